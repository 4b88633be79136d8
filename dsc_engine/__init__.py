"""Collateralised-debt engine for an over-collateralised synthetic stablecoin."""
from .config import AppConfig, EngineParameters, load_config
from .errors import EngineError, ErrorKind, OperationResult
from .services import DSCEngine

__all__ = [
    "AppConfig",
    "DSCEngine",
    "EngineError",
    "EngineParameters",
    "ErrorKind",
    "OperationResult",
    "load_config",
]
