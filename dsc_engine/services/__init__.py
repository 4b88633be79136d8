"""Engine components."""
from .engine import DSCEngine
from .health import HealthFactorCalculator, calculate_health_factor
from .ledger import CollateralLedger
from .liquidation import LiquidationEngine
from .positions import PositionManager
from .unit_of_work import ReentrancyGuard, UnitOfWork

__all__ = [
    "CollateralLedger",
    "DSCEngine",
    "HealthFactorCalculator",
    "LiquidationEngine",
    "PositionManager",
    "ReentrancyGuard",
    "UnitOfWork",
    "calculate_health_factor",
]
