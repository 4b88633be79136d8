"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .fixed_point import PRECISION

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineParameters:
    """Process-wide risk parameters, fixed when the engine is built."""

    liquidation_threshold_percent: int = 50
    liquidation_bonus_percent: int = 10
    min_health_factor: int = PRECISION

    @property
    def safe_health_factor(self) -> int:
        """Sentinel reported for accounts without debt."""
        return 100 * self.min_health_factor


@dataclass(frozen=True)
class EngineConfig:
    address: str = "dsc-engine"
    parameters: EngineParameters = field(default_factory=EngineParameters)


@dataclass(frozen=True)
class CollateralConfig:
    symbol: str = "WETH"
    decimals: int = 18


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feed_id: str = ""


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "static"
    static_price: int = 0
    feed_decimals: int = 18
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    collateral: CollateralConfig = field(default_factory=CollateralConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_engine(raw: dict[str, Any]) -> EngineConfig:
    return EngineConfig(
        address=str(raw.get("address", "dsc-engine")),
        parameters=EngineParameters(
            liquidation_threshold_percent=int(raw.get("liquidation_threshold_percent", 50)),
            liquidation_bonus_percent=int(raw.get("liquidation_bonus_percent", 10)),
            min_health_factor=int(raw.get("min_health_factor", PRECISION)),
        ),
    )


def _build_collateral(raw: dict[str, Any]) -> CollateralConfig:
    return CollateralConfig(
        symbol=str(raw.get("symbol", "WETH")),
        decimals=int(raw.get("decimals", 18)),
    )


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider") or "static",
        static_price=int(raw.get("static_price", 0) or 0),
        feed_decimals=int(raw.get("feed_decimals", 18)),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feed_id=pyth_raw.get("feed_id", ""),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate engine configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        engine=_build_engine(raw.get("engine", {})),
        collateral=_build_collateral(raw.get("collateral", {})),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.engine.address:
        raise ValueError("Engine address must not be empty")

    params = cfg.engine.parameters
    if not 0 < params.liquidation_threshold_percent <= 100:
        raise ValueError(
            f"liquidation_threshold_percent must be in 1..100, "
            f"got {params.liquidation_threshold_percent}"
        )
    if not 0 <= params.liquidation_bonus_percent <= 100:
        raise ValueError(
            f"liquidation_bonus_percent must be in 0..100, "
            f"got {params.liquidation_bonus_percent}"
        )
    if params.min_health_factor <= 0:
        raise ValueError("min_health_factor must be positive")

    if cfg.price_oracle.provider not in ("static", "pyth"):
        raise ValueError(f"Unknown price oracle provider '{cfg.price_oracle.provider}'")
    if cfg.price_oracle.provider == "pyth" and not cfg.price_oracle.pyth.feed_id:
        raise ValueError("Pyth price oracle requires a feed_id")
    if cfg.price_oracle.feed_decimals < 0:
        raise ValueError("feed_decimals must not be negative")
