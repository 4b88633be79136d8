"""Data models, all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountState:
    """Ledger entry for one account. Amounts are 18-decimal integers."""

    collateral_deposited: int = 0
    debt_minted: int = 0


@dataclass(frozen=True)
class AccountInformation:
    """Debt and collateral value of an account at the current price."""

    debt_minted: int
    collateral_value_usd: int


@dataclass(frozen=True)
class LiquidationQuote:
    """Collateral a liquidator receives for covering *debt_to_cover*."""

    debt_to_cover: int
    collateral_from_debt: int
    bonus_collateral: int

    @property
    def total_collateral(self) -> int:
        return self.collateral_from_debt + self.bonus_collateral


@dataclass(frozen=True)
class LiquidationOutcome:
    """Committed liquidation, returned as the value of a successful result."""

    target: str
    liquidator: str
    quote: LiquidationQuote
    starting_health_factor: int
    ending_health_factor: int


@dataclass(frozen=True)
class PositionQuote:
    """Hypothetical position evaluated at a given price (used by the CLI)."""

    collateral: int
    debt: int
    price: int
    collateral_value_usd: int
    health_factor: int
    can_open: bool
    liquidatable: bool
