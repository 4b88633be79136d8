"""Health-factor computation.

    healthFactor = (collateralUsd * threshold% / 100) * minHealthFactor / debt

An account without debt reports ``100 * minHealthFactor``. Nothing is cached:
every call reads the ledger and the price afresh.
"""
from __future__ import annotations

from ..config import EngineParameters
from ..errors import EngineError, ErrorKind
from ..fixed_point import mul_div, percent_of
from ..models import AccountInformation
from ..oracles.adapter import PriceOracleAdapter
from .ledger import CollateralLedger


def calculate_health_factor(
    debt_minted: int, collateral_value_usd: int, params: EngineParameters
) -> int:
    """Pure health factor for a (debt, collateral value) pair."""
    if debt_minted == 0:
        return params.safe_health_factor
    adjusted = percent_of(collateral_value_usd, params.liquidation_threshold_percent)
    return mul_div(adjusted, params.min_health_factor, debt_minted)


class HealthFactorCalculator:
    """Read-only solvency view over the ledger at the current price."""

    def __init__(
        self,
        ledger: CollateralLedger,
        oracle: PriceOracleAdapter,
        params: EngineParameters,
    ) -> None:
        self._ledger = ledger
        self._oracle = oracle
        self._params = params

    def collateral_value_usd(self, account: str, price: int | None = None) -> int:
        return self._oracle.usd_value(self._ledger.collateral_of(account), price)

    def account_information(self, account: str) -> AccountInformation:
        return AccountInformation(
            debt_minted=self._ledger.debt_of(account),
            collateral_value_usd=self.collateral_value_usd(account),
        )

    def health_factor(self, account: str, price: int | None = None) -> int:
        debt = self._ledger.debt_of(account)
        if debt == 0:
            # collateral is never priced without debt, however large it is
            return self._params.safe_health_factor
        return calculate_health_factor(
            debt, self.collateral_value_usd(account, price), self._params
        )

    def max_additional_debt(self, account: str) -> int:
        """Largest mint that keeps *account* at or above the minimum."""
        adjusted = percent_of(
            self.collateral_value_usd(account), self._params.liquidation_threshold_percent
        )
        # HF >= min reduces to debt <= adjusted collateral value
        return max(adjusted - self._ledger.debt_of(account), 0)

    def require_healthy(self, account: str) -> None:
        """Raise HEALTH_FACTOR_BROKEN when *account* is below the minimum."""
        health_factor = self.health_factor(account)
        if health_factor < self._params.min_health_factor:
            raise EngineError(
                ErrorKind.HEALTH_FACTOR_BROKEN,
                f"{account} health factor {health_factor} < {self._params.min_health_factor}",
            )
