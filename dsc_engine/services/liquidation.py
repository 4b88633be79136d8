"""Forced closing of under-collateralised positions."""
from __future__ import annotations

import logging

from ..config import EngineParameters
from ..errors import EngineError, ErrorKind, OperationResult
from ..fixed_point import percent_of
from ..models import LiquidationOutcome, LiquidationQuote
from ..oracles.adapter import PriceOracleAdapter
from .health import HealthFactorCalculator
from .ledger import CollateralLedger
from .positions import PositionManager
from .unit_of_work import ReentrancyGuard, UnitOfWork, run_guarded

logger = logging.getLogger(__name__)


def check_liquidation_amount(debt_to_cover: int, outstanding_debt: int) -> ErrorKind | None:
    """``debt_to_cover`` must lie in ``1..outstanding_debt``; it is never clamped."""
    if debt_to_cover <= 0 or debt_to_cover > outstanding_debt:
        return ErrorKind.INVALID_LIQUIDATION_AMOUNT
    return None


class LiquidationEngine:
    """Lets a third party repay an unhealthy account's debt for its collateral.

    The liquidator pays ``debt_to_cover`` synthetic units from their own token
    balance and receives the equivalent collateral plus the liquidation bonus.
    The liquidator's own position in the ledger is not involved.
    """

    def __init__(
        self,
        ledger: CollateralLedger,
        health: HealthFactorCalculator,
        oracle: PriceOracleAdapter,
        positions: PositionManager,
        params: EngineParameters,
        guard: ReentrancyGuard,
    ) -> None:
        self._ledger = ledger
        self._health = health
        self._oracle = oracle
        self._positions = positions
        self._params = params
        self._guard = guard

    def quote(self, debt_to_cover: int, price: int | None = None) -> LiquidationQuote:
        """Collateral owed to a liquidator covering *debt_to_cover* at *price*."""
        collateral_from_debt = self._oracle.asset_amount_for_usd(debt_to_cover, price)
        bonus = percent_of(collateral_from_debt, self._params.liquidation_bonus_percent)
        return LiquidationQuote(
            debt_to_cover=debt_to_cover,
            collateral_from_debt=collateral_from_debt,
            bonus_collateral=bonus,
        )

    def liquidate(self, target: str, liquidator: str, debt_to_cover: int) -> OperationResult:
        return run_guarded(
            self._guard, self._ledger, "liquidate",
            self._liquidate, target, liquidator, debt_to_cover,
        )

    def _liquidate(
        self, uow: UnitOfWork, target: str, liquidator: str, debt_to_cover: int
    ) -> LiquidationOutcome:
        price = self._oracle.latest_price()
        starting = self._health.health_factor(target, price)
        if starting >= self._params.min_health_factor:
            raise EngineError(
                ErrorKind.HEALTH_FACTOR_OK, f"{target} health factor {starting}"
            )

        error = check_liquidation_amount(debt_to_cover, self._ledger.debt_of(target))
        if error is not None:
            raise EngineError(
                error,
                f"cover {debt_to_cover} of {self._ledger.debt_of(target)} owed by {target}",
            )

        quote = self.quote(debt_to_cover, price)

        # a dust cover can be worth zero collateral; only the debt leg runs then
        if quote.total_collateral:
            self._ledger.debit_collateral(target, quote.total_collateral)
        self._ledger.debit_debt(target, debt_to_cover)

        ending = self._health.health_factor(target, price)
        if ending <= starting:
            raise EngineError(
                ErrorKind.LIQUIDATION_INEFFECTIVE,
                f"{target} health factor {starting} -> {ending}",
            )

        self._positions.burn_from(uow, liquidator, debt_to_cover)
        if quote.total_collateral:
            self._positions.push_collateral(uow, liquidator, quote.total_collateral)

        logger.info(
            "Liquidated target=%s liquidator=%s debt=%s collateral=%s bonus=%s hf=%s->%s",
            target, liquidator, debt_to_cover,
            quote.collateral_from_debt, quote.bonus_collateral, starting, ending,
        )
        return LiquidationOutcome(
            target=target,
            liquidator=liquidator,
            quote=quote,
            starting_health_factor=starting,
            ending_health_factor=ending,
        )
