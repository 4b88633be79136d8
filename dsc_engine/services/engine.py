"""The collateralised-debt engine: one object wiring all components together."""
from __future__ import annotations

import logging

from ..config import AppConfig, EngineParameters
from ..errors import OperationResult
from ..interfaces.price_oracle import PriceSource
from ..interfaces.token import CollateralToken, SyntheticToken
from ..models import AccountInformation, AccountState, LiquidationQuote
from ..oracles.adapter import PriceOracleAdapter
from .health import HealthFactorCalculator, calculate_health_factor
from .ledger import CollateralLedger
from .liquidation import LiquidationEngine
from .positions import PositionManager
from .unit_of_work import ReentrancyGuard

logger = logging.getLogger(__name__)


class DSCEngine:
    """Deposit collateral, mint the synthetic asset against it, stay solvent.

    State-mutating methods return an ``OperationResult`` and share one
    re-entrancy guard. Read-only methods never take the guard and may be
    called at any time, including from a collaborator mid-operation.
    """

    def __init__(
        self,
        collateral_token: CollateralToken,
        synthetic_token: SyntheticToken,
        price_source: PriceSource,
        params: EngineParameters | None = None,
        address: str = "dsc-engine",
    ) -> None:
        self.address = address
        self.parameters = params or EngineParameters()

        self._ledger = CollateralLedger()
        self._oracle = PriceOracleAdapter(price_source)
        self._health = HealthFactorCalculator(self._ledger, self._oracle, self.parameters)
        self._guard = ReentrancyGuard()
        self._positions = PositionManager(
            address, self._ledger, self._health,
            collateral_token, synthetic_token, self._guard,
        )
        self._liquidations = LiquidationEngine(
            self._ledger, self._health, self._oracle,
            self._positions, self.parameters, self._guard,
        )
        logger.info(
            "Engine %s ready: threshold=%s%% bonus=%s%% min_hf=%s",
            address,
            self.parameters.liquidation_threshold_percent,
            self.parameters.liquidation_bonus_percent,
            self.parameters.min_health_factor,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        collateral_token: CollateralToken,
        synthetic_token: SyntheticToken,
        price_source: PriceSource,
    ) -> DSCEngine:
        return cls(
            collateral_token,
            synthetic_token,
            price_source,
            params=config.engine.parameters,
            address=config.engine.address,
        )

    # ------------------------------------------------------------------
    # State-mutating operations
    # ------------------------------------------------------------------

    def deposit_collateral(self, account: str, amount: int) -> OperationResult:
        return self._positions.deposit_collateral(account, amount)

    def mint_debt(self, account: str, amount: int) -> OperationResult:
        return self._positions.mint_debt(account, amount)

    def deposit_and_mint(
        self, account: str, collateral_amount: int, debt_amount: int
    ) -> OperationResult:
        return self._positions.deposit_and_mint(account, collateral_amount, debt_amount)

    def redeem_collateral(self, account: str, amount: int) -> OperationResult:
        return self._positions.redeem_collateral(account, amount)

    def burn_debt(self, account: str, amount: int) -> OperationResult:
        return self._positions.burn_debt(account, amount)

    def redeem_and_burn(
        self, account: str, collateral_amount: int, debt_amount: int
    ) -> OperationResult:
        return self._positions.redeem_and_burn(account, collateral_amount, debt_amount)

    def liquidate(self, target: str, liquidator: str, debt_to_cover: int) -> OperationResult:
        """On success the result value is a ``LiquidationOutcome``."""
        return self._liquidations.liquidate(target, liquidator, debt_to_cover)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def health_factor(self, account: str) -> int:
        return self._health.health_factor(account)

    def account_information(self, account: str) -> AccountInformation:
        return self._health.account_information(account)

    def account(self, account: str) -> AccountState:
        return self._ledger.account(account)

    def collateral_balance_of(self, account: str) -> int:
        return self._ledger.collateral_of(account)

    def debt_of(self, account: str) -> int:
        return self._ledger.debt_of(account)

    def collateral_value_usd(self, account: str) -> int:
        return self._health.collateral_value_usd(account)

    def max_additional_debt(self, account: str) -> int:
        return self._health.max_additional_debt(account)

    def latest_price(self) -> int:
        return self._oracle.latest_price()

    def usd_value(self, amount: int) -> int:
        return self._oracle.usd_value(amount)

    def asset_amount_for_usd(self, usd_amount: int) -> int:
        return self._oracle.asset_amount_for_usd(usd_amount)

    def calculate_health_factor(self, debt_minted: int, collateral_value_usd: int) -> int:
        return calculate_health_factor(debt_minted, collateral_value_usd, self.parameters)

    def quote_liquidation(self, debt_to_cover: int) -> LiquidationQuote:
        return self._liquidations.quote(debt_to_cover)

    def total_collateral(self) -> int:
        return self._ledger.total_collateral()

    def total_debt(self) -> int:
        return self._ledger.total_debt()
