"""Deposit, mint, redeem and burn as atomic, solvency-checked operations."""
from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import ErrorKind, OperationResult, require_positive
from ..interfaces.token import CollateralToken, SyntheticToken
from .health import HealthFactorCalculator
from .ledger import CollateralLedger
from .unit_of_work import ReentrancyGuard, UnitOfWork, run_guarded

logger = logging.getLogger(__name__)


class PositionManager:
    """Orchestrates the account-owner operations.

    Every operation follows the same sequence: validate amounts, update the
    ledger, apply the health gate, then talk to the token collaborators. The
    ledger is therefore already current when a collaborator runs, and a failed
    gate never reaches a collaborator at all.
    """

    def __init__(
        self,
        engine_address: str,
        ledger: CollateralLedger,
        health: HealthFactorCalculator,
        collateral_token: CollateralToken,
        synthetic_token: SyntheticToken,
        guard: ReentrancyGuard,
    ) -> None:
        self._address = engine_address
        self._ledger = ledger
        self._health = health
        self._collateral = collateral_token
        self._synthetic = synthetic_token
        self._guard = guard

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def deposit_collateral(self, account: str, amount: int) -> OperationResult:
        return self._run(
            "deposit_collateral", (amount,), self._deposit_and_mint, account, amount, 0
        )

    def mint_debt(self, account: str, amount: int) -> OperationResult:
        return self._run("mint_debt", (amount,), self._deposit_and_mint, account, 0, amount)

    def deposit_and_mint(
        self, account: str, collateral_amount: int, debt_amount: int
    ) -> OperationResult:
        return self._run(
            "deposit_and_mint",
            (collateral_amount, debt_amount),
            self._deposit_and_mint, account, collateral_amount, debt_amount,
        )

    def burn_debt(self, account: str, amount: int) -> OperationResult:
        return self._run("burn_debt", (amount,), self._redeem_and_burn, account, 0, amount)

    def redeem_collateral(self, account: str, amount: int) -> OperationResult:
        return self._run(
            "redeem_collateral", (amount,), self._redeem_and_burn, account, amount, 0
        )

    def redeem_and_burn(
        self, account: str, collateral_amount: int, debt_amount: int
    ) -> OperationResult:
        return self._run(
            "redeem_and_burn",
            (collateral_amount, debt_amount),
            self._redeem_and_burn, account, collateral_amount, debt_amount,
        )

    # ------------------------------------------------------------------
    # Operation bodies (run inside a unit of work; a zero leg is skipped)
    # ------------------------------------------------------------------

    def _deposit_and_mint(
        self, uow: UnitOfWork, account: str, collateral_amount: int, debt_amount: int
    ) -> None:
        if collateral_amount:
            self._ledger.credit_collateral(account, collateral_amount)
        if debt_amount:
            self._ledger.credit_debt(account, debt_amount)
            self._health.require_healthy(account)

        if collateral_amount:
            self.pull_collateral(uow, account, collateral_amount)
            logger.info("CollateralDeposited account=%s amount=%s", account, collateral_amount)
        if debt_amount:
            uow.call(
                ErrorKind.MINT_FAILED,
                f"synthetic.mint({account}, {debt_amount})",
                self._synthetic.mint, account, debt_amount,
            )
            logger.info("DebtMinted account=%s amount=%s", account, debt_amount)

    def _redeem_and_burn(
        self, uow: UnitOfWork, account: str, collateral_amount: int, debt_amount: int
    ) -> None:
        # debt leaves first so the redemption is judged against the reduced debt
        if debt_amount:
            self._ledger.debit_debt(account, debt_amount)
        if collateral_amount:
            self._ledger.debit_collateral(account, collateral_amount)
        self._health.require_healthy(account)

        if debt_amount:
            self.burn_from(uow, account, debt_amount)
            logger.info("DebtBurned account=%s amount=%s", account, debt_amount)
        if collateral_amount:
            self.push_collateral(uow, account, collateral_amount)
            logger.info(
                "CollateralRedeemed from=%s to=%s amount=%s",
                account, account, collateral_amount,
            )

    # ------------------------------------------------------------------
    # Token movements, shared with the liquidation engine
    # ------------------------------------------------------------------

    def pull_collateral(self, uow: UnitOfWork, sender: str, amount: int) -> None:
        uow.call(
            ErrorKind.TRANSFER_FAILED,
            f"collateral.transfer_from({sender}, {self._address}, {amount})",
            self._collateral.transfer_from, sender, self._address, amount,
            undo=(self._collateral.transfer, (sender, amount)),
        )

    def push_collateral(self, uow: UnitOfWork, recipient: str, amount: int) -> None:
        uow.call(
            ErrorKind.TRANSFER_FAILED,
            f"collateral.transfer({recipient}, {amount})",
            self._collateral.transfer, recipient, amount,
            undo=(self._collateral.transfer_from, (recipient, self._address, amount)),
        )

    def burn_from(self, uow: UnitOfWork, payer: str, amount: int) -> None:
        """Move *amount* synthetic units from *payer* to the engine and burn them."""
        uow.call(
            ErrorKind.TRANSFER_FAILED,
            f"synthetic.transfer_from({payer}, {self._address}, {amount})",
            self._synthetic.transfer_from, payer, self._address, amount,
            undo=(self._synthetic.transfer, (payer, amount)),
        )
        uow.call(
            ErrorKind.TRANSFER_FAILED,
            f"synthetic.burn({amount})",
            self._synthetic.burn, amount,
            undo=(self._synthetic.mint, (self._address, amount)),
            returns_status=False,
        )

    def _run(
        self,
        name: str,
        amounts: tuple[int, ...],
        body: Callable[..., None],
        *args: object,
    ) -> OperationResult:
        for amount in amounts:
            error = require_positive(amount)
            if error is not None:
                logger.info("%s rejected: amount %s", name, amount)
                return OperationResult.failure(error, f"amount must be positive, got {amount}")
        return run_guarded(self._guard, self._ledger, name, body, *args)
