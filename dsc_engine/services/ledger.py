"""Per-account collateral and debt bookkeeping."""
from __future__ import annotations

import logging

from ..errors import EngineError, ErrorKind, require_positive
from ..fixed_point import checked_add, checked_sub
from ..models import AccountState

logger = logging.getLogger(__name__)


class CollateralLedger:
    """Sole owner of the account → balances mapping.

    Operations only keep balances non-negative; solvency rules are enforced by
    the callers. Accounts spring into existence with zero balances on first
    access and are never removed once an operation commits.

    Between ``begin`` and ``commit`` the prior state of every account written
    is journalled once, so ``rollback`` only touches those accounts.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, AccountState] = {}
        self._journal: dict[str, AccountState | None] | None = None

    def account(self, account: str) -> AccountState:
        return self._accounts.get(account, AccountState())

    def collateral_of(self, account: str) -> int:
        return self.account(account).collateral_deposited

    def debt_of(self, account: str) -> int:
        return self.account(account).debt_minted

    def total_collateral(self) -> int:
        return sum(state.collateral_deposited for state in self._accounts.values())

    def total_debt(self) -> int:
        return sum(state.debt_minted for state in self._accounts.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def credit_collateral(self, account: str, amount: int) -> None:
        _require_amount(amount)
        state = self.account(account)
        self._store(
            account,
            AccountState(checked_add(state.collateral_deposited, amount), state.debt_minted),
        )

    def debit_collateral(self, account: str, amount: int) -> None:
        _require_amount(amount)
        state = self.account(account)
        if amount > state.collateral_deposited:
            raise EngineError(
                ErrorKind.INSUFFICIENT_COLLATERAL,
                f"{account} holds {state.collateral_deposited}, debit {amount}",
            )
        self._store(
            account,
            AccountState(checked_sub(state.collateral_deposited, amount), state.debt_minted),
        )

    def credit_debt(self, account: str, amount: int) -> None:
        _require_amount(amount)
        state = self.account(account)
        self._store(
            account,
            AccountState(state.collateral_deposited, checked_add(state.debt_minted, amount)),
        )

    def debit_debt(self, account: str, amount: int) -> None:
        _require_amount(amount)
        state = self.account(account)
        if amount > state.debt_minted:
            raise EngineError(
                ErrorKind.INSUFFICIENT_DEBT,
                f"{account} owes {state.debt_minted}, debit {amount}",
            )
        self._store(
            account,
            AccountState(state.collateral_deposited, checked_sub(state.debt_minted, amount)),
        )

    # ------------------------------------------------------------------
    # Journal for unit-of-work rollback
    # ------------------------------------------------------------------

    def begin(self) -> None:
        self._journal = {}

    def commit(self) -> None:
        self._journal = None

    def rollback(self) -> None:
        """Put every account written since ``begin`` back as it was."""
        if self._journal is None:
            return
        for account, previous in self._journal.items():
            if previous is None:
                del self._accounts[account]
            else:
                self._accounts[account] = previous
        self._journal = None

    def _store(self, account: str, state: AccountState) -> None:
        if self._journal is not None and account not in self._journal:
            self._journal[account] = self._accounts.get(account)
        self._accounts[account] = state
        logger.debug(
            "Ledger %s: collateral=%s debt=%s",
            account, state.collateral_deposited, state.debt_minted,
        )


def _require_amount(amount: int) -> None:
    error = require_positive(amount)
    if error is not None:
        raise EngineError(error, f"amount must be positive, got {amount}")
