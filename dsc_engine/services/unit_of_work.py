"""Re-entrancy guard and all-or-nothing execution of engine operations."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..errors import EngineError, ErrorKind, OperationResult
from .ledger import CollateralLedger

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    """Single engine-wide lock held for the duration of a state-mutating call."""

    def __init__(self) -> None:
        self._entered = False

    @property
    def locked(self) -> bool:
        return self._entered

    def acquire(self) -> bool:
        if self._entered:
            return False
        self._entered = True
        return True

    def release(self) -> None:
        self._entered = False


class UnitOfWork:
    """Undo journal for one operation.

    Opens a ledger journal at the start and keeps the compensating token calls
    registered after each external interaction that succeeded.
    """

    def __init__(self, ledger: CollateralLedger) -> None:
        self._ledger = ledger
        self._ledger.begin()
        self._compensations: list[tuple[str, Callable[..., Any], tuple[Any, ...]]] = []

    def call(
        self,
        kind: ErrorKind,
        description: str,
        fn: Callable[..., Any],
        *args: Any,
        undo: tuple[Callable[..., Any], tuple[Any, ...]] | None = None,
        returns_status: bool = True,
    ) -> None:
        """Invoke a collaborator and raise *kind* if it fails.

        A collaborator fails when it raises or, for calls that report a status,
        returns a falsy value. On success *undo* is journalled.
        """
        try:
            result = fn(*args)
        except Exception as exc:
            logger.exception("Collaborator call %s raised", description)
            raise EngineError(kind, f"{description} raised {exc!r}") from exc
        if returns_status and not result:
            raise EngineError(kind, f"{description} returned {result!r}")
        if undo is not None:
            undo_fn, undo_args = undo
            self._compensations.append((description, undo_fn, undo_args))

    def commit(self) -> None:
        self._ledger.commit()
        self._compensations.clear()

    def rollback(self) -> None:
        """Undo the ledger writes, then every journalled token call, newest first.

        A compensation that fails is logged and the rest still run.
        """
        self._ledger.rollback()
        while self._compensations:
            description, undo_fn, undo_args = self._compensations.pop()
            try:
                undone = undo_fn(*undo_args)
            except Exception:
                logger.critical(
                    "Compensation for %s raised; token balances diverged",
                    description, exc_info=True,
                )
                continue
            if undone is False:
                logger.critical("Compensation for %s failed; token balances diverged", description)


def run_guarded(
    guard: ReentrancyGuard,
    ledger: CollateralLedger,
    name: str,
    operation: Callable[..., Any],
    *args: Any,
) -> OperationResult:
    """Run *operation* under *guard* as one atomic unit of work.

    ``operation`` receives the ``UnitOfWork`` followed by ``*args``. An
    ``EngineError`` rolls the unit back and becomes a failed result; any other
    exception rolls back and propagates.
    """
    if not guard.acquire():
        logger.warning("Re-entrant call to %s rejected", name)
        return OperationResult.failure(ErrorKind.REENTRANCY_DETECTED, name)

    uow = UnitOfWork(ledger)
    try:
        value = operation(uow, *args)
        uow.commit()
    except EngineError as exc:
        uow.rollback()
        logger.info("%s rejected: %s", name, exc)
        return OperationResult.failure(exc.kind, exc.detail)
    except BaseException:
        uow.rollback()
        raise
    finally:
        guard.release()
    return OperationResult.success(value)
