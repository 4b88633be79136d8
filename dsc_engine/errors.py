"""Error kinds and the result type returned by state-mutating operations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Every way an engine operation can be rejected."""

    ZERO_AMOUNT = "ZeroAmount"
    INSUFFICIENT_COLLATERAL = "InsufficientCollateral"
    INSUFFICIENT_DEBT = "InsufficientDebt"
    TRANSFER_FAILED = "TransferFailed"
    MINT_FAILED = "MintFailed"
    HEALTH_FACTOR_BROKEN = "HealthFactorBroken"
    HEALTH_FACTOR_OK = "HealthFactorOk"
    INVALID_LIQUIDATION_AMOUNT = "InvalidLiquidationAmount"
    LIQUIDATION_INEFFECTIVE = "LiquidationIneffective"
    REENTRANCY_DETECTED = "ReentrancyDetected"
    ARITHMETIC_OVERFLOW = "ArithmeticOverflow"
    ARITHMETIC_UNDERFLOW = "ArithmeticUnderflow"
    DIVISION_BY_ZERO = "DivisionByZero"


class EngineError(Exception):
    """Raised by internal components; converted to an OperationResult at the boundary."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a public state-mutating operation."""

    error: ErrorKind | None = None
    detail: str = ""
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> OperationResult:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str = "") -> OperationResult:
        return cls(error=kind, detail=detail)


def require_positive(amount: int) -> ErrorKind | None:
    """Return ZERO_AMOUNT unless *amount* is strictly positive."""
    if amount <= 0:
        return ErrorKind.ZERO_AMOUNT
    return None
