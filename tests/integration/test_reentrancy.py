"""A collaborator calling back into the engine mid-operation."""
from __future__ import annotations

from collections.abc import Callable

import pytest

from dsc_engine.config import EngineParameters
from dsc_engine.errors import ErrorKind, OperationResult
from dsc_engine.fixed_point import PRECISION
from dsc_engine.oracles import StaticPriceFeed
from dsc_engine.services import DSCEngine
from tests.conftest import (
    AMOUNT_TO_MINT,
    COLLATERAL_AMOUNT,
    ENGINE,
    LIQUIDATOR,
    STARTING_BALANCE,
    USER,
    FakeStableCoin,
    FakeToken,
)


class HookedToken(FakeToken):
    """Runs ``hook`` from inside ``transfer_from`` before moving funds."""

    def __init__(self) -> None:
        super().__init__()
        self.hook: Callable[[], object] | None = None

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        if self.hook is not None:
            self.hook()
        return super().transfer_from(sender, recipient, amount)


class HookedStableCoin(FakeStableCoin):
    """Runs ``hook`` from inside ``mint``."""

    def __init__(self) -> None:
        super().__init__()
        self.hook: Callable[[], object] | None = None

    def mint(self, recipient: str, amount: int) -> bool:
        if self.hook is not None:
            self.hook()
        return super().mint(recipient, amount)


@pytest.fixture()
def hooked_weth() -> HookedToken:
    token = HookedToken()
    token.mint_to(USER, STARTING_BALANCE)
    token.mint_to(LIQUIDATOR, STARTING_BALANCE)
    return token


@pytest.fixture()
def hooked_dsc() -> HookedStableCoin:
    return HookedStableCoin()


@pytest.fixture()
def engine(
    hooked_weth: HookedToken,
    hooked_dsc: HookedStableCoin,
    eth_usd: StaticPriceFeed,
    params: EngineParameters,
) -> DSCEngine:
    return DSCEngine(hooked_weth, hooked_dsc, eth_usd, params=params, address=ENGINE)


class TestReentrancy:
    def test_nested_deposit_rejected(self, engine: DSCEngine, hooked_weth: HookedToken) -> None:
        inner: list[OperationResult] = []
        hooked_weth.hook = lambda: inner.append(engine.deposit_collateral(USER, PRECISION))

        result = engine.deposit_collateral(USER, COLLATERAL_AMOUNT)

        assert result.ok
        assert inner[0].error is ErrorKind.REENTRANCY_DETECTED
        assert engine.collateral_balance_of(USER) == COLLATERAL_AMOUNT
        assert hooked_weth.balance_of(ENGINE) == COLLATERAL_AMOUNT

    def test_every_mutating_operation_shares_the_guard(
        self, engine: DSCEngine, hooked_dsc: HookedStableCoin
    ) -> None:
        assert engine.deposit_collateral(USER, COLLATERAL_AMOUNT).ok
        inner: list[OperationResult] = []

        def reenter() -> None:
            inner.append(engine.mint_debt(USER, 1))
            inner.append(engine.burn_debt(USER, 1))
            inner.append(engine.redeem_collateral(USER, 1))
            inner.append(engine.redeem_and_burn(USER, 1, 1))
            inner.append(engine.deposit_and_mint(USER, 1, 1))
            inner.append(engine.liquidate(USER, LIQUIDATOR, 1))

        hooked_dsc.hook = reenter
        assert engine.mint_debt(USER, AMOUNT_TO_MINT).ok
        assert [r.error for r in inner] == [ErrorKind.REENTRANCY_DETECTED] * 6
        assert engine.debt_of(USER) == AMOUNT_TO_MINT

    def test_reads_during_callback_see_updated_ledger(
        self, engine: DSCEngine, hooked_dsc: HookedStableCoin
    ) -> None:
        assert engine.deposit_collateral(USER, COLLATERAL_AMOUNT).ok
        seen: list[tuple[int, int]] = []
        hooked_dsc.hook = lambda: seen.append((engine.debt_of(USER), engine.health_factor(USER)))

        assert engine.mint_debt(USER, AMOUNT_TO_MINT).ok

        assert seen == [(AMOUNT_TO_MINT, 100 * PRECISION)]

    def test_guard_released_after_failure(
        self, engine: DSCEngine, hooked_weth: HookedToken
    ) -> None:
        hooked_weth.fail_transfer_from = True
        assert engine.deposit_collateral(USER, COLLATERAL_AMOUNT).error is ErrorKind.TRANSFER_FAILED

        hooked_weth.fail_transfer_from = False
        assert engine.deposit_collateral(USER, COLLATERAL_AMOUNT).ok

    def test_collaborator_exception_becomes_transfer_failure(
        self, engine: DSCEngine, hooked_weth: HookedToken
    ) -> None:
        def explode() -> None:
            raise RuntimeError("token contract paused")

        hooked_weth.hook = explode
        result = engine.deposit_collateral(USER, COLLATERAL_AMOUNT)

        assert result.error is ErrorKind.TRANSFER_FAILED
        assert "token contract paused" in result.detail
        assert engine.collateral_balance_of(USER) == 0

        hooked_weth.hook = None
        assert engine.deposit_collateral(USER, COLLATERAL_AMOUNT).ok
