"""Shared test fixtures, in-memory token fakes and sample positions."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from dsc_engine.config import EngineParameters
from dsc_engine.fixed_point import PRECISION
from dsc_engine.oracles import StaticPriceFeed
from dsc_engine.services import DSCEngine

ENGINE = "dsc-engine"
USER = "0xUSER"
LIQUIDATOR = "0xLIQUIDATOR"

ETH_USD_PRICE = 2000 * PRECISION
COLLATERAL_AMOUNT = 10 * PRECISION
AMOUNT_TO_MINT = 100 * PRECISION
STARTING_BALANCE = 100 * PRECISION


# ---------------------------------------------------------------------------
# Token fakes
# ---------------------------------------------------------------------------


class FakeToken:
    """Plain balance ledger. ``transfer`` always moves funds out of *holder*."""

    def __init__(self, holder: str = ENGINE) -> None:
        self.holder = holder
        self.balances: dict[str, int] = {}
        self.total_supply = 0
        self.fail_transfer = False
        self.fail_transfer_from = False

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def mint_to(self, account: str, amount: int) -> None:
        self.balances[account] = self.balance_of(account) + amount
        self.total_supply += amount

    def _move(self, sender: str, recipient: str, amount: int) -> bool:
        if self.balance_of(sender) < amount:
            return False
        self.balances[sender] = self.balance_of(sender) - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        return True

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        if self.fail_transfer_from:
            return False
        return self._move(sender, recipient, amount)

    def transfer(self, recipient: str, amount: int) -> bool:
        if self.fail_transfer:
            return False
        return self._move(self.holder, recipient, amount)


class FakeStableCoin(FakeToken):
    """Synthetic asset; only *holder* (the engine) mints and burns."""

    def __init__(self, holder: str = ENGINE) -> None:
        super().__init__(holder)
        self.fail_mint = False
        self.fail_burn = False

    def mint(self, recipient: str, amount: int) -> bool:
        if self.fail_mint:
            return False
        self.mint_to(recipient, amount)
        return True

    def burn(self, amount: int) -> None:
        if self.fail_burn or self.balance_of(self.holder) < amount:
            raise ValueError("burn amount exceeds balance")
        self.balances[self.holder] -= amount
        self.total_supply -= amount


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def params() -> EngineParameters:
    return EngineParameters(
        liquidation_threshold_percent=50,
        liquidation_bonus_percent=10,
        min_health_factor=PRECISION,
    )


@pytest.fixture()
def eth_usd() -> StaticPriceFeed:
    return StaticPriceFeed(ETH_USD_PRICE)


@pytest.fixture()
def weth() -> FakeToken:
    token = FakeToken()
    token.mint_to(USER, STARTING_BALANCE)
    token.mint_to(LIQUIDATOR, STARTING_BALANCE)
    return token


@pytest.fixture()
def dsc() -> FakeStableCoin:
    return FakeStableCoin()


@pytest.fixture()
def dsce(
    weth: FakeToken, dsc: FakeStableCoin, eth_usd: StaticPriceFeed, params: EngineParameters
) -> DSCEngine:
    return DSCEngine(weth, dsc, eth_usd, params=params, address=ENGINE)


@pytest.fixture()
def dsce_deposited(dsce: DSCEngine) -> DSCEngine:
    assert dsce.deposit_collateral(USER, COLLATERAL_AMOUNT).ok
    return dsce


@pytest.fixture()
def dsce_minted(dsce: DSCEngine) -> DSCEngine:
    assert dsce.deposit_and_mint(USER, COLLATERAL_AMOUNT, AMOUNT_TO_MINT).ok
    return dsce


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    engine:
      address: test-engine
      liquidation_threshold_percent: 50
      liquidation_bonus_percent: 10
      min_health_factor: 1000000000000000000
    collateral:
      symbol: WETH
      decimals: 18
    price_oracle:
      provider: static
      static_price: 200000000000
      feed_decimals: 8
      pyth:
        hermes_url: "https://hermes.example.com"
        feed_id: "aaa111"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
