"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from synth_engine.config import PythConfig
from synth_engine.models import RiskParameters
from synth_engine.services import SynthEngine
from synth_engine.testing import (
    MockCollateralToken,
    MockPriceFeed,
    MockSyntheticToken,
    RecordingEventSink,
)

ETHER = 10**18

WETH = "0xWETH"
WBTC = "0xWBTC"
USER = "0xUSER"
LIQUIDATOR = "0xLIQUIDATOR"

ETH_USD_PRICE = 2000 * 10**8
BTC_USD_PRICE = 1000 * 10**8

STARTING_BALANCE = 100 * ETHER
COLLATERAL_AMOUNT = 10 * ETHER
AMOUNT_TO_ISSUE = 100 * ETHER
COLLATERAL_TO_COVER = 20 * ETHER
CRASHED_PRICE = 18 * 10**8


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def eth_feed() -> MockPriceFeed:
    return MockPriceFeed(ETH_USD_PRICE)


@pytest.fixture()
def btc_feed() -> MockPriceFeed:
    return MockPriceFeed(BTC_USD_PRICE)


@pytest.fixture()
def weth() -> MockCollateralToken:
    token = MockCollateralToken(WETH)
    token.mint(USER, STARTING_BALANCE)
    token.mint(LIQUIDATOR, STARTING_BALANCE)
    return token


@pytest.fixture()
def wbtc() -> MockCollateralToken:
    token = MockCollateralToken(WBTC, decimals=8)
    token.mint(USER, 10 * 10**8)
    return token


@pytest.fixture()
def synthetic() -> MockSyntheticToken:
    return MockSyntheticToken()


@pytest.fixture()
def sink() -> RecordingEventSink:
    return RecordingEventSink()


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def risk() -> RiskParameters:
    return RiskParameters()


@pytest.fixture()
def engine(
    weth: MockCollateralToken,
    wbtc: MockCollateralToken,
    eth_feed: MockPriceFeed,
    btc_feed: MockPriceFeed,
    synthetic: MockSyntheticToken,
    sink: RecordingEventSink,
    risk: RiskParameters,
) -> SynthEngine:
    return SynthEngine(
        [weth, wbtc], [eth_feed, btc_feed], synthetic, risk=risk, event_sinks=[sink]
    )


@pytest.fixture()
def deposited(engine: SynthEngine) -> SynthEngine:
    engine.deposit(USER, WETH, COLLATERAL_AMOUNT)
    return engine


@pytest.fixture()
def issued(engine: SynthEngine) -> SynthEngine:
    engine.deposit_and_issue(USER, WETH, COLLATERAL_AMOUNT, AMOUNT_TO_ISSUE)
    return engine


@pytest.fixture()
def liquidator_ready(issued: SynthEngine) -> SynthEngine:
    issued.deposit_and_issue(LIQUIDATOR, WETH, COLLATERAL_TO_COVER, AMOUNT_TO_ISSUE)
    return issued


@pytest.fixture()
def crashed(liquidator_ready: SynthEngine, eth_feed: MockPriceFeed) -> SynthEngine:
    eth_feed.update_answer(CRASHED_PRICE)
    return liquidator_ready


def engine_state(
    engine: SynthEngine, weth: MockCollateralToken, synthetic: MockSyntheticToken
) -> tuple:
    """Ledger and collaborator balances of both test accounts."""
    return (
        engine.collateral_balance(USER, WETH),
        engine.collateral_balance(LIQUIDATOR, WETH),
        engine.debt_of(USER),
        engine.debt_of(LIQUIDATOR),
        dict(weth.balances),
        weth.held,
        dict(synthetic.balances),
        synthetic.total_supply,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_pyth_config() -> PythConfig:
    return PythConfig(
        hermes_url="https://hermes.example.com/v2/updates/price/latest",
        feeds={"ETH": "aaa111", "BTC": "bbb222", "USDC": "ccc333"},
    )


SAMPLE_YAML = textwrap.dedent("""\
    risk:
      liquidation_threshold: 50
      liquidation_precision: 100
      liquidation_bonus: 10
      min_health_factor: 1.0
    assets:
      - symbol: WETH
        address: "0xWETH"
        feed: ETH
      - symbol: WBTC
        address: "0xWBTC"
        feed: BTC
        decimals: 8
    price_oracle:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        feeds: {ETH: "aaa", BTC: "bbb"}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
