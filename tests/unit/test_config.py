"""Unit tests for config loading, env interpolation, and validation."""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from synth_engine.config import (
    AppConfig,
    AssetConfig,
    RiskConfig,
    _interpolate_env,
    load_config,
)
from synth_engine.fixed_point import PRECISION


def _write(tmp_path: Path, content: str) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(content)
    return cfg_file


_ORACLE = """\
price_oracle:
  provider: pyth
  pyth:
    hermes_url: "https://hermes.test.com"
    feeds: {ETH: "aaa"}
"""


class TestInterpolateEnv:
    def test_simple_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _interpolate_env("${MY_VAR}") == "hello"

    def test_missing_var_becomes_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert _interpolate_env("${NONEXISTENT_VAR_XYZ}") == ""

    def test_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOK", "secret")
        result = _interpolate_env({"key": "${TOK}", "plain": "text"})
        assert result == {"key": "secret", "plain": "text"}

    def test_nested_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("A", "x")
        assert _interpolate_env(["${A}", "y"]) == ["x", "y"]

    def test_non_string_passthrough(self) -> None:
        assert _interpolate_env(42) == 42
        assert _interpolate_env(True) is True


class TestLoadConfig:
    def test_loads_valid_yaml(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert isinstance(cfg, AppConfig)
        assert [a.symbol for a in cfg.assets] == ["WETH", "WBTC"]
        assert cfg.asset("WBTC").decimals == 8
        assert cfg.asset("WETH").decimals == 18
        assert cfg.price_oracle.pyth.feeds == {"ETH": "aaa", "BTC": "bbb"}
        assert cfg.risk.liquidation_bonus == 10

    def test_unknown_asset_lookup(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        with pytest.raises(KeyError):
            cfg.asset("DOGE")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_risk_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(
            _write(tmp_path, "assets:\n  - {symbol: WETH, address: '0x1', feed: ETH}\n" + _ORACLE)
        )
        assert cfg.risk == RiskConfig()

    def test_env_interpolation_in_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_WETH", "0xABCDEF")
        cfg = load_config(
            _write(
                tmp_path,
                "assets:\n  - {symbol: WETH, address: '${TEST_WETH}', feed: ETH}\n" + _ORACLE,
            )
        )
        assert cfg.assets[0].address == "0xABCDEF"


class TestRiskConfig:
    def test_min_health_factor_scaled_by_engine_precision(self) -> None:
        params = RiskConfig(min_health_factor=Decimal("1.25")).to_parameters()
        assert params.min_health_factor == 125 * PRECISION // 100

    def test_parameters_carry_through(self) -> None:
        params = RiskConfig(liquidation_threshold=80, liquidation_bonus=5).to_parameters()
        assert params.liquidation_threshold == 80
        assert params.liquidation_bonus == 5


class TestValidation:
    def test_no_assets_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="At least one collateral asset"):
            load_config(_write(tmp_path, "assets: []\n" + _ORACLE))

    def test_unknown_feed_raises(self, tmp_path: Path) -> None:
        content = "assets:\n  - {symbol: WBTC, address: '0x2', feed: BTC}\n" + _ORACLE
        with pytest.raises(ValueError, match="unknown feed"):
            load_config(_write(tmp_path, content))

    def test_empty_address_raises(self, tmp_path: Path) -> None:
        content = "assets:\n  - {symbol: WETH, address: '', feed: ETH}\n" + _ORACLE
        with pytest.raises(ValueError, match="no address"):
            load_config(_write(tmp_path, content))

    def test_duplicate_address_raises(self, tmp_path: Path) -> None:
        content = (
            "assets:\n"
            "  - {symbol: WETH, address: '0x1', feed: ETH}\n"
            "  - {symbol: STETH, address: '0x1', feed: ETH}\n" + _ORACLE
        )
        with pytest.raises(ValueError, match="Duplicate asset address"):
            load_config(_write(tmp_path, content))

    def test_duplicate_symbol_raises(self, tmp_path: Path) -> None:
        content = (
            "assets:\n"
            "  - {symbol: WETH, address: '0x1', feed: ETH}\n"
            "  - {symbol: WETH, address: '0x2', feed: ETH}\n" + _ORACLE
        )
        with pytest.raises(ValueError, match="Duplicate asset symbol"):
            load_config(_write(tmp_path, content))

    def test_threshold_out_of_range_raises(self, tmp_path: Path) -> None:
        content = (
            "risk: {liquidation_threshold: 150}\n"
            "assets:\n  - {symbol: WETH, address: '0x1', feed: ETH}\n" + _ORACLE
        )
        with pytest.raises(ValueError, match="liquidation_threshold"):
            load_config(_write(tmp_path, content))

    def test_non_positive_floor_raises(self, tmp_path: Path) -> None:
        content = (
            "risk: {min_health_factor: 0}\n"
            "assets:\n  - {symbol: WETH, address: '0x1', feed: ETH}\n" + _ORACLE
        )
        with pytest.raises(ValueError, match="min_health_factor"):
            load_config(_write(tmp_path, content))


class TestFrozenConfigs:
    def test_risk_config_immutable(self) -> None:
        r = RiskConfig()
        with pytest.raises(AttributeError):
            r.liquidation_bonus = 99  # type: ignore[misc]

    def test_asset_config_immutable(self) -> None:
        a = AssetConfig(symbol="WETH", address="0x1", feed="ETH")
        with pytest.raises(AttributeError):
            a.address = "0x2"  # type: ignore[misc]
