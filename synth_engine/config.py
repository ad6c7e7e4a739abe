"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .fixed_point import (
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    PRECISION,
)
from .models import RiskParameters

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskConfig:
    liquidation_threshold: int = LIQUIDATION_THRESHOLD
    liquidation_precision: int = LIQUIDATION_PRECISION
    liquidation_bonus: int = LIQUIDATION_BONUS
    min_health_factor: Decimal = Decimal("1")

    def to_parameters(self) -> RiskParameters:
        """Build engine parameters; the floor is scaled by the one engine precision."""
        return RiskParameters(
            liquidation_threshold=self.liquidation_threshold,
            liquidation_precision=self.liquidation_precision,
            liquidation_bonus=self.liquidation_bonus,
            min_health_factor=int(self.min_health_factor * PRECISION),
        )


@dataclass(frozen=True)
class AssetConfig:
    symbol: str = ""
    address: str = ""
    feed: str = ""
    decimals: int = 18


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feeds: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class AppConfig:
    risk: RiskConfig = field(default_factory=RiskConfig)
    assets: tuple[AssetConfig, ...] = ()
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)

    def asset(self, symbol: str) -> AssetConfig:
        for asset in self.assets:
            if asset.symbol == symbol:
                return asset
        raise KeyError(f"Unknown asset '{symbol}'")


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    return RiskConfig(
        liquidation_threshold=int(raw.get("liquidation_threshold", LIQUIDATION_THRESHOLD)),
        liquidation_precision=int(raw.get("liquidation_precision", LIQUIDATION_PRECISION)),
        liquidation_bonus=int(raw.get("liquidation_bonus", LIQUIDATION_BONUS)),
        min_health_factor=Decimal(str(raw.get("min_health_factor", "1"))),
    )


def _build_assets(raw: list[dict[str, Any]]) -> tuple[AssetConfig, ...]:
    return tuple(
        AssetConfig(
            symbol=a.get("symbol", ""),
            address=a.get("address", ""),
            feed=a.get("feed", a.get("symbol", "")),
            decimals=int(a.get("decimals", 18)),
        )
        for a in raw
    )


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feeds=dict(pyth_raw.get("feeds", {})),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        risk=_build_risk(raw.get("risk", {})),
        assets=_build_assets(raw.get("assets", [])),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.assets:
        raise ValueError("At least one collateral asset must be configured")

    symbols: set[str] = set()
    addresses: set[str] = set()
    for asset in cfg.assets:
        if not asset.symbol:
            raise ValueError("Collateral asset has no symbol")
        if not asset.address:
            raise ValueError(f"Asset '{asset.symbol}' has no address")
        if asset.symbol in symbols:
            raise ValueError(f"Duplicate asset symbol '{asset.symbol}'")
        if asset.address in addresses:
            raise ValueError(f"Duplicate asset address '{asset.address}'")
        if asset.feed not in cfg.price_oracle.pyth.feeds:
            raise ValueError(
                f"Asset '{asset.symbol}' references unknown feed '{asset.feed}'"
            )
        symbols.add(asset.symbol)
        addresses.add(asset.address)

    if cfg.risk.min_health_factor <= 0:
        raise ValueError("min_health_factor must be positive")

    # Raises ConfigurationError (a ValueError) on inconsistent parameters
    cfg.risk.to_parameters()
