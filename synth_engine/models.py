"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import ConfigurationError
from .fixed_point import (
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MIN_HEALTH_FACTOR,
    PRECISION,
)

if TYPE_CHECKING:
    from .interfaces import CollateralToken, PriceFeed


@dataclass(frozen=True)
class PriceQuote:
    """Raw feed answer: ``price / 10**decimals`` USD per whole unit."""

    price: int
    decimals: int = 8


@dataclass(frozen=True)
class Asset:
    """Accepted collateral asset bound to its price source.

    ``token`` is None for assets that are only priced, never transferred.
    """

    address: str
    decimals: int
    price_feed: PriceFeed = field(compare=False, repr=False)
    token: CollateralToken | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class AccountInformation:
    """Outstanding debt and total collateral value of one user."""

    debt: int
    collateral_value_usd: int


@dataclass(frozen=True)
class RiskParameters:
    """System configuration, fixed at construction."""

    liquidation_threshold: int = LIQUIDATION_THRESHOLD
    liquidation_precision: int = LIQUIDATION_PRECISION
    liquidation_bonus: int = LIQUIDATION_BONUS
    min_health_factor: int = MIN_HEALTH_FACTOR
    precision: int = PRECISION

    def __post_init__(self) -> None:
        if self.liquidation_precision <= 0:
            raise ConfigurationError("liquidation_precision must be positive")
        if not 0 < self.liquidation_threshold <= self.liquidation_precision:
            raise ConfigurationError(
                "liquidation_threshold must be in (0, liquidation_precision]"
            )
        if not 0 <= self.liquidation_bonus < self.liquidation_precision:
            raise ConfigurationError(
                "liquidation_bonus must be in [0, liquidation_precision)"
            )
        if self.precision != PRECISION:
            raise ConfigurationError(f"precision must be {PRECISION}")
        if self.min_health_factor <= 0:
            raise ConfigurationError("min_health_factor must be positive")


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollateralDeposited:
    user: str
    asset: str
    amount: int


@dataclass(frozen=True)
class CollateralRedeemed:
    redeemed_from: str
    redeemed_to: str
    asset: str
    amount: int

    @property
    def is_liquidation(self) -> bool:
        return self.redeemed_from != self.redeemed_to


@dataclass(frozen=True)
class DebtIssued:
    user: str
    amount: int


@dataclass(frozen=True)
class DebtRepaid:
    on_behalf_of: str
    payer: str
    amount: int


EngineEvent = CollateralDeposited | CollateralRedeemed | DebtIssued | DebtRepaid
