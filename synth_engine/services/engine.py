"""Engine facade — wires the components and exposes the caller-facing operations."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..events import EventDispatcher
from ..guard import ReentrancyGuard
from ..health import HealthFactorCalculator, calculate_health_factor
from ..interfaces import CollateralToken, EventSink, PriceFeed, SyntheticToken
from ..ledger import PositionLedger
from ..models import AccountInformation, RiskParameters
from ..oracles.adapter import PriceOracleAdapter
from ..registry import AssetRegistry
from ..transaction import OperationScope
from .liquidation import LiquidationEngine
from .position_manager import PositionManager

logger = logging.getLogger(__name__)


class SynthEngine:
    """Over-collateralized issuance engine for one synthetic asset.

    ``collateral_tokens[i]`` is valued with ``price_feeds[i]``. The registry,
    risk parameters and collaborators are fixed for the engine's lifetime.
    """

    def __init__(
        self,
        collateral_tokens: Sequence[CollateralToken],
        price_feeds: Sequence[PriceFeed],
        synthetic: SyntheticToken,
        risk: RiskParameters | None = None,
        event_sinks: Iterable[EventSink] = (),
    ) -> None:
        self._risk = risk or RiskParameters()
        self._registry = AssetRegistry(collateral_tokens, price_feeds)
        self._oracle = PriceOracleAdapter(self._registry)
        self._ledger = PositionLedger()
        self._health = HealthFactorCalculator(
            self._ledger, self._registry, self._oracle, self._risk
        )
        self._events = EventDispatcher(event_sinks)
        scope = OperationScope(
            ReentrancyGuard(),
            self._ledger,
            self._events,
            collaborators=[*collateral_tokens, synthetic],
        )
        self._positions = PositionManager(
            self._ledger, self._registry, self._health, synthetic, self._events, scope
        )
        self._liquidations = LiquidationEngine(
            self._registry, self._oracle, self._health, self._positions, self._risk, scope
        )

        logger.info(
            "Engine ready with %d collateral assets (threshold %d/%d, bonus %d/%d)",
            len(self._registry),
            self._risk.liquidation_threshold,
            self._risk.liquidation_precision,
            self._risk.liquidation_bonus,
            self._risk.liquidation_precision,
        )

    # ------------------------------------------------------------------
    # State-mutating operations
    # ------------------------------------------------------------------

    def deposit(self, user: str, asset: str, amount: int) -> None:
        self._positions.deposit(user, asset, amount)

    def withdraw(self, user: str, asset: str, amount: int) -> None:
        self._positions.withdraw(user, asset, amount)

    def issue(self, user: str, amount: int) -> None:
        self._positions.issue(user, amount)

    def repay(self, user: str, amount: int) -> None:
        self._positions.repay(user, amount)

    def deposit_and_issue(
        self, user: str, asset: str, collateral_amount: int, issue_amount: int
    ) -> None:
        self._positions.deposit_and_issue(user, asset, collateral_amount, issue_amount)

    def withdraw_and_repay(
        self, user: str, asset: str, collateral_amount: int, repay_amount: int
    ) -> None:
        self._positions.withdraw_and_repay(user, asset, collateral_amount, repay_amount)

    def liquidate(
        self, liquidator: str, collateral_asset: str, user: str, debt_to_cover: int
    ) -> None:
        self._liquidations.liquidate(liquidator, collateral_asset, user, debt_to_cover)

    def add_event_sink(self, sink: EventSink) -> None:
        self._events.add_sink(sink)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def usd_value(self, asset: str, amount: int) -> int:
        return self._oracle.usd_value(asset, amount)

    def token_amount_for_usd(self, asset: str, usd_amount: int) -> int:
        return self._oracle.token_amount_for_usd(asset, usd_amount)

    def collateral_value(self, user: str) -> int:
        return self._health.collateral_value(user)

    def account_information(self, user: str) -> AccountInformation:
        return self._health.account_information(user)

    def health_factor(self, user: str) -> int:
        return self._health.health_factor(user)

    def is_healthy(self, user: str) -> bool:
        return self._health.is_healthy(user)

    def calculate_health_factor(self, debt: int, collateral_value_usd: int) -> int:
        return calculate_health_factor(debt, collateral_value_usd, self._risk)

    def max_issuable(self, user: str) -> int:
        return self._health.max_issuable(user)

    def collateral_balance(self, user: str, asset: str) -> int:
        return self._ledger.collateral_of(user, asset)

    def debt_of(self, user: str) -> int:
        return self._ledger.debt_of(user)

    def collateral_assets(self) -> tuple[str, ...]:
        return tuple(asset.address for asset in self._registry.list_assets())

    def collateral_price_feed(self, asset: str) -> PriceFeed:
        return self._registry.get(asset).price_feed

    def is_accepted(self, asset: str) -> bool:
        return self._registry.is_accepted(asset)

    @property
    def risk(self) -> RiskParameters:
        return self._risk

    @property
    def ledger(self) -> PositionLedger:
        return self._ledger
