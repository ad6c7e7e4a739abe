"""Liquidation engine — third-party recovery of unhealthy positions."""
from __future__ import annotations

import logging

from ..errors import HealthNotImproved, PositionHealthy
from ..fixed_point import checked_add, checked_div, checked_mul
from ..health import HealthFactorCalculator
from ..models import RiskParameters
from ..oracles.adapter import PriceOracleAdapter
from ..registry import AssetRegistry
from ..transaction import OperationScope
from .position_manager import PositionManager, require_positive

logger = logging.getLogger(__name__)


class LiquidationEngine:
    """Lets any caller repay an unhealthy user's debt for discounted collateral."""

    def __init__(
        self,
        registry: AssetRegistry,
        oracle: PriceOracleAdapter,
        health: HealthFactorCalculator,
        positions: PositionManager,
        risk: RiskParameters,
        scope: OperationScope,
    ) -> None:
        self._registry = registry
        self._oracle = oracle
        self._health = health
        self._positions = positions
        self._risk = risk
        self._scope = scope

    def collateral_for(self, collateral_asset: str, debt_to_cover: int) -> tuple[int, int]:
        """Collateral equivalent of ``debt_to_cover`` and the liquidator's bonus."""
        equivalent = self._oracle.token_amount_for_usd(collateral_asset, debt_to_cover)
        bonus = checked_div(
            checked_mul(equivalent, self._risk.liquidation_bonus),
            self._risk.liquidation_precision,
        )
        return equivalent, bonus

    def liquidate(
        self, liquidator: str, collateral_asset: str, user: str, debt_to_cover: int
    ) -> None:
        """Cover ``debt_to_cover`` of ``user``'s debt and seize collateral plus bonus.

        Raises:
            PositionHealthy: ``user`` already meets the minimum health factor.
            InsufficientCollateral: ``user`` holds too little ``collateral_asset``.
            HealthNotImproved: the liquidation would not raise ``user``'s health.
            HealthFactorBroken: the liquidator ends up below the floor.
        """
        require_positive(debt_to_cover)
        self._registry.get(collateral_asset)

        with self._scope("liquidate"):
            starting = self._health.health_factor(user)
            if starting >= self._risk.min_health_factor:
                raise PositionHealthy(user, starting)

            equivalent, bonus = self.collateral_for(collateral_asset, debt_to_cover)
            seized = checked_add(equivalent, bonus)

            self._positions.redeem_collateral(collateral_asset, seized, user, liquidator)
            self._positions.burn_debt(debt_to_cover, on_behalf_of=user, payer=liquidator)

            ending = self._health.health_factor(user)
            if ending <= starting:
                raise HealthNotImproved(user, starting, ending)

            self._positions.require_healthy(liquidator)

        logger.info(
            "Liquidated %s by %s: covered %d debt for %d %s (bonus %d), health %d -> %d",
            user,
            liquidator,
            debt_to_cover,
            seized,
            collateral_asset,
            bonus,
            starting,
            ending,
        )
