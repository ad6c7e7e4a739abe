"""Health factor calculation over the ledger and live prices."""
from __future__ import annotations

from .fixed_point import MAX_HEALTH_FACTOR, checked_add, checked_div, checked_mul
from .ledger import PositionLedger
from .models import AccountInformation, RiskParameters
from .oracles.adapter import PriceOracleAdapter
from .registry import AssetRegistry


def calculate_health_factor(
    debt: int, collateral_value_usd: int, risk: RiskParameters
) -> int:
    """Threshold-adjusted collateral value per unit of debt, PRECISION-scaled.

    A zero debt is maximally healthy and yields ``MAX_HEALTH_FACTOR``.
    """
    if debt == 0:
        return MAX_HEALTH_FACTOR
    adjusted = checked_div(
        checked_mul(collateral_value_usd, risk.liquidation_threshold),
        risk.liquidation_precision,
    )
    return checked_div(checked_mul(adjusted, risk.precision), debt)


class HealthFactorCalculator:
    """Reads a user's balances and values them at current prices."""

    def __init__(
        self,
        ledger: PositionLedger,
        registry: AssetRegistry,
        oracle: PriceOracleAdapter,
        risk: RiskParameters,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._oracle = oracle
        self._risk = risk

    def collateral_value(self, user: str) -> int:
        total = 0
        for asset in self._registry.list_assets():
            amount = self._ledger.collateral_of(user, asset.address)
            if amount:
                total = checked_add(total, self._oracle.usd_value(asset.address, amount))
        return total

    def account_information(self, user: str) -> AccountInformation:
        return AccountInformation(
            debt=self._ledger.debt_of(user),
            collateral_value_usd=self.collateral_value(user),
        )

    def health_factor(self, user: str) -> int:
        debt = self._ledger.debt_of(user)
        if debt == 0:
            # healthy without consulting the feeds
            return MAX_HEALTH_FACTOR
        return calculate_health_factor(debt, self.collateral_value(user), self._risk)

    @property
    def min_health_factor(self) -> int:
        return self._risk.min_health_factor

    def is_healthy(self, user: str) -> bool:
        return self.health_factor(user) >= self._risk.min_health_factor

    def max_issuable(self, user: str) -> int:
        """Additional debt the user could take on and stay at the floor."""
        info = self.account_information(user)
        adjusted = checked_div(
            checked_mul(info.collateral_value_usd, self._risk.liquidation_threshold),
            self._risk.liquidation_precision,
        )
        ceiling = checked_div(
            checked_mul(adjusted, self._risk.precision), self._risk.min_health_factor
        )
        return max(ceiling - info.debt, 0)
