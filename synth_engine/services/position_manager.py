"""Position management — deposit, withdraw, issue and repay."""
from __future__ import annotations

import logging

from ..errors import HealthFactorBroken, InvalidAmount, IssuanceFailed, TransferFailed
from ..events import EventDispatcher
from ..health import HealthFactorCalculator
from ..interfaces import SyntheticToken
from ..ledger import PositionLedger
from ..models import CollateralDeposited, CollateralRedeemed, DebtIssued, DebtRepaid
from ..registry import AssetRegistry
from ..transaction import OperationScope

logger = logging.getLogger(__name__)

SYNTHETIC = "synthetic"


def require_positive(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmount(amount)


class PositionManager:
    """Applies user-initiated state transitions to the ledger.

    Public methods are atomic and non-reentrant. The ``redeem_collateral``,
    ``burn_debt`` and ``require_healthy`` steps are unguarded and must run
    inside an open operation scope; the liquidation engine composes them.

    Ordering: the ledger is always updated before the external call, and
    solvency is checked only after the external call returns.
    """

    def __init__(
        self,
        ledger: PositionLedger,
        registry: AssetRegistry,
        health: HealthFactorCalculator,
        synthetic: SyntheticToken,
        events: EventDispatcher,
        scope: OperationScope,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._health = health
        self._synthetic = synthetic
        self._events = events
        self._scope = scope

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def deposit(self, user: str, asset: str, amount: int) -> None:
        require_positive(amount)
        self._registry.get(asset)
        with self._scope("deposit"):
            self._deposit(user, asset, amount)

    def withdraw(self, user: str, asset: str, amount: int) -> None:
        require_positive(amount)
        self._registry.get(asset)
        with self._scope("withdraw"):
            self.redeem_collateral(asset, amount, user, user)
            self.require_healthy(user)

    def issue(self, user: str, amount: int) -> None:
        require_positive(amount)
        with self._scope("issue"):
            self._issue(user, amount)

    def repay(self, user: str, amount: int) -> None:
        require_positive(amount)
        with self._scope("repay"):
            self.burn_debt(amount, on_behalf_of=user, payer=user)

    def deposit_and_issue(
        self, user: str, asset: str, collateral_amount: int, issue_amount: int
    ) -> None:
        require_positive(collateral_amount)
        require_positive(issue_amount)
        self._registry.get(asset)
        with self._scope("deposit_and_issue"):
            self._deposit(user, asset, collateral_amount)
            self._issue(user, issue_amount)

    def withdraw_and_repay(
        self, user: str, asset: str, collateral_amount: int, repay_amount: int
    ) -> None:
        require_positive(collateral_amount)
        require_positive(repay_amount)
        self._registry.get(asset)
        with self._scope("withdraw_and_repay"):
            self.burn_debt(repay_amount, on_behalf_of=user, payer=user)
            self.redeem_collateral(asset, collateral_amount, user, user)
            self.require_healthy(user)

    # ------------------------------------------------------------------
    # Unguarded steps
    # ------------------------------------------------------------------

    def _deposit(self, user: str, asset: str, amount: int) -> None:
        token = self._registry.get(asset).token
        self._ledger.credit_collateral(user, asset, amount)
        self._events.emit(CollateralDeposited(user=user, asset=asset, amount=amount))
        if not token.pull(user, amount):
            raise TransferFailed(asset, amount, user)
        logger.info("Deposited %d %s for %s", amount, asset, user)

    def _issue(self, user: str, amount: int) -> None:
        self._ledger.credit_debt(user, amount)
        self.require_healthy(user)
        if not self._synthetic.issue(user, amount):
            raise IssuanceFailed("issue", amount)
        self._events.emit(DebtIssued(user=user, amount=amount))
        logger.info("Issued %d synthetic units to %s", amount, user)

    def redeem_collateral(
        self, asset: str, amount: int, redeemed_from: str, redeemed_to: str
    ) -> None:
        """Debit ``redeemed_from`` and push the collateral to ``redeemed_to``."""
        token = self._registry.get(asset).token
        self._ledger.debit_collateral(redeemed_from, asset, amount)
        self._events.emit(
            CollateralRedeemed(
                redeemed_from=redeemed_from,
                redeemed_to=redeemed_to,
                asset=asset,
                amount=amount,
            )
        )
        if not token.push(redeemed_to, amount):
            raise TransferFailed(asset, amount, redeemed_to)
        logger.info(
            "Redeemed %d %s from %s to %s", amount, asset, redeemed_from, redeemed_to
        )

    def burn_debt(self, amount: int, on_behalf_of: str, payer: str) -> None:
        """Reduce ``on_behalf_of``'s debt, collecting and destroying ``payer``'s units."""
        self._ledger.debit_debt(on_behalf_of, amount)
        if not self._synthetic.pull(payer, amount):
            raise TransferFailed(SYNTHETIC, amount, payer)
        if not self._synthetic.destroy(amount):
            raise IssuanceFailed("destroy", amount)
        self._events.emit(DebtRepaid(on_behalf_of=on_behalf_of, payer=payer, amount=amount))
        logger.info("Burned %d synthetic units of %s paid by %s", amount, on_behalf_of, payer)

    def require_healthy(self, user: str) -> None:
        health_factor = self._health.health_factor(user)
        if health_factor < self._health.min_health_factor:
            raise HealthFactorBroken(user, health_factor)
