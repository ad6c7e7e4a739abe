"""Position ledger — the authoritative per-user collateral and debt balances."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from .errors import InsufficientCollateral, InsufficientDebt, LedgerError
from .fixed_point import checked_add

logger = logging.getLogger(__name__)


@dataclass
class UserPosition:
    """Mutable balances of one user; owned by the ledger."""

    collateral: dict[str, int] = field(default_factory=dict)
    debt: int = 0

    def copy(self) -> UserPosition:
        return UserPosition(collateral=dict(self.collateral), debt=self.debt)


class PositionLedger:
    """Single-writer store keyed by user identity.

    Reads are always allowed. Writes are only accepted inside
    :meth:`transaction`, which restores the pre-transaction state if the
    enclosed block raises. Only users written during the transaction are
    saved, on their first write.
    """

    def __init__(self) -> None:
        self._positions: dict[str, UserPosition] = {}
        self._undo: dict[str, UserPosition | None] | None = None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return self._undo is not None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._undo is not None:
            raise LedgerError("A ledger transaction is already open")

        self._undo = {}
        try:
            yield
        except BaseException:
            self._rollback(self._undo)
            raise
        finally:
            self._undo = None

    def _rollback(self, undo: dict[str, UserPosition | None]) -> None:
        for user, saved in undo.items():
            if saved is None:
                del self._positions[user]
            else:
                self._positions[user] = saved
        logger.debug("Ledger transaction rolled back (%d users restored)", len(undo))

    def _writable(self, user: str) -> UserPosition:
        if self._undo is None:
            raise LedgerError("Ledger mutation outside of a transaction")
        position = self._positions.get(user)
        if user not in self._undo:
            self._undo[user] = position.copy() if position is not None else None
        if position is None:
            position = self._positions[user] = UserPosition()
        return position

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def collateral_of(self, user: str, asset: str) -> int:
        position = self._positions.get(user)
        return position.collateral.get(asset, 0) if position else 0

    def debt_of(self, user: str) -> int:
        position = self._positions.get(user)
        return position.debt if position else 0

    def users(self) -> tuple[str, ...]:
        return tuple(self._positions)

    def total_collateral(self, asset: str) -> int:
        return sum(p.collateral.get(asset, 0) for p in self._positions.values())

    def total_debt(self) -> int:
        return sum(p.debt for p in self._positions.values())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def credit_collateral(self, user: str, asset: str, amount: int) -> None:
        position = self._writable(user)
        position.collateral[asset] = checked_add(position.collateral.get(asset, 0), amount)

    def debit_collateral(self, user: str, asset: str, amount: int) -> None:
        position = self._writable(user)
        available = position.collateral.get(asset, 0)
        if amount > available:
            raise InsufficientCollateral(user, amount, available)
        position.collateral[asset] = available - amount

    def credit_debt(self, user: str, amount: int) -> None:
        position = self._writable(user)
        position.debt = checked_add(position.debt, amount)

    def debit_debt(self, user: str, amount: int) -> None:
        position = self._writable(user)
        if amount > position.debt:
            raise InsufficientDebt(user, amount, position.debt)
        position.debt -= amount
