"""In-memory collaborators for tests and local simulation.

Each double keeps its balances in plain dicts, reports failure through its
return value like the real capabilities do, and takes part in the engine's
rollback through ``snapshot``/``restore``.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .errors import PriceUnavailable
from .models import PriceQuote

TransferHook = Callable[[str, str, int], None]


class MockPriceFeed:
    """Settable price feed, 8 decimals by default."""

    def __init__(self, price: int, decimals: int = 8) -> None:
        self.price = price
        self.decimals = decimals
        self.available = True
        self.calls = 0

    def update_answer(self, price: int) -> None:
        self.price = price

    def latest_quote(self) -> PriceQuote:
        self.calls += 1
        if not self.available:
            raise PriceUnavailable("mock", "feed offline")
        return PriceQuote(price=self.price, decimals=self.decimals)


class _Balances:
    """Holder balances plus the engine's custody balance."""

    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.held = 0
        self.on_transfer: TransferHook | None = None

    def balance_of(self, holder: str) -> int:
        return self.balances.get(holder, 0)

    def mint(self, to: str, amount: int) -> None:
        self.balances[to] = self.balance_of(to) + amount

    def _take(self, owner: str, amount: int) -> bool:
        if self.balance_of(owner) < amount:
            return False
        self.balances[owner] -= amount
        self.held += amount
        return True

    def _give(self, recipient: str, amount: int) -> bool:
        if self.held < amount:
            return False
        self.held -= amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        return True

    def _notify(self, action: str, counterparty: str, amount: int) -> None:
        if self.on_transfer is not None:
            self.on_transfer(action, counterparty, amount)

    def snapshot(self) -> Any:
        return dict(self.balances), self.held

    def restore(self, state: Any) -> None:
        balances, held = state
        self.balances = dict(balances)
        self.held = held


class MockCollateralToken(_Balances):
    """Collateral token; ``fail_pull``/``fail_push`` make transfers report failure."""

    def __init__(self, address: str, decimals: int = 18) -> None:
        super().__init__()
        self._address = address
        self._decimals = decimals
        self.fail_pull = False
        self.fail_push = False

    @property
    def address(self) -> str:
        return self._address

    @property
    def decimals(self) -> int:
        return self._decimals

    def pull(self, owner: str, amount: int) -> bool:
        self._notify("pull", owner, amount)
        if self.fail_pull:
            return False
        return self._take(owner, amount)

    def push(self, recipient: str, amount: int) -> bool:
        self._notify("push", recipient, amount)
        if self.fail_push:
            return False
        return self._give(recipient, amount)


class MockSyntheticToken(_Balances):
    """Synthetic asset with issuance bookkeeping."""

    def __init__(self) -> None:
        super().__init__()
        self.total_supply = 0
        self.fail_issue = False
        self.fail_pull = False
        self.fail_destroy = False

    def issue(self, recipient: str, amount: int) -> bool:
        self._notify("issue", recipient, amount)
        if self.fail_issue:
            return False
        self.mint(recipient, amount)
        self.total_supply += amount
        return True

    def pull(self, owner: str, amount: int) -> bool:
        self._notify("pull", owner, amount)
        if self.fail_pull:
            return False
        return self._take(owner, amount)

    def destroy(self, amount: int) -> bool:
        if self.fail_destroy or self.held < amount:
            return False
        self.held -= amount
        self.total_supply -= amount
        return True

    def snapshot(self) -> Any:
        return super().snapshot(), self.total_supply

    def restore(self, state: Any) -> None:
        inner, total_supply = state
        super().restore(inner)
        self.total_supply = total_supply


class RecordingEventSink:
    """Keeps every published event in order."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def publish(self, event: Any) -> None:
        self.events.append(event)
