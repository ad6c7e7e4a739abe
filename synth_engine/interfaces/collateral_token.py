"""Collateral token protocol — transferable asset abstraction."""
from typing import Protocol


class CollateralToken(Protocol):
    """Abstract interface for moving collateral in and out of engine custody."""

    @property
    def address(self) -> str: ...

    @property
    def decimals(self) -> int: ...

    def pull(self, owner: str, amount: int) -> bool: ...

    def push(self, recipient: str, amount: int) -> bool: ...
