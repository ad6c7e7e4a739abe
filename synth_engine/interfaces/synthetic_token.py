"""Synthetic token protocol — issuable asset abstraction."""
from typing import Protocol


class SyntheticToken(Protocol):
    """Abstract interface for issuing and destroying synthetic units."""

    def issue(self, recipient: str, amount: int) -> bool: ...

    def pull(self, owner: str, amount: int) -> bool: ...

    def destroy(self, amount: int) -> bool: ...
