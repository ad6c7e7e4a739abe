"""Reentrancy guard for state-mutating engine operations."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .errors import ReentrantCall

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    """At most one guarded operation in flight per engine instance."""

    def __init__(self) -> None:
        self._in_flight: str | None = None

    @property
    def in_flight(self) -> str | None:
        return self._in_flight

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        if self._in_flight is not None:
            logger.warning(
                "Rejected reentrant %s while %s is in flight", operation, self._in_flight
            )
            raise ReentrantCall(operation, self._in_flight)

        self._in_flight = operation
        try:
            yield
        finally:
            self._in_flight = None
