"""Event sink protocol — receives committed engine events."""
from typing import Protocol

from ..models import EngineEvent


class EventSink(Protocol):
    """Abstract interface for observers of engine side effects."""

    def publish(self, event: EngineEvent) -> None: ...
