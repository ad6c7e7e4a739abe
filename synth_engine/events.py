"""Event dispatch — buffers events per operation, publishes on commit."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from .interfaces.event_sink import EventSink
from .models import (
    CollateralDeposited,
    CollateralRedeemed,
    DebtIssued,
    DebtRepaid,
    EngineEvent,
)

logger = logging.getLogger(__name__)


class LoggingEventSink:
    """Write every committed event to the log."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def publish(self, event: EngineEvent) -> None:
        if isinstance(event, CollateralDeposited):
            self._log.info(
                "Collateral deposited — %s · %s · %d", event.user, event.asset, event.amount
            )
        elif isinstance(event, CollateralRedeemed):
            kind = "liquidated" if event.is_liquidation else "redeemed"
            self._log.info(
                "Collateral %s — %s -> %s · %s · %d",
                kind,
                event.redeemed_from,
                event.redeemed_to,
                event.asset,
                event.amount,
            )
        elif isinstance(event, DebtIssued):
            self._log.info("Debt issued — %s · %d", event.user, event.amount)
        elif isinstance(event, DebtRepaid):
            self._log.info(
                "Debt repaid — %s by %s · %d", event.on_behalf_of, event.payer, event.amount
            )


class EventDispatcher:
    """Collects events emitted inside :meth:`buffer` and fans them out on success."""

    def __init__(self, sinks: Iterable[EventSink] = ()) -> None:
        self._sinks: list[EventSink] = list(sinks)
        self._pending: list[EngineEvent] | None = None

    def add_sink(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: EngineEvent) -> None:
        if self._pending is None:
            raise RuntimeError("Events can only be emitted inside an operation")
        self._pending.append(event)

    @contextmanager
    def buffer(self) -> Iterator[None]:
        self._pending = []
        try:
            yield
        except BaseException:
            logger.debug("Discarding %d uncommitted events", len(self._pending))
            raise
        else:
            self._publish(self._pending)
        finally:
            self._pending = None

    def _publish(self, events: list[EngineEvent]) -> None:
        for event in events:
            for sink in self._sinks:
                try:
                    sink.publish(event)
                except Exception as e:
                    logger.error("Event sink %r failed on %r: %s", sink, event, e)
