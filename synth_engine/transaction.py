"""Operation scope — one atomic, non-reentrant unit of engine work."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from .errors import EngineError
from .events import EventDispatcher
from .guard import ReentrancyGuard
from .interfaces.participant import TransactionParticipant
from .ledger import PositionLedger

logger = logging.getLogger(__name__)


class OperationScope:
    """Guard, ledger transaction, collaborator snapshots and event buffer.

    Entering the scope acquires the reentrancy guard and opens a ledger
    transaction. If the body raises, the ledger and every participating
    collaborator are restored and buffered events are dropped; otherwise
    the events are published.
    """

    def __init__(
        self,
        guard: ReentrancyGuard,
        ledger: PositionLedger,
        events: EventDispatcher,
        collaborators: Iterable[object] = (),
    ) -> None:
        self._guard = guard
        self._ledger = ledger
        self._events = events
        unique = {id(c): c for c in collaborators}
        self._participants: list[TransactionParticipant] = [
            c for c in unique.values() if isinstance(c, TransactionParticipant)
        ]

    @contextmanager
    def __call__(self, operation: str) -> Iterator[None]:
        with self._guard.hold(operation), self._ledger.transaction():
            saved = [(p, p.snapshot()) for p in self._participants]
            logger.debug("Operation %s started", operation)
            try:
                with self._events.buffer():
                    yield
            except EngineError as e:
                self._restore(saved)
                logger.warning("Operation %s rejected: %s", operation, e)
                raise
            except BaseException:
                self._restore(saved)
                raise
            logger.debug("Operation %s committed", operation)

    @staticmethod
    def _restore(saved: list[tuple[TransactionParticipant, object]]) -> None:
        for participant, state in reversed(saved):
            participant.restore(state)
