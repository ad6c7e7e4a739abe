"""Transaction participant protocol — collaborators sharing the engine's rollback."""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TransactionParticipant(Protocol):
    """A collaborator whose state can be captured and restored.

    Participants are restored together with the ledger when an operation fails.
    """

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...
