"""Engine errors, grouped by how a caller is expected to react to them."""
from __future__ import annotations


class EngineError(Exception):
    """Base error class for engine errors."""


# ---------------------------------------------------------------------------
# Validation: caller-correctable, raised before anything is mutated
# ---------------------------------------------------------------------------


class ValidationError(EngineError):
    """The request itself is malformed."""


class InvalidAmount(ValidationError):
    def __init__(self, amount: int) -> None:
        super().__init__(f"Amount must be more than zero, got {amount}")
        self.amount = amount


class AssetNotAllowed(ValidationError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"Asset '{asset}' is not an accepted collateral")
        self.asset = asset


class ConfigurationError(ValidationError, ValueError):
    """Invalid construction-time configuration."""


# ---------------------------------------------------------------------------
# Invariant violations: the mutation was attempted and rolled back
# ---------------------------------------------------------------------------


class InvariantViolation(EngineError):
    """The requested state transition would leave the system unsafe."""


class HealthFactorBroken(InvariantViolation):
    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(f"Health factor of {user} would be {health_factor}")
        self.user = user
        self.health_factor = health_factor


class PositionHealthy(InvariantViolation):
    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(
            f"Position of {user} is healthy (health factor {health_factor})"
        )
        self.user = user
        self.health_factor = health_factor


class HealthNotImproved(InvariantViolation):
    def __init__(self, user: str, before: int, after: int) -> None:
        super().__init__(
            f"Liquidation did not improve health of {user}: {before} -> {after}"
        )
        self.user = user
        self.before = before
        self.after = after


# ---------------------------------------------------------------------------
# Collaborator failures: an external capability rejected the request
# ---------------------------------------------------------------------------


class CollaboratorFailure(EngineError):
    """An external capability reported failure."""


class TransferFailed(CollaboratorFailure):
    def __init__(self, asset: str, amount: int, counterparty: str) -> None:
        super().__init__(f"Transfer of {amount} {asset} with {counterparty} failed")
        self.asset = asset
        self.amount = amount
        self.counterparty = counterparty


class IssuanceFailed(CollaboratorFailure):
    def __init__(self, action: str, amount: int) -> None:
        super().__init__(f"Synthetic asset refused to {action} {amount} units")
        self.action = action
        self.amount = amount


class PriceUnavailable(CollaboratorFailure):
    def __init__(self, source: str, reason: str = "no price") -> None:
        super().__init__(f"Price unavailable from {source}: {reason}")
        self.source = source
        self.reason = reason


# ---------------------------------------------------------------------------
# Insufficient balances: underflow-guarded decrements
# ---------------------------------------------------------------------------


class InsufficientBalance(EngineError):
    def __init__(self, user: str, requested: int, available: int) -> None:
        super().__init__(
            f"{type(self).__name__}: {user} has {available}, requested {requested}"
        )
        self.user = user
        self.requested = requested
        self.available = available


class InsufficientCollateral(InsufficientBalance):
    pass


class InsufficientDebt(InsufficientBalance):
    pass


# ---------------------------------------------------------------------------
# Engine-level faults
# ---------------------------------------------------------------------------


class ReentrantCall(EngineError):
    def __init__(self, attempted: str, in_flight: str) -> None:
        super().__init__(
            f"Reentrant call to {attempted} while {in_flight} is in flight"
        )
        self.attempted = attempted
        self.in_flight = in_flight


class LedgerError(EngineError):
    """Ledger used outside of an open transaction."""


class ArithmeticOverflow(EngineError):
    """Fixed-point arithmetic left the uint256 range."""
