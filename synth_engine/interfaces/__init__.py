"""Capability interfaces consumed by the engine."""
from .collateral_token import CollateralToken
from .event_sink import EventSink
from .participant import TransactionParticipant
from .price_feed import PriceFeed
from .synthetic_token import SyntheticToken

__all__ = [
    "CollateralToken",
    "EventSink",
    "PriceFeed",
    "SyntheticToken",
    "TransactionParticipant",
]
