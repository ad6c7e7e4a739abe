"""Service modules"""
from .engine import SynthEngine
from .liquidation import LiquidationEngine
from .position_manager import PositionManager

__all__ = ["SynthEngine", "LiquidationEngine", "PositionManager"]
