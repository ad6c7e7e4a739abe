"""Over-collateralized synthetic asset issuance engine."""
from .errors import EngineError
from .models import RiskParameters
from .services import SynthEngine

__all__ = ["EngineError", "RiskParameters", "SynthEngine"]
