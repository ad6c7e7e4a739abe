"""Fixed-point scale factors and checked uint256 arithmetic."""
from __future__ import annotations

from .errors import ArithmeticOverflow

# Fixed point scale factors
PRECISION = 10**18  # USD values, synthetic units and health factors
FEED_PRECISION = 10**8  # Chainlink-style USD feeds
ADDITIONAL_FEED_PRECISION = PRECISION // FEED_PRECISION  # 1e10

# Risk constants
LIQUIDATION_THRESHOLD = 50  # 200% over-collateralized
LIQUIDATION_PRECISION = 100
LIQUIDATION_BONUS = 10  # 10% discount for liquidators
MIN_HEALTH_FACTOR = 1 * PRECISION

UINT256_MAX = 2**256 - 1
MAX_HEALTH_FACTOR = UINT256_MAX


def _check(result: int, op: str) -> int:
    if result < 0 or result > UINT256_MAX:
        raise ArithmeticOverflow(f"Arithmetic overflow in {op}")
    return result


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    return _check(a + b, "addition")


def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    return _check(a - b, "subtraction")


def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    return _check(a * b, "multiplication")


def checked_div(a: int, b: int) -> int:
    """Floor-divide, refusing division by zero"""
    if b == 0:
        raise ArithmeticOverflow("Division by zero")
    return _check(a // b, "division")


def feed_scale(decimals: int) -> int:
    """Factor lifting a quote with ``decimals`` decimals to PRECISION.

    An 8-decimal quote yields ADDITIONAL_FEED_PRECISION.
    """
    if decimals < 0 or 10**decimals > PRECISION:
        raise ArithmeticOverflow(f"Unsupported feed decimals: {decimals}")
    return PRECISION // 10**decimals
