from __future__ import annotations

import math
from collections.abc import Sequence

def _ensure_finite(value: float, name: str) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    return value


def _validate_odds(value: float, name: str = "odds") -> float:
    value = _ensure_finite(float(value), name)
    if value <= 1.0:
        raise ValueError(f"{name} must be greater than 1")
    return value


def effective_odds(odds: float, boost_percent: float = 0.0) -> float:
    odds = _validate_odds(odds)
    boost_percent = _ensure_finite(float(boost_percent), "boost_percent")
    if boost_percent < 0.0:
        raise ValueError("boost_percent must be non-negative")
    return _ensure_finite(odds * (1.0 + boost_percent / 100.0), "effective_odds")


def inverse_odds_weights(odds: Sequence[float]) -> list[float]:
    if not odds:
        raise ValueError("odds must not be empty")
    return [1.0 / _validate_odds(o) for o in odds]


def implied_probability_sum(odds: Sequence[float]) -> float:
    return math.fsum(inverse_odds_weights(odds))


def dutch_stakes(odds: Sequence[float], total: float) -> list[float]:
    """Split ``total`` in proportion to 1/odds so every leg returns the same amount."""
    total = _ensure_finite(float(total), "total")
    if total <= 0.0:
        raise ValueError("total must be greater than zero")
    weights = inverse_odds_weights(odds)
    weight_sum = math.fsum(weights)
    return [total * w / weight_sum for w in weights]


def total_for_return(odds: Sequence[float], target_return: float) -> float:
    target_return = _ensure_finite(float(target_return), "target_return")
    if target_return <= 0.0:
        raise ValueError("target_return must be greater than zero")
    return _ensure_finite(target_return * implied_probability_sum(odds), "total")


def total_for_capped_leg(odds: Sequence[float], cap: float, index: int) -> float:
    cap = _ensure_finite(float(cap), "cap")
    if cap <= 0.0:
        raise ValueError("cap must be greater than zero")
    return _ensure_finite(cap * implied_probability_sum(odds) * _validate_odds(odds[index]), "total")


def payout(stake: float, effective: float, is_free_bet: bool = False) -> float:
    # A free bet keeps the winnings but not the stake.
    if is_free_bet:
        return stake * (effective - 1.0)
    return stake * effective


def commission_on(gross_profit: float, commission_percent: float) -> float:
    if gross_profit <= 0.0:
        return 0.0
    return gross_profit * commission_percent / 100.0


def is_arbitrage(profits: Sequence[float]) -> bool:
    if not profits:
        return False
    return all(p >= 0.0 for p in profits) and any(p > 0.0 for p in profits)
