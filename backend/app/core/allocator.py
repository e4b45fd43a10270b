"""Dutching stake allocation.

Everything here is pure: no I/O, no logging, no clock. Stakes keep full float
precision; rounding happens only in ``app.services.presentation``.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

from app.core.math import (
    commission_on,
    dutch_stakes,
    effective_odds,
    implied_probability_sum,
    is_arbitrage,
    payout,
    total_for_capped_leg,
    total_for_return,
)
from app.domain.enums import BudgetMode
from app.domain.errors import AllocationError, InsufficientLegs, InvalidBudget, InvalidConstraint, InvalidOdds
from app.domain.types import AllocationRequest, AllocationResult, Leg, LegResult

MIN_LEGS = 2


def _valid_odds(value: float) -> bool:
    return math.isfinite(value) and value > 1.0


def _validate_legs(legs: Sequence[Leg]) -> None:
    valid = sum(1 for leg in legs if _valid_odds(leg.odds))
    if valid < MIN_LEGS:
        raise InsufficientLegs(f"at least {MIN_LEGS} legs with odds > 1 are required, got {valid}")
    for idx, leg in enumerate(legs):
        if not _valid_odds(leg.odds):
            raise InvalidOdds(f"leg {idx} has odds {leg.odds}; odds must be greater than 1")


def _positive_amount(value: float | None, name: str) -> float:
    if value is None:
        raise InvalidBudget(f"{name} is required")
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidBudget(f"{name} must be numeric") from exc
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidBudget(f"{name} must be greater than zero")
    return value


@contextmanager
def _budget_math() -> Iterator[None]:
    # Amounts that overflow a float surface as a budget error.
    try:
        yield
    except AllocationError:
        raise
    except (ValueError, OverflowError) as exc:
        raise InvalidBudget(f"amounts are out of range: {exc}") from exc


def _effective(leg: Leg) -> float:
    try:
        return effective_odds(leg.odds, leg.odds_boost_percent)
    except ValueError as exc:
        raise InvalidOdds(f"odds {leg.odds} with a {leg.odds_boost_percent}% boost are out of range") from exc


def _boosted(legs: Sequence[Leg]) -> list[float]:
    return [_effective(leg) for leg in legs]


def min_odds_index(legs: Sequence[Leg]) -> int:
    """Index of the leg with the lowest effective odds; first occurrence wins ties."""
    best: int | None = None
    best_odds = math.inf
    for idx, leg in enumerate(legs):
        if not _valid_odds(leg.odds):
            continue
        odds = _effective(leg)
        if odds < best_odds:
            best, best_odds = idx, odds
    if best is None:
        raise InvalidConstraint("no leg with odds > 1 to apply the cap to")
    return best


def resolve_total(request: AllocationRequest) -> float:
    """Total budget implied by the request's budgeting mode."""
    legs = request.legs
    _validate_legs(legs)
    odds = _boosted(legs)

    if request.mode is BudgetMode.TOTAL:
        return _positive_amount(request.amount, "budget")
    if request.mode is BudgetMode.CAPPED:
        cap = _positive_amount(request.amount, "cap")
        with _budget_math():
            return total_for_capped_leg(odds, cap, min_odds_index(legs))
    if request.mode is BudgetMode.FIXED:
        idx = _fixed_index(request)
        fixed_stake = _positive_amount(legs[idx].stake, f"stake of fixed leg {idx}")
        with _budget_math():
            return total_for_return(odds, fixed_stake * odds[idx])
    raise InvalidConstraint(f"unsupported budgeting mode {request.mode!r}")


def _fixed_index(request: AllocationRequest) -> int:
    idx = request.fixed_index
    if idx is None or not 0 <= idx < len(request.legs):
        raise InvalidConstraint(f"fixed leg index {idx} is out of range for {len(request.legs)} legs")
    return idx


def allocate(request: AllocationRequest) -> AllocationResult:
    total = resolve_total(request)
    legs = request.legs
    odds = _boosted(legs)
    with _budget_math():
        stakes = dutch_stakes(odds, total)

    # The constrained leg keeps the exact amount the user supplied.
    if request.mode is BudgetMode.FIXED:
        idx = _fixed_index(request)
        stakes[idx] = float(legs[idx].stake)
    elif request.mode is BudgetMode.CAPPED:
        stakes[min_odds_index(legs)] = float(request.amount)

    return _evaluate(legs, stakes)


def fix_leg(request: AllocationRequest, leg_index: int) -> AllocationRequest:
    """Pin ``leg_index`` at its current stake and rebalance every other leg to match."""
    fixed = AllocationRequest.fixed(request.legs, leg_index)
    result = allocate(fixed)
    legs = tuple(leg.with_stake(leg_result.stake) for leg, leg_result in zip(fixed.legs, result.legs, strict=True))
    return replace(fixed, legs=legs)


def evaluate_stakes(legs: Sequence[Leg]) -> AllocationResult:
    """Profit/ROI for stakes as entered, without redistributing them."""
    _validate_legs(legs)
    stakes: list[float] = []
    for idx, leg in enumerate(legs):
        if leg.stake is None:
            raise InvalidBudget(f"leg {idx} has no stake")
        stakes.append(float(leg.stake))
    funded = sum(1 for stake in stakes if stake > 0.0)
    if funded < MIN_LEGS:
        raise InsufficientLegs(f"at least {MIN_LEGS} legs with a positive stake are required, got {funded}")
    return _evaluate(legs, stakes)


def _evaluate(legs: Sequence[Leg], stakes: Sequence[float]) -> AllocationResult:
    with _budget_math():
        total = math.fsum(stakes)
    if total <= 0.0:
        raise InvalidBudget("total stake must be greater than zero")

    results: list[LegResult] = []
    for leg, stake in zip(legs, stakes, strict=True):
        boosted = _effective(leg)
        gross_return = payout(stake, boosted, leg.is_free_bet)
        commission = commission_on(gross_return - stake, leg.commission_percent)
        profit = gross_return - total + leg.cashback_amount - commission
        results.append(
            LegResult(
                odds=leg.odds,
                effective_odds=boosted,
                stake=stake,
                gross_return=gross_return,
                commission=commission,
                profit=profit,
                roi_percent=profit / total * 100.0,
                share_of_budget_percent=stake / total * 100.0,
                is_free_bet=leg.is_free_bet,
            )
        )

    profits = [r.profit for r in results]
    if not all(math.isfinite(p) for p in profits):
        raise InvalidBudget("stakes are too large to evaluate")
    min_profit = min(profits)
    return AllocationResult(
        legs=tuple(results),
        total_stake=total,
        min_profit=min_profit,
        overall_roi_percent=min_profit / total * 100.0,
        is_arbitrage=is_arbitrage(profits),
        guaranteed_return=total + min_profit,
        cash_outlay=math.fsum(s for leg, s in zip(legs, stakes, strict=True) if not leg.is_free_bet),
        implied_probability_sum=implied_probability_sum([r.effective_odds for r in results]),
    )
