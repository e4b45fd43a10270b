from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime

from app.domain.enums import BudgetMode


def _non_negative(value: float, name: str) -> None:
    if not math.isfinite(value) or value < 0.0:
        raise ValueError(f"{name} must be a finite number >= 0")


@dataclass(frozen=True, slots=True)
class Leg:
    """One outcome of the set. Odds are validated by the allocator, not here."""

    odds: float
    stake: float | None = None
    odds_boost_percent: float = 0.0
    commission_percent: float = 0.0
    cashback_amount: float = 0.0
    is_free_bet: bool = False

    def __post_init__(self) -> None:
        if self.stake is not None:
            _non_negative(self.stake, "stake")
        _non_negative(self.odds_boost_percent, "odds_boost_percent")
        _non_negative(self.commission_percent, "commission_percent")
        _non_negative(self.cashback_amount, "cashback_amount")

    def with_stake(self, stake: float) -> Leg:
        return replace(self, stake=stake)


@dataclass(frozen=True, slots=True)
class AllocationRequest:
    """Legs plus exactly one budgeting mode.

    ``amount`` is the total budget in TOTAL mode and the per-leg cap in CAPPED
    mode. FIXED mode reads the stake of ``legs[fixed_index]`` instead.
    """

    legs: tuple[Leg, ...]
    mode: BudgetMode = BudgetMode.TOTAL
    amount: float | None = None
    fixed_index: int | None = None

    @classmethod
    def total(cls, legs: list[Leg] | tuple[Leg, ...], budget: float) -> AllocationRequest:
        return cls(legs=tuple(legs), mode=BudgetMode.TOTAL, amount=budget)

    @classmethod
    def capped(cls, legs: list[Leg] | tuple[Leg, ...], cap: float) -> AllocationRequest:
        return cls(legs=tuple(legs), mode=BudgetMode.CAPPED, amount=cap)

    @classmethod
    def fixed(cls, legs: list[Leg] | tuple[Leg, ...], index: int) -> AllocationRequest:
        return cls(legs=tuple(legs), mode=BudgetMode.FIXED, fixed_index=index)


@dataclass(frozen=True, slots=True)
class LegResult:
    odds: float
    effective_odds: float
    stake: float
    gross_return: float
    commission: float
    profit: float
    roi_percent: float
    share_of_budget_percent: float
    is_free_bet: bool = False


@dataclass(frozen=True, slots=True)
class AllocationResult:
    legs: tuple[LegResult, ...]
    total_stake: float
    min_profit: float
    overall_roi_percent: float
    is_arbitrage: bool
    guaranteed_return: float
    cash_outlay: float
    implied_probability_sum: float

    @property
    def odds(self) -> list[float]:
        return [leg.odds for leg in self.legs]

    @property
    def stakes(self) -> list[float]:
        return [leg.stake for leg in self.legs]


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    id: str
    user_id: str
    total_invested: float
    odds: list[float]
    stakes: list[float]
    guaranteed_return: float
    profit: float
    roi: float
    created_at: datetime
    observation: str | None = None
