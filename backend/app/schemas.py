from __future__ import annotations

from pydantic import BaseModel, Field

from app.domain.enums import BudgetMode
from app.domain.types import AllocationRequest, Leg


class LegIn(BaseModel):
    odds: float
    stake: float | None = Field(None, ge=0, allow_inf_nan=False)
    odds_boost_percent: float = Field(0.0, ge=0, allow_inf_nan=False)
    commission_percent: float = Field(0.0, ge=0, allow_inf_nan=False)
    cashback_amount: float = Field(0.0, ge=0, allow_inf_nan=False)
    is_free_bet: bool = False

    def to_leg(self) -> Leg:
        return Leg(
            odds=self.odds,
            stake=self.stake,
            odds_boost_percent=self.odds_boost_percent,
            commission_percent=self.commission_percent,
            cashback_amount=self.cashback_amount,
            is_free_bet=self.is_free_bet,
        )


class AllocationIn(BaseModel):
    legs: list[LegIn]
    mode: BudgetMode = BudgetMode.TOTAL
    amount: float | None = None
    fixed_index: int | None = None

    def to_request(self) -> AllocationRequest:
        return AllocationRequest(
            legs=tuple(leg.to_leg() for leg in self.legs),
            mode=self.mode,
            amount=self.amount,
            fixed_index=self.fixed_index,
        )


class FixLegIn(BaseModel):
    legs: list[LegIn]
    leg_index: int


class EvaluateIn(BaseModel):
    legs: list[LegIn]


class LedgerRecordIn(BaseModel):
    legs: list[LegIn]
    observation: str | None = None
    entry_id: str | None = Field(None, max_length=36)


class AnnotateIn(BaseModel):
    observation: str | None = None
