from __future__ import annotations

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.api.allocations import allocation_summary, create_allocation, evaluate_allocation, fix_allocation_leg
from app.api.ledger import annotate_ledger_entry, ledger_history, record_ledger_entry, remove_ledger_entry
from app.config import get_settings
from app.main import health
from app.models import Base
from app.schemas import AllocationIn, AnnotateIn, EvaluateIn, FixLegIn, LedgerRecordIn, LegIn


def _session() -> Session:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    return Session(engine)


def _legs(*odds: float) -> list[LegIn]:
    return [LegIn(odds=o) for o in odds]


def test_create_allocation_rounds_at_presentation() -> None:
    payload = create_allocation(AllocationIn(legs=_legs(2.0, 2.2), amount=100.0))

    assert [leg["stake"] for leg in payload["legs"]] == [52.38, 47.62]
    assert payload["min_profit"] == 4.76
    assert payload["overall_roi_percent"] == 4.76
    assert payload["is_arbitrage"] is True


def test_capped_allocation_over_http() -> None:
    payload = create_allocation(AllocationIn(legs=_legs(1.8, 2.5), mode="CAPPED", amount=40.0))

    assert [leg["stake"] for leg in payload["legs"]] == [40.0, 28.8]
    assert payload["total_stake"] == 68.8


def test_allocation_errors_map_to_422() -> None:
    with pytest.raises(HTTPException) as excinfo:
        create_allocation(AllocationIn(legs=_legs(2.0), amount=100.0))
    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["error"] == "insufficient_legs"

    with pytest.raises(HTTPException) as excinfo:
        create_allocation(AllocationIn(legs=_legs(2.0, 2.2), amount=0.0))
    assert excinfo.value.detail["error"] == "invalid_budget"


def test_leg_limit_is_enforced(monkeypatch) -> None:
    monkeypatch.setenv("MAX_LEGS", "3")
    get_settings.cache_clear()
    try:
        with pytest.raises(HTTPException) as excinfo:
            create_allocation(AllocationIn(legs=_legs(2.0, 3.0, 4.0, 5.0), amount=100.0))
        assert excinfo.value.detail["error"] == "too_many_legs"
    finally:
        get_settings.cache_clear()


def test_fix_leg_endpoint() -> None:
    legs = [LegIn(odds=2.0, stake=60.0), LegIn(odds=3.0, stake=5.0), LegIn(odds=4.0, stake=5.0)]
    payload = fix_allocation_leg(FixLegIn(legs=legs, leg_index=0))

    assert payload["mode"] == "FIXED"
    assert payload["fixed_index"] == 0
    assert [leg["stake"] for leg in payload["legs"]] == pytest.approx([60.0, 40.0, 30.0])
    assert payload["result"]["total_stake"] == 130.0


def test_evaluate_endpoint_free_bet() -> None:
    legs = [LegIn(odds=3.0, stake=50.0, is_free_bet=True), LegIn(odds=1.5, stake=100.0)]
    payload = evaluate_allocation(EvaluateIn(legs=legs))

    assert payload["legs"][0]["gross_return"] == 100.0
    assert payload["cash_outlay"] == 100.0


def test_summary_endpoint() -> None:
    payload = allocation_summary(AllocationIn(legs=_legs(2.0, 2.2), amount=100.0))

    assert "Leg 1: Odds 2 | Stake 52.38 | Profit 4.76" in payload["text"]
    assert "ROI: 4.76%" in payload["text"]


def test_ledger_round_trip_through_routes() -> None:
    with _session() as session:
        legs = [LegIn(odds=2.0, stake=52.38), LegIn(odds=2.2, stake=47.62)]
        created = record_ledger_entry(
            LedgerRecordIn(legs=legs, observation="bet365 / pinnacle"), user_id="user-a", db=session
        )
        assert created["stakes"] == [52.38, 47.62]
        assert created["observation"] == "bet365 / pinnacle"

        updated = annotate_ledger_entry(
            created["id"], AnnotateIn(observation="settled"), user_id="user-a", db=session
        )
        assert updated["observation"] == "settled"

        history = ledger_history(user_id="user-a", db=session)
        assert [row["id"] for row in history] == [created["id"]]

        with pytest.raises(HTTPException) as excinfo:
            remove_ledger_entry(created["id"], user_id="user-b", db=session)
        assert excinfo.value.status_code == 403
        assert excinfo.value.detail["error"] == "not_owner"

        remove_ledger_entry(created["id"], user_id="user-a", db=session)
        assert ledger_history(user_id="user-a", db=session) == []

        with pytest.raises(HTTPException) as excinfo:
            annotate_ledger_entry(created["id"], AnnotateIn(observation="x"), user_id="user-a", db=session)
        assert excinfo.value.status_code == 404


def test_ledger_record_rejects_invalid_legs() -> None:
    with _session() as session:
        with pytest.raises(HTTPException) as excinfo:
            record_ledger_entry(
                LedgerRecordIn(legs=[LegIn(odds=2.0, stake=10.0), LegIn(odds=1.0, stake=10.0)]),
                user_id="user-a",
                db=session,
            )
    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["error"] == "insufficient_legs"


def test_health() -> None:
    assert health()["status"] == "ok"


@pytest.mark.parametrize("field", ["stake", "odds_boost_percent", "commission_percent", "cashback_amount"])
def test_leg_body_rejects_non_finite_amounts(field) -> None:
    with pytest.raises(ValidationError):
        LegIn(odds=2.0, **{field: "inf"})
    with pytest.raises(ValidationError):
        LegIn(odds=2.0, **{field: "nan"})


def test_overflowing_cap_maps_to_422() -> None:
    with pytest.raises(HTTPException) as excinfo:
        create_allocation(AllocationIn(legs=_legs(2.0, 2.0), mode="CAPPED", amount=1e308))
    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["error"] == "invalid_budget"
