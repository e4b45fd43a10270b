from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from app.api.deps import enforce_leg_limit, http_error
from app.core.allocator import allocate, evaluate_stakes, fix_leg
from app.domain.errors import AllocationError
from app.domain.types import AllocationRequest
from app.schemas import AllocationIn, EvaluateIn, FixLegIn
from app.services.presentation import result_payload, summary_text

router = APIRouter(tags=["allocations"])


@router.post("/allocations")
def create_allocation(body: AllocationIn) -> dict[str, object]:
    enforce_leg_limit(len(body.legs))
    try:
        result = allocate(body.to_request())
    except AllocationError as exc:
        raise http_error(exc) from exc
    return result_payload(result)


@router.post("/allocations/fix")
def fix_allocation_leg(body: FixLegIn) -> dict[str, object]:
    enforce_leg_limit(len(body.legs))
    request = AllocationRequest(legs=tuple(leg.to_leg() for leg in body.legs))
    try:
        fixed = fix_leg(request, body.leg_index)
        result = allocate(fixed)
    except AllocationError as exc:
        raise http_error(exc) from exc
    return {
        "mode": fixed.mode.value,
        "fixed_index": fixed.fixed_index,
        "legs": [asdict(leg) for leg in fixed.legs],
        "result": result_payload(result),
    }


@router.post("/allocations/evaluate")
def evaluate_allocation(body: EvaluateIn) -> dict[str, object]:
    enforce_leg_limit(len(body.legs))
    try:
        result = evaluate_stakes([leg.to_leg() for leg in body.legs])
    except AllocationError as exc:
        raise http_error(exc) from exc
    return result_payload(result)


@router.post("/allocations/summary")
def allocation_summary(body: AllocationIn) -> dict[str, str]:
    enforce_leg_limit(len(body.legs))
    try:
        result = allocate(body.to_request())
    except AllocationError as exc:
        raise http_error(exc) from exc
    return {"text": summary_text(result)}
