from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import enforce_leg_limit, get_user_id, http_error
from app.core.allocator import evaluate_stakes
from app.db import get_db
from app.domain.errors import AllocationError, LedgerError
from app.schemas import AnnotateIn, LedgerRecordIn
from app.services.ledger import annotate_entry, list_entries, record_entry, remove_entry

router = APIRouter(tags=["ledger"])


@router.get("/ledger")
def ledger_history(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
) -> list[dict[str, object]]:
    try:
        entries = list_entries(db, user_id=user_id)
    except LedgerError as exc:
        raise http_error(exc) from exc
    return [asdict(entry) for entry in entries]


@router.post("/ledger", status_code=201)
def record_ledger_entry(
    body: LedgerRecordIn,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    enforce_leg_limit(len(body.legs))
    try:
        result = evaluate_stakes([leg.to_leg() for leg in body.legs])
        entry = record_entry(
            db,
            user_id=user_id,
            result=result,
            observation=body.observation,
            entry_id=body.entry_id,
        )
    except (AllocationError, LedgerError) as exc:
        raise http_error(exc) from exc
    return asdict(entry)


@router.patch("/ledger/{entry_id}")
def annotate_ledger_entry(
    entry_id: str,
    body: AnnotateIn,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    try:
        entry = annotate_entry(db, user_id=user_id, entry_id=entry_id, observation=body.observation)
    except LedgerError as exc:
        raise http_error(exc) from exc
    return asdict(entry)


@router.delete("/ledger/{entry_id}", status_code=204)
def remove_ledger_entry(
    entry_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
) -> None:
    try:
        remove_entry(db, user_id=user_id, entry_id=entry_id)
    except LedgerError as exc:
        raise http_error(exc) from exc
