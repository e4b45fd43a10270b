from __future__ import annotations

from fastapi import Header, HTTPException

from app.config import get_settings
from app.domain.errors import (
    AllocationError,
    EntryNotFound,
    InvalidEntry,
    LedgerError,
    NotOwner,
    PersistenceFailure,
)

_LEDGER_STATUS: dict[type[LedgerError], int] = {
    InvalidEntry: 422,
    NotOwner: 403,
    EntryNotFound: 404,
    PersistenceFailure: 503,
}


def get_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    return x_user_id


def http_error(exc: AllocationError | LedgerError) -> HTTPException:
    status_code = 422 if isinstance(exc, AllocationError) else _LEDGER_STATUS.get(type(exc), 500)
    return HTTPException(status_code=status_code, detail={"error": exc.code, "message": str(exc)})


def enforce_leg_limit(count: int) -> None:
    settings = get_settings()
    if count > settings.max_legs:
        raise HTTPException(
            status_code=422,
            detail={
                "error": "too_many_legs",
                "message": f"at most {settings.max_legs} legs are allowed, got {count}",
            },
        )
