from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import EntryNotFound, InvalidEntry, NotOwner, PersistenceFailure
from app.domain.types import AllocationResult, LedgerEntry
from app.models import DutchingEntry

logger = logging.getLogger(__name__)


def _to_decimal(value: float, places: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places))


def _normalize_observation(observation: str | None) -> str | None:
    if observation is None:
        return None
    observation = observation.strip()
    return observation or None


def _validate_snapshot(user_id: str, odds: Sequence[float], stakes: Sequence[float]) -> None:
    if not user_id.strip():
        raise InvalidEntry("user_id must not be empty")
    if len(odds) != len(stakes):
        raise InvalidEntry(f"odds and stakes lengths must match ({len(odds)} != {len(stakes)})")
    if len(odds) < 2:
        raise InvalidEntry("an entry needs at least two legs")
    for idx, (o, s) in enumerate(zip(odds, stakes, strict=True)):
        if not math.isfinite(o) or o <= 1.0:
            raise InvalidEntry(f"odds[{idx}] must be greater than 1")
        if not math.isfinite(s) or s < 0.0:
            raise InvalidEntry(f"stakes[{idx}] must be >= 0")


def _to_entry(row: DutchingEntry) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        user_id=row.user_id,
        total_invested=float(row.total_invested),
        odds=[float(o) for o in row.odds],
        stakes=[float(s) for s in row.stakes],
        guaranteed_return=float(row.guaranteed_return),
        profit=float(row.profit),
        roi=float(row.roi),
        created_at=row.created_at,
        observation=row.observation,
    )


@contextmanager
def _persisting(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Ledger %s failed", action)
        raise PersistenceFailure(f"ledger {action} failed: {exc}") from exc


def _owned_row(session: Session, user_id: str, entry_id: str) -> DutchingEntry:
    row = session.get(DutchingEntry, entry_id)
    if row is None:
        raise EntryNotFound(f"ledger entry {entry_id} does not exist")
    if row.user_id != user_id:
        logger.warning("User %s attempted to modify ledger entry %s owned by another user", user_id, entry_id)
        raise NotOwner(f"ledger entry {entry_id} does not belong to the caller")
    return row


def record_entry(
    session: Session,
    *,
    user_id: str,
    result: AllocationResult,
    odds: Sequence[float] | None = None,
    stakes: Sequence[float] | None = None,
    observation: str | None = None,
    entry_id: str | None = None,
    created_at: datetime | None = None,
) -> LedgerEntry:
    """Persist a snapshot of ``result``; either the whole row is written or nothing is.

    Passing the same ``entry_id`` again returns the stored entry, so a caller can
    retry after a transient failure without recomputing the allocation.
    """
    odds = [float(o) for o in (result.odds if odds is None else odds)]
    stakes = [float(s) for s in (result.stakes if stakes is None else stakes)]
    _validate_snapshot(user_id, odds, stakes)

    with _persisting(session, "record"):
        if entry_id is not None:
            existing = session.get(DutchingEntry, entry_id)
            if existing is not None:
                if existing.user_id != user_id:
                    raise NotOwner(f"ledger entry {entry_id} does not belong to the caller")
                logger.info("Ledger entry %s already recorded; returning stored snapshot", entry_id)
                return _to_entry(existing)

        row = DutchingEntry(
            user_id=user_id,
            created_at=created_at or datetime.now(timezone.utc),
            total_invested=_to_decimal(result.total_stake, "0.0001"),
            odds=odds,
            stakes=stakes,
            guaranteed_return=_to_decimal(result.guaranteed_return, "0.0001"),
            profit=_to_decimal(result.min_profit, "0.0001"),
            roi=_to_decimal(result.overall_roi_percent, "0.000001"),
            observation=_normalize_observation(observation),
        )
        if entry_id is not None:
            row.id = entry_id
        session.add(row)
        session.commit()
        entry = _to_entry(row)

    logger.info("Recorded ledger entry %s for user %s (%d legs)", entry.id, user_id, len(odds))
    return entry


def annotate_entry(session: Session, *, user_id: str, entry_id: str, observation: str | None) -> LedgerEntry:
    with _persisting(session, "annotate"):
        row = _owned_row(session, user_id, entry_id)
        row.observation = _normalize_observation(observation)
        session.commit()
        return _to_entry(row)


def remove_entry(session: Session, *, user_id: str, entry_id: str) -> None:
    with _persisting(session, "remove"):
        row = _owned_row(session, user_id, entry_id)
        session.delete(row)
        session.commit()
    logger.info("Removed ledger entry %s for user %s", entry_id, user_id)


def list_entries(session: Session, *, user_id: str) -> list[LedgerEntry]:
    # Unpaginated. Entries sharing a created_at come back in id order, which is not insertion order.
    with _persisting(session, "list"):
        rows = (
            session.execute(
                select(DutchingEntry)
                .where(DutchingEntry.user_id == user_id)
                .order_by(desc(DutchingEntry.created_at), desc(DutchingEntry.id))
            )
            .scalars()
            .all()
        )
    return [_to_entry(row) for row in rows]
