from __future__ import annotations


class AllocationError(ValueError):
    code = "allocation_error"


class InsufficientLegs(AllocationError):
    code = "insufficient_legs"


class InvalidOdds(AllocationError):
    code = "invalid_odds"


class InvalidBudget(AllocationError):
    code = "invalid_budget"


class InvalidConstraint(AllocationError):
    code = "invalid_constraint"


class LedgerError(Exception):
    code = "ledger_error"


class InvalidEntry(LedgerError):
    code = "invalid_entry"


class EntryNotFound(LedgerError):
    code = "entry_not_found"


class NotOwner(LedgerError):
    code = "not_owner"


class PersistenceFailure(LedgerError):
    code = "persistence_failure"
