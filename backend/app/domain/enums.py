from enum import StrEnum


class BudgetMode(StrEnum):
    TOTAL = "TOTAL"
    CAPPED = "CAPPED"
    FIXED = "FIXED"
