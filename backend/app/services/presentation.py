from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from app.config import get_settings
from app.domain.types import AllocationResult


def _round(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def result_payload(result: AllocationResult, places: int | None = None) -> dict[str, object]:
    if places is None:
        places = get_settings().display_places
    return {
        "legs": [
            {
                "odds": leg.odds,
                "effective_odds": _round(leg.effective_odds, places),
                "stake": _round(leg.stake, places),
                "gross_return": _round(leg.gross_return, places),
                "commission": _round(leg.commission, places),
                "profit": _round(leg.profit, places),
                "roi_percent": _round(leg.roi_percent, places),
                "share_of_budget_percent": _round(leg.share_of_budget_percent, places),
                "is_free_bet": leg.is_free_bet,
            }
            for leg in result.legs
        ],
        "total_stake": _round(result.total_stake, places),
        "min_profit": _round(result.min_profit, places),
        "overall_roi_percent": _round(result.overall_roi_percent, places),
        "is_arbitrage": result.is_arbitrage,
        "guaranteed_return": _round(result.guaranteed_return, places),
        "cash_outlay": _round(result.cash_outlay, places),
        "implied_probability_sum": _round(result.implied_probability_sum, 4),
    }


def summary_text(result: AllocationResult, places: int | None = None) -> str:
    if places is None:
        places = get_settings().display_places
    fmt = f"{{:.{places}f}}"
    lines = ["Surebet", ""]
    for idx, leg in enumerate(result.legs, start=1):
        marker = " [FB]" if leg.is_free_bet else ""
        lines.append(
            f"Leg {idx}{marker}: Odds {leg.odds:g} | Stake {fmt.format(leg.stake)} | Profit {fmt.format(leg.profit)}"
        )
    lines.append("")
    lines.append(f"Total stake: {fmt.format(result.total_stake)}")
    lines.append(f"Cash outlay: {fmt.format(result.cash_outlay)}")
    lines.append(f"Guaranteed profit: {fmt.format(result.min_profit)}")
    lines.append(f"ROI: {fmt.format(result.overall_roi_percent)}%")
    return "\n".join(lines)
