"""
On-screen cost estimate for an AI quote.

Two-tier labor billing: a flat first-hour charge, then a lower marginal rate
for every additional hour. Materials are summed as itemized by the AI.

This is the customer-facing total shown with the quote results. It is NOT
the amount persisted on the quote record - see quote_builder.py.
"""

from typing import Iterable

from ..schemas import AIQuoteResult, Material

FIRST_HOUR_RATE = 100.0
ADDITIONAL_HOUR_RATE = 70.0


def labor_cost(hours: float) -> float:
    """Tiered labor cost. Not rounded - callers format for display.

    Caller guarantees hours is finite and >= 0.
    """
    if hours <= 1:
        return FIRST_HOUR_RATE
    return FIRST_HOUR_RATE + (hours - 1) * ADDITIONAL_HOUR_RATE


def labor_breakdown(hours: float) -> str:
    """Human-readable rate breakdown shown next to the labor cost."""
    if hours <= 1:
        return f"{hours:g} hour @ ${FIRST_HOUR_RATE:.0f}/hour"
    return (
        f"1 hour @ ${FIRST_HOUR_RATE:.0f}, "
        f"{hours - 1:.1f} hours @ ${ADDITIONAL_HOUR_RATE:.0f}/hour"
    )


def materials_total(materials: Iterable[Material]) -> float:
    return sum((m.estimated_cost for m in materials), 0.0)


def total_estimate(hours: float, materials: Iterable[Material]) -> float:
    return labor_cost(hours) + materials_total(materials)


def cost_breakdown(ai_quote: AIQuoteResult) -> dict:
    """Everything the quote results view renders, in one dict."""
    labor = labor_cost(ai_quote.labor_hours)
    mats = materials_total(ai_quote.materials)
    return {
        "labor_hours": ai_quote.labor_hours,
        "labor_cost": labor,
        "labor_breakdown": labor_breakdown(ai_quote.labor_hours),
        "materials": [
            {"item": m.item, "estimated_cost": m.estimated_cost, "notes": m.notes}
            for m in ai_quote.materials
        ],
        "materials_total": mats,
        "total_estimate": labor + mats,
        "cost_range_min": ai_quote.cost_range_min,
        "cost_range_max": ai_quote.cost_range_max,
        "timeline_days": ai_quote.timeline_days,
        "complexity": ai_quote.complexity,
        "confidence_level": ai_quote.confidence_level,
    }
