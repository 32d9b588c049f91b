"""
AI quote → persistable QuoteRecord.

Valued differently from the on-screen estimate: amount is the midpoint of
the AI cost range and labor is itemized at a flat hourly rate. Do not unify
with cost_calculator.total_estimate - the two figures may diverge.
"""

from datetime import datetime, timedelta
from typing import Optional

from ..models import QuoteStatus
from ..schemas import AIQuoteResult, ProjectForm, QuoteLineItem, QuoteRecord

QUOTE_LABOR_RATE = 75.0
QUOTE_VALID_DAYS = 30


def build_line_items(ai_quote: AIQuoteResult) -> list[QuoteLineItem]:
    """Labor first, then one line per material at quantity 1."""
    items = [
        QuoteLineItem(
            description="Labor",
            quantity=ai_quote.labor_hours,
            rate=QUOTE_LABOR_RATE,
            amount=ai_quote.labor_hours * QUOTE_LABOR_RATE,
        )
    ]
    for material in ai_quote.materials:
        items.append(QuoteLineItem(
            description=material.item,
            quantity=1,
            rate=material.estimated_cost,
            amount=material.estimated_cost,
        ))
    return items


def build_notes(ai_quote: AIQuoteResult) -> str:
    return (
        "AI-Generated Quote\n"
        f"Complexity: {ai_quote.complexity}\n"
        f"Timeline: {ai_quote.timeline_days} days\n"
        f"Confidence: {ai_quote.confidence_level}"
    )


def build_quote_record(
    ai_quote: AIQuoteResult,
    project_form: ProjectForm,
    customer_id: int,
    created_at: Optional[datetime] = None,
) -> QuoteRecord:
    """
    Build the quote record saved when a customer accepts an AI quote.

    Args:
        ai_quote: validated AI result
        project_form: title + description the customer entered
        customer_id: id of the authenticated user
        created_at: creation timestamp, defaults to now (UTC)

    Returns:
        QuoteRecord with status pending, valid for 30 days (date only)
    """
    created_at = created_at or datetime.utcnow()

    return QuoteRecord(
        customer_id=customer_id,
        title=project_form.title,
        description=f"{project_form.description}\n\nAI Analysis: {ai_quote.analysis}",
        amount=(ai_quote.cost_range_min + ai_quote.cost_range_max) / 2,
        status=QuoteStatus.PENDING,
        valid_until=(created_at + timedelta(days=QUOTE_VALID_DAYS)).date(),
        line_items=build_line_items(ai_quote),
        notes=build_notes(ai_quote),
    )
