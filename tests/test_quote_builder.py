"""
Tests for AI quote → QuoteRecord (quote_builder.py).

Includes the divergence check: the saved amount and the on-screen total are
computed by different formulas and are allowed to disagree.
"""

import json
from datetime import date, datetime

from portal.calculators.cost_calculator import total_estimate
from portal.calculators.quote_builder import QUOTE_LABOR_RATE, build_quote_record
from portal.models import QuoteStatus
from portal.schemas import AIQuoteResult, ProjectForm


CREATED = datetime(2026, 3, 10, 22, 45)


def _build(payload, form, **overrides):
    payload = {**payload, **overrides}
    return build_quote_record(
        AIQuoteResult.model_validate(payload),
        ProjectForm(**form),
        customer_id=7,
        created_at=CREATED,
    )


def test_amount_is_cost_range_midpoint(ai_payload, project_form):
    record = _build(ai_payload, project_form, cost_range_min=500, cost_range_max=700)
    assert record.amount == 600


def test_valid_until_is_30_days_date_only(ai_payload, project_form):
    record = _build(ai_payload, project_form)
    assert record.valid_until == date(2026, 4, 9)
    assert type(record.valid_until) is date
    assert (record.valid_until - CREATED.date()).days == 30


def test_valid_until_defaults_to_now(ai_payload, project_form):
    record = build_quote_record(
        AIQuoteResult.model_validate(ai_payload),
        ProjectForm(**project_form),
        customer_id=1,
    )
    assert (record.valid_until - datetime.utcnow().date()).days == 30


def test_status_is_pending(ai_payload, project_form):
    assert _build(ai_payload, project_form).status == QuoteStatus.PENDING


def test_labor_line_first_at_flat_rate(ai_payload, project_form):
    labor = _build(ai_payload, project_form).line_items[0]
    assert labor.description == "Labor"
    assert labor.quantity == 2.5
    assert labor.rate == QUOTE_LABOR_RATE == 75
    assert labor.amount == 2.5 * 75


def test_one_line_per_material(ai_payload, project_form):
    items = _build(ai_payload, project_form).line_items[1:]
    assert [(i.description, i.quantity, i.rate, i.amount) for i in items] == [
        ("Faucet cartridge", 1, 45.0, 45.0),
        ("Braided supply lines (pair)", 1, 24.5, 24.5),
    ]


def test_no_materials_only_labor_line(ai_payload, project_form):
    record = _build(ai_payload, project_form, materials=[])
    assert len(record.line_items) == 1


def test_notes_and_description(ai_payload, project_form):
    record = _build(ai_payload, project_form, complexity="moderate", timeline_days=3)
    assert record.notes == (
        "AI-Generated Quote\nComplexity: moderate\nTimeline: 3 days\nConfidence: high"
    )
    assert record.title == "Leaky kitchen faucet"
    assert record.description == (
        "Drips constantly, worse with hot water.\n\n"
        "AI Analysis: Cartridge failure in a single-handle kitchen faucet; supply lines corroded."
    )
    assert record.customer_id == 7


def test_saved_amount_and_on_screen_total_may_diverge(ai_payload, project_form):
    quote = AIQuoteResult.model_validate(ai_payload)
    record = _build(ai_payload, project_form)

    on_screen = total_estimate(quote.labor_hours, quote.materials)
    assert on_screen == 274.5
    assert record.amount == 325.0
    assert on_screen != record.amount
    # Line items use the flat rate, so they don't add up to either figure
    assert sum(i.amount for i in record.line_items) == 2.5 * 75 + 69.5


def test_serialized_round_trip_gives_identical_outputs(ai_payload, project_form):
    quote = AIQuoteResult.model_validate(ai_payload)
    restored = AIQuoteResult.model_validate(json.loads(quote.model_dump_json()))

    assert restored == quote
    assert total_estimate(restored.labor_hours, restored.materials) == \
        total_estimate(quote.labor_hours, quote.materials)

    form = ProjectForm(**project_form)
    assert build_quote_record(restored, form, 7, CREATED) == build_quote_record(quote, form, 7, CREATED)
