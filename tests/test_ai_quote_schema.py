"""
Boundary validation of AI quote payloads (schemas.AIQuoteResult).

Malformed payloads must be rejected here, before any calculator sees them.
"""

import pytest
from pydantic import ValidationError

from portal.routers.ai_quote import RESPONSE_SCHEMA
from portal.schemas import AIQuoteResult


def test_valid_payload_parses(ai_payload):
    quote = AIQuoteResult.model_validate(ai_payload)
    assert quote.labor_hours == 2.5
    assert quote.materials[1].notes is None
    assert quote.complexity == "simple"


def test_whole_number_float_accepted_for_timeline(ai_payload):
    quote = AIQuoteResult.model_validate({**ai_payload, "timeline_days": 3.0})
    assert quote.timeline_days == 3


@pytest.mark.parametrize("overrides", [
    {"labor_hours": 0},
    {"labor_hours": -1},
    {"timeline_days": -2},
    {"timeline_days": 2.5},
    {"complexity": "trivial"},
    {"confidence_level": "certain"},
    {"cost_range_min": 900, "cost_range_max": 400},
    {"materials": [{"item": "Pipe", "estimated_cost": -5}]},
    {"materials": [{"estimated_cost": 5}]},
    {"labor_hours": "lots"},
])
def test_malformed_payload_rejected(ai_payload, overrides):
    with pytest.raises(ValidationError):
        AIQuoteResult.model_validate({**ai_payload, **overrides})


@pytest.mark.parametrize("field", RESPONSE_SCHEMA["required"])
def test_missing_required_field_rejected(ai_payload, field):
    payload = dict(ai_payload)
    del payload[field]
    with pytest.raises(ValidationError):
        AIQuoteResult.model_validate(payload)


def test_result_is_immutable(ai_payload):
    quote = AIQuoteResult.model_validate(ai_payload)
    with pytest.raises(ValidationError):
        quote.labor_hours = 10


def test_declared_schema_covers_every_field():
    assert set(RESPONSE_SCHEMA["properties"]) == set(AIQuoteResult.model_fields)
    assert RESPONSE_SCHEMA["properties"]["complexity"]["enum"] == ["simple", "moderate", "complex"]
    assert RESPONSE_SCHEMA["properties"]["confidence_level"]["enum"] == ["low", "medium", "high"]


def test_required_list_matches_model():
    required = {name for name, f in AIQuoteResult.model_fields.items() if f.is_required()}
    assert required == set(RESPONSE_SCHEMA["required"])
