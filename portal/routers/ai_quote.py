"""
AI-assisted quoting - powered by Gemini.

Customer describes the project and attaches photos.
Gemini returns a structured estimate (AIQuoteResult contract).
The app does all of the math: on-screen costs via cost_calculator,
the saved quote via quote_builder.
"""

import json
import logging
import threading
import urllib.error
import urllib.request

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..calculators import cost_calculator, quote_builder
from ..config import settings
from ..database import get_db
from ..schemas import AcceptQuoteRequest, AIQuoteResult, ProjectForm
from .quotes import _quote_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai-quoting"])

RETRY_MESSAGE = "Failed to generate AI quote. Please try again."

# Declared response contract - mirrors schemas.AIQuoteResult field for field
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "analysis": {"type": "STRING"},
        "work_needed": {"type": "ARRAY", "items": {"type": "STRING"}},
        "labor_hours": {"type": "NUMBER"},
        "materials": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "item": {"type": "STRING"},
                    "estimated_cost": {"type": "NUMBER"},
                    "notes": {"type": "STRING"},
                },
                "required": ["item", "estimated_cost"],
            },
        },
        "cost_range_min": {"type": "NUMBER"},
        "cost_range_max": {"type": "NUMBER"},
        "complexity": {"type": "STRING", "enum": ["simple", "moderate", "complex"]},
        "considerations": {"type": "ARRAY", "items": {"type": "STRING"}},
        "timeline_days": {"type": "INTEGER"},
        "confidence_level": {"type": "STRING", "enum": ["low", "medium", "high"]},
    },
    "required": [
        "analysis", "work_needed", "labor_hours", "materials",
        "cost_range_min", "cost_range_max", "complexity",
        "considerations", "timeline_days", "confidence_level",
    ],
}

# In-memory response cache - keyed on the full prompt, FIFO eviction
_prompt_cache: dict = {}
_CACHE_MAX = 50
_cache_lock = threading.Lock()


def build_prompt(project: ProjectForm) -> str:
    photo_lines = "\n".join(f"- {url}" for url in project.photo_urls) or "- (none)"
    return (
        f"Analyze the project photos and provide a detailed estimate for a "
        f"{project.service_type} project.\n\n"
        f"Project Title: {project.title}\n"
        f"Service Type: {project.service_type}\n"
        f"Description: {project.description}\n"
        f"Urgency: {project.urgency}\n"
        f"Photos:\n{photo_lines}\n\n"
        "Based on the photos, provide:\n"
        "1. A detailed analysis of what work is needed\n"
        "2. Estimated labor hours\n"
        "3. Materials needed with approximate costs\n"
        "4. Total estimated cost range\n"
        "5. Complexity assessment (simple/moderate/complex)\n"
        "6. Potential issues or considerations\n"
        "7. Recommended timeline in days\n\n"
        "Be realistic with pricing based on current market rates for "
        "professional home services."
    )


def call_gemini(prompt: str) -> dict:
    """
    Call Gemini with the declared response schema and return the parsed JSON payload.

    Only payloads that validate as AIQuoteResult are cached.
    """
    with _cache_lock:
        cached = _prompt_cache.get(prompt)
    if cached is not None:
        logger.debug("AI quote cache hit")
        return cached

    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise HTTPException(status_code=500, detail="GEMINI_API_KEY not configured")

    url = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        f"{settings.GEMINI_MODEL}:generateContent?key={api_key}"
    )
    payload = json.dumps({
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": 0.2,
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }).encode("utf-8")

    req = urllib.request.Request(
        url,
        data=payload,
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=settings.GEMINI_TIMEOUT_SECONDS) as response:
            result = json.loads(response.read())
            text = result["candidates"][0]["content"]["parts"][0]["text"]
            parsed = json.loads(text)
    except urllib.error.HTTPError as e:
        logger.warning("Gemini API error %s: %s", e.code, e.read().decode(errors="replace"))
        raise HTTPException(status_code=502, detail=RETRY_MESSAGE)
    except (urllib.error.URLError, TimeoutError, KeyError, IndexError, ValueError) as e:
        logger.warning("Gemini call failed: %s", e)
        raise HTTPException(status_code=502, detail=RETRY_MESSAGE)

    parse_ai_quote(parsed)

    with _cache_lock:
        while len(_prompt_cache) >= _CACHE_MAX:
            _prompt_cache.pop(next(iter(_prompt_cache)))
        _prompt_cache[prompt] = parsed
    return parsed


def parse_ai_quote(payload: dict) -> AIQuoteResult:
    """Validate the raw AI payload. Malformed payloads never reach the calculators."""
    try:
        return AIQuoteResult.model_validate(payload)
    except ValidationError as e:
        logger.warning("AI payload rejected: %d validation error(s)", e.error_count())
        raise HTTPException(status_code=502, detail=RETRY_MESSAGE)


@router.post("/estimate")
def ai_estimate(
    project: ProjectForm,
    current_user: models.User = Depends(get_current_user),
):
    """
    Generate an AI quote for display. Does NOT save to database.
    Use /ai/quote with the returned ai_quote to save it.
    """
    if not project.photo_urls:
        raise HTTPException(status_code=400, detail="Upload at least one photo")

    ai_quote = parse_ai_quote(call_gemini(build_prompt(project)))
    logger.info(
        "AI quote for user %s: %s hrs, %s complexity",
        current_user.id, ai_quote.labor_hours, ai_quote.complexity,
    )

    return {
        "ai_quote": ai_quote.model_dump(),
        "costs": cost_calculator.cost_breakdown(ai_quote),
        "project": project.model_dump(),
    }


@router.post("/quote")
def ai_save_quote(
    request: AcceptQuoteRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Customer accepted the AI quote - build the quote record and persist it."""
    record = quote_builder.build_quote_record(request.ai_quote, request.project, current_user.id)

    db_quote = models.Quote(
        customer_id=record.customer_id,
        title=record.title,
        description=record.description,
        amount=record.amount,
        status=record.status.value,
        valid_until=record.valid_until,
        notes=record.notes,
        ai_generated=True,
    )
    for position, item in enumerate(record.line_items):
        db_quote.line_items.append(models.QuoteLineItem(position=position, **item.model_dump()))

    db.add(db_quote)
    db.commit()
    db.refresh(db_quote)
    logger.info("Quote %s saved for user %s (amount %.2f)", db_quote.id, current_user.id, db_quote.amount)

    return {
        "message": "Quote request saved",
        "quote": _quote_to_dict(db_quote),
    }
