import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..database import get_db
from ..schemas import QuoteUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _get_user_quote(quote_id: int, db: Session, user: models.User) -> models.Quote:
    quote = db.query(models.Quote).filter(models.Quote.id == quote_id).first()
    if not quote:
        raise HTTPException(status_code=404, detail="Quote not found")
    if quote.customer_id != user.id:
        raise HTTPException(status_code=403, detail="Not your quote")
    return quote


@router.get("/")
def list_my_quotes(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """List quotes for the authenticated user, newest first."""
    quotes = db.query(models.Quote).filter(
        models.Quote.customer_id == current_user.id,
    ).order_by(models.Quote.created_at.desc(), models.Quote.id.desc()).offset(skip).limit(limit).all()
    return [_quote_to_dict(q) for q in quotes]


@router.get("/{quote_id}")
def get_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return _quote_to_dict(_get_user_quote(quote_id, db, current_user))


@router.patch("/{quote_id}")
def update_quote(
    quote_id: int,
    update: QuoteUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Move a quote through pending → sent → viewed → accepted/declined."""
    quote = _get_user_quote(quote_id, db, current_user)
    quote.status = update.status.value
    quote.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(quote)
    logger.info("Quote %s status → %s", quote.id, quote.status)
    return _quote_to_dict(quote)


def _quote_to_dict(q: models.Quote) -> dict:
    return {
        "id": q.id,
        "customer_id": q.customer_id,
        "title": q.title,
        "description": q.description,
        "amount": q.amount,
        "status": q.status,
        "valid_until": q.valid_until.isoformat() if q.valid_until else None,
        "notes": q.notes,
        "ai_generated": q.ai_generated,
        "line_items": [_item_to_dict(i) for i in q.line_items],
        "created_at": q.created_at.isoformat() if q.created_at else None,
        "updated_at": q.updated_at.isoformat() if q.updated_at else None,
    }


def _item_to_dict(i: models.QuoteLineItem) -> dict:
    return {
        "description": i.description,
        "quantity": i.quantity,
        "rate": i.rate,
        "amount": i.amount,
    }
