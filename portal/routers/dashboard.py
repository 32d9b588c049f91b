"""
Customer home view - stats, active jobs, open quotes, bundle readiness.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..calculators import dispatch_aggregator
from ..dashboard import summarize
from ..database import get_db
from .jobs import _dispatch_to_dict, _job_to_dict
from .quotes import _quote_to_dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_QUOTES_LIMIT = 5
RECENT_JOBS_LIMIT = 100


@router.get("/")
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    jobs = db.query(models.Job).filter(
        models.Job.customer_id == current_user.id,
    ).order_by(models.Job.created_at.desc(), models.Job.id.desc()).limit(RECENT_JOBS_LIMIT).all()
    quotes = db.query(models.Quote).filter(
        models.Quote.customer_id == current_user.id,
    ).order_by(models.Quote.created_at.desc(), models.Quote.id.desc()).all()

    summary = summarize(jobs, quotes)
    return {
        "stats": {
            "completed_jobs": summary["completed_jobs"],
            "pending_jobs": summary["pending_jobs"],
            "total_quotes": summary["total_quotes"],
            "accepted_quotes": summary["accepted_quotes"],
        },
        "active_jobs": [_job_to_dict(j) for j in summary["active_jobs"]],
        "pending_quotes": [_quote_to_dict(q) for q in summary["pending_quotes"]],
        "recent_quotes": [_quote_to_dict(q) for q in quotes[:RECENT_QUOTES_LIMIT]],
        "dispatch": _dispatch_to_dict(dispatch_aggregator.evaluate(jobs)),
    }
