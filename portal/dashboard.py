"""
Dashboard summary - counts and short lists for the customer home view.

Pure: takes already-loaded jobs and quotes, returns a dict.
"""

from .models import JobStatus, QuoteStatus, RequestType

PENDING_JOB_STATUSES = (JobStatus.PENDING, JobStatus.QUOTED)
ACTIVE_JOB_STATUSES = (JobStatus.SCHEDULED, JobStatus.IN_PROGRESS)
OPEN_QUOTE_STATUSES = (QuoteStatus.PENDING, QuoteStatus.SENT)


def summarize(jobs: list, quotes: list) -> dict:
    active_jobs = [
        j for j in jobs
        if j.request_type == RequestType.STANDARD and j.status in ACTIVE_JOB_STATUSES
    ]
    pending_quotes = [q for q in quotes if q.status in OPEN_QUOTE_STATUSES]

    return {
        "completed_jobs": sum(1 for j in jobs if j.status == JobStatus.COMPLETED),
        "pending_jobs": sum(1 for j in jobs if j.status in PENDING_JOB_STATUSES),
        "total_quotes": len(quotes),
        "accepted_quotes": sum(1 for q in quotes if q.status == QuoteStatus.ACCEPTED),
        "active_jobs": active_jobs,
        "pending_quotes": pending_quotes,
    }
