"""
Bundled-job dispatch readiness.

Small "cumulative" requests wait in a bundle until their combined estimated
labor cost justifies a single technician visit. Read-only: this module never
changes job status - the jobs router does the transition to scheduled.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from ..models import JobStatus, RequestType

DISPATCH_THRESHOLD = 300.0


@dataclass
class DispatchEvaluation:
    eligible_jobs: List = field(default_factory=list)
    total_cost: float = 0.0
    progress_percent: float = 0.0
    ready_to_dispatch: bool = False
    threshold: float = DISPATCH_THRESHOLD


def is_bundle_eligible(job) -> bool:
    return job.request_type == RequestType.CUMULATIVE and job.status == JobStatus.PENDING


def evaluate(jobs: Iterable, threshold: float = DISPATCH_THRESHOLD) -> DispatchEvaluation:
    """
    Filter cumulative+pending jobs and compare their summed cost to the threshold.

    progress_percent is clamped to 100 for display; ready_to_dispatch is not.
    """
    eligible = [job for job in jobs if is_bundle_eligible(job)]
    total_cost = sum((job.estimated_labor_cost or 0 for job in eligible), 0.0)
    progress = min((total_cost / threshold) * 100, 100)

    return DispatchEvaluation(
        eligible_jobs=eligible,
        total_cost=total_cost,
        progress_percent=progress,
        ready_to_dispatch=total_cost >= threshold,
        threshold=threshold,
    )
