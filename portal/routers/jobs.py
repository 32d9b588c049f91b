"""
Service request endpoints - create, list, update, and bundled dispatch.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..calculators import dispatch_aggregator
from ..database import get_db
from ..schemas import JobCreate, JobUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])

# Cumulative requests submitted without an estimate go into the bundle at this cost
DEFAULT_CUMULATIVE_LABOR_COST = 75.0


def _job_to_dict(job: models.Job) -> dict:
    return {
        "id": job.id,
        "customer_id": job.customer_id,
        "title": job.title,
        "description": job.description,
        "property_address": job.property_address,
        "service_type": job.service_type,
        "priority": job.priority,
        "request_type": job.request_type,
        "status": job.status,
        "estimated_labor_cost": job.estimated_labor_cost,
        "created_at": job.created_at.isoformat() if job.created_at else None,
        "updated_at": job.updated_at.isoformat() if job.updated_at else None,
    }


def _dispatch_to_dict(evaluation: dispatch_aggregator.DispatchEvaluation) -> dict:
    return {
        "eligible_jobs": [_job_to_dict(j) for j in evaluation.eligible_jobs],
        "task_count": len(evaluation.eligible_jobs),
        "total_cost": evaluation.total_cost,
        "progress_percent": evaluation.progress_percent,
        "ready_to_dispatch": evaluation.ready_to_dispatch,
        "threshold": evaluation.threshold,
    }


def _user_jobs(db: Session, user: models.User):
    return db.query(models.Job).filter(models.Job.customer_id == user.id)


def _get_user_job(job_id: int, db: Session, user: models.User) -> models.Job:
    job = _user_jobs(db, user).filter(models.Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


# --- Endpoints ---

@router.post("/")
def create_job(
    job: JobCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    if job.service_type not in models.SERVICE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"service_type must be one of {models.SERVICE_TYPES}, got {job.service_type}",
        )

    estimated_cost = job.estimated_labor_cost
    if job.request_type == models.RequestType.CUMULATIVE and not estimated_cost:
        estimated_cost = DEFAULT_CUMULATIVE_LABOR_COST

    db_job = models.Job(
        customer_id=current_user.id,
        title=job.title,
        description=job.description,
        property_address=job.property_address,
        service_type=job.service_type,
        priority=job.priority.value,
        request_type=job.request_type.value,
        status=models.JobStatus.PENDING.value,
        estimated_labor_cost=estimated_cost,
    )
    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    logger.info("Job %s created (%s) for user %s", db_job.id, db_job.request_type, current_user.id)
    return _job_to_dict(db_job)


@router.get("/")
def list_jobs(
    status: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """List the user's jobs newest first. search matches title or property address."""
    query = _user_jobs(db, current_user)
    if status and status != "all":
        query = query.filter(models.Job.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            models.Job.title.ilike(pattern),
            models.Job.property_address.ilike(pattern),
        ))
    jobs = query.order_by(models.Job.created_at.desc(), models.Job.id.desc()).offset(skip).limit(limit).all()
    return [_job_to_dict(j) for j in jobs]


@router.get("/dispatch")
def get_dispatch_status(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Bundle readiness for the user's cumulative pending jobs."""
    evaluation = dispatch_aggregator.evaluate(_user_jobs(db, current_user).all())
    return _dispatch_to_dict(evaluation)


@router.post("/dispatch")
def request_dispatch(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Request a technician visit for the bundle.

    Only allowed once the bundle reaches the dispatch threshold.
    Every eligible job moves to scheduled in one commit.
    """
    evaluation = dispatch_aggregator.evaluate(_user_jobs(db, current_user).all())
    if not evaluation.ready_to_dispatch:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Bundle total ${evaluation.total_cost:,.2f} is below the "
                f"${evaluation.threshold:,.0f} dispatch threshold"
            ),
        )

    now = datetime.utcnow()
    for job in evaluation.eligible_jobs:
        job.status = models.JobStatus.SCHEDULED.value
        job.updated_at = now
    db.commit()

    job_ids = [j.id for j in evaluation.eligible_jobs]
    logger.info("Dispatched %d bundled jobs for user %s: %s", len(job_ids), current_user.id, job_ids)
    return {
        "dispatched_job_ids": job_ids,
        "total_cost": evaluation.total_cost,
        "status": models.JobStatus.SCHEDULED.value,
    }


@router.get("/{job_id}")
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return _job_to_dict(_get_user_job(job_id, db, current_user))


@router.patch("/{job_id}")
def update_job(
    job_id: int,
    update: JobUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    job = _get_user_job(job_id, db, current_user)
    if update.service_type is not None and update.service_type not in models.SERVICE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"service_type must be one of {models.SERVICE_TYPES}, got {update.service_type}",
        )
    for field, value in update.model_dump(exclude_unset=True).items():
        if hasattr(value, "value"):
            value = value.value
        setattr(job, field, value)
    job.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(job)
    return _job_to_dict(job)
