from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import date
from .models import QuoteStatus, JobStatus, JobPriority, RequestType


# --- AI quote contract ---
# Parsed at the boundary: nothing reaches the calculators until it validates.

class Material(BaseModel):
    item: str
    estimated_cost: float = Field(ge=0)
    notes: Optional[str] = None

    class Config:
        frozen = True


class AIQuoteResult(BaseModel):
    analysis: str
    work_needed: List[str]
    labor_hours: float = Field(gt=0)
    materials: List[Material]
    cost_range_min: float = Field(ge=0)
    cost_range_max: float = Field(ge=0)
    complexity: Literal["simple", "moderate", "complex"]
    considerations: List[str]
    timeline_days: int = Field(ge=0)
    confidence_level: Literal["low", "medium", "high"]

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_cost_range(self):
        if self.cost_range_min > self.cost_range_max:
            raise ValueError(
                f"cost_range_min ({self.cost_range_min}) exceeds "
                f"cost_range_max ({self.cost_range_max})"
            )
        return self


class ProjectForm(BaseModel):
    title: str
    description: str = ""
    service_type: str = "other"
    urgency: str = "normal"
    photo_urls: List[str] = []


class AcceptQuoteRequest(BaseModel):
    project: ProjectForm
    ai_quote: AIQuoteResult


# --- Quotes ---

class QuoteLineItem(BaseModel):
    description: str
    quantity: float
    rate: float
    amount: float


class QuoteRecord(BaseModel):
    customer_id: int
    title: str
    description: str
    amount: float
    status: QuoteStatus = QuoteStatus.PENDING
    valid_until: date
    line_items: List[QuoteLineItem] = []
    notes: str


class QuoteUpdate(BaseModel):
    status: QuoteStatus


# --- Jobs ---

class JobCreate(BaseModel):
    title: str
    description: Optional[str] = None
    property_address: Optional[str] = None
    service_type: str = "other"
    priority: JobPriority = JobPriority.MEDIUM
    request_type: RequestType = RequestType.STANDARD
    estimated_labor_cost: Optional[float] = Field(default=None, ge=0)


class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    property_address: Optional[str] = None
    service_type: Optional[str] = None
    priority: Optional[JobPriority] = None
    request_type: Optional[RequestType] = None
    status: Optional[JobStatus] = None
    estimated_labor_cost: Optional[float] = Field(default=None, ge=0)

    @field_validator("title", "service_type", "priority", "request_type", "status", mode="before")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

