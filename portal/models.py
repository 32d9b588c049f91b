from sqlalchemy import Column, Integer, String, Float, DateTime, Date, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---
# DECISION: status / type columns are stored as VARCHAR, enums below are the
# validation reference. str-mixin members compare equal to their raw values.

class RequestType(str, enum.Enum):
    STANDARD = "standard"
    CUMULATIVE = "cumulative"


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    QUOTED = "quoted"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    DECLINED = "declined"


SERVICE_TYPES = [
    "plumbing",
    "electrical",
    "hvac",
    "general_maintenance",
    "landscaping",
    "cleaning",
    "painting",
    "roofing",
    "other",
]


# --- Tables ---

class User(Base):
    """Portal accounts - homeowners and landlords."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    auth_tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")
    jobs = relationship("Job", back_populates="customer")
    quotes = relationship("Quote", back_populates="customer")


class AuthToken(Base):
    """JWT refresh token storage - access tokens are stateless."""
    __tablename__ = "auth_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String, nullable=False)
    token_type = Column(String, default="refresh")
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="auth_tokens")


class Job(Base):
    """A service request. Cumulative jobs wait in the bundle until dispatch."""
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    property_address = Column(Text)
    service_type = Column(String, default="other")
    priority = Column(String, default=JobPriority.MEDIUM.value)
    request_type = Column(String, default=RequestType.STANDARD.value)
    status = Column(String, default=JobStatus.PENDING.value)
    estimated_labor_cost = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = relationship("User", back_populates="jobs")


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    amount = Column(Float, default=0.0)
    status = Column(String, default=QuoteStatus.PENDING.value)
    valid_until = Column(Date, nullable=True)
    notes = Column(Text)
    ai_generated = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = relationship("User", back_populates="quotes")
    line_items = relationship(
        "QuoteLineItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteLineItem.position",
    )


class QuoteLineItem(Base):
    __tablename__ = "quote_line_items"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"))
    position = Column(Integer, default=0)  # Labor line is always position 0
    description = Column(String, nullable=False)
    quantity = Column(Float, default=1.0)
    rate = Column(Float, default=0.0)
    amount = Column(Float, default=0.0)

    quote = relationship("Quote", back_populates="line_items")
