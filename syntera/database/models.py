"""
Database Models

Four flat tables back the CRM:

- users: consumer and business accounts
- messages: support conversation history
- feedback: complaints, suggestions and other feedback items
- sales_data: per-business sales observations

References between tables (``user_id``, ``business_id``) are weak: plain
identifier columns with no foreign key, no cascade and no join is ever issued
across them.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


_last_stamp: Optional[datetime] = None


def _wall_clock() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """
    Naive UTC timestamp with microsecond resolution.

    Strictly increasing within a process: a wall-clock step backwards, or two
    inserts in the same microsecond, still yield newer stamps for later rows.
    """
    global _last_stamp
    now = _wall_clock()
    if _last_stamp is not None and now <= _last_stamp:
        now = _last_stamp + timedelta(microseconds=1)
    _last_stamp = now
    return now


def new_user_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# ENUMERATIONS
# =============================================================================

class UserType(str, Enum):
    """Account type, fixed at signup"""
    CONSUMER = "consumer"
    BUSINESS = "business"


class MessageSender(str, Enum):
    """Author side of a support message"""
    USER = "user"
    AGENT = "agent"


class FeedbackType(str, Enum):
    """Feedback classification"""
    COMPLAINT = "complaint"
    SUGGESTION = "suggestion"
    OTHER = "other"


DEFAULT_FEEDBACK_STATUS = "pending"


def _value_enum(enum_cls: type) -> SQLEnum:
    # Persist the lowercase value, not the member name
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


# =============================================================================
# TABLES
# =============================================================================

class User(Base):
    """
    User Account

    ``email`` is always unique; ``username`` is unique when present (NULLs do
    not collide). The password is stored as supplied.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_user_id)
    username: Mapped[Optional[str]] = mapped_column(Text, unique=True)
    business_name: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[UserType] = mapped_column(_value_enum(UserType), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text)
    unique_code: Mapped[Optional[str]] = mapped_column(Text)
    whatsapp: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} ({self.type.value})>"


class Message(Base):
    """Support Message"""
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(36))
    text: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[MessageSender] = mapped_column(_value_enum(MessageSender), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_messages_user_created", "user_id", "created_at"),
    )


class Feedback(Base):
    """Feedback Item"""
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(36))
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[FeedbackType] = mapped_column(_value_enum(FeedbackType), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=DEFAULT_FEEDBACK_STATUS, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_feedback_user_created", "user_id", "created_at"),
    )


class SalesRecord(Base):
    """
    Sales Observation

    Money columns are integers in minor currency units (cents).
    """
    __tablename__ = "sales_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_id: Mapped[Optional[str]] = mapped_column(String(36))
    date: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)
    revenue: Mapped[int] = mapped_column(Integer, nullable=False)
    conversions: Mapped[int] = mapped_column(Integer, nullable=False)
    avg_order_value: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_sales_data_business_date", "business_id", "date"),
    )
