"""
Shared Request/Response Schemas

Statically declared shapes for everything crossing the HTTP boundary. The
JSON wire format is camelCase (``businessName``, ``createdAt``); Python code
uses the snake_case attribute names.

Create models omit the generated columns (``id``, ``created_at``) and, for
feedback, ``status``: unknown keys in a request body are ignored, so a client
cannot set them.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from syntera.database.models import FeedbackType, MessageSender, UserType

# Range of the 32-bit integer columns
INT32_MIN = -2_147_483_648
INT32_MAX = 2_147_483_647


def _assume_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Serialized with an explicit offset so clients do not read it as local time
UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python, ORM rows accepted"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


# =============================================================================
# USERS
# =============================================================================

class UserCreate(ApiModel):
    """Signup payload"""
    username: Optional[str] = None
    business_name: Optional[str] = None
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    type: UserType
    category: Optional[str] = None
    unique_code: Optional[str] = None
    whatsapp: Optional[str] = None

    @field_validator("username", "business_name", "category", "unique_code", "whatsapp")
    @classmethod
    def blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        """An empty optional field is stored as NULL"""
        if v is not None and not v.strip():
            return None
        return v


class LoginRequest(ApiModel):
    """Login payload. Missing fields are an authentication failure, not a shape error."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(ApiModel):
    """User as returned to clients; never carries the password"""
    id: str
    username: Optional[str] = None
    business_name: Optional[str] = None
    email: str
    type: UserType
    category: Optional[str] = None
    unique_code: Optional[str] = None
    whatsapp: Optional[str] = None
    created_at: UtcDatetime


# =============================================================================
# MESSAGES
# =============================================================================

class MessageCreate(ApiModel):
    user_id: str
    text: str = Field(min_length=1)
    sender: MessageSender


class MessageRead(ApiModel):
    id: int
    user_id: Optional[str] = None
    text: str
    sender: MessageSender
    created_at: UtcDatetime


# =============================================================================
# FEEDBACK
# =============================================================================

class FeedbackCreate(ApiModel):
    user_id: str
    subject: str = Field(min_length=1)
    type: FeedbackType
    message: str = Field(min_length=1)
    email: str = Field(min_length=1)


class FeedbackRead(ApiModel):
    id: int
    user_id: Optional[str] = None
    subject: str
    type: FeedbackType
    message: str
    email: str
    status: str
    created_at: UtcDatetime


# =============================================================================
# SALES
# =============================================================================

class SalesRecordCreate(ApiModel):
    """Money fields are integers in minor currency units"""
    business_id: str
    revenue: int = Field(ge=INT32_MIN, le=INT32_MAX)
    conversions: int = Field(ge=0, le=INT32_MAX)
    avg_order_value: int = Field(ge=INT32_MIN, le=INT32_MAX)


class SalesRecordRead(ApiModel):
    id: int
    business_id: Optional[str] = None
    date: UtcDatetime
    revenue: int
    conversions: int
    avg_order_value: int
