"""
Record Store

Typed accessors over users, messages, feedback and sales records. Each
operation issues exactly one statement: writes are a single-row
``INSERT ... RETURNING`` committed immediately, reads are a single-table
filtered select with at most one sort key.

Operations return ``Ok``/``Err`` instead of raising; absence is ``Ok(None)``
or an empty list.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type

import structlog
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from syntera.database.models import (
    Base,
    DEFAULT_FEEDBACK_STATUS,
    Feedback,
    Message,
    SalesRecord,
    User,
)
from syntera.database.results import Err, Ok, StoreErrorKind, StoreResult
from syntera.schemas import FeedbackCreate, MessageCreate, SalesRecordCreate, UserCreate

logger = structlog.get_logger(__name__)


class RecordStore:
    """Record Store bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------

    async def _fetch_one(self, query: Select, operation: str) -> StoreResult[Optional[Any]]:
        try:
            result = await self.session.execute(query.limit(1))
            return Ok(result.scalars().first())
        except SQLAlchemyError as e:
            logger.error("Store read failed", operation=operation, error=str(e), error_type=type(e).__name__)
            return Err(StoreErrorKind.FAULT, f"{operation} failed")

    async def _fetch_all(self, query: Select, operation: str) -> StoreResult[List[Any]]:
        try:
            result = await self.session.execute(query)
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Store read failed", operation=operation, error=str(e), error_type=type(e).__name__)
            return Err(StoreErrorKind.FAULT, f"{operation} failed")
        logger.debug("Store read completed", operation=operation, count=len(rows))
        return Ok(rows)

    async def _insert(self, model: Type[Base], values: Dict[str, Any], operation: str) -> StoreResult[Any]:
        stmt = insert(model).values(**values).returning(model)
        try:
            row = (await self.session.execute(stmt)).scalar_one()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Store insert conflict", operation=operation, error=str(e.orig))
            return Err(StoreErrorKind.CONFLICT, f"{operation} violates a unique constraint")
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Store insert failed", operation=operation, error=str(e), error_type=type(e).__name__)
            return Err(StoreErrorKind.FAULT, f"{operation} failed")
        logger.info("Store insert completed", operation=operation, table=model.__tablename__, id=row.id)
        return Ok(row)

    # -------------------------------------------------------------------------
    # users
    # -------------------------------------------------------------------------

    async def get_user_by_id(self, user_id: str) -> StoreResult[Optional[User]]:
        return await self._fetch_one(select(User).where(User.id == user_id), "get_user_by_id")

    async def get_user_by_email(self, email: str) -> StoreResult[Optional[User]]:
        return await self._fetch_one(select(User).where(User.email == email), "get_user_by_email")

    async def get_user_by_username(self, username: Optional[str]) -> StoreResult[Optional[User]]:
        """Empty or missing username never matches and issues no query."""
        if not username:
            return Ok(None)
        return await self._fetch_one(select(User).where(User.username == username), "get_user_by_username")

    async def create_user(self, data: UserCreate) -> StoreResult[User]:
        """Insert a user. A duplicate email or username is ``Err(CONFLICT)``."""
        return await self._insert(User, data.model_dump(), "create_user")

    # -------------------------------------------------------------------------
    # messages
    # -------------------------------------------------------------------------

    async def list_messages_by_user(self, user_id: str) -> StoreResult[List[Message]]:
        query = (
            select(Message)
            .where(Message.user_id == user_id)
            .order_by(Message.created_at.desc())
        )
        return await self._fetch_all(query, "list_messages_by_user")

    async def create_message(self, data: MessageCreate) -> StoreResult[Message]:
        return await self._insert(Message, data.model_dump(), "create_message")

    # -------------------------------------------------------------------------
    # feedback
    # -------------------------------------------------------------------------

    async def create_feedback(self, data: FeedbackCreate) -> StoreResult[Feedback]:
        """Insert feedback; status is always the default regardless of input."""
        values = data.model_dump(exclude={"status"})
        values["status"] = DEFAULT_FEEDBACK_STATUS
        return await self._insert(Feedback, values, "create_feedback")

    async def list_feedback_by_user(self, user_id: str) -> StoreResult[List[Feedback]]:
        query = (
            select(Feedback)
            .where(Feedback.user_id == user_id)
            .order_by(Feedback.created_at.desc())
        )
        return await self._fetch_all(query, "list_feedback_by_user")

    # -------------------------------------------------------------------------
    # sales
    # -------------------------------------------------------------------------

    async def list_sales_by_business(self, business_id: str) -> StoreResult[List[SalesRecord]]:
        query = (
            select(SalesRecord)
            .where(SalesRecord.business_id == business_id)
            .order_by(SalesRecord.date.desc())
        )
        return await self._fetch_all(query, "list_sales_by_business")

    async def create_sales_record(
        self,
        data: SalesRecordCreate,
        date: Optional[datetime] = None,
    ) -> StoreResult[SalesRecord]:
        """
        Insert a sales observation.

        Args:
            data: Validated sales fields
            date: Observation time for backfills; defaults to insertion time
        """
        values = data.model_dump()
        if date is not None:
            values["date"] = date
        return await self._insert(SalesRecord, values, "create_sales_record")

    async def get_latest_sales_record(self, business_id: str) -> StoreResult[Optional[SalesRecord]]:
        query = (
            select(SalesRecord)
            .where(SalesRecord.business_id == business_id)
            .order_by(SalesRecord.date.desc())
        )
        return await self._fetch_one(query, "get_latest_sales_record")
