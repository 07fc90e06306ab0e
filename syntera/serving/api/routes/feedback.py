"""
Feedback API Endpoints

Submitted feedback always starts as ``pending``; a status in the request body
is ignored.
"""

from typing import List

from fastapi import APIRouter, Depends
import structlog

from syntera.database.store import RecordStore
from syntera.schemas import FeedbackCreate, FeedbackRead
from syntera.serving.api.dependencies import get_record_store
from syntera.serving.api.errors import unwrap

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post("", response_model=FeedbackRead)
async def submit_feedback(
    payload: FeedbackCreate,
    store: RecordStore = Depends(get_record_store),
) -> FeedbackRead:
    item = unwrap(await store.create_feedback(payload), "Failed to submit feedback")
    logger.info("Feedback submitted", feedback_id=item.id, feedback_type=item.type.value)
    return FeedbackRead.model_validate(item)


@router.get("/{user_id}", response_model=List[FeedbackRead])
async def list_feedback(
    user_id: str,
    store: RecordStore = Depends(get_record_store),
) -> List[FeedbackRead]:
    items = unwrap(await store.list_feedback_by_user(user_id), "Failed to fetch feedback")
    return [FeedbackRead.model_validate(f) for f in items]
