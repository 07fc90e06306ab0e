"""
Support Messages API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends

from syntera.database.store import RecordStore
from syntera.schemas import MessageCreate, MessageRead
from syntera.serving.api.dependencies import get_record_store
from syntera.serving.api.errors import unwrap

router = APIRouter()


@router.get("/{user_id}", response_model=List[MessageRead])
async def list_messages(
    user_id: str,
    store: RecordStore = Depends(get_record_store),
) -> List[MessageRead]:
    """Conversation history for a user, newest first."""
    messages = unwrap(await store.list_messages_by_user(user_id), "Failed to fetch messages")
    return [MessageRead.model_validate(m) for m in messages]


@router.post("", response_model=MessageRead)
async def create_message(
    payload: MessageCreate,
    store: RecordStore = Depends(get_record_store),
) -> MessageRead:
    message = unwrap(await store.create_message(payload), "Failed to send message")
    return MessageRead.model_validate(message)
