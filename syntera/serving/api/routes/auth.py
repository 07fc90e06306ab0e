"""
Auth API Endpoints

Signup and login. There is no server-side session: the client keeps the
returned user and re-sends its id on later calls.

Passwords are stored and compared as plain values.
"""

from typing import Optional

from fastapi import APIRouter, Depends
import structlog

from syntera.database.store import RecordStore
from syntera.schemas import LoginRequest, UserCreate, UserPublic
from syntera.serving.api.dependencies import get_record_store
from syntera.serving.api.errors import ApiError, unwrap

router = APIRouter()
logger = structlog.get_logger(__name__)

EMAIL_TAKEN = "User already exists with this email"
USERNAME_TAKEN = "Username already taken"
ACCOUNT_TAKEN = "User already exists with this email or username"
INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/signup", response_model=UserPublic)
async def signup(
    payload: UserCreate,
    store: RecordStore = Depends(get_record_store),
) -> UserPublic:
    """Register a consumer or business account."""
    failure = "Failed to create user"

    if unwrap(await store.get_user_by_email(payload.email), failure) is not None:
        raise ApiError(400, EMAIL_TAKEN)

    if payload.username:
        if unwrap(await store.get_user_by_username(payload.username), failure) is not None:
            raise ApiError(400, USERNAME_TAKEN)

    # A concurrent signup can still hit the unique constraints
    user = unwrap(await store.create_user(payload), failure, conflict_message=ACCOUNT_TAKEN)

    logger.info("User signed up", user_id=user.id, user_type=user.type.value)
    return UserPublic.model_validate(user)


@router.post("/login", response_model=UserPublic)
async def login(
    payload: Optional[LoginRequest] = None,
    store: RecordStore = Depends(get_record_store),
) -> UserPublic:
    """Log in with email and password."""
    if payload is None or not payload.email or payload.password is None:
        raise ApiError(401, INVALID_CREDENTIALS)

    user = unwrap(await store.get_user_by_email(payload.email), "Login failed")
    if user is None or user.password != payload.password:
        logger.info("Login rejected")
        raise ApiError(401, INVALID_CREDENTIALS)

    logger.info("User logged in", user_id=user.id)
    return UserPublic.model_validate(user)
