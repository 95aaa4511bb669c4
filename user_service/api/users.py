# user_service/api/users.py

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from user_service.core.errors import ValidationError
from user_service.core.store import UserStore
from user_service.database import get_store
from user_service.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------
# Request & Response Schemas
# -------------------------------

class UserResponse(BaseModel):
    """
    Outward-facing view of a user. Has no password field.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class CreateUserRequest(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""


class UpdateUserRequest(BaseModel):
    username: str | None = None
    email: str | None = None


def to_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


# ids are stored as signed 64-bit integers
MAX_USER_ID = 2**63 - 1


def parse_user_id(raw: str) -> int:
    """
    Path ids must be plain ASCII digits naming a positive 64-bit integer.
    """
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(f"{raw!r} is not a valid user id", error="Invalid user ID")
    user_id = int(raw)
    if not 0 < user_id <= MAX_USER_ID:
        raise ValidationError(f"{raw!r} is not a valid user id", error="Invalid user ID")
    return user_id


# -------------------------------
# User Endpoints
# -------------------------------

@router.get("", response_model=list[UserResponse])
def list_users(store: UserStore = Depends(get_store)):
    logger.info("Listing users")
    return [to_response(u) for u in store.get_all()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, store: UserStore = Depends(get_store)):
    uid = parse_user_id(user_id)
    return to_response(store.get_by_id(uid))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(req: CreateUserRequest, store: UserStore = Depends(get_store)):
    """
    Creates a user. All three fields are required and must be non-empty.
    """
    if not req.username or not req.email or not req.password:
        raise ValidationError(
            "username, email, and password are required",
            error="Missing required fields",
        )

    logger.info("Creating user %r", req.username)
    user = store.create(User(username=req.username, email=req.email, password=req.password))
    return to_response(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, req: UpdateUserRequest, store: UserStore = Depends(get_store)):
    """
    Partial update: only non-empty fields replace the stored values.
    """
    uid = parse_user_id(user_id)
    user = store.get_by_id(uid)

    if req.username:
        user.username = req.username
    if req.email:
        user.email = req.email

    logger.info("Updating user %s", uid)
    return to_response(store.update(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, store: UserStore = Depends(get_store)):
    uid = parse_user_id(user_id)
    logger.info("Deleting user %s", uid)
    store.delete(uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
