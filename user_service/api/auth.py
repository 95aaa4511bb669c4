# user_service/api/auth.py

import logging
import time
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from user_service.api.users import UserResponse, to_response
from user_service.core.errors import NotFoundError, UnauthorizedError
from user_service.core.store import UserStore
from user_service.database import get_store
from user_service.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: UserResponse
    token: str


def invalid_credentials() -> UnauthorizedError:
    # same body whether the username or the password was wrong
    return UnauthorizedError("Username or password is incorrect", error="Invalid credentials")


def authenticate_user(store: UserStore, username: str, password: str) -> User:
    try:
        user = store.get_by_username(username)
    except NotFoundError:
        logger.warning("Login failed for %r: unknown user", username)
        raise invalid_credentials()
    if user.password != password:
        logger.warning("Login failed for %r: wrong password", username)
        raise invalid_credentials()
    return user


def create_access_token(user: User) -> str:
    """
    Opaque token binding the user id to the issue time.
    Nothing on the server stores or verifies it.
    """
    return f"token_{user.id}_{int(time.time())}"


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, store: UserStore = Depends(get_store)):
    user = authenticate_user(store, req.username, req.password)
    logger.info("User %r logged in", user.username)
    return {"user": to_response(user), "token": create_access_token(user)}
