# user_service/api/admin.py

from fastapi import APIRouter, Depends
from user_service.api.users import UserResponse, to_response
from user_service.core.middleware import require_api_key
from user_service.core.store import UserStore
from user_service.database import get_store


router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/users", response_model=list[UserResponse])
def admin_list_users(store: UserStore = Depends(get_store)):
    """
    Same listing as /api/users, gated by the X-API-Key header.
    """
    return [to_response(u) for u in store.get_all()]
