"""
Users API Endpoints
Self-service profile of the authenticated user

Author: TM3
"""
from fastapi import APIRouter, Depends

from storefront.api.deps import get_user_service
from storefront.core.auth import TokenUser, get_current_user
from storefront.domain.user import UserUpdate
from storefront.services.user_service import UserService

router = APIRouter()


@router.get("/me")
def get_me(
    user: TokenUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    profile = service.get_user(user.id)
    return {"status": "success", "data": profile.to_dict()}


@router.put("/me")
def update_me(
    req: UserUpdate,
    user: TokenUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update own profile. A role in the body is ignored."""
    profile = service.update_user(user.id, req, is_admin=False)
    return {"status": "success", "data": profile.to_dict()}
