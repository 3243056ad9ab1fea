"""
Auth API Endpoints
Registration, login and token refresh (public)

Author: TM3
"""
from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_auth_service
from storefront.domain.user import LoginRequest, RefreshRequest, RegisterRequest
from storefront.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Create a customer account and return a token pair"""
    result = service.register(req)
    return {"status": "success", "data": result.to_dict()}


@router.post("/login")
def login(req: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = service.login(req)
    return {"status": "success", "data": result.to_dict()}


@router.post("/refresh")
def refresh(req: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    """Exchange a refresh token for a new access/refresh pair"""
    result = service.refresh(req.refresh_token)
    return {"status": "success", "data": result.to_dict()}
