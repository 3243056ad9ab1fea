"""
Authentication helpers for the Storefront API
Issues and validates our own JWTs, hashes passwords and provides the
FastAPI dependencies that resolve the current user
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from .config import settings
from .exceptions import AuthenticationError, InvalidToken, PermissionDenied, TokenExpired

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: UUID
    email: str
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def create_token(user_id: UUID, email: str, role: str, token_type: str = ACCESS_TOKEN) -> str:
    """
    Sign a JWT for the user

    Access tokens live ACCESS_TOKEN_TTL_HOURS, refresh tokens
    REFRESH_TOKEN_TTL_DAYS.
    """
    now = datetime.now(timezone.utc)
    if token_type == REFRESH_TOKEN:
        expires = now + timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS)
    else:
        expires = now + timedelta(hours=settings.ACCESS_TOKEN_TTL_HOURS)

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": token_type,
        "iat": now,
        "exp": expires,
        "iss": settings.JWT_ISSUER,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict:
    """
    Decode and validate one of our JWTs.

    Token structure:
    {
        "sub": "user uuid",
        "email": "user@example.com",
        "role": "customer",
        "type": "access",
        "iat": 1234567890,
        "exp": 1234567890,
        "iss": "ecommerce-api"
    }

    Raises:
        TokenExpired: exp is in the past
        InvalidToken: bad signature, issuer, type or payload
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidToken()

    if payload.get("type") != expected_type:
        raise InvalidToken()
    if not payload.get("sub") or not payload.get("email"):
        raise InvalidToken("invalid token payload: missing user id or email")

    return payload


def token_user_from_payload(payload: dict) -> TokenUser:
    try:
        return TokenUser(
            id=payload["sub"],
            email=payload["email"],
            role=payload.get("role", "customer"),
        )
    except ValueError:
        raise InvalidToken("invalid token payload: malformed user id")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Missing, malformed or expired tokens raise AuthenticationError (401).

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise AuthenticationError()

    payload = decode_token(credentials.credentials, ACCESS_TOKEN)
    return token_user_from_payload(payload)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/admin/users/{user_id}")
        async def delete_user(
            user_id: UUID,
            user: TokenUser = Depends(require_role("admin"))
        ):
            # Only admins can delete users
            pass
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        # Role hierarchy: admin > customer
        role_hierarchy = {
            "admin": 2,
            "customer": 1,
        }

        user_level = role_hierarchy.get(user.role, 0)
        required_level = role_hierarchy.get(required_role, 0)

        if user_level < required_level:
            raise PermissionDenied(
                f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


# Convenience dependencies for common role requirements
require_admin = require_role("admin")
