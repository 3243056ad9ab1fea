"""
User Domain Models

Author: TM3
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email


def _checked_email(value: str) -> str:
    """Strip an address and check it with the same rules as EmailStr"""
    value = value.strip()
    validate_email(value)
    return value


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class User(BaseModel):
    """
    User domain model

    password_hash never leaves the service layer: to_dict() drops it.
    """

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Login email")
    password_hash: str = Field("", description="bcrypt hash", repr=False)
    first_name: str = Field("", description="First name")
    last_name: str = Field("", description="Last name")
    role: UserRole = Field(UserRole.CUSTOMER, description="customer or admin")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> dict:
        return self.model_dump(exclude={'password_hash'})


class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""

    @field_validator('email')
    @classmethod
    def email_format(cls, value: str) -> str:
        # empty is reported by AuthService.register as EmailRequired
        return _checked_email(value) if value.strip() else value


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class RefreshRequest(BaseModel):
    refresh_token: str


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: User

    def to_dict(self) -> dict:
        data = self.model_dump(exclude={'user'})
        data['user'] = self.user.to_dict()
        return data


class UserUpdate(BaseModel):
    """Schema for updating a user; role is only honored for admins"""
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None

    @field_validator('email')
    @classmethod
    def email_format(cls, value: Optional[str]) -> Optional[str]:
        return _checked_email(value) if value is not None else None


class UserFilter(BaseModel):
    search: Optional[str] = None
    role: Optional[str] = None
    limit: int = 20
    offset: int = 0


class UserListResponse(BaseModel):
    users: List[User]
    total: int
    limit: int
    offset: int
