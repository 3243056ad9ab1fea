"""
User Service
Profile updates and user administration

Author: TM3
"""
import logging
from typing import Optional
from uuid import UUID

from storefront.core.auth import hash_password
from storefront.core.exceptions import (
    EmailAlreadyExists,
    InvalidRole,
    NoFieldsToUpdate,
    UserIDRequired,
    UserNotFound,
    WeakPassword,
)
from storefront.core.pagination import clamp_pagination
from storefront.domain.user import User, UserFilter, UserListResponse, UserRole, UserUpdate
from storefront.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


def _validate_role(role: str) -> str:
    try:
        return UserRole(role).value
    except ValueError:
        raise InvalidRole()


class UserService:
    """Service for user management"""

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.user_repo = user_repo or UserRepository()

    def get_user(self, user_id: UUID) -> User:
        if not user_id:
            raise UserIDRequired()

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def list_users(self, filters: UserFilter) -> UserListResponse:
        limit, offset = clamp_pagination(filters.limit, filters.offset)
        role = _validate_role(filters.role) if filters.role else None

        users, total = self.user_repo.list(
            search=filters.search,
            role=role,
            limit=limit,
            offset=offset,
        )
        return UserListResponse(users=users, total=total, limit=limit, offset=offset)

    def update_user(self, user_id: UUID, req: UserUpdate, is_admin: bool = False) -> User:
        """
        Update profile fields of a user

        Args:
            user_id: User to update
            req: Fields to change (None means unchanged)
            is_admin: Role changes are only applied for admin callers

        Raises:
            UserNotFound, NoFieldsToUpdate, InvalidRole, EmailAlreadyExists,
            WeakPassword
        """
        user = self.get_user(user_id)

        fields = req.model_dump(exclude_none=True)
        if not is_admin:
            fields.pop('role', None)
        if not fields:
            raise NoFieldsToUpdate()

        if 'role' in fields:
            fields['role'] = _validate_role(fields['role'])

        if 'email' in fields:
            fields['email'] = fields['email'].strip().lower()
            owner = self.user_repo.get_by_email(fields['email'])
            if owner is not None and owner.id != user.id:
                raise EmailAlreadyExists()

        if 'password' in fields:
            password = fields.pop('password')
            if len(password) < PASSWORD_MIN_LENGTH:
                raise WeakPassword()
            fields['password_hash'] = hash_password(password)

        updated = self.user_repo.update(user.id, fields)
        if updated is None:
            raise UserNotFound()

        logger.info(f"User {user.id} updated: {', '.join(sorted(fields))}")
        return updated

    def delete_user(self, user_id: UUID) -> None:
        if not user_id:
            raise UserIDRequired()

        if not self.user_repo.delete(user_id):
            raise UserNotFound()
        logger.info(f"User {user_id} deleted")
