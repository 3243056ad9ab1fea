"""
Auth Service
Registration, login and token refresh

Author: TM3
"""
import logging
from typing import Optional

from storefront.core.auth import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    TokenUser,
    create_token,
    decode_token,
    hash_password,
    token_user_from_payload,
    verify_password,
)
from storefront.core.exceptions import (
    EmailAlreadyExists,
    EmailRequired,
    InvalidCredentials,
    InvalidToken,
    PasswordRequired,
    WeakPassword,
)
from storefront.domain.user import AuthResponse, LoginRequest, RegisterRequest, User, UserRole
from storefront.repositories.user_repository import UserRepository
from storefront.services.user_service import PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service for authentication

    Handles:
    - Registration of customers
    - Password login
    - Refresh of token pairs
    - Validation of access tokens
    """

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.user_repo = user_repo or UserRepository()

    def register(self, req: RegisterRequest) -> AuthResponse:
        email = (req.email or "").strip().lower()
        if not email:
            raise EmailRequired()
        if not req.password:
            raise PasswordRequired()
        if len(req.password) < PASSWORD_MIN_LENGTH:
            raise WeakPassword()

        if self.user_repo.get_by_email(email) is not None:
            raise EmailAlreadyExists()

        user = self.user_repo.create(
            email=email,
            password_hash=hash_password(req.password),
            first_name=req.first_name.strip(),
            last_name=req.last_name.strip(),
            role=UserRole.CUSTOMER.value,
        )
        logger.info(f"User registered: {user.id}")
        return self._issue_tokens(user)

    def login(self, req: LoginRequest) -> AuthResponse:
        email = (req.email or "").strip().lower()
        if not email:
            raise EmailRequired()
        if not req.password:
            raise PasswordRequired()

        user = self.user_repo.get_by_email(email)
        if user is None or not verify_password(req.password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            raise InvalidCredentials()

        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> AuthResponse:
        """
        Exchange a refresh token for a new token pair

        The user is reloaded so role changes since the last login apply.
        """
        payload = decode_token(refresh_token, REFRESH_TOKEN)
        token_user = token_user_from_payload(payload)

        user = self.user_repo.get_by_id(token_user.id)
        if user is None:
            raise InvalidToken("user no longer exists")

        return self._issue_tokens(user)

    def validate_token(self, access_token: str) -> TokenUser:
        return token_user_from_payload(decode_token(access_token, ACCESS_TOKEN))

    def _issue_tokens(self, user: User) -> AuthResponse:
        role = user.role.value
        return AuthResponse(
            access_token=create_token(user.id, user.email, role, ACCESS_TOKEN),
            refresh_token=create_token(user.id, user.email, role, REFRESH_TOKEN),
            user=user,
        )
