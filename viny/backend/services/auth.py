"""
Auth Service.

Registration, login and session management. A user has at most one live
refresh token: every issuance overwrites the stored value, so presenting
an older token after rotation fails.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.config import get_app_config
from viny.backend.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from viny.backend.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from viny.backend.core.utils import utc_now
from viny.backend.models.user import User
from viny.backend.repositories.user import UserRepository
from viny.backend.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from viny.backend.services.base import BaseService

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


@dataclass
class AuthResult:
    """A user together with a freshly issued token pair."""

    user: User
    access_token: str
    refresh_token: str


class AuthService(BaseService):
    """Service for authentication and account management."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    async def register(self, data: RegisterRequest) -> AuthResult:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If the password is shorter than configured
        """
        email = data.email.lower()
        self._check_password_length(data.password)

        if await self.repo.exists_by_email(email):
            raise ConflictError("User with this email already exists")

        self._log_operation("Registering user", email=email)
        user = await self._execute_db_operation(
            "register",
            self.repo.create(
                email=email,
                name=data.name,
                password=hash_password(data.password),
            ),
        )
        return await self._issue_tokens(user)

    async def login(self, data: LoginRequest) -> AuthResult:
        """
        Verify credentials and issue a new token pair.

        Unknown email and wrong password fail identically and change nothing.

        Raises:
            AuthenticationError: On bad credentials
        """
        user = await self.repo.get_by_email(data.email.lower())
        if user is None or not verify_password(data.password, user.password):
            self._logger.warning("Login failed", extra={"email": data.email.lower()})
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._log_operation("User logged in", user_id=user.id)
        return await self._issue_tokens(user, last_login=utc_now())

    async def refresh(self, refresh_token: str | None) -> AuthResult:
        """
        Rotate a refresh token.

        The token must verify against the refresh secret and match the one
        currently stored for its user.

        Raises:
            AuthenticationError: If the token is invalid, expired or superseded
        """
        if not refresh_token:
            raise AuthenticationError("Refresh token not provided")

        payload = decode_refresh_token(refresh_token)
        user = await self.repo.get_with_refresh_token(int(payload["sub"]), refresh_token)
        if user is None:
            self._logger.warning(
                "Refresh token rejected",
                extra={"user_id": payload["sub"], "reason": "not current"},
            )
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        self._log_debug("Refresh token rotated", user_id=user.id)
        return await self._issue_tokens(user)

    async def logout(self, user_id: int) -> None:
        """Invalidate the user's refresh token."""
        await self.repo.update(user_id, refresh_token=None)
        self._log_operation("User logged out", user_id=user_id)

    async def change_password(self, user_id: int, data: ChangePasswordRequest) -> None:
        """
        Change the password and end every session.

        Raises:
            ValidationError: If the current password is wrong
        """
        user = await self.repo.get_by_id(user_id)
        if not verify_password(data.current_password, user.password):
            raise ValidationError("Current password is incorrect")
        self._check_password_length(data.new_password)

        await self.repo.update(
            user_id,
            password=hash_password(data.new_password),
            refresh_token=None,
        )
        self._log_operation("Password changed", user_id=user_id)

    async def get_profile(self, user_id: int) -> User:
        """
        Raises:
            NotFoundError: If the user no longer exists
        """
        return await self.repo.get_by_id(user_id)

    async def update_profile(self, user_id: int, data: UpdateProfileRequest) -> User:
        """Update name and/or avatar. Omitted fields are left alone."""
        changes = data.model_dump(exclude_unset=True, mode="json")
        if not changes:
            return await self.repo.get_by_id(user_id)

        self._log_operation("Updating profile", user_id=user_id, fields=list(changes))
        return await self.repo.update(user_id, **changes)

    async def _issue_tokens(self, user: User, **changes) -> AuthResult:
        access_token = create_access_token(user)
        refresh_token = create_refresh_token(user)
        user = await self.repo.update(user.id, refresh_token=refresh_token, **changes)
        return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)

    @staticmethod
    def _check_password_length(password: str) -> None:
        min_length = get_app_config().security.password.min_length
        if len(password) < min_length:
            raise ValidationError(
                f"Password must be at least {min_length} characters long",
                details={"min_length": min_length},
            )
