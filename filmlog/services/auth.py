"""Credential service: registration, login, token refresh and profiles."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from filmlog.config import Settings
from filmlog.core import background
from filmlog.core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
)
from filmlog.core.logging import get_logger
from filmlog.core.security import (
    TokenService,
    burn_password_check,
    hash_password,
    verify_password,
)
from filmlog.core.validation import (
    sanitize_text,
    validate_display_name,
    validate_email,
    validate_password,
    validate_username,
)
from filmlog.models.user import User
from filmlog.repositories.user import UserRepository
from filmlog.schemas.auth import AccessTokenResponse, AuthResponse, TokenResponse
from filmlog.schemas.user import UserCreate, UserPublic, UserRead, UserUpdate

logger = get_logger("auth")

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """Service for account and credential operations.

    Args:
        session: Request-scoped database session.
        settings: Application settings (token keys and lifetimes).
        session_factory: Factory for the independent session used by the
            detached last-login update.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self.session = session
        self.session_factory = session_factory
        self.tokens = TokenService(settings)
        self.user_repository = UserRepository(session)

    async def register(self, data: UserCreate) -> AuthResponse:
        """Create an account and sign it in.

        Raises:
            ValidationError: Malformed username, email, password or display name.
            ConflictError: Username or email already taken (case-insensitive).
        """
        username = validate_username(data.username.strip())
        email = validate_email(data.email)
        password = validate_password(data.password)
        display_name = validate_display_name(data.display_name)

        if await self.user_repository.username_exists(username):
            raise ConflictError(message="Username already taken")
        if await self.user_repository.email_exists(email):
            raise ConflictError(message="Email already registered")

        try:
            user = await self.user_repository.create(
                username=username,
                email=email.lower(),
                hashed_password=hash_password(password),
                display_name=display_name or username,
            )
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(message="Username or email already registered") from None

        logger.info("User registered", extra={"user_id": str(user.id)})
        return AuthResponse(user=self._to_user_read(user), tokens=self._token_response(user.id))

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the user.

        An unknown email and a wrong password produce the same error. The
        inactive-account check only happens once the password matched.

        Raises:
            AuthenticationError: Invalid email or password.
            AccountInactiveError: Credentials are correct but the account is deactivated.
        """
        user = await self.user_repository.get_by_email(email)
        if user is None:
            burn_password_check(password)
            raise AuthenticationError(
                message=INVALID_CREDENTIALS_MESSAGE,
                code=ErrorCode.INVALID_CREDENTIALS,
            )

        if not verify_password(password, user.hashed_password):
            raise AuthenticationError(
                message=INVALID_CREDENTIALS_MESSAGE,
                code=ErrorCode.INVALID_CREDENTIALS,
            )

        if not user.is_active:
            raise AccountInactiveError()

        background.spawn(self._record_login(user.id), name=f"last-login:{user.id}")
        return user

    async def login(self, email: str, password: str) -> AuthResponse:
        """Authenticate and issue a token pair."""
        user = await self.authenticate(email, password)
        return AuthResponse(user=self._to_user_read(user), tokens=self._token_response(user.id))

    async def refresh(self, refresh_token: str) -> AccessTokenResponse:
        """Mint a new access token from a valid refresh token.

        The refresh token itself is not rotated.

        Raises:
            AuthenticationError: Token invalid/expired, or the user is gone or deactivated.
        """
        user_id = self.tokens.verify_refresh_token(refresh_token)
        if user_id is None:
            raise AuthenticationError(
                message="Invalid or expired refresh token",
                code=ErrorCode.TOKEN_INVALID,
            )

        user = await self.user_repository.get_by_id_active(user_id)
        if user is None:
            raise AuthenticationError(
                message="User not found or deactivated",
                code=ErrorCode.TOKEN_INVALID,
            )

        return AccessTokenResponse(
            access_token=self.tokens.create_access_token(user.id),
            expires_in=int(self.tokens.access_lifetime.total_seconds()),
        )

    async def get_profile(self, user_id: UUID) -> UserRead:
        user = await self._get_user(user_id)
        return self._to_user_read(user)

    async def update_profile(self, user_id: UUID, data: UserUpdate) -> UserRead:
        """Apply a partial profile update."""
        user = await self._get_user(user_id)
        fields = data.model_dump(exclude_unset=True)

        if "display_name" in fields:
            fields["display_name"] = validate_display_name(fields["display_name"])
        if "bio" in fields:
            fields["bio"] = sanitize_text(fields["bio"])
        if "avatar_url" in fields:
            fields["avatar_url"] = sanitize_text(fields["avatar_url"]) or None
        if fields.get("is_public", True) is None:
            fields.pop("is_public")

        user = await self.user_repository.update(user, **fields)
        return self._to_user_read(user)

    async def get_public_profile(self, username: str, viewer_id: UUID | None) -> UserPublic:
        """Look up a profile by username. Private profiles are hidden from others."""
        user = await self.user_repository.get_by_username(username)
        if user is None or (not user.is_public and user.id != viewer_id):
            raise NotFoundError(resource="User", code=ErrorCode.USER_NOT_FOUND)
        return UserPublic.model_validate(user)

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repository.get_by_id_active(user_id)
        if user is None:
            raise AuthenticationError(
                message="User not found or deactivated",
                code=ErrorCode.UNAUTHORIZED,
            )
        return user

    async def _record_login(self, user_id: UUID) -> None:
        """Stamp ``last_login_at`` in a separate session."""
        async with self.session_factory() as session:
            await UserRepository(session).touch_last_login(user_id)
            await session.commit()

    def _token_response(self, user_id: UUID) -> TokenResponse:
        pair = self.tokens.issue_token_pair(user_id)
        return TokenResponse(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=int(self.tokens.access_lifetime.total_seconds()),
        )

    @staticmethod
    def _to_user_read(user: User) -> UserRead:
        return UserRead.model_validate(user)
