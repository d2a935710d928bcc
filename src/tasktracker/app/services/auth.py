"""Registration, login and profile workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import email_validator
from beanie import PydanticObjectId
from email_validator import EmailNotValidError, validate_email
from pymongo.errors import DuplicateKeyError

from ..core.security import CredentialService, GeneratedToken
from ..errors import ConflictError, InvalidCredentialsError, NotFoundError, ValidationError
from ..models import NAME_MAX_LENGTH, User, utcnow
from ..repositories import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes.
MAX_PASSWORD_BYTES = 72

# Intranet addresses such as ``dev@corp.local`` are accepted.
if "local" in email_validator.SPECIAL_USE_DOMAIN_NAMES:
    email_validator.SPECIAL_USE_DOMAIN_NAMES.remove("local")


@dataclass(slots=True)
class AuthResult:
    """An authenticated user together with the token issued for them."""

    user: User
    token: GeneratedToken


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def _normalise_email(value: str | None) -> str:
    return _clean(value).lower()


class AuthService:
    """Stateless authentication operations; one instance per request."""

    def __init__(
        self,
        credentials: CredentialService,
        *,
        users: UserRepository | None = None,
    ) -> None:
        self._credentials = credentials
        self._users = users or UserRepository()

    async def register(
        self,
        *,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> AuthResult:
        """Create an account and return it with a fresh token.

        Raises :class:`ValidationError` for missing or malformed input and
        :class:`ConflictError` when the email is already registered, whether
        detected up front or by the unique index during a concurrent insert.
        """

        clean_name = _clean(name)
        clean_email = _normalise_email(email)
        if not clean_name or not clean_email or not password:
            raise ValidationError("Name, email and password are required")
        if len(clean_name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name must be at most {NAME_MAX_LENGTH} characters")

        try:
            validate_email(clean_email, check_deliverability=False, test_environment=True)
        except EmailNotValidError as exc:
            raise ValidationError("Please enter a valid email") from exc

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if await self._users.get_by_email(clean_email) is not None:
            raise ConflictError("User already exists")

        now = utcnow()
        user = User(
            name=clean_name,
            email=clean_email,
            hashed_password=self._credentials.hash_password(password),
            created_at=now,
            updated_at=now,
        )
        try:
            await self._users.add(user)
        except DuplicateKeyError as exc:
            raise ConflictError("User already exists") from exc

        logger.info("User registered", extra={"user_id": str(user.id)})
        return AuthResult(user=user, token=self._credentials.issue_token(user.id))

    async def authenticate(self, *, email: str | None, password: str | None) -> AuthResult:
        """Verify credentials. Unknown email and wrong password fail identically."""

        clean_email = _normalise_email(email)
        if not clean_email or not password:
            raise ValidationError("Email and password are required")

        user = await self._users.get_by_email(clean_email)
        if user is None or not self._credentials.verify_password(password, user.hashed_password):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return AuthResult(user=user, token=self._credentials.issue_token(user.id))

    async def get_profile(self, user_id: PydanticObjectId) -> User:
        """Return the user bound to a verified token."""

        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


__all__ = ["AuthResult", "AuthService", "MAX_PASSWORD_BYTES", "MIN_PASSWORD_LENGTH"]
