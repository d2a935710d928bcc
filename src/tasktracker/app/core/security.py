"""Password hashing and bearer token issuance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from beanie import PydanticObjectId
from bson.errors import InvalidId
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import Settings


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted for any reason."""


class TokenPayload(BaseModel):
    """Validated JWT claims."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime
    iat: datetime
    jti: str


@dataclass(slots=True)
class GeneratedToken:
    """A signed token together with its expiry and unique id."""

    token: str
    expires_at: datetime
    jti: str


class CredentialService:
    """Hash passwords and issue/verify signed, time-limited bearer tokens.

    The signing secret is supplied at construction time; one instance is built
    per application and shared by request handlers.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(days=7),
        schemes: tuple[str, ...] = ("bcrypt",),
    ) -> None:
        if not secret:
            raise ValueError("A token signing secret is required.")
        self._secret = secret
        self._algorithm = algorithm
        self._token_ttl = token_ttl
        self._pwd_context = CryptContext(schemes=list(schemes), deprecated="auto")

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        )

    def hash_password(self, password: str) -> str:
        """Return a salted one-way hash of ``password``."""

        return self._pwd_context.hash(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Check ``password`` against a hash produced by :meth:`hash_password`."""

        try:
            return self._pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognised or corrupt hash.
            return False

    def issue_token(
        self,
        user_id: PydanticObjectId | str,
        *,
        expires_delta: timedelta | None = None,
    ) -> GeneratedToken:
        """Sign a token binding ``user_id`` for the configured lifetime."""

        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._token_ttl)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": expire,
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return GeneratedToken(token=token, expires_at=expire, jti=payload["jti"])

    def verify_token(self, token: str) -> PydanticObjectId:
        """Return the user id bound to ``token``.

        Raises :class:`InvalidTokenError` for a bad signature, an expired or
        malformed token, or a subject that is not a valid identifier.
        """

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidTokenError("Token could not be decoded.") from exc

        try:
            payload = TokenPayload.model_validate(claims)
        except ValidationError as exc:
            raise InvalidTokenError("Token claims are incomplete.") from exc

        try:
            return PydanticObjectId(payload.sub)
        except (InvalidId, TypeError) as exc:
            raise InvalidTokenError("Token subject is not a user id.") from exc


__all__ = [
    "CredentialService",
    "GeneratedToken",
    "InvalidTokenError",
    "TokenPayload",
]
