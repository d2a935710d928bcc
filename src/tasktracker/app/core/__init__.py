"""Core application utilities."""

from __future__ import annotations

from .config import Settings, get_settings
from .security import CredentialService, InvalidTokenError

__all__ = ["CredentialService", "InvalidTokenError", "Settings", "get_settings"]
