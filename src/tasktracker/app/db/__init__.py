"""Database related helpers."""

from __future__ import annotations

from .store import DocumentStore

__all__ = ["DocumentStore"]
