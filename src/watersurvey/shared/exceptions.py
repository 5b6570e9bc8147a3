"""
Shared exceptions.

Mapped to HTTP responses by the application factory in ``watersurvey.main``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AppError(Exception):
    message: str = "Application error"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidFieldError(ValidationError):
    """A store mutation was rejected; the survey state is unchanged."""

    def __init__(self, message: str = "Invalid field update", details: Optional[dict[str, Any]] = None, **_: Any) -> None:
        super().__init__(message=message, details=details)
