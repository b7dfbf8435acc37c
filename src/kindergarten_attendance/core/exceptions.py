from __future__ import annotations

from typing import Optional

from .enums import ValidationCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a record or request violates an attendance rule.

    ``code`` identifies the rule and ``field`` the offending input, so callers
    can point the user at the exact field instead of a generic message.
    """

    def __init__(self, code: ValidationCode, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.field = field

    def to_dict(self) -> dict:
        return {"code": self.code.value, "field": self.field, "message": str(self)}


class StoreError(DomainError):
    """Raised when the attendance store fails (connectivity, constraints, timeouts)."""
