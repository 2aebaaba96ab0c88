"""
Error hierarchy for klarlog.

These are raised only while wiring loggers together (construction and
lookup). Nothing raised inside a destination during a log call reaches
application code.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class KlarLogError(Exception):
    """Root of all klarlog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(KlarLogError, ValueError):
    """Invalid destination or settings value."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="INVALID_CONFIGURATION", details=details)


class DuplicateCategoryError(KlarLogError, ValueError):
    """Two categories registered under the same accessor name."""

    def __init__(self, *, name: str) -> None:
        super().__init__(
            f"Category '{name}' is registered more than once",
            code="DUPLICATE_CATEGORY",
            details={"name": name},
        )


class UnknownCategoryError(KlarLogError, AttributeError, KeyError):
    """Lookup of a category that is not in the registry."""

    def __init__(self, *, name: str, known: Optional[list[str]] = None) -> None:
        super().__init__(
            f"Unknown log category '{name}'",
            code="UNKNOWN_CATEGORY",
            details={"name": name, "known": known or []},
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
