"""
Typed errors for whole-source failures.

Row-level problems (short rows, blank identifiers) are never raised; they are
filtered during extraction. Everything here means a whole source, or the
caller's configuration, is unusable.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class RosterMatchError(Exception):
    """Base exception carrying structured context for API/CLI output."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recommendation: Optional[str] = None,
        http_status: int = 400,
    ):
        self.message = message
        self.context = context or {}
        self.recommendation = recommendation
        self.http_status = http_status
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured error response."""
        error_dict = {
            "success": False,
            "error": self.message,
            "type": type(self).__name__,
        }
        if self.context:
            error_dict["context"] = self.context
        if self.recommendation:
            error_dict["recommendation"] = self.recommendation
        return error_dict


class SourceNotFound(RosterMatchError):
    """Raised when a source path does not exist."""

    def __init__(self, path: str):
        super().__init__(
            message=f"File not found: {path}",
            context={"path": path},
            recommendation="Check the path and make sure the file is still there.",
            http_status=404,
        )


class UnreadableContainer(RosterMatchError):
    """Raised when a file cannot be decoded as .xlsx or .xls."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Cannot read spreadsheet {path}: {reason}",
            context={"path": path, "reason": reason},
            recommendation="Save the file as .xlsx or .xls and try again.",
            http_status=422,
        )


class SheetMissing(RosterMatchError):
    """Raised when the requested sheet index is out of range."""

    def __init__(self, path: str, index: int, available: int):
        super().__init__(
            message=f"Cannot find worksheet at index {index} in {path}",
            context={"path": path, "sheet_index": index, "sheet_count": available},
            recommendation="The file layout does not match the selected category.",
            http_status=422,
        )


class SchemaUnknown(RosterMatchError):
    """Raised when a category tag is not in the registry."""

    def __init__(self, tag: Any, known: Optional[list] = None):
        context: Dict[str, Any] = {"category": str(tag)}
        if known:
            context["known"] = known
        super().__init__(
            message=f"Unknown category: {tag}",
            context=context,
            recommendation="Use one of the categories listed by `rostermatch categories`.",
            http_status=400,
        )


class DuplicateIdentifier(RosterMatchError):
    """Raised under the 'error' duplicate policy when roster identifiers repeat."""

    def __init__(self, duplicates: Dict[str, list]):
        sample = sorted(duplicates)[:5]
        super().__init__(
            message=f"{len(duplicates)} identifier(s) appear more than once in the roster",
            context={"count": len(duplicates), "sample": sample},
            recommendation="Remove duplicate roster rows or rerun with --duplicates last/first.",
            http_status=409,
        )


class InvalidSetting(RosterMatchError):
    """Raised when a run option (duplicate policy, worker count) has an unusable value."""

    def __init__(self, setting: str, value: Any, expected: str):
        super().__init__(
            message=f"Invalid {setting}: {value!r} (expected {expected})",
            context={"setting": setting, "value": str(value)},
            recommendation="Fix the option, or the ROSTERMATCH_* environment variable behind its default.",
            http_status=400,
        )
