"""Exception hierarchy for the Notes Site pipeline.

Every exception carries a machine-readable ``error_code``, a ``details``
mapping and a ``user_message`` so the pipeline can aggregate them into a
report instead of printing them inline. ``severity`` separates problems that
cost a whole source or relation ("error") from recoverable ones ("warning").
"""

from __future__ import annotations

from typing import Any


class NotesSiteError(Exception):
    """Base exception for all Notes Site errors."""

    default_error_code = "UNKNOWN_ERROR"
    severity = "error"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception into a report entry."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "severity": self.severity,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(NotesSiteError):
    """Raised when an input value fails validation."""

    default_error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = value
        super().__init__(message, details=details, **kwargs)


class LoadError(NotesSiteError):
    """Raised when a source cannot be read into a Document.

    Fatal for that source only; batch loading skips it and continues.
    """

    default_error_code = "LOAD_ERROR"

    def __init__(self, source: str, reason: str, details: dict[str, Any] | None = None):
        merged = {"source": source, "failure_reason": reason}
        merged.update(details or {})
        super().__init__(
            f"Failed to load '{source}': {reason}",
            details=merged,
            user_message=f"Note '{source}' could not be read: {reason}",
        )
        self.source = source


class MalformedCodeBlockError(NotesSiteError):
    """Reported when a fenced code block is never closed.

    Recoverable: the parser closes the block at end of document.
    """

    default_error_code = "MALFORMED_CODE_BLOCK"
    severity = "warning"

    def __init__(self, document_id: str, line_number: int, fence: str, language: str | None = None):
        details: dict[str, Any] = {
            "document_id": document_id,
            "line_number": line_number,
            "fence": fence,
        }
        if language:
            details["language"] = language
        super().__init__(
            f"Unterminated code fence '{fence}' opened at line {line_number} in '{document_id}'",
            details=details,
            user_message=(
                f"A code block in '{document_id}' (line {line_number}) is never closed; "
                "it was closed at the end of the note."
            ),
        )
        self.document_id = document_id
        self.line_number = line_number


class DanglingReferenceWarning(NotesSiteError, UserWarning):
    """Reported when a note relates to an identifier that was not loaded."""

    default_error_code = "DANGLING_REFERENCE"
    severity = "warning"

    def __init__(self, document_id: str, target: str):
        super().__init__(
            f"'{document_id}' relates to unknown note '{target}'",
            details={"document_id": document_id, "target": target},
            user_message=f"Related note '{target}' referenced from '{document_id}' does not exist.",
        )
        self.document_id = document_id
        self.target = target


class SelfReferenceError(NotesSiteError):
    """Raised for a note that declares itself as related.

    Fatal for that relation only.
    """

    default_error_code = "SELF_REFERENCE"

    def __init__(self, document_id: str):
        super().__init__(
            f"'{document_id}' declares a relation to itself",
            details={"document_id": document_id},
            user_message=f"Note '{document_id}' lists itself as related.",
        )
        self.document_id = document_id


class RenderError(NotesSiteError):
    """Raised when an output format is unknown or rendering fails."""

    default_error_code = "RENDER_ERROR"

    def __init__(self, output_format: str, reason: str):
        super().__init__(
            f"Cannot render format '{output_format}': {reason}",
            details={"output_format": output_format, "failure_reason": reason},
            user_message=f"Rendering failed: {reason}",
        )


class OutputError(NotesSiteError):
    """Raised when a rendered artifact cannot be written."""

    default_error_code = "OUTPUT_ERROR"

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            f"Failed to write '{file_path}': {reason}",
            details={"file_path": file_path, "failure_reason": reason},
            user_message=f"File operation failed: {reason}",
        )


class PathConflictWarning(NotesSiteError, UserWarning):
    """Reported when the site index would overwrite a note's artifact.

    Recoverable: the note keeps its path and the index is written under
    the next free name.
    """

    default_error_code = "PATH_CONFLICT"
    severity = "warning"

    def __init__(self, file_path: str, document_id: str, relocated_to: str):
        super().__init__(
            f"Artifact path '{file_path}' of note '{document_id}' collides with the site index",
            details={"file_path": file_path, "document_id": document_id, "relocated_to": relocated_to},
            user_message=f"Note '{document_id}' uses '{file_path}'; the site index was written to '{relocated_to}'.",
        )
        self.file_path = file_path
        self.document_id = document_id
        self.relocated_to = relocated_to
