"""
Notes API: Exception Hierarchy
===============================

What:  Application-specific exceptions for the three failure classes a notes
       request can end in.
How:   Each exception carries a user-facing `message` and an optional
       `context` dict. The message ends up in the response envelope; the
       context is only logged.
Who:   Raised by NoteStore and NoteService; converted into envelopes by the
       service handlers and, as a fallback, by the handlers in main.py.

Exception Hierarchy:
    NotesApiError (base)
    ├── ValidationError   → required input missing (Add, Update)
    ├── NotFoundError     → id does not resolve to a Note (Update, Delete)
    └── StorageError      → persistence I/O failure or deadline exceeded

None of these map to an HTTP error status: callers inspect `success` in the
envelope.
"""

from typing import Any, Dict, Optional


class NotesApiError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (returned in the envelope)
        context:  Additional debug info (logged, never returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesApiError):
    """
    Raised when required request input is missing or empty.

    This is a short-circuit: the store is never called once it is raised.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class NotFoundError(NotesApiError):
    """
    Raised when an identifier does not resolve to a stored resource.

    A normal, expected outcome; distinct from StorageError.
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StorageError(NotesApiError):
    """
    Raised when a storage operation fails.

    When:  Connection refused or lost, driver error, constraint violation,
           or the per-operation deadline expired.

    The message stays generic (names the operation only); the driver error
    and statement details go to the log through `context`.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation
