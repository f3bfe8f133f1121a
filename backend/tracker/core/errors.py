"""Error Hierarchy — the three failure kinds every request can end in.

Invariants:
    - Every error has a code (str), category (ErrorCategory) and http_status
    - to_response() produces the wire envelope {"message": str} and nothing else
    - InvalidInputError surfaces the decoder's message verbatim
    - StoreFailureError surfaces the store's message verbatim
    - IOFailureError never surfaces its cause; detail stays in the logs

Design Decisions:
    - Single hierarchy with TrackerError base: one FastAPI handler catches all
      (ADR: uniform error shape)
    - public_message separate from detail: the responder logs detail and
      sends public_message, so the leak rule lives in one place
"""

from enum import Enum


GENERIC_ERROR_MESSAGE = "something went wrong. Try again later!"


class ErrorCategory(str, Enum):
    """Failure source — drives status code and message granularity."""
    INVALID_INPUT = "invalid_input"
    STORE = "store"
    IO = "io"


class TrackerError(Exception):
    """Base exception for all drink tracker errors."""

    log_label = "error"

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.cause = cause

    @property
    def public_message(self) -> str:
        """Message safe to send to the client."""
        return self.message

    @property
    def detail(self) -> str:
        """Full detail for server-side logs."""
        if self.cause is not None:
            return f"{self.message} ({type(self.cause).__name__}: {self.cause})"
        return self.message

    def to_response(self) -> dict:
        """Convert to the wire error envelope."""
        return {"message": self.public_message}


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidInputError(TrackerError):
    """Request body or path identifier failed to decode."""

    log_label = "bad user input"

    def __init__(
        self,
        message: str,
        http_status: int = 400,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.INVALID_INPUT,
            http_status, cause,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class StoreFailureError(TrackerError):
    """Embedded store rejected an operation (schema, missing record, abort)."""

    log_label = "DB error"

    def __init__(
        self,
        message: str,
        operation: str,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message, "STORE_FAILURE", ErrorCategory.STORE, 500, cause,
        )
        self.operation = operation


class IOFailureError(TrackerError):
    """Failure outside store semantics (file system, transport)."""

    log_label = "I/O error"

    def __init__(self, operation: str, cause: BaseException | None = None):
        super().__init__(
            f"I/O failure during {operation}: {cause}",
            "IO_FAILURE", ErrorCategory.IO, 500, cause,
        )
        self.operation = operation

    @property
    def public_message(self) -> str:
        return GENERIC_ERROR_MESSAGE
