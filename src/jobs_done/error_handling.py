"""Error taxonomy for jobs-done."""

from enum import Enum


class ErrorCategory(Enum):
    """Error categories for better handling."""

    VALIDATION = "validation"
    BACKEND = "backend"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class JobsDoneError(Exception):
    """Base exception class for jobs-done.

    Every error that aborts a run derives from this class. The CLI turns it
    into a user-facing message and a non-zero exit status.
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.original_error = original_error

    def get_user_message(self) -> str:
        """Get user-friendly error message."""
        base_message = self.message

        if self.category == ErrorCategory.VALIDATION:
            return (
                f"Invalid input: {base_message}\n"
                "💡 Please check your command-line arguments."
            )
        elif self.category == ErrorCategory.BACKEND:
            return (
                f"Accounting query failed: {base_message}\n"
                "💡 Check that SLURM accounting is reachable from this host."
            )
        elif self.category == ErrorCategory.TIMEOUT:
            return (
                f"Accounting query timed out: {base_message}\n"
                "💡 The scheduler may be busy. Try again later."
            )
        else:
            return f"Error: {base_message}"


class InvalidTimestamp(JobsDoneError):
    """Raised when an explicit ``--since`` value cannot be parsed."""

    exit_code = 2

    def __init__(self, value: str, original_error: Exception | None = None):
        super().__init__(
            f"'{value}' is not a valid timestamp (expected ISO-8601, "
            "e.g. 2025-01-01T10:00:00)",
            category=ErrorCategory.VALIDATION,
            original_error=original_error,
        )
        self.value = value


class InvalidDuration(JobsDoneError):
    """Raised when a relative window is not a non-negative integer."""

    exit_code = 2

    def __init__(self, value, unit: str = "hours"):
        super().__init__(
            f"'{value}' is not a valid number of {unit} "
            "(expected a non-negative integer)",
            category=ErrorCategory.VALIDATION,
        )
        self.value = value
        self.unit = unit


class BackendUnavailable(JobsDoneError):
    """Raised when the accounting command is not installed."""

    def __init__(self, command: str, original_error: Exception | None = None):
        super().__init__(
            f"'{command}' was not found on this system",
            category=ErrorCategory.BACKEND,
            original_error=original_error,
        )
        self.command = command


class BackendQueryFailed(JobsDoneError):
    """Raised when the accounting command exits with a non-zero status."""

    def __init__(self, stderr: str, returncode: int | None = None):
        detail = stderr.strip() or "no error output"
        if returncode is not None:
            message = f"exit status {returncode}: {detail}"
        else:
            message = detail
        super().__init__(message, category=ErrorCategory.BACKEND)
        self.stderr = stderr
        self.returncode = returncode


class BackendTimeout(JobsDoneError):
    """Raised when the accounting command does not finish in time."""

    def __init__(self, timeout: float, original_error: Exception | None = None):
        super().__init__(
            f"no response after {timeout:g} seconds",
            category=ErrorCategory.TIMEOUT,
            original_error=original_error,
        )
        self.timeout = timeout
