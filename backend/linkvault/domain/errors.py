"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry the user-facing messaging used by the API layer.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_REQUEST = "invalid_request"
    CONTENT_NOT_FOUND = "content_not_found"
    CONTENT_EXPIRED = "content_expired"
    CONTENT_EXHAUSTED = "content_exhausted"
    ONE_TIME_CONSUMED = "one_time_consumed"
    PASSWORD_REQUIRED = "password_required"
    NOT_AUTHORIZED = "not_authorized"
    FILE_TOO_LARGE = "file_too_large"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.CONTENT_NOT_FOUND: {
        "title": "Content Not Found",
        "message": "The requested content could not be found or has been deleted.",
        "action": "Check the link or ask the sender for a new one.",
    },
    ErrorCategory.CONTENT_EXPIRED: {
        "title": "Content Expired",
        "message": "This link has expired and its content has been removed.",
        "action": "Ask the sender to share the content again.",
    },
    ErrorCategory.CONTENT_EXHAUSTED: {
        "title": "Access Limit Reached",
        "message": "The maximum number of views or downloads for this content has been reached.",
        "action": "Ask the sender to share the content again.",
    },
    ErrorCategory.ONE_TIME_CONSUMED: {
        "title": "Already Opened",
        "message": "This content could only be opened once and has already been accessed.",
        "action": "Ask the sender to share the content again.",
    },
    ErrorCategory.PASSWORD_REQUIRED: {
        "title": "Password Required",
        "message": "This content is password protected.",
        "action": "Enter the password you received from the sender.",
    },
    ErrorCategory.NOT_AUTHORIZED: {
        "title": "Not Authorized",
        "message": "You are not allowed to delete this content.",
        "action": "Use the delete token returned at upload time or sign in as the owner.",
    },
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The uploaded file exceeds the maximum allowed size.",
        "action": "Upload a smaller file.",
    },
    ErrorCategory.STORAGE_UNAVAILABLE: {
        "title": "Storage Unavailable",
        "message": "The file could not be stored right now.",
        "action": "Please try the upload again in a moment.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class ValidationError(DomainError):
    """Raised when a create request is malformed. The client must correct its input."""

    category = ErrorCategory.INVALID_REQUEST

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message, original_error)
        if category is not None:
            self.category = category


class ContentNotFoundError(DomainError):
    """Raised when no record exists for the requested id."""

    category = ErrorCategory.CONTENT_NOT_FOUND


class ContentExpiredError(DomainError):
    """Raised when a record exists but is past its expiry."""

    category = ErrorCategory.CONTENT_EXPIRED


class ContentExhaustedError(DomainError):
    """
    Raised when a record has no accesses left.

    ``one_time`` distinguishes an already-consumed one-time record from a
    record whose numeric ceiling was reached.
    """

    category = ErrorCategory.CONTENT_EXHAUSTED

    def __init__(self, message: str, one_time: bool = False):
        super().__init__(message)
        self.one_time = one_time
        if one_time:
            self.category = ErrorCategory.ONE_TIME_CONSUMED


class AccessDeniedError(DomainError):
    """
    Raised when a password or delete credential is missing or wrong.

    Missing and wrong passwords are deliberately not distinguished.
    """

    category = ErrorCategory.NOT_AUTHORIZED

    def __init__(self, message: str, password_required: bool = False):
        super().__init__(message)
        self.password_required = password_required
        if password_required:
            self.category = ErrorCategory.PASSWORD_REQUIRED


class StorageUnavailableError(DomainError):
    """Raised by a blob store when it cannot persist or serve bytes."""

    category = ErrorCategory.STORAGE_UNAVAILABLE


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    Bridges domain errors with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        data = {
            "success": False,
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        data.update(self.context)
        return data


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    The technical message is never part of the response body.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional fields merged into the response (e.g. requires_password)
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
