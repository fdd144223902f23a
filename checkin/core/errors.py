"""
Error taxonomy for the check-in service.

Every failure the core can raise derives from AppError and carries a
category, so resolvers and logs can tell configuration, upstream,
validation and concurrency failures apart. A duplicate check-in is not an
error and has no class here.
"""

from typing import Optional


class ErrorCategory:
    """Error categories for structured error handling"""
    VALIDATION = "validation_error"
    EXTERNAL_SERVICE = "external_service_error"
    NOT_FOUND = "not_found_error"
    CONFLICT = "conflict_error"
    AUTHENTICATION = "authentication_error"
    INTERNAL = "internal_error"


class AppError(Exception):
    """Base application error with structured information"""

    def __init__(
        self,
        message: str,
        category: str = ErrorCategory.INTERNAL,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.category = category
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, category=ErrorCategory.VALIDATION, details=details)


class TagNotFoundError(ValidationError):
    def __init__(self, tag: str):
        super().__init__(f"Tag '{tag}' does not exist", details={"tag": tag})


class TagExistsError(ValidationError):
    def __init__(self, tag: str):
        super().__init__(f"Tag '{tag}' already exists", details={"tag": tag})


class TagValidationError(ValidationError):
    pass


class UpstreamError(AppError):
    """The registration service failed or answered with an errors payload."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(
            message,
            category=ErrorCategory.EXTERNAL_SERVICE,
            details={"service": "registration", "errors": errors or []},
        )
        self.errors = errors or []


class AttendeeNotFoundError(AppError):
    def __init__(self, attendee_id: str):
        super().__init__(
            f"User '{attendee_id}' was not found",
            category=ErrorCategory.NOT_FOUND,
            details={"user": attendee_id},
        )


class ConcurrentTransitionError(AppError):
    def __init__(self, attendee_id: str, tag: str):
        super().__init__(
            f"Check-in state for '{attendee_id}' / '{tag}' changed concurrently",
            category=ErrorCategory.CONFLICT,
            details={"user": attendee_id, "tag": tag},
        )


class AuthenticationError(AppError):
    def __init__(self, message: str = "You must log in to access this endpoint"):
        super().__init__(message, category=ErrorCategory.AUTHENTICATION)
