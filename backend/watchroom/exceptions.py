"""
Custom Exception Classes for Watch Together

Every failure surfaced by the room/chat access layer is one of these.
Each carries a stable error code and the HTTP status the API answers with.
"""

from typing import Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for consistent error responses"""

    # Room (ROOM_xxx)
    ROOM_NOT_FOUND = "ROOM_001"
    ROOM_LOCATOR_EXHAUSTED = "ROOM_002"
    ROOM_CONCURRENT_UPDATE = "ROOM_003"

    # User (USER_xxx)
    USER_NOT_FOUND = "USER_001"

    # Validation (VAL_xxx)
    VALIDATION_ERROR = "VAL_001"
    INVALID_INPUT = "VAL_002"

    # Database (DB_xxx)
    DATABASE_ERROR = "DB_001"
    NOT_FOUND = "DB_002"
    ALREADY_EXISTS = "DB_003"
    STORE_UNAVAILABLE = "DB_004"

    # General (GEN_xxx)
    INTERNAL_SERVER_ERROR = "GEN_001"


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        message: Human readable error message
        code: Error code (ErrorCode enum)
        status_code: HTTP status code
        details: Extra error details (optional)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dict (for API responses)"""
        result = {
            "error": self.code.value,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            result["details"] = self.details
        return result


# ==================== Validation Exceptions ====================

class ValidationException(AppException):
    """A required field is missing or malformed"""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, 400, details)

    @classmethod
    def from_pydantic(cls, error) -> "ValidationException":
        """Build from a pydantic ValidationError, keeping per-field messages."""
        errors = [
            {
                "field": ".".join(str(loc) for loc in item["loc"]),
                "message": item["msg"],
                "type": item["type"],
            }
            for item in error.errors()
        ]
        return cls("Invalid input", {"validation_errors": errors})


class InvalidInputException(ValidationException):
    """Invalid value for a field"""

    def __init__(self, field: str, reason: str = "Invalid value"):
        super().__init__(
            f"Invalid value: {field}",
            {"field": field, "reason": reason},
        )
        self.code = ErrorCode.INVALID_INPUT


# ==================== Database Exceptions ====================

class DatabaseException(AppException):
    """Generic store error"""

    def __init__(
        self,
        message: str = "Database error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DATABASE_ERROR, 500, details)


class NotFoundException(DatabaseException):
    """A record required by the operation does not exist"""

    def __init__(self, resource: str = "Resource", details: Optional[dict[str, Any]] = None):
        super().__init__(
            f"{resource} not found",
            {"resource": resource, **(details or {})},
        )
        self.code = ErrorCode.NOT_FOUND
        self.status_code = 404


class UniquenessViolationException(DatabaseException):
    """Insert collided with a unique id, url, code, email or discord id"""

    def __init__(self, resource: str = "Resource", details: Optional[dict[str, Any]] = None):
        super().__init__(
            f"{resource} already exists",
            {"resource": resource, **(details or {})},
        )
        self.code = ErrorCode.ALREADY_EXISTS
        self.status_code = 409


class StoreUnavailableException(DatabaseException):
    """The underlying store could not be reached"""

    def __init__(self, reason: str = "Unknown"):
        super().__init__("Store unavailable", {"reason": reason})
        self.code = ErrorCode.STORE_UNAVAILABLE
        self.status_code = 503


# ==================== Room Exceptions ====================

class RoomNotFoundException(NotFoundException):
    """Room not found"""

    def __init__(self, room_url: str | None = None):
        super().__init__("Room", {"room_url": room_url} if room_url else None)
        self.code = ErrorCode.ROOM_NOT_FOUND


class RoomLocatorExhaustedException(UniquenessViolationException):
    """Could not issue a free room url/code pair"""

    def __init__(self, attempts: int):
        super().__init__("Room locator", {"attempts": attempts})
        self.message = f"Could not issue a unique room url/code after {attempts} attempts"
        self.code = ErrorCode.ROOM_LOCATOR_EXHAUSTED


class ConcurrentUpdateException(AppException):
    """Optimistic update retries were exhausted"""

    def __init__(self, resource: str = "Room", attempts: int = 0):
        super().__init__(
            f"{resource} was modified concurrently, please retry",
            ErrorCode.ROOM_CONCURRENT_UPDATE,
            409,
            {"resource": resource, "attempts": attempts},
        )


# ==================== User Exceptions ====================

class UserNotFoundException(NotFoundException):
    """User not found"""

    def __init__(self, user_id: str | None = None):
        super().__init__("User", {"user_id": user_id} if user_id else None)
        self.code = ErrorCode.USER_NOT_FOUND

