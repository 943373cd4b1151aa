"""Exception handling for Tasklist CalDAV Server."""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(Enum):
    """Standard error codes for the application."""

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # Authentication errors
    AUTH_FAILED = "AUTH_FAILED"

    # Data processing errors
    DATA_PARSING_ERROR = "DATA_PARSING_ERROR"

    # Calendar generation errors
    CALENDAR_GENERATION_ERROR = "CALENDAR_GENERATION_ERROR"

    # Lookup and permission errors
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    INVALID_RIGHT = "INVALID_RIGHT"
    CONFLICT = "CONFLICT"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TasklistCalDAVError(Exception):
    """Base exception for Tasklist CalDAV Server."""

    http_status = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/monitoring."""
        return {
            'error_code': self.error_code.value,
            'message': self.message,
            'details': self.details,
            'timestamp': self.timestamp.isoformat(),
            'cause': str(self.cause) if self.cause else None,
            'traceback': traceback.format_exc() if self.cause else None
        }


class ConfigurationError(TasklistCalDAVError):
    """Configuration related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)


class AuthenticationError(TasklistCalDAVError):
    """Authentication related errors."""

    http_status = 401

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.AUTH_FAILED, details)


class DataProcessingError(TasklistCalDAVError):
    """Data processing related errors."""

    http_status = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATA_PARSING_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, error_code, details, cause)


class VTodoParseError(DataProcessingError):
    """The submitted text does not contain a well-formed VTODO block."""


class CalendarGenerationError(TasklistCalDAVError):
    """Calendar generation related errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, ErrorCode.CALENDAR_GENERATION_ERROR, details, cause)


class NotFoundError(TasklistCalDAVError):
    """A referenced entity does not exist."""

    http_status = 404

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details)


class ListDoesNotExistError(NotFoundError):
    def __init__(self, list_id: int):
        super().__init__(f"List {list_id} does not exist", {'list_id': list_id})


class TeamDoesNotExistError(NotFoundError):
    def __init__(self, team_id: int):
        super().__init__(f"Team {team_id} does not exist", {'team_id': team_id})


class TaskDoesNotExistError(NotFoundError):
    def __init__(self, uid: str):
        super().__init__(f"Task {uid} does not exist", {'uid': uid})


class AccessDeniedError(TasklistCalDAVError):
    """The current user lacks the right required for an operation."""

    http_status = 403

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.ACCESS_DENIED, details)


class NeedToHaveListReadAccessError(AccessDeniedError):
    def __init__(self, list_id: int, user_id: Optional[int] = None):
        super().__init__(
            f"User {user_id} needs read access to list {list_id}",
            {'list_id': list_id, 'user_id': user_id}
        )


class NeedToHaveListWriteAccessError(AccessDeniedError):
    def __init__(self, list_id: int, user_id: Optional[int] = None):
        super().__init__(
            f"User {user_id} needs write access to list {list_id}",
            {'list_id': list_id, 'user_id': user_id}
        )


class InvalidRightError(TasklistCalDAVError):
    """A right value outside of the known levels."""

    http_status = 400

    def __init__(self, right: Any):
        super().__init__(f"Invalid right: {right!r}", ErrorCode.INVALID_RIGHT, {'right': right})
        self.right = right


class InvalidTeamRightError(InvalidRightError):
    """A team share was given a right outside of the known levels."""


class TeamAlreadyHasAccessError(TasklistCalDAVError):
    http_status = 409

    def __init__(self, team_id: int, list_id: int):
        super().__init__(
            f"Team {team_id} already has access to list {list_id}",
            ErrorCode.CONFLICT,
            {'team_id': team_id, 'list_id': list_id}
        )


class TaskUidMismatchError(TasklistCalDAVError):
    """An uploaded VTODO names a different UID than the resource it was stored under."""

    http_status = 409

    def __init__(self, uid: str, resource_uid: str):
        super().__init__(
            f"Task UID {uid} does not match resource {resource_uid}",
            ErrorCode.CONFLICT,
            {'uid': uid, 'resource_uid': resource_uid}
        )


class TeamDoesNotHaveAccessToListError(NotFoundError):
    def __init__(self, team_id: int, list_id: int):
        super().__init__(
            f"Team {team_id} does not have access to list {list_id}",
            {'team_id': team_id, 'list_id': list_id}
        )


class ErrorHandler:
    """Centralized error handling and logging."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._error_counts = {}
        self._last_errors = {}

    def handle_error(
        self,
        error: Exception,
        context: str = "unknown",
        extra_details: Optional[Dict[str, Any]] = None
    ) -> TasklistCalDAVError:
        """Handle and log an error, converting to TasklistCalDAVError if needed."""

        if isinstance(error, TasklistCalDAVError):
            app_error = error
        else:
            app_error = TasklistCalDAVError(
                message=str(error),
                error_code=ErrorCode.INTERNAL_ERROR,
                details=extra_details or {},
                cause=error
            )

        app_error.details['context'] = context
        if extra_details:
            app_error.details.update(extra_details)

        error_key = f"{context}:{app_error.error_code.value}"
        self._error_counts[error_key] = self._error_counts.get(error_key, 0) + 1
        self._last_errors[error_key] = app_error.to_dict()

        if app_error.error_code == ErrorCode.INTERNAL_ERROR:
            self.logger.error(
                f"[{context}] {app_error.message}",
                extra={
                    'error_code': app_error.error_code.value,
                    'details': app_error.details,
                    'error_count': self._error_counts[error_key]
                },
                exc_info=app_error.cause
            )
        else:
            self.logger.warning(
                f"[{context}] {app_error.message}",
                extra={
                    'error_code': app_error.error_code.value,
                    'details': app_error.details,
                    'error_count': self._error_counts[error_key]
                }
            )

        return app_error

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics for monitoring."""
        return {
            'error_counts': self._error_counts.copy(),
            'last_errors': self._last_errors.copy(),
            'total_errors': sum(self._error_counts.values())
        }

    def reset_stats(self):
        """Reset error statistics."""
        self._error_counts.clear()
        self._last_errors.clear()


# Global error handler instance
error_handler = ErrorHandler()
