"""Monitoring and error handling for Tasklist CalDAV Server."""

from .exceptions import (
    ErrorCode, TasklistCalDAVError, ConfigurationError, AuthenticationError,
    DataProcessingError, VTodoParseError, CalendarGenerationError,
    NotFoundError, ListDoesNotExistError, TeamDoesNotExistError, TaskDoesNotExistError,
    AccessDeniedError, NeedToHaveListReadAccessError, NeedToHaveListWriteAccessError,
    InvalidRightError, InvalidTeamRightError, TeamAlreadyHasAccessError,
    TeamDoesNotHaveAccessToListError, TaskUidMismatchError,
    ErrorHandler, error_handler
)

__all__ = [
    'ErrorCode', 'TasklistCalDAVError', 'ConfigurationError', 'AuthenticationError',
    'DataProcessingError', 'VTodoParseError', 'CalendarGenerationError',
    'NotFoundError', 'ListDoesNotExistError', 'TeamDoesNotExistError', 'TaskDoesNotExistError',
    'AccessDeniedError', 'NeedToHaveListReadAccessError', 'NeedToHaveListWriteAccessError',
    'InvalidRightError', 'InvalidTeamRightError', 'TeamAlreadyHasAccessError',
    'TeamDoesNotHaveAccessToListError', 'TaskUidMismatchError',
    'ErrorHandler', 'error_handler'
]
