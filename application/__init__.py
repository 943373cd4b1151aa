"""Application services for Tasklist CalDAV server."""

from .services import CalDAVService
from .sharing import RightsResolver, TeamListService

__all__ = [
    'CalDAVService', 'RightsResolver', 'TeamListService'
]
