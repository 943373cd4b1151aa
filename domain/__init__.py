"""Domain layer for the Tasklist CalDAV server."""

from .entities import (
    Task, Label, TaskComment, Project, Namespace, User, Team, TeamMember, TeamList
)
from .rights import Right
from .interfaces import ProjectRepository, TeamRepository

__all__ = [
    'Task', 'Label', 'TaskComment', 'Project', 'Namespace', 'User',
    'Team', 'TeamMember', 'TeamList', 'Right',
    'ProjectRepository', 'TeamRepository'
]
