"""Domain interfaces for the Tasklist CalDAV server."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Namespace, Project, Task, Team, TeamList, User


class ProjectRepository(ABC):
    """Abstract repository for project and task data."""

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by login name."""
        pass

    @abstractmethod
    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def get_namespace_by_id(self, namespace_id: int) -> Optional[Namespace]:
        """Get namespace by ID."""
        pass

    @abstractmethod
    def get_project_tasks(self, project_id: int) -> List[Task]:
        """Get tasks for a project."""
        pass

    @abstractmethod
    def get_task_by_uid(self, project_id: int, uid: str) -> Optional[Task]:
        """Get a single task of a project by its calendar UID."""
        pass

    @abstractmethod
    def save_task(self, task: Task) -> Task:
        """Insert or replace a task; assigns an ID on insert."""
        pass

    @abstractmethod
    def delete_task(self, task: Task) -> None:
        """Remove a task."""
        pass


class TeamRepository(ABC):
    """Abstract repository for teams and their list shares."""

    @abstractmethod
    def get_team_by_id(self, team_id: int) -> Optional[Team]:
        """Get team by ID."""
        pass

    @abstractmethod
    def get_teams_for_user(self, user_id: int) -> List[Team]:
        """Get every team the user is a member of."""
        pass

    @abstractmethod
    def get_team_list(self, team_id: int, list_id: int) -> Optional[TeamList]:
        """Get the share of a list held by a team."""
        pass

    @abstractmethod
    def get_team_lists_for_list(self, list_id: int) -> List[TeamList]:
        """Get all team shares of a list."""
        pass

    @abstractmethod
    def save_team_list(self, share: TeamList) -> TeamList:
        """Insert or replace a team share; assigns an ID on insert."""
        pass

    @abstractmethod
    def delete_team_list(self, share: TeamList) -> None:
        """Remove a team share."""
        pass
