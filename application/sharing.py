"""List sharing with teams and the rights checks around it."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from domain import Project, ProjectRepository, Right, Team, TeamList, TeamRepository, User
from monitoring.exceptions import (
    InvalidTeamRightError, ListDoesNotExistError, NeedToHaveListReadAccessError,
    TeamAlreadyHasAccessError, TeamDoesNotExistError, TeamDoesNotHaveAccessToListError
)


class RightsResolver:
    """Works out which right a user holds on a list."""

    def __init__(self, project_repository: ProjectRepository, team_repository: TeamRepository):
        self.project_repository = project_repository
        self.team_repository = team_repository

    def get_right(self, user: User, project: Project) -> Optional[Right]:
        """Highest right of ``user`` on ``project``, or None without any access.

        Owners of the list or of its namespace are admins. Everyone else gets
        the best right among the teams they belong to.
        """
        if project.owner_id is not None and project.owner_id == user.id:
            return Right.ADMIN

        if project.namespace_id is not None:
            namespace = self.project_repository.get_namespace_by_id(project.namespace_id)
            if namespace and namespace.owner_id == user.id:
                return Right.ADMIN

        best = None
        for team in self.team_repository.get_teams_for_user(user.id):
            share = self.team_repository.get_team_list(team.id, project.id)
            if share and (best is None or share.right > best):
                best = share.right
        return best

    def can_read(self, user: User, project: Project) -> bool:
        right = self.get_right(user, project)
        return right is not None and right >= Right.READ

    def can_write(self, user: User, project: Project) -> bool:
        right = self.get_right(user, project)
        return right is not None and right >= Right.WRITE

    def is_admin(self, user: User, project: Project) -> bool:
        right = self.get_right(user, project)
        return right is not None and right >= Right.ADMIN


class TeamListService:
    """Create, list, update and remove team shares of a list."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        team_repository: TeamRepository,
        rights: RightsResolver
    ):
        self.project_repository = project_repository
        self.team_repository = team_repository
        self.rights = rights
        self.logger = logging.getLogger(__name__)

    def _is_list_admin(self, user: User, list_id: int) -> bool:
        project = self.project_repository.get_project_by_id(list_id)
        if project is None:
            return False
        return self.rights.is_admin(user, project)

    def can_create(self, user: User, share: TeamList) -> bool:
        return self._is_list_admin(user, share.list_id)

    def can_update(self, user: User, share: TeamList) -> bool:
        return self._is_list_admin(user, share.list_id)

    def can_delete(self, user: User, share: TeamList) -> bool:
        return self._is_list_admin(user, share.list_id)

    def create(self, user: User, share: TeamList) -> TeamList:
        """Give a team access to a list."""
        share.right = Right.parse(share.right, error_cls=InvalidTeamRightError)

        if self.team_repository.get_team_by_id(share.team_id) is None:
            raise TeamDoesNotExistError(share.team_id)
        if self.project_repository.get_project_by_id(share.list_id) is None:
            raise ListDoesNotExistError(share.list_id)
        if self.team_repository.get_team_list(share.team_id, share.list_id) is not None:
            raise TeamAlreadyHasAccessError(share.team_id, share.list_id)

        now = datetime.now(timezone.utc)
        share.id = None
        share.created = now
        share.updated = now
        saved = self.team_repository.save_team_list(share)
        self.logger.info(
            f"User {user.id} shared list {share.list_id} with team {share.team_id} "
            f"as {share.right.name}"
        )
        return saved

    def read_all(self, user: User, list_id: int) -> List[Tuple[Team, Right]]:
        """All teams with access to a list, with the right each holds."""
        project = self.project_repository.get_project_by_id(list_id)
        if project is None:
            raise ListDoesNotExistError(list_id)
        if not self.rights.can_read(user, project):
            raise NeedToHaveListReadAccessError(list_id, user.id)

        teams = []
        for share in self.team_repository.get_team_lists_for_list(list_id):
            team = self.team_repository.get_team_by_id(share.team_id)
            if team is not None:
                teams.append((team, share.right))
        return teams

    def update(self, share: TeamList) -> TeamList:
        """Change the right a team holds on a list."""
        right = Right.parse(share.right, error_cls=InvalidTeamRightError)

        existing = self.team_repository.get_team_list(share.team_id, share.list_id)
        if existing is None:
            raise TeamDoesNotHaveAccessToListError(share.team_id, share.list_id)

        existing.right = right
        existing.updated = datetime.now(timezone.utc)
        return self.team_repository.save_team_list(existing)

    def delete(self, share: TeamList) -> None:
        """Remove a team's access to a list."""
        if self.team_repository.get_team_by_id(share.team_id) is None:
            raise TeamDoesNotExistError(share.team_id)

        existing = self.team_repository.get_team_list(share.team_id, share.list_id)
        if existing is None:
            raise TeamDoesNotHaveAccessToListError(share.team_id, share.list_id)

        self.team_repository.delete_team_list(existing)
        self.logger.info(f"Removed access of team {share.team_id} to list {share.list_id}")
