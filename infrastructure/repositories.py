"""Infrastructure implementations for Tasklist CalDAV server."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from domain import (
    Namespace, Project, ProjectRepository, Right, Task, Team, TeamList,
    TeamMember, TeamRepository, User
)
from domain.entities import parse_timestamp


class InMemoryRepository(ProjectRepository, TeamRepository):
    """Process-local store for users, lists, tasks, teams and team shares."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._users: Dict[int, User] = {}
        self._namespaces: Dict[int, Namespace] = {}
        self._projects: Dict[int, Project] = {}
        self._tasks: Dict[int, Task] = {}
        self._teams: Dict[int, Team] = {}
        self._team_lists: Dict[int, TeamList] = {}
        self._next_ids: Dict[str, int] = {}

    @classmethod
    def from_file(cls, path: str) -> 'InMemoryRepository':
        """Create a repository seeded from a JSON document."""
        data_file = Path(path)
        if not data_file.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        with open(data_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        repository = cls()
        repository.load(data)
        return repository

    def load(self, data: Dict[str, Any]) -> None:
        """Add every entity of a seed document to the store."""
        with self._lock:
            for item in data.get('users', []):
                self.add_user(User(
                    id=item['id'],
                    username=item['username'],
                    password_hash=item.get('password_hash', '')
                ))
            for item in data.get('namespaces', []):
                self.add_namespace(Namespace(
                    id=item.get('id'),
                    title=item.get('title', ''),
                    owner_id=item.get('owner_id')
                ))
            for item in data.get('projects', []):
                self.add_project(Project.from_dict(item))
            for item in data.get('tasks', []):
                self.save_task(Task.from_dict(item))
            for item in data.get('teams', []):
                self.add_team(Team(
                    id=item.get('id'),
                    name=item.get('name', ''),
                    members=[
                        TeamMember(user_id=m['user_id'], admin=bool(m.get('admin', False)))
                        for m in item.get('members', [])
                    ]
                ))
            for item in data.get('team_lists', []):
                self.save_team_list(TeamList(
                    id=item.get('id'),
                    team_id=item['team_id'],
                    list_id=item['list_id'],
                    right=Right.parse(item.get('right', Right.READ)),
                    created=parse_timestamp(item.get('created')),
                    updated=parse_timestamp(item.get('updated'))
                ))

        self.logger.info(
            f"Loaded {len(self._users)} users, {len(self._projects)} lists, "
            f"{len(self._tasks)} tasks and {len(self._teams)} teams"
        )

    def _assign_id(self, kind: str, current: Optional[int]) -> int:
        if current is not None:
            self._next_ids[kind] = max(self._next_ids.get(kind, 1), current + 1)
            return current
        next_id = self._next_ids.get(kind, 1)
        self._next_ids[kind] = next_id + 1
        return next_id

    # Users, namespaces and projects

    def add_user(self, user: User) -> User:
        with self._lock:
            user.id = self._assign_id('user', user.id)
            self._users[user.id] = user
            return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
            return None

    def add_namespace(self, namespace: Namespace) -> Namespace:
        with self._lock:
            namespace.id = self._assign_id('namespace', namespace.id)
            self._namespaces[namespace.id] = namespace
            return namespace

    def get_namespace_by_id(self, namespace_id: int) -> Optional[Namespace]:
        with self._lock:
            return self._namespaces.get(namespace_id)

    def add_project(self, project: Project) -> Project:
        with self._lock:
            project.id = self._assign_id('project', project.id)
            self._projects[project.id] = project
            return project

    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    # Tasks

    def get_project_tasks(self, project_id: int) -> List[Task]:
        with self._lock:
            tasks = [task for task in self._tasks.values() if task.project_id == project_id]
        return sorted(tasks, key=lambda task: task.id)

    def get_task_by_uid(self, project_id: int, uid: str) -> Optional[Task]:
        with self._lock:
            for task in self._tasks.values():
                if task.project_id == project_id and task.uid == uid:
                    return task
            return None

    def save_task(self, task: Task) -> Task:
        with self._lock:
            task.id = self._assign_id('task', task.id)
            self._tasks[task.id] = task
            self.logger.debug(f"Saved task {task.id} ({task.uid}) in list {task.project_id}")
            return task

    def delete_task(self, task: Task) -> None:
        with self._lock:
            self._tasks.pop(task.id, None)

    # Teams and shares

    def add_team(self, team: Team) -> Team:
        with self._lock:
            team.id = self._assign_id('team', team.id)
            self._teams[team.id] = team
            return team

    def get_team_by_id(self, team_id: int) -> Optional[Team]:
        with self._lock:
            return self._teams.get(team_id)

    def get_teams_for_user(self, user_id: int) -> List[Team]:
        with self._lock:
            return [team for team in self._teams.values() if team.has_member(user_id)]

    def get_team_list(self, team_id: int, list_id: int) -> Optional[TeamList]:
        with self._lock:
            for share in self._team_lists.values():
                if share.team_id == team_id and share.list_id == list_id:
                    return share
            return None

    def get_team_lists_for_list(self, list_id: int) -> List[TeamList]:
        with self._lock:
            return [share for share in self._team_lists.values() if share.list_id == list_id]

    def save_team_list(self, share: TeamList) -> TeamList:
        with self._lock:
            share.id = self._assign_id('team_list', share.id)
            self._team_lists[share.id] = share
            return share

    def delete_team_list(self, share: TeamList) -> None:
        with self._lock:
            self._team_lists.pop(share.id, None)

