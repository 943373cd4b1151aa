"""Application services for Tasklist CalDAV server."""

import hashlib
import logging
from datetime import datetime, tzinfo
from typing import Optional, Tuple

from domain import Project, ProjectRepository, Task, User
from infrastructure import encode_calendar, parse_task_from_vtodo, todo_from_task
from monitoring.exceptions import (
    CalendarGenerationError, ListDoesNotExistError, NeedToHaveListReadAccessError,
    NeedToHaveListWriteAccessError, TaskDoesNotExistError, TasklistCalDAVError,
    TaskUidMismatchError
)
from .sharing import RightsResolver


class CalDAVService:
    """Serves lists as calendars and applies tasks uploaded by CalDAV clients."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        rights: RightsResolver,
        tz: tzinfo,
        product_id: Optional[str] = None
    ):
        self.project_repository = project_repository
        self.rights = rights
        self.tz = tz
        self.product_id = product_id
        self.logger = logging.getLogger(__name__)

    def _get_project(self, project_id: int) -> Project:
        project = self.project_repository.get_project_by_id(project_id)
        if project is None:
            raise ListDoesNotExistError(project_id)
        return project

    def _readable_project(self, user: User, project_id: int) -> Project:
        project = self._get_project(project_id)
        if not self.rights.can_read(user, project):
            raise NeedToHaveListReadAccessError(project_id, user.id)
        return project

    def _writable_project(self, user: User, project_id: int) -> Project:
        project = self._get_project(project_id)
        if not self.rights.can_write(user, project):
            raise NeedToHaveListWriteAccessError(project_id, user.id)
        return project

    def _encode(self, project: Project, tasks) -> str:
        try:
            return encode_calendar(project, tasks, self.product_id)
        except TasklistCalDAVError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to generate calendar for list {project.id}: {e}")
            raise CalendarGenerationError(
                f"Failed to generate calendar for list {project.id}",
                details={'list_id': project.id},
                cause=e
            )

    def get_calendar_data(self, user: User, project_id: int) -> str:
        """Generate iCalendar data for every task of a list."""
        project = self._readable_project(user, project_id)
        tasks = self.project_repository.get_project_tasks(project_id)
        return self._encode(project, tasks)

    def get_task_data(self, user: User, project_id: int, uid: str) -> str:
        """Generate iCalendar data for a single task."""
        project = self._readable_project(user, project_id)
        task = self.project_repository.get_task_by_uid(project_id, uid)
        if task is None:
            raise TaskDoesNotExistError(uid)
        return self._encode(project, [task])

    def put_task(
        self,
        user: User,
        project_id: int,
        content: str,
        uid: Optional[str] = None
    ) -> Tuple[Task, bool]:
        """Create or update a task from a client-submitted VTODO.

        ``uid`` is the resource name the client stored the task under. A
        VTODO without a UID takes it; a VTODO with a different UID is
        rejected. Returns the stored task and whether it was newly created.
        """
        self._writable_project(user, project_id)
        task = parse_task_from_vtodo(content, self.tz)
        task.project_id = project_id
        if uid:
            if not task.uid:
                task.uid = uid
            elif task.uid != uid:
                raise TaskUidMismatchError(task.uid, uid)

        now = datetime.now(self.tz).replace(microsecond=0)
        existing = self.project_repository.get_task_by_uid(project_id, task.uid) if task.uid else None
        if existing is not None:
            task.id = existing.id
            task.created = existing.created
            task.comments = existing.comments
            self.logger.info(f"Updating task {task.uid} in list {project_id}")
        else:
            self.logger.info(f"Creating task {task.uid} in list {project_id}")

        if task.created is None:
            task.created = now
        if task.updated is None:
            task.updated = now

        return self.project_repository.save_task(task), existing is None

    def delete_task(self, user: User, project_id: int, uid: str) -> None:
        self._writable_project(user, project_id)
        task = self.project_repository.get_task_by_uid(project_id, uid)
        if task is None:
            raise TaskDoesNotExistError(uid)
        self.project_repository.delete_task(task)
        self.logger.info(f"Deleted task {uid} from list {project_id}")

    def get_etag(self, project_id: int, uid: Optional[str] = None) -> str:
        """Quoted ETag for a whole list or for one task of it, taken over the rendered VTODOs."""
        if uid is not None:
            task = self.project_repository.get_task_by_uid(project_id, uid)
            tasks = [task] if task else []
        else:
            tasks = self.project_repository.get_project_tasks(project_id)

        digest = hashlib.md5(f"{project_id}:{uid or ''}".encode('utf-8'))
        for task in tasks:
            digest.update(todo_from_task(task).to_ical(sorted=False))
        return f'"{digest.hexdigest()}"'

