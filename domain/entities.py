"""Domain entities for the Tasklist CalDAV server."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, List, Any

from .rights import Right


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp (unix seconds or ISO 8601) into an aware datetime."""
    if value in (None, ''):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Label:
    """A label attached to a task; ``id`` is assigned by storage."""

    title: str
    id: Optional[int] = None


@dataclass
class TaskComment:
    """A comment on a task. Comments never appear in calendar output."""

    comment: str
    id: Optional[int] = None
    author_id: Optional[int] = None
    created: Optional[datetime] = None


@dataclass
class Task:
    """Domain entity representing a task."""

    title: str = ''
    uid: str = ''
    description: str = ''
    id: Optional[int] = None
    project_id: Optional[int] = None
    done: bool = False
    done_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    priority: int = 0
    repeat_after: int = 0  # seconds
    labels: List[Label] = None
    comments: List[TaskComment] = None

    def __post_init__(self):
        """Initialize default values."""
        if self.labels is None:
            self.labels = []
        if self.comments is None:
            self.comments = []

    @property
    def label_titles(self) -> List[str]:
        return [label.title for label in self.labels]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        """Create Task instance from stored data."""
        return cls(
            id=data.get('id'),
            uid=data.get('uid', ''),
            title=data.get('title', ''),
            description=data.get('description', ''),
            project_id=data.get('project_id'),
            done=bool(data.get('done', False)),
            done_at=parse_timestamp(data.get('done_at')),
            due_date=parse_timestamp(data.get('due_date')),
            start_date=parse_timestamp(data.get('start_date')),
            end_date=parse_timestamp(data.get('end_date')),
            created=parse_timestamp(data.get('created')),
            updated=parse_timestamp(data.get('updated')),
            priority=int(data.get('priority', 0)),
            repeat_after=int(data.get('repeat_after', 0)),
            labels=[Label(title=l['title'], id=l.get('id')) for l in data.get('labels', [])],
            comments=[
                TaskComment(
                    comment=c.get('comment', ''),
                    id=c.get('id'),
                    author_id=c.get('author_id'),
                    created=parse_timestamp(c.get('created'))
                )
                for c in data.get('comments', [])
            ]
        )


@dataclass
class Project:
    """Domain entity representing a project (a shared to-do list)."""

    title: str
    id: Optional[int] = None
    description: Optional[str] = None
    namespace_id: Optional[int] = None
    owner_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=data.get('id'),
            title=data.get('title', 'Untitled List'),
            description=data.get('description'),
            namespace_id=data.get('namespace_id'),
            owner_id=data.get('owner_id')
        )


@dataclass
class Namespace:
    """Groups projects; its owner administers every project inside it."""

    title: str
    id: Optional[int] = None
    owner_id: Optional[int] = None


@dataclass
class User:
    id: int
    username: str
    password_hash: str = ''


@dataclass
class TeamMember:
    user_id: int
    admin: bool = False


@dataclass
class Team:
    """A group of users that can be granted rights on lists."""

    name: str
    id: Optional[int] = None
    members: List[TeamMember] = None

    def __post_init__(self):
        """Initialize default values."""
        if self.members is None:
            self.members = []

    def has_member(self, user_id: int) -> bool:
        return any(member.user_id == user_id for member in self.members)


@dataclass
class TeamList:
    """A team's share of a list, carrying the right granted to the team."""

    team_id: int
    list_id: int
    right: Right = Right.READ
    id: Optional[int] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
