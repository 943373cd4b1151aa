"""Infrastructure implementations for Tasklist CalDAV server."""

from .repositories import InMemoryRepository
from .encoder import encode_calendar, todo_from_task, PRODUCT_ID
from .decoder import parse_task_from_vtodo

__all__ = [
    'InMemoryRepository',
    'encode_calendar', 'todo_from_task', 'parse_task_from_vtodo', 'PRODUCT_ID'
]
