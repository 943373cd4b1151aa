"""Rendering of tasks as an iCalendar document of VTODO components."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from icalendar import Calendar, Todo
from icalendar.prop import vCategory, vDatetime, vDuration

from domain import Project, Task
from .fields import labels_to_categories, priority_to_caldav
from .timecodec import to_caldav_rrule, to_caldav_time

logger = logging.getLogger(__name__)

PRODUCT_ID = '-//Tasklist CalDAV Server//tasklist_caldav//EN'
PUBLISHED_TTL = timedelta(hours=4)


def encode_calendar(project: Project, tasks: Iterable[Task], product_id: Optional[str] = None) -> str:
    """Render ``tasks`` as one calendar named after ``project``.

    Properties are written in insertion order, so the order of the ``add``
    calls below is part of the output format.
    """
    cal = Calendar()
    cal.add('version', '2.0')
    cal.add('method', 'PUBLISH')
    cal.add('x-published-ttl', vDuration(PUBLISHED_TTL))
    cal.add('x-wr-calname', project.title)
    cal.add('prodid', product_id or PRODUCT_ID)

    count = 0
    for task in tasks:
        cal.add_component(todo_from_task(task))
        count += 1

    logger.debug(f"Encoded {count} tasks for list '{project.title}'")
    return cal.to_ical(sorted=False).decode('utf-8')


def todo_from_task(task: Task) -> Todo:
    """Create a VTODO component from a task."""
    todo = Todo()
    updated = to_caldav_time(task.updated)

    todo.add('uid', task.uid)
    _add_time(todo, 'dtstamp', updated)
    todo.add('summary', task.title)
    _add_time(todo, 'dtstart', to_caldav_time(task.start_date))
    _add_time(todo, 'dtend', to_caldav_time(task.end_date))

    if task.description:
        todo.add('description', task.description)

    done_at = to_caldav_time(task.done_at)
    if done_at:
        _add_time(todo, 'completed', done_at)
        todo.add('status', 'COMPLETED')

    _add_time(todo, 'due', to_caldav_time(task.due_date))
    _add_time(todo, 'created', to_caldav_time(task.created))

    priority = priority_to_caldav(task.priority)
    if priority:
        todo.add('priority', priority)

    rrule = to_caldav_rrule(task.repeat_after)
    if rrule:
        todo.add('rrule', rrule)

    if task.labels:
        todo.add('categories', vCategory(labels_to_categories(task.labels)))

    _add_time(todo, 'last-modified', updated)
    return todo


def _add_time(todo: Todo, name: str, value: Optional[datetime]) -> None:
    # value is already UTC; wrapping it keeps icalendar from adding a TZID parameter
    if value is not None:
        todo.add(name, vDatetime(value))
