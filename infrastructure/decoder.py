"""Parsing of client-submitted VTODO text into tasks."""

import logging
from datetime import tzinfo
from typing import List, Tuple

from icalendar import Calendar, Todo
from icalendar.parser import Contentlines

from domain import Task
from monitoring.exceptions import VTodoParseError
from .fields import labels_from_categories, priority_from_caldav, text_value
from .timecodec import from_caldav_rrule, from_caldav_time

logger = logging.getLogger(__name__)


def parse_task_from_vtodo(content: str, tz: tzinfo) -> Task:
    """Build a transient task from the first VTODO block in ``content``.

    The VCALENDAR envelope around the block is optional. Zone-less
    timestamps are read in ``tz`` and every timestamp is returned in ``tz``.
    A property whose value cannot be read is left out of the task, so the
    matching attribute keeps its zero value.

    Raises:
        VTodoParseError: when there is no complete BEGIN/END:VTODO block
            or the text is not calendar data at all.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise VTodoParseError(f"Calendar data is not valid UTF-8: {e}", cause=e)
    _check_block_delimiters(content)

    components, errors = _parse_components(content)

    todos = [todo for component in components for todo in component.walk('VTODO')]
    if not todos:
        raise VTodoParseError("No VTODO block found")
    if len(todos) > 1:
        logger.debug(f"Found {len(todos)} VTODO blocks, only the first is used")
    vtodo = todos[0]

    updated = from_caldav_time(vtodo.get('dtstamp'), tz)
    if updated is None:
        updated = from_caldav_time(vtodo.get('last-modified'), tz)

    done_at = from_caldav_time(vtodo.get('completed'), tz)
    status = text_value(vtodo.get('status')).upper()

    task = Task(
        uid=text_value(vtodo.get('uid')),
        title=text_value(vtodo.get('summary')),
        description=text_value(vtodo.get('description')),
        updated=updated,
        created=from_caldav_time(vtodo.get('created'), tz),
        start_date=from_caldav_time(vtodo.get('dtstart'), tz),
        end_date=from_caldav_time(vtodo.get('dtend'), tz),
        due_date=from_caldav_time(vtodo.get('due'), tz),
        done=status == 'COMPLETED',
        done_at=done_at,
        priority=priority_from_caldav(vtodo.get('priority')),
        repeat_after=from_caldav_rrule(vtodo.get('rrule')),
        labels=labels_from_categories(vtodo.get('categories')),
    )

    errors.extend(getattr(vtodo, 'errors', None) or [])
    if errors:
        logger.debug(f"Ignored malformed properties in VTODO {task.uid}: {errors}")
    return task


def _parse_components(content: str) -> Tuple[list, List[Tuple[str, str]]]:
    try:
        return Calendar.from_ical(content, multiple=True), []
    except (ValueError, TypeError) as e:
        logger.debug(f"Retrying without malformed VTODO properties: {e}")

    lines, errors = _drop_malformed_properties(content)
    try:
        return Calendar.from_ical('\r\n'.join(lines) + '\r\n', multiple=True), errors
    except (ValueError, TypeError) as e:
        raise VTodoParseError(f"Invalid calendar data: {e}", cause=e)


def _drop_malformed_properties(content: str) -> Tuple[List[str], List[Tuple[str, str]]]:
    """Unfold ``content`` and leave out the VTODO property lines icalendar rejects."""
    try:
        content_lines = Contentlines.from_ical(content)
    except ValueError as e:
        raise VTodoParseError(f"Invalid calendar data: {e}", cause=e)

    kept, errors = [], []
    depth = 0
    for line in content_lines:
        if not line:
            continue
        marker = line.strip().upper()
        if marker.startswith('BEGIN:'):
            if depth or marker == 'BEGIN:VTODO':
                depth += 1
        elif marker.startswith('END:'):
            if depth:
                depth -= 1
        elif depth:
            try:
                Todo.from_ical(f'BEGIN:VTODO\r\n{line}\r\nEND:VTODO\r\n')
            except (ValueError, TypeError) as e:
                errors.append((line.split(':', 1)[0], str(e)))
                continue
        kept.append(line)
    return kept, errors


def _check_block_delimiters(content: str) -> None:
    inside = False
    for line in content.splitlines():
        line = line.strip().upper()
        if line == 'BEGIN:VTODO':
            if inside:
                raise VTodoParseError("Nested BEGIN:VTODO")
            inside = True
        elif line == 'END:VTODO':
            if not inside:
                raise VTodoParseError("END:VTODO without BEGIN:VTODO")
            return
    if inside:
        raise VTodoParseError("Missing END:VTODO")
    raise VTodoParseError("Missing BEGIN:VTODO")
