"""Mapping of task attributes onto iCalendar properties."""

from typing import Any, Iterable, List, Optional

from domain import Label

# Internal priority (0 unset, 1 low .. 5 do-now) to iCalendar PRIORITY (1 highest .. 9 lowest).
PRIORITY_TO_CALDAV = {
    1: 9,
    2: 5,
    3: 3,
    4: 2,
    5: 1,
}

# Every iCalendar PRIORITY value, each mapped to the nearest point of the table
# above. Ties (4 and 7) go to the more urgent point.
PRIORITY_FROM_CALDAV = {
    0: 0,
    1: 5,
    2: 4,
    3: 3,
    4: 3,
    5: 2,
    6: 2,
    7: 2,
    8: 1,
    9: 1,
}

MIN_PRIORITY, MAX_PRIORITY = 0, 5
MIN_CALDAV_PRIORITY, MAX_CALDAV_PRIORITY = 0, 9


def priority_to_caldav(priority: int) -> Optional[int]:
    """Map an internal priority to PRIORITY, or None when the field should be left out."""
    priority = max(MIN_PRIORITY, min(MAX_PRIORITY, int(priority or 0)))
    return PRIORITY_TO_CALDAV.get(priority)


def priority_from_caldav(value: Any) -> int:
    """Map a PRIORITY value back to the internal scale; junk and absence both give 0."""
    if value is None:
        return 0
    if isinstance(value, list):
        value = value[0] if value else None
    try:
        value = int(value)
    except (TypeError, ValueError):
        return 0
    value = max(MIN_CALDAV_PRIORITY, min(MAX_CALDAV_PRIORITY, value))
    return PRIORITY_FROM_CALDAV[value]


def labels_to_categories(labels: Iterable[Label]) -> List[str]:
    return [label.title for label in labels]


def labels_from_categories(prop: Any) -> List[Label]:
    """Build title-only labels from one or more CATEGORIES properties, keeping order and duplicates."""
    if prop is None:
        return []
    props = prop if isinstance(prop, list) else [prop]

    labels = []
    for item in props:
        cats = getattr(item, 'cats', None)
        titles = [str(c) for c in cats] if cats is not None else str(item).split(',')
        labels.extend(Label(title=title.strip()) for title in titles if title.strip())
    return labels


def text_value(prop: Any) -> str:
    """Plain string of a text property; the first one wins if it was repeated."""
    if prop is None:
        return ''
    if isinstance(prop, list):
        prop = prop[0] if prop else ''
    return str(prop)
