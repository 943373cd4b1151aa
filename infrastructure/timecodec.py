"""Date-time and recurrence conversion between tasks and iCalendar.

Timestamps always leave the server as UTC (``YYYYMMDDTHHMMSSZ``). Incoming
timestamps without a zone marker are read in the server's configured zone,
not in UTC.
"""

import logging
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

RECUR_FREQUENCY = 'SECONDLY'
_SUPPORTED_RECUR_PARTS = {'FREQ', 'INTERVAL'}


def is_zero_time(value: Optional[datetime]) -> bool:
    """True for values that mean "no timestamp": None, the epoch, or year 1."""
    if value is None:
        return True
    if value.year <= 1:
        return True
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() == 0


def to_caldav_time(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a task timestamp for output: UTC, whole seconds, None if unset.

    Naive values are taken to be UTC already.
    """
    if is_zero_time(value):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def from_caldav_time(prop: Any, tz: tzinfo) -> Optional[datetime]:
    """Turn a parsed iCalendar date/date-time property into an aware datetime in ``tz``.

    Returns None for missing values, values icalendar could not type,
    and the zero-time sentinel some clients send (``00010101T000000``).
    """
    if prop is None:
        return None
    if isinstance(prop, list):
        if not prop:
            return None
        prop = prop[0]
    value = getattr(prop, 'dt', prop)

    if isinstance(value, datetime):
        if value.year <= 1:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    if isinstance(value, date):
        if value.year <= 1:
            return None
        return datetime.combine(value, time(), tzinfo=tz)

    logger.debug(f"Ignoring untyped date value {value!r}")
    return None


def to_caldav_rrule(repeat_after: int) -> Optional[Dict[str, Any]]:
    """Express a repeat interval in seconds as an RRULE value, or None if it does not repeat."""
    if not repeat_after or repeat_after <= 0:
        return None
    return {'FREQ': RECUR_FREQUENCY, 'INTERVAL': int(repeat_after)}


def from_caldav_rrule(rrule: Any) -> int:
    """Read a repeat interval in seconds back out of a parsed RRULE.

    Only ``FREQ=SECONDLY`` with an optional ``INTERVAL`` is understood.
    Every other rule shape yields 0 instead of an approximation.
    """
    if rrule is None:
        return 0
    if isinstance(rrule, list):
        if len(rrule) != 1:
            logger.debug(f"Ignoring {len(rrule)} recurrence rules")
            return 0
        rrule = rrule[0]
    if not hasattr(rrule, 'items'):
        logger.debug(f"Ignoring unparsed recurrence rule {rrule!r}")
        return 0

    parts = {str(key).upper(): value for key, value in rrule.items()}
    unsupported = set(parts) - _SUPPORTED_RECUR_PARTS
    frequency = _single(parts.get('FREQ'))
    if unsupported or str(frequency).upper() != RECUR_FREQUENCY:
        logger.debug(f"Ignoring unsupported recurrence rule {parts}")
        return 0

    interval = _single(parts.get('INTERVAL', 1))
    try:
        interval = int(interval)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring recurrence rule with interval {interval!r}")
        return 0
    return interval if interval > 0 else 0


def _single(value: Any) -> Any:
    # vRecur stores every part as a list
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value
