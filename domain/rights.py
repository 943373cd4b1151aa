"""Access rights for shared lists."""

from enum import IntEnum
from typing import Any

from monitoring.exceptions import InvalidRightError


class Right(IntEnum):
    """Access level a user or team holds on a list.

    Levels are ordered, so ``right >= Right.WRITE`` reads as "may write".
    ``UNKNOWN`` only marks an invalid value and never grants anything.
    """
    UNKNOWN = -1
    READ = 0
    WRITE = 1
    ADMIN = 2

    @property
    def is_valid(self) -> bool:
        return self is not Right.UNKNOWN

    @classmethod
    def parse(cls, value: Any, error_cls=InvalidRightError) -> 'Right':
        """Turn a raw value (int, numeric string, name or Right) into a valid Right."""
        if isinstance(value, cls):
            right = value
        elif isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise error_cls(value)
        elif isinstance(value, str) and value.strip().upper() in cls.__members__:
            right = cls[value.strip().upper()]
        else:
            try:
                right = cls(int(value))
            except (TypeError, ValueError):
                raise error_cls(value)
        if not right.is_valid:
            raise error_cls(value)
        return right
