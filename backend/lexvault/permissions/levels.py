"""Document permission levels.

Levels are totally ordered by declaration order:

    NONE < DOWNLOAD < READ < WRITE < ADMIN

Comparison operators compare ranks, never string values, so
``level >= PermissionLevel.WRITE`` is the only way to ask "meets minimum".
"""

from enum import Enum
from typing import List


class PermissionLevel(str, Enum):
    """Access tier a principal holds on a document.

    Values are lowercase for the API; the database stores member names.
    """
    NONE = "none"
    DOWNLOAD = "download"
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def _compare(self, other) -> int:
        # Raise rather than return NotImplemented: str ordering must never apply.
        if not isinstance(other, PermissionLevel):
            raise TypeError(
                f"Cannot order PermissionLevel against {type(other).__name__}; "
                f"convert with PermissionLevel(value) first"
            )
        return self.rank - other.rank

    def __lt__(self, other):
        return self._compare(other) < 0

    def __le__(self, other):
        return self._compare(other) <= 0

    def __gt__(self, other):
        return self._compare(other) > 0

    def __ge__(self, other):
        return self._compare(other) >= 0

    @classmethod
    def at_least(cls, minimum: "PermissionLevel") -> List["PermissionLevel"]:
        """All levels that meet ``minimum``, for building SQL filters."""
        return [level for level in cls if level >= minimum]


_RANKS = {level: index for index, level in enumerate(PermissionLevel)}


def meets_minimum(level: PermissionLevel, minimum: PermissionLevel) -> bool:
    """Check if ``level`` satisfies the required ``minimum``.

    Examples:
        >>> meets_minimum(PermissionLevel.ADMIN, PermissionLevel.WRITE)
        True
        >>> meets_minimum(PermissionLevel.DOWNLOAD, PermissionLevel.READ)
        False
    """
    return level >= minimum


def highest(*levels: PermissionLevel) -> PermissionLevel:
    """Return the highest of the given levels (NONE when empty)."""
    return max(levels, key=lambda level: level.rank, default=PermissionLevel.NONE)
