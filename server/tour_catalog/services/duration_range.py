"""Duration bucket parsing for the tour listing filter."""

import logging
import re
from typing import NamedTuple, Optional

from sqlalchemy.sql.elements import ColumnElement

logger = logging.getLogger(__name__)

# Bounds are capped at nine digits so they fit INTEGER columns
_OPEN_ENDED = re.compile(r"(\d{1,9})\+", re.ASCII)
_CLOSED = re.compile(r"(\d{1,9})-(\d{1,9})", re.ASCII)


class DurationRange(NamedTuple):
    """Interval over duration in days; ``max_days`` of None means unbounded."""

    min_days: int
    max_days: Optional[int] = None

    def criteria(self, column: ColumnElement[int]) -> list[ColumnElement[bool]]:
        """Predicates restricting ``column`` to this interval."""
        clauses = [column >= self.min_days]
        if self.max_days is not None:
            clauses.append(column <= self.max_days)
        return clauses


def parse_duration_range(token: Optional[str]) -> Optional[DurationRange]:
    """
    Parse a duration bucket such as ``"1-3"`` or ``"8+"``.

    Tokens come from a fixed set of UI buckets, so anything that does not
    match either shape yields None (no duration filter) instead of an error.

    Args:
        token: Raw duration token

    Returns:
        DurationRange, or None when the token is absent or malformed
    """
    if not token:
        return None

    token = token.strip()

    match = _OPEN_ENDED.fullmatch(token)
    if match:
        return DurationRange(min_days=int(match.group(1)))

    match = _CLOSED.fullmatch(token)
    if match:
        return DurationRange(min_days=int(match.group(1)), max_days=int(match.group(2)))

    logger.debug("Ignoring unrecognized duration token", extra={"duration": token})
    return None
