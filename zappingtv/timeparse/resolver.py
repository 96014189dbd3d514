"""
Time expression resolver.

Turns expressions like "2 hours ago" or "last friday at 9am" into a past
UNIX timestamp for catch-up playback, together with a short description
of how long ago that is.

Only past instants are resolved. A candidate that lands in the future is
given one rescue: the same clock time one calendar day earlier. If that is
still in the future the expression is rejected.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from dateutil import tz

from zappingtv.timeparse.grammar import TimeGrammar, default_grammar

logger = logging.getLogger(__name__)

EXAMPLES = (
    "2 hours ago",
    "30 minutes ago",
    "1 day ago",
    "yesterday at 3pm",
    "yesterday 15:30",
    "last friday at 9am",
    "tuesday at noon",
    "3 days ago at 2pm",
    "this morning at 8am",
    "last night at 10pm",
)


@dataclass(frozen=True)
class ParsedTime:
    """
    A resolved catch-up start.

    Attributes:
        timestamp: Whole UNIX seconds of ``resolved_instant`` (truncated)
        description: Human-readable summary, e.g. "2 hours ago"
        resolved_instant: The instant the expression resolved to
    """

    timestamp: int
    description: str
    resolved_instant: datetime


def local_now() -> datetime:
    """Current time in the local zone.

    The zone follows daylight saving changes, so wall-clock arithmetic on the
    result (e.g. "yesterday at 3pm") picks up the offset of the target date.
    """
    return datetime.now(tz=tz.tzlocal())


def _align(instant: datetime, now: datetime) -> datetime:
    """Make ``instant`` comparable with ``now`` (both naive or both aware)."""
    if now.tzinfo is not None and instant.tzinfo is None:
        return instant.replace(tzinfo=now.tzinfo)
    if now.tzinfo is None and instant.tzinfo is not None:
        return instant.astimezone().replace(tzinfo=None)
    return instant


def _to_timestamp(instant: datetime) -> int:
    return math.floor(instant.timestamp())


def resolve(
    expression: str,
    now: Optional[datetime] = None,
    grammar: Optional[TimeGrammar] = None,
) -> Optional[ParsedTime]:
    """
    Resolve a natural-language time expression to a past instant.

    Args:
        expression: Free text such as "yesterday at 3pm"
        now: Reference instant; defaults to the current local time
        grammar: Grammar to parse with; defaults to ``default_grammar()``

    Returns:
        ParsedTime, or None when the expression is empty, cannot be parsed,
        or names a future instant the one-day rescue cannot bring into the
        past.
    """
    text = expression.strip() if expression else ""
    if not text:
        return None

    if now is None:
        now = local_now()
    if grammar is None:
        grammar = default_grammar()

    candidates = grammar.parse(text, now)
    if not candidates:
        logger.debug(f"No date found in '{text}'")
        return None

    best = candidates[0]
    if best.instant is None:
        logger.debug(f"Matched '{best.text}' in '{text}' but it has no usable date")
        return None

    instant = _align(best.instant, now)

    if instant.timestamp() > now.timestamp():
        # "friday at 9am" may have been read as the upcoming friday
        day_before = instant - timedelta(days=1)
        if day_before.timestamp() > now.timestamp():
            logger.debug(f"'{text}' resolves to the future ({instant.isoformat()}), rejecting")
            return None
        instant = day_before

    return ParsedTime(
        timestamp=_to_timestamp(instant),
        description=describe(instant, expression, now),
        resolved_instant=instant,
    )


def is_resolvable(expression: str) -> bool:
    """True if ``expression`` resolves against the current time."""
    return resolve(expression) is not None


def current_timestamp(now: Optional[datetime] = None) -> int:
    """Current time (or ``now``) as whole UNIX seconds."""
    return _to_timestamp(now if now is not None else local_now())


def describe(instant: datetime, expression: str, now: datetime) -> str:
    """
    Describe how far ``instant`` lies before ``now``.

    Under a week the description is relative ("5 minutes ago",
    "yesterday at 3:00 PM"). Older instants echo the user's own wording
    followed by the calendar date.
    """
    # elapsed time, not wall-clock difference, across offset changes
    delta_seconds = now.timestamp() - instant.timestamp()
    delta_minutes = math.floor(delta_seconds / 60)
    delta_hours = math.floor(delta_minutes / 60)
    delta_days = math.floor(delta_hours / 24)

    if delta_minutes < 60:
        return f"{delta_minutes} minute{'' if delta_minutes == 1 else 's'} ago"
    if delta_hours < 24:
        return f"{delta_hours} hour{'' if delta_hours == 1 else 's'} ago"
    if delta_days < 7:
        if delta_days == 1:
            return f"yesterday at {format_time(instant)}"
        return f"{delta_days} days ago at {format_time(instant)}"
    return f"{expression} ({format_date(instant)})"


def format_time(instant: datetime) -> str:
    """12-hour clock time, e.g. "3:05 PM"."""
    hour = instant.hour % 12 or 12
    meridiem = "AM" if instant.hour < 12 else "PM"
    return f"{hour}:{instant.minute:02d} {meridiem}"


def format_date(instant: datetime) -> str:
    """Short weekday, month, day and time, e.g. "Tue, Jan 5, 3:05 PM"."""
    return f"{instant:%a, %b} {instant.day}, {format_time(instant)}"


def format_timestamp(timestamp: int) -> str:
    """Local date and time of a UNIX timestamp, e.g. "Sat, Jun 15 2024, 12:00 PM"."""
    instant = datetime.fromtimestamp(timestamp)
    return f"{instant:%a, %b} {instant.day} {instant.year}, {format_time(instant)}"


def get_examples() -> list[str]:
    """Example expressions for help output."""
    return list(EXAMPLES)
