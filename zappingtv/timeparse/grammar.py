"""
Natural-language date grammars.

A grammar turns free text into ranked date candidates relative to a
reference instant. The resolver only depends on the ``TimeGrammar``
protocol, so grammars can be swapped or chained.

The default chain is a deterministic rule-based English grammar for the
relative phrases people type when catching up on TV ("2 hours ago",
"last friday at 9am"), backed by ``dateparser`` for absolute dates.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, Sequence

from dateparser.search import search_dates
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateCandidate:
    """
    One interpretation of (part of) an expression.

    Attributes:
        text: The matched span of the input
        start: Offset of the span in the input
        instant: The calendar instant, or None when the span matched but
            no usable date could be built from it
    """

    text: str
    start: int
    instant: Optional[datetime]


class TimeGrammar(Protocol):
    """Turns text into candidates ordered by descending confidence."""

    def parse(self, text: str, reference: datetime) -> list[DateCandidate]:
        ...


# ============ Rule-based English grammar ============

_NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11,
    "twelve": 12,
}

_UNITS = {
    "sec": "seconds", "second": "seconds",
    "min": "minutes", "minute": "minutes",
    "hr": "hours", "hour": "hours",
    "day": "days",
    "wk": "weeks", "week": "weeks",
    "month": "months",
    "yr": "years", "year": "years",
}

_WEEKDAYS = {
    "mon": 0, "monday": 0,
    "tue": 1, "tues": 1, "tuesday": 1,
    "wed": 2, "wednesday": 2,
    "thu": 3, "thur": 3, "thurs": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}

# Default clock time for a part of the day: (hour, minute)
_PART_OF_DAY = {
    "morning": (6, 0),
    "afternoon": (15, 0),
    "evening": (20, 0),
    "night": (22, 0),
}

_QTY = r"(?P<qty>\d+|an?|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve)"
_UNIT = r"(?P<unit>secs?|seconds?|mins?|minutes?|hrs?|hours?|days?|wks?|weeks?|months?|yrs?|years?)"
_WEEKDAY = (
    r"(?P<weekday>monday|mon|tuesday|tues|tue|wednesday|wed|thursday|thurs|thur|thu"
    r"|friday|fri|saturday|sat|sunday|sun)"
)
_PART = r"(?P<part>morning|afternoon|evening|night)"
_MERIDIEM = r"(?P<meridiem>[ap]\.?m\.?)"

# Clock time: "noon", "3pm", "3:05 pm", "15:30", and a bare "3" after "at"
_TIME = (
    r"(?P<named>noon|midnight)"
    r"|(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*" + _MERIDIEM + r"?"
)
# A clock time that stands on its own needs a colon, a meridiem or a name
_STRICT_TIME = (
    r"(?P<named>noon|midnight)"
    r"|(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))\s*" + _MERIDIEM + r"?"
    r"|(?P<hour2>\d{1,2})\s*(?P<meridiem2>[ap]\.?m\.?)"
)
_AT_TIME = r"(?:\s*,?\s+(?:at\s+)?(?:" + _TIME + r"))?"


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(r"\b(?:" + pattern + r")(?![\w:])", re.IGNORECASE)


def _clock(match: re.Match[str], part: Optional[str] = None) -> Optional[tuple[int, int]]:
    """
    Extract (hour, minute) from the time groups of a match.

    Returns None when the match has no time, or when the time is not a
    valid clock reading.
    """
    groups = match.groupdict()
    named = groups.get("named")
    if named:
        return (12, 0) if named.lower() == "noon" else (0, 0)

    hour_text = groups.get("hour") or groups.get("hour2")
    if hour_text is None:
        return None

    hour = int(hour_text)
    minute = int(groups.get("minute") or 0)
    meridiem = (groups.get("meridiem") or groups.get("meridiem2") or "").replace(".", "").lower()

    if minute > 59:
        raise ValueError(f"invalid minute {minute}")
    if meridiem:
        if not 1 <= hour <= 12:
            raise ValueError(f"invalid hour {hour}{meridiem}")
        if meridiem == "pm" and hour != 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    else:
        if hour > 23:
            raise ValueError(f"invalid hour {hour}")
        # "this evening at 8" means 20:00
        if part in ("afternoon", "evening", "night") and hour < 12:
            hour += 12
    return hour, minute


def _at(base: datetime, clock: tuple[int, int]) -> datetime:
    return base.replace(hour=clock[0], minute=clock[1], second=0, microsecond=0)


def _quantity(text: str) -> int:
    text = text.lower()
    if text.isdigit():
        return int(text)
    return _NUMBER_WORDS[text]


def _offset(qty: int, unit_text: str) -> relativedelta:
    unit_text = unit_text.lower()
    if unit_text.endswith("s") and unit_text not in _UNITS:
        unit_text = unit_text[:-1]
    return relativedelta(**{_UNITS[unit_text]: qty})


def _ago(match: re.Match[str], reference: datetime) -> datetime:
    if match.group("half"):
        instant = reference - timedelta(minutes=30)
    else:
        instant = reference - _offset(_quantity(match.group("qty")), match.group("unit"))
    clock = _clock(match)
    return _at(instant, clock) if clock else instant


def _ahead(match: re.Match[str], reference: datetime) -> datetime:
    return reference + _offset(_quantity(match.group("qty")), match.group("unit"))


def _casual_day(match: re.Match[str], reference: datetime) -> datetime:
    day = " ".join(match.group("day").lower().split())
    part = match.group("part")
    part = part.lower() if part else None

    if day in ("yesterday", "last night"):
        base = reference - timedelta(days=1)
    elif day == "tomorrow":
        base = reference + timedelta(days=1)
    else:
        base = reference

    if day in ("tonight", "last night"):
        part = "night"
    elif day.startswith("this "):
        part = day.split()[1]

    clock = _clock(match, part)
    if clock:
        return _at(base, clock)
    if part:
        return _at(base, _PART_OF_DAY[part])
    return base


def _weekday(match: re.Match[str], reference: datetime) -> datetime:
    modifier = (match.group("modifier") or "").lower()
    target = _WEEKDAYS[match.group("weekday").lower()]
    today = reference.weekday()

    if modifier == "next":
        days = (target - today) % 7 or 7
        base = reference + timedelta(days=days)
    elif modifier in ("last", "past"):
        days = (today - target) % 7 or 7
        base = reference - timedelta(days=days)
    else:
        base = reference - timedelta(days=(today - target) % 7)

    part = match.group("part")
    part = part.lower() if part else None
    clock = _clock(match, part)
    if clock:
        return _at(base, clock)
    if part:
        return _at(base, _PART_OF_DAY[part])
    return _at(base, (12, 0))


def _period(match: re.Match[str], reference: datetime) -> datetime:
    modifier = match.group("modifier").lower()
    step = {"last": -1, "this": 0, "next": 1}[modifier]
    return reference + _offset(step, match.group("period"))


def _clock_today(match: re.Match[str], reference: datetime) -> datetime:
    return _at(reference, _clock(match))


def _now(match: re.Match[str], reference: datetime) -> datetime:
    return reference


_Rule = tuple[re.Pattern[str], Callable[[re.Match[str], datetime], datetime]]

_RULES: list[_Rule] = [
    (
        _compile(
            r"(?:" + _QTY + r"\s+" + _UNIT + r"|(?P<half>half\s+an?\s+hour))\s+ago" + _AT_TIME
        ),
        _ago,
    ),
    (_compile(r"in\s+" + _QTY + r"\s+" + _UNIT), _ahead),
    (_compile(_QTY + r"\s+" + _UNIT + r"\s+from\s+now"), _ahead),
    (
        _compile(
            r"(?P<day>today|tonight|tomorrow|last\s+night|this\s+(?:morning|afternoon|evening)"
            r"|yesterday)(?:\s+" + _PART + r")?" + _AT_TIME
        ),
        _casual_day,
    ),
    (
        _compile(
            r"(?:(?P<modifier>last|past|this|next)\s+)?" + _WEEKDAY
            + r"(?:\s+" + _PART + r")?" + _AT_TIME
        ),
        _weekday,
    ),
    (_compile(r"(?P<modifier>last|this|next)\s+(?P<period>week|month|year)"), _period),
    (_compile(r"(?:at\s+)?(?:" + _STRICT_TIME + r")"), _clock_today),
    (_compile(r"(?:right\s+|just\s+)?now"), _now),
]


class RelativeGrammar:
    """
    Deterministic rule-based grammar for English relative expressions.

    Every rule is searched across the whole text. Matches are ranked by
    span length (longest first), then by position; a match overlapping a
    better one is dropped.
    """

    def __init__(self, rules: Optional[Sequence[_Rule]] = None):
        self.rules = list(rules if rules is not None else _RULES)

    def parse(self, text: str, reference: datetime) -> list[DateCandidate]:
        matches: list[tuple[re.Match[str], Callable[[re.Match[str], datetime], datetime]]] = []
        for pattern, build in self.rules:
            for match in pattern.finditer(text):
                matches.append((match, build))

        matches.sort(key=lambda item: (-(item[0].end() - item[0].start()), item[0].start()))

        candidates: list[DateCandidate] = []
        taken: list[tuple[int, int]] = []
        for match, build in matches:
            start, end = match.span()
            if any(start < t_end and t_start < end for t_start, t_end in taken):
                continue
            taken.append((start, end))
            try:
                instant: Optional[datetime] = build(match, reference)
            except (ValueError, OverflowError) as e:
                logger.debug(f"Unusable date in '{match.group(0)}': {e}")
                instant = None
            candidates.append(DateCandidate(text=match.group(0), start=start, instant=instant))

        return candidates


# ============ dateparser-backed grammar ============


class DateparserGrammar:
    """
    Grammar backed by ``dateparser.search.search_dates``.

    Handles absolute dates ("June 1 at 8pm", "2024-05-30 21:00") and the
    many phrasings the rule-based grammar does not know. Results keep the
    order dateparser reports them in.
    """

    def __init__(self, languages: Optional[list[str]] = None, settings: Optional[dict] = None):
        self.languages = languages or ["en"]
        self.settings = settings or {}

    def parse(self, text: str, reference: datetime) -> list[DateCandidate]:
        settings = {
            "PREFER_DATES_FROM": "past",
            "RETURN_AS_TIMEZONE_AWARE": False,
            **self.settings,
            # dateparser works on naive wall-clock time
            "RELATIVE_BASE": reference.replace(tzinfo=None),
        }
        hits = search_dates(text, languages=self.languages, settings=settings)
        if not hits:
            return []

        candidates = []
        offset = 0
        for matched, instant in hits:
            start = text.find(matched, offset)
            if start >= 0:
                offset = start + len(matched)
            if instant is not None and instant.tzinfo is None and reference.tzinfo is not None:
                instant = instant.replace(tzinfo=reference.tzinfo)
            candidates.append(DateCandidate(text=matched, start=max(start, 0), instant=instant))
        return candidates


# ============ Composition ============


class CompositeGrammar:
    """
    Chains grammars in priority order.

    The first grammar whose best candidate spans the whole text wins
    outright and later grammars are not consulted. Otherwise candidates of
    all grammars are pooled and ranked by span length; on equal length the
    earlier grammar comes first.
    """

    def __init__(self, grammars: Sequence[TimeGrammar]):
        self.grammars = list(grammars)

    def parse(self, text: str, reference: datetime) -> list[DateCandidate]:
        pooled: list[DateCandidate] = []
        for grammar in self.grammars:
            candidates = grammar.parse(text, reference)
            if candidates and _spans_all(candidates[0], text):
                return candidates
            pooled.extend(candidates)
        return sorted(pooled, key=lambda candidate: -len(candidate.text.strip()))


def _spans_all(candidate: DateCandidate, text: str) -> bool:
    return candidate.text.strip().lower() == text.strip().lower()


_default_grammar: Optional[CompositeGrammar] = None


def default_grammar() -> CompositeGrammar:
    """Shared stateless grammar: rules first, dateparser as fallback."""
    global _default_grammar
    if _default_grammar is None:
        _default_grammar = CompositeGrammar([RelativeGrammar(), DateparserGrammar()])
    return _default_grammar
