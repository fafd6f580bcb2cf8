"""Resolve relative and absolute date/time expressions to concrete future moments.

Both pattern families are ordered tables evaluated top to bottom; the first
entry that matches wins, even when a later entry would be more specific
(``"Friday 20th June"`` resolves through the day+month entry because it is
listed before the weekday entry).

Every resolution starts from the ``now`` snapshot handed in by the caller.
The clock is never read here, so one parse call always sees a single instant.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

_MONTH_NAMES = (
    r"january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec"
)
_MONTH_PREFIXES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
_WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_WEEKDAY_ALT = "|".join(_WEEKDAY_NAMES)

TONIGHT_HOUR = 20
END_OF_DAY_HOUR = 17

# datetime.weekday() numbering
_FRIDAY = 4


@dataclass(frozen=True)
class TimePattern:
    """A time-of-day pattern and the converter to a 24-hour ``(hour, minute)``."""

    name: str
    regex: re.Pattern[str]
    to_clock: Callable[[re.Match[str]], tuple[int, int]]


@dataclass(frozen=True)
class DatePattern:
    """A date pattern and the handler that applies it to the ``now`` snapshot.

    Handlers raise ``ValueError`` when the matched text names a day that does
    not exist (``31 June``); the resolver then moves on to the next entry.
    """

    name: str
    regex: re.Pattern[str]
    resolve: Callable[[re.Match[str], datetime], datetime]
    weekday_based: bool = False
    transcript_only: bool = False


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def _month_number(name: str) -> int:
    return _MONTH_PREFIXES.index(name[:3].lower()) + 1


def _add_years(moment: datetime, years: int) -> datetime:
    """Shift *moment* by whole years; Feb 29 lands on Feb 28 in common years."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def _add_months(moment: datetime, months: int) -> datetime:
    """Shift *moment* by whole months, clamping to the last day of the target month."""
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _next_weekday(moment: datetime, weekday: int) -> datetime:
    """Next strict occurrence of *weekday*; today never counts."""
    days = (weekday - moment.weekday()) % 7 or 7
    return moment + timedelta(days=days)


def _at(moment: datetime, hour: int, minute: int = 0) -> datetime:
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


# ---------------------------------------------------------------------------
# Date handlers
# ---------------------------------------------------------------------------


def _calendar_day(day: int, month: int, now: datetime) -> datetime:
    candidate = now.replace(month=month, day=day)
    if candidate.date() < now.date():
        candidate = _add_years(candidate, 1)
    return candidate


def _day_month(match: re.Match[str], now: datetime) -> datetime:
    return _calendar_day(int(match.group(1)), _month_number(match.group(2)), now)


def _month_day(match: re.Match[str], now: datetime) -> datetime:
    return _calendar_day(int(match.group(2)), _month_number(match.group(1)), now)


def _iso_date(match: re.Match[str], now: datetime) -> datetime:
    year, month, day = (int(g) for g in match.groups())
    return now.replace(year=year, month=month, day=day)


def _relative_day(match: re.Match[str], now: datetime) -> datetime:
    word = match.group(1).lower()
    if word == "tomorrow":
        return now + timedelta(days=1)
    if word == "tonight":
        return _at(now, TONIGHT_HOUR)
    return now


def _next_named_weekday(match: re.Match[str], now: datetime) -> datetime:
    return _next_weekday(now, _WEEKDAY_NAMES.index(match.group(1).lower()))


def _next_period(match: re.Match[str], now: datetime) -> datetime:
    # "next week" and "next month" both mean one week out
    return now + timedelta(days=7)


def _in_offset(match: re.Match[str], now: datetime) -> datetime:
    amount = int(match.group(1))
    unit = match.group(2).lower()
    if unit == "day":
        return now + timedelta(days=amount)
    if unit == "week":
        return now + timedelta(weeks=amount)
    return _add_months(now, amount)


def _end_of_week(match: re.Match[str], now: datetime) -> datetime:
    days = (_FRIDAY - now.weekday()) % 7
    return _at(now + timedelta(days=days), END_OF_DAY_HOUR)


def _end_of_month(match: re.Match[str], now: datetime) -> datetime:
    last_day = calendar.monthrange(now.year, now.month)[1]
    candidate = _at(now.replace(day=last_day), END_OF_DAY_HOUR)
    if candidate < now:
        following = _add_months(now.replace(day=1), 1)
        last_day = calendar.monthrange(following.year, following.month)[1]
        candidate = _at(following.replace(day=last_day), END_OF_DAY_HOUR)
    return candidate


# ---------------------------------------------------------------------------
# Pattern tables (order matters: first match wins)
# ---------------------------------------------------------------------------

TIME_PATTERNS: tuple[TimePattern, ...] = (
    TimePattern(
        name="twelve_hour",
        regex=re.compile(r"\b(1[0-2]|0?[1-9])(?::?([0-5]\d))?\s*(am|pm)\b", re.IGNORECASE),
        to_clock=lambda m: (
            int(m.group(1)) % 12 + (12 if m.group(3).lower() == "pm" else 0),
            int(m.group(2) or 0),
        ),
    ),
    TimePattern(
        name="twenty_four_hour",
        regex=re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b"),
        to_clock=lambda m: (int(m.group(1)), int(m.group(2))),
    ),
)

DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern(
        name="day_month",
        regex=re.compile(rf"(?<![:\d])\b(\d{{1,2}})(?:st|nd|rd|th)?\s+({_MONTH_NAMES})\b", re.IGNORECASE),
        resolve=_day_month,
    ),
    DatePattern(
        name="month_day",
        regex=re.compile(rf"\b({_MONTH_NAMES})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b(?!:\d)", re.IGNORECASE),
        resolve=_month_day,
    ),
    DatePattern(
        name="iso_date",
        regex=re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"),
        resolve=_iso_date,
    ),
    DatePattern(
        name="relative_day",
        regex=re.compile(r"\b(today|tomorrow|tonight)\b", re.IGNORECASE),
        resolve=_relative_day,
    ),
    DatePattern(
        name="next_weekday",
        regex=re.compile(rf"\bnext\s+({_WEEKDAY_ALT})\b", re.IGNORECASE),
        resolve=_next_named_weekday,
        weekday_based=True,
    ),
    DatePattern(
        name="next_period",
        regex=re.compile(r"\bnext\s+(week|month)\b", re.IGNORECASE),
        resolve=_next_period,
    ),
    DatePattern(
        name="in_offset",
        regex=re.compile(r"\bin\s+(\d+)\s+(day|week|month)s?\b", re.IGNORECASE),
        resolve=_in_offset,
    ),
    DatePattern(
        name="weekday",
        regex=re.compile(rf"\b({_WEEKDAY_ALT})\b", re.IGNORECASE),
        resolve=_next_named_weekday,
        weekday_based=True,
    ),
    DatePattern(
        name="end_of_week",
        regex=re.compile(r"\b(?:end\s+of|by)\s+(?:the\s+)?week\b", re.IGNORECASE),
        resolve=_end_of_week,
        weekday_based=True,
        transcript_only=True,
    ),
    DatePattern(
        name="end_of_month",
        regex=re.compile(r"\b(?:end\s+of|by)\s+(?:the\s+)?month\b", re.IGNORECASE),
        resolve=_end_of_month,
        transcript_only=True,
    ),
)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _first_time(text: str) -> tuple[re.Match[str], tuple[int, int]] | None:
    for pattern in TIME_PATTERNS:
        match = pattern.regex.search(text)
        if match:
            return match, pattern.to_clock(match)
    return None


def _first_date(
    text: str, start: datetime, transcript: bool
) -> tuple[DatePattern, re.Match[str], datetime] | None:
    for pattern in DATE_PATTERNS:
        if pattern.transcript_only and not transcript:
            continue
        match = pattern.regex.search(text)
        if match is None:
            continue
        try:
            return pattern, match, pattern.resolve(match, start)
        except (ValueError, OverflowError):
            # Impossible calendar day or out-of-range offset: not a date after all
            continue
    return None


def ensure_not_past(moment: datetime, now: datetime, weekday_based: bool = False) -> datetime:
    """Push *moment* forward until it is no earlier than *now*.

    Weekday-based moments move a week at a time, everything else a year at a time.
    """
    if moment >= now:
        return moment
    if weekday_based:
        weeks = -((moment - now) // timedelta(weeks=1))
        moment = moment + timedelta(weeks=weeks)
    else:
        moment = _add_years(moment, max(now.year - moment.year, 1))
        if moment < now:
            moment = _add_years(moment, 1)
    return moment


def _remove_spans(text: str, spans: list[tuple[int, int]]) -> str:
    merged: list[tuple[int, int]] = []
    for begin, end in sorted(spans):
        if merged and begin <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(end, merged[-1][1]))
        else:
            merged.append((begin, end))
    for begin, end in reversed(merged):
        text = text[:begin] + text[end:]
    return text


def resolve_datetime(
    text: str, now: datetime, *, transcript: bool = False
) -> tuple[datetime | None, str]:
    """Find a date and/or time expression in *text* and resolve it against *now*.

    Args:
        text: Free-form text that may contain date and time tokens.
        now: The snapshot every relative expression is measured from.
        transcript: Also accept the meeting-only forms (``end of week``,
            ``end of month``, ``by week``, ``by month``).

    Returns:
        ``(due, remaining_text)``. ``due`` is ``None`` when neither family
        matches, in which case the text is returned unchanged. A returned
        ``due`` is never earlier than *now* and has no sub-second part.
    """
    # Round up so that "today" can never land a fraction of a second before now
    start = now.replace(microsecond=0)
    if start < now:
        start += timedelta(seconds=1)

    time_hit = _first_time(text)
    date_hit = _first_date(text, start, transcript)
    if time_hit is None and date_hit is None:
        return None, text

    due = start
    weekday_based = False
    spans: list[tuple[int, int]] = []

    if date_hit is not None:
        pattern, match, due = date_hit
        weekday_based = pattern.weekday_based
        spans.append(match.span())

    if time_hit is not None:
        match, (hour, minute) = time_hit
        due = _at(due, hour, minute)
        spans.append(match.span())

    due = ensure_not_past(due, now, weekday_based)
    return due, _remove_spans(text, spans)
