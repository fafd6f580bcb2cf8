"""Tests for the single-task parsing engine (priority, date/time, assignee, parser)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from nltasks.parsing.assignee import extract_assignee
from nltasks.parsing.datetime_resolver import (
    DATE_PATTERNS,
    TIME_PATTERNS,
    ensure_not_past,
    resolve_datetime,
)
from nltasks.parsing.models import ParsedTask, Priority
from nltasks.parsing.priority import extract_priority
from nltasks.parsing.task_parser import clean_task_name, parse_task

# Monday
NOW = datetime(2024, 6, 10, 9, 0, 0)


def _squash(text: str) -> str:
    return " ".join(text.split())


# ---------------------------------------------------------------------------
# Priority extraction
# ---------------------------------------------------------------------------


class TestExtractPriority:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Call client P1", Priority.P1),
            ("p2 update the docs", Priority.P2),
            ("Ship release P3 today", Priority.P3),
            ("cleanup backlog (P4)", Priority.P4),
        ],
    )
    def test_explicit_tag(self, text: str, expected: Priority) -> None:
        """P1 to P4 are read in either case, even inside parentheses."""
        priority, _ = extract_priority(text)
        assert priority is expected

    def test_default_is_p3_and_text_unchanged(self) -> None:
        """Without a tag the priority is P3 and nothing is removed."""
        priority, remaining = extract_priority("Write the quarterly report")
        assert priority is Priority.P3
        assert remaining == "Write the quarterly report"

    def test_first_tag_wins_and_only_it_is_removed(self) -> None:
        """Only the first tag counts; later tags stay in the text."""
        priority, remaining = extract_priority("Fix P2 bug then P1 bug")
        assert priority is Priority.P2
        assert remaining == "Fix  bug then P1 bug"

    @pytest.mark.parametrize("text", ["P5 review", "AP1 report", "P12 tickets", "P 1"])
    def test_not_a_whole_word_tag(self, text: str) -> None:
        """Tags glued to other characters or out of range are ignored."""
        priority, remaining = extract_priority(text)
        assert priority is Priority.P3
        assert remaining == text


# ---------------------------------------------------------------------------
# Date/time resolution
# ---------------------------------------------------------------------------


class TestResolveDateTime:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("tomorrow", datetime(2024, 6, 11, 9, 0)),
            ("today 5pm", datetime(2024, 6, 10, 17, 0)),
            ("tonight", datetime(2024, 6, 10, 20, 0)),
            ("tonight 11pm", datetime(2024, 6, 10, 23, 0)),
            ("next week", datetime(2024, 6, 17, 9, 0)),
            ("next month", datetime(2024, 6, 17, 9, 0)),
            ("next friday", datetime(2024, 6, 14, 9, 0)),
            ("in 3 days", datetime(2024, 6, 13, 9, 0)),
            ("in 2 weeks", datetime(2024, 6, 24, 9, 0)),
            ("in 1 month", datetime(2024, 7, 10, 9, 0)),
            ("Wednesday", datetime(2024, 6, 12, 9, 0)),
            ("20th June", datetime(2024, 6, 20, 9, 0)),
            ("June 20", datetime(2024, 6, 20, 9, 0)),
            ("3 Sep", datetime(2024, 9, 3, 9, 0)),
            ("2024-07-01", datetime(2024, 7, 1, 9, 0)),
            ("17:30", datetime(2024, 6, 10, 17, 30)),
            ("5:30pm", datetime(2024, 6, 10, 17, 30)),
            ("930pm", datetime(2024, 6, 10, 21, 30)),
            ("12am tomorrow", datetime(2024, 6, 11, 0, 0)),
            ("12pm tomorrow", datetime(2024, 6, 11, 12, 0)),
        ],
    )
    def test_resolves(self, text: str, expected: datetime) -> None:
        """Each supported expression resolves against the Monday 09:00 snapshot."""
        due, _ = resolve_datetime(text, NOW)
        assert due == expected

    def test_same_weekday_is_next_week_never_today(self) -> None:
        """Naming today's weekday means the same day next week."""
        due, _ = resolve_datetime("Monday", NOW)
        assert due == datetime(2024, 6, 17, 9, 0)

    def test_past_day_month_rolls_to_next_year(self) -> None:
        """A calendar day already gone this year moves to next year."""
        due, _ = resolve_datetime("5 May", NOW)
        assert due == datetime(2025, 5, 5, 9, 0)

    def test_today_with_earlier_time_rolls_a_year(self) -> None:
        """A clock time earlier than now on today moves forward a year."""
        due, _ = resolve_datetime("today 8am", NOW)
        assert due == datetime(2025, 6, 10, 8, 0)

    def test_time_only_earlier_than_now_rolls_a_year(self) -> None:
        """A bare clock time already past today moves forward a year."""
        due, _ = resolve_datetime("7am", NOW)
        assert due == datetime(2025, 6, 10, 7, 0)

    def test_old_iso_date_moves_past_now(self) -> None:
        """An ISO date in an earlier year lands on the first future anniversary."""
        due, _ = resolve_datetime("2023-01-15", NOW)
        assert due == datetime(2025, 1, 15, 9, 0)

    def test_in_months_clamps_to_month_end(self) -> None:
        """Month offsets clamp to the last day of a shorter month."""
        due, _ = resolve_datetime("in 1 month", datetime(2024, 1, 31, 9, 0))
        assert due == datetime(2024, 2, 29, 9, 0)

    def test_impossible_day_is_not_a_date(self) -> None:
        """A day that does not exist leaves the text untouched."""
        due, remaining = resolve_datetime("Submit form 31 June", NOW)
        assert due is None
        assert remaining == "Submit form 31 June"

    def test_no_match_returns_text_unchanged(self) -> None:
        """Text without date or time tokens comes back as-is."""
        due, remaining = resolve_datetime("Write the report", NOW)
        assert due is None
        assert remaining == "Write the report"

    def test_removes_matched_tokens(self) -> None:
        """Both the date and the time tokens are stripped."""
        _, remaining = resolve_datetime("Call client tomorrow 9am", NOW)
        assert _squash(remaining) == "Call client"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Standup 10:30 June 20", datetime(2024, 6, 20, 10, 30)),
            ("Standup June 20 10:30", datetime(2024, 6, 20, 10, 30)),
            ("Standup 10:30 20 June", datetime(2024, 6, 20, 10, 30)),
        ],
    )
    def test_clock_minutes_are_not_a_day(self, text: str, expected: datetime) -> None:
        """Digits that belong to an HH:MM time never count as the day of the month."""
        due, remaining = resolve_datetime(text, NOW)
        assert due == expected
        assert _squash(remaining) == "Standup"

    def test_clock_time_before_month_without_day_is_time_only(self) -> None:
        """With no day next to the month, only the clock time is used."""
        due, remaining = resolve_datetime("10:30 June", NOW)
        assert due == datetime(2024, 6, 10, 10, 30)
        assert _squash(remaining) == "June"

    def test_past_leap_day_clamps_on_roll(self) -> None:
        """Feb 29 already gone in a leap year moves to Feb 28 of the next year."""
        due, remaining = resolve_datetime("Feb 29", datetime(2024, 3, 1, 9, 0))
        assert due == datetime(2025, 2, 28, 9, 0)
        assert remaining == ""

    def test_first_listed_date_pattern_wins(self) -> None:
        """Day+month is listed before weekday, so the weekday is ignored."""
        due, remaining = resolve_datetime("Friday 20th June", NOW)
        assert due == datetime(2024, 6, 20, 9, 0)
        assert _squash(remaining) == "Friday"

    def test_pattern_tables_are_ordered(self) -> None:
        """The pattern tables keep their evaluation order."""
        assert [p.name for p in TIME_PATTERNS] == ["twelve_hour", "twenty_four_hour"]
        assert [p.name for p in DATE_PATTERNS] == [
            "day_month",
            "month_day",
            "iso_date",
            "relative_day",
            "next_weekday",
            "next_period",
            "in_offset",
            "weekday",
            "end_of_week",
            "end_of_month",
        ]

    # --- transcript-only forms ---

    def test_end_of_week_ignored_outside_transcripts(self) -> None:
        """Meeting-only forms are not recognised in single-task input."""
        due, remaining = resolve_datetime("end of week", NOW)
        assert due is None
        assert remaining == "end of week"

    @pytest.mark.parametrize("text", ["end of week", "by end of week", "by week"])
    def test_end_of_week_is_friday_five_pm(self, text: str) -> None:
        """End of week in a transcript means Friday at 17:00."""
        due, _ = resolve_datetime(text, NOW, transcript=True)
        assert due == datetime(2024, 6, 14, 17, 0)

    def test_end_of_week_late_friday_moves_a_week(self) -> None:
        """After Friday 17:00 the end of week is the following Friday."""
        friday_evening = datetime(2024, 6, 14, 18, 0)
        due, _ = resolve_datetime("end of week", friday_evening, transcript=True)
        assert due == datetime(2024, 6, 21, 17, 0)

    def test_end_of_month(self) -> None:
        """End of month means the last day of the month at 17:00."""
        due, _ = resolve_datetime("end of month", NOW, transcript=True)
        assert due == datetime(2024, 6, 30, 17, 0)

    def test_end_of_month_after_close_moves_to_next_month(self) -> None:
        """Once the month has closed, the next month end is used."""
        due, _ = resolve_datetime("by month", datetime(2024, 6, 30, 18, 0), transcript=True)
        assert due == datetime(2024, 7, 31, 17, 0)

    # --- snapshot handling ---

    def test_keeps_timezone_of_now(self) -> None:
        """An aware snapshot yields an aware result in the same zone."""
        now = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
        due, _ = resolve_datetime("tomorrow", now)
        assert due == datetime(2024, 6, 11, 9, 0, tzinfo=timezone.utc)
        assert due.tzinfo is timezone.utc

    def test_sub_second_now_never_yields_earlier_moment(self) -> None:
        """A snapshot with microseconds never produces a due before it."""
        now = datetime(2024, 6, 10, 9, 0, 0, 500000)
        due, _ = resolve_datetime("today", now)
        assert due is not None
        assert due >= now
        assert due.microsecond == 0


class TestEnsureNotPast:
    def test_future_moment_untouched(self) -> None:
        """Moments at or after now are returned as they are."""
        moment = datetime(2024, 7, 1, 9, 0)
        assert ensure_not_past(moment, NOW) == moment

    def test_weekday_based_moves_by_weeks(self) -> None:
        """Weekday-based moments advance whole weeks until not past."""
        assert ensure_not_past(datetime(2024, 6, 3, 9, 0), NOW, weekday_based=True) == NOW
        assert ensure_not_past(datetime(2024, 6, 2, 9, 0), NOW, weekday_based=True) == datetime(
            2024, 6, 16, 9, 0
        )

    def test_leap_day_clamps(self) -> None:
        """Feb 29 rolled into a common year becomes Feb 28."""
        now = datetime(2025, 3, 1, 0, 0)
        assert ensure_not_past(datetime(2024, 2, 29, 9, 0), now) == datetime(2026, 2, 28, 9, 0)


# ---------------------------------------------------------------------------
# Assignee extraction
# ---------------------------------------------------------------------------


class TestExtractAssignee:
    def test_first_capitalised_non_stopword(self) -> None:
        """The first capitalised word outside the stoplist is the assignee."""
        assignee, remaining = extract_assignee("Finish landing page Aman by")
        assert assignee == "Aman"
        assert _squash(remaining) == "Finish landing page by"

    @pytest.mark.parametrize(
        "text",
        ["Send report", "Review With Email", "write the summary", "I need milk"],
    )
    def test_defaults_to_unassigned(self, text: str) -> None:
        """With no candidate the assignee is Unassigned and text is kept."""
        assignee, remaining = extract_assignee(text)
        assert assignee == "Unassigned"
        assert remaining == text

    def test_removes_every_occurrence(self) -> None:
        """Every whole-word occurrence of the assignee is removed."""
        assignee, remaining = extract_assignee("Aman review Aman notes")
        assert assignee == "Aman"
        assert _squash(remaining) == "review notes"

    def test_stopwords_are_case_insensitive(self) -> None:
        """Capitalised stopwords such as By are skipped."""
        assignee, _ = extract_assignee("By Friday Call Priya")
        assert assignee == "Friday"


# ---------------------------------------------------------------------------
# Single task parser
# ---------------------------------------------------------------------------


class TestCleanTaskName:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Finish landing page  by  ", "Finish landing page"),
            ("  by ", "Untitled Task"),
            ("", "Untitled Task"),
            ("Stand   up notes", "Stand up notes"),
            ("Pick up parcel nearby", "Pick up parcel nearby"),
        ],
    )
    def test_clean(self, text: str, expected: str) -> None:
        """Whitespace collapses, dangling by is dropped and empty names get a placeholder."""
        assert clean_task_name(text) == expected


class TestParseTask:
    def test_landing_page_example(self) -> None:
        """Name, assignee, date and time are all pulled from one line."""
        task = parse_task("Finish landing page Aman by 11pm 20th June", NOW)
        assert task == ParsedTask(
            name="Finish landing page",
            assignee="Aman",
            due=datetime(2024, 6, 20, 23, 0, 0),
            priority=Priority.P3,
        )

    def test_call_client_example(self) -> None:
        """A relative day with a time and a tag, and no assignee."""
        task = parse_task("Call client tomorrow 9am P1", NOW)
        assert task.due == datetime(2024, 6, 11, 9, 0, 0)
        assert task.priority is Priority.P1
        assert task.name == "Call client"
        assert task.assignee == "Unassigned"

    def test_weekday_only_input(self) -> None:
        """Input that is only a date leaves an untitled task."""
        task = parse_task("Monday", NOW)
        assert task.due == datetime(2024, 6, 17, 9, 0)
        assert task.name == "Untitled Task"
        assert task.assignee == "Unassigned"

    @pytest.mark.parametrize(
        "text",
        ["P2", "Update docs P2 for Sam", "p2 email Ravi next week", "Deploy tonight p2"],
    )
    def test_embedded_p2_always_wins(self, text: str) -> None:
        """An explicit P2 anywhere in the text sets the priority."""
        assert parse_task(text, NOW).priority is Priority.P2

    def test_empty_input_gets_defaults(self) -> None:
        """Empty input produces a default task."""
        task = parse_task("", NOW)
        assert task == ParsedTask(name="Untitled Task")

    @pytest.mark.parametrize(
        "text",
        [
            "Call mom 7am",
            "Renew passport 1 January",
            "Board meeting 2020-02-29 10:00",
            "Pay rent today 8:59",
            "Gym Monday 6am",
        ],
    )
    def test_due_never_before_now(self, text: str) -> None:
        """Due moments are never earlier than the snapshot."""
        task = parse_task(text, NOW)
        assert task.due is not None
        assert task.due >= NOW

    def test_deterministic(self) -> None:
        """The same input and snapshot always give the same task."""
        text = "Email Priya the deck next friday 4pm P2"
        assert parse_task(text, NOW) == parse_task(text, NOW)

    def test_default_now_reads_clock_once(self) -> None:
        """Without a snapshot the clock is read exactly once."""
        with patch("nltasks.parsing.task_parser.datetime") as mock_datetime:
            mock_datetime.now.return_value = datetime(2024, 6, 10, 9, 0, 0, 123456)
            task = parse_task("Call client tomorrow")

        mock_datetime.now.assert_called_once()
        assert task.due == datetime(2024, 6, 11, 9, 0, 0)

    def test_to_dict(self) -> None:
        """The dict form carries an ISO due and the priority label."""
        task = parse_task("Call client tomorrow 9am P1", NOW)
        assert task.to_dict() == {
            "name": "Call client",
            "assignee": "Unassigned",
            "due": "2024-06-11T09:00:00",
            "priority": "P1",
            "description": None,
        }

    def test_relative_offset_matches_timedelta(self) -> None:
        """An in-N-days offset is exactly N days after now."""
        task = parse_task("water plants in 10 days", NOW)
        assert task.due == NOW + timedelta(days=10)
        assert task.name == "water plants"

    def test_clock_time_then_month_day(self) -> None:
        """The minutes of 11:15 are not read as the day; May 3 is."""
        task = parse_task("dentist checkup 11:15 May 3", NOW)
        assert task.due == datetime(2025, 5, 3, 11, 15)
        assert task.name == "dentist checkup"
        assert task.assignee == "Unassigned"

    def test_past_leap_day_keeps_a_due(self) -> None:
        """A passed Feb 29 still resolves, so neither Feb nor 29 leaks into the task."""
        task = parse_task("renew licence Feb 29", datetime(2024, 3, 1, 9, 0))
        assert task.due == datetime(2025, 2, 28, 9, 0)
        assert task.name == "renew licence"
        assert task.assignee == "Unassigned"
