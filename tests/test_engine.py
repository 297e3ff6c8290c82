"""Tests für die Engine: Terminprüfung, Zeit-Helfer, Namen, Datum, Preise, Zuordnungen."""

import logging
from datetime import datetime, time

import pytest

from config.schema import Currency, SchedulingConfig, Weekday
from engine.assignments import LectureAssignmentTracker
from engine.dates import date_envelope, end_date, start_date
from engine.naming import generate_group_name, sort_sessions_by_day
from engine.pricing import PricingEngine, calculate_total_price, has_subscription_type
from engine.session_validator import SessionValidator
from engine.time_helper import (
    create_time,
    format_date_range,
    format_date_with_day,
    format_session_time,
    format_time_12h,
    format_time_24h,
    generate_time_options,
    get_time_components,
    minutes_between,
)
from models.lecture_assignment import AssignmentUpdate, LectureAssignment, LectureStatus
from models.session import Session
from models.subscription import Cost, Subscription, SubscriptionType


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _session(day: str, start: tuple, end: tuple, session_id: str = None) -> Session:
    kwargs = {"day": day, "start_time": time(*start), "end_time": time(*end)}
    if session_id:
        kwargs["id"] = session_id
    return Session(**kwargs)


def _sub(sub_type: str, amount: float, currency: str, lectures: int) -> Subscription:
    return Subscription(
        type=sub_type,
        cost=Cost(amount=amount, currency=currency),
        number_of_lectures_included=lectures,
    )


NOW = datetime(2026, 10, 18, 8, 30)


# ─── TERMINPRÜFUNG ────────────────────────────────────────────────────────────

class TestSessionValidator:
    def test_valid_session(self):
        """Sonntag 9–11 ohne bestehende Termine ist gültig."""
        result = SessionValidator().validate_session(_session("Sunday", (9, 0), (11, 0)))
        assert result.is_valid
        assert result.errors == []

    def test_invalid_day(self):
        """Freitag liegt außerhalb der erlaubten Tage."""
        result = SessionValidator().validate_session(_session("Friday", (9, 0), (11, 0)))
        assert not result.is_valid
        assert result.errors == ["Sessions can only be scheduled on Sunday through Thursday"]

    def test_all_errors_reported_together(self):
        """Falscher Tag + vertauschte Zeiten + Konflikt → alle Meldungen gleichzeitig."""
        existing = [_session("Saturday", (8, 0), (9, 0))]
        candidate = _session("Saturday", (11, 0), (9, 0))
        result = SessionValidator().validate_session(candidate, existing)
        assert not result.is_valid
        assert result.errors == [
            "Sessions can only be scheduled on Sunday through Thursday",
            "Start time must be before end time",
            "Session must be at least 1 hour long",
            "A session already exists for Saturday",
        ]

    @pytest.mark.parametrize("end", [(9, 0), (9, 30), (9, 59)])
    def test_duration_below_minimum_fails(self, end):
        """Alles unter 60 Minuten ergibt einen Dauer-Fehler."""
        result = SessionValidator().validate_session(_session("Monday", (9, 0), end))
        assert "Session must be at least 1 hour long" in result.errors

    def test_exactly_one_hour_is_valid(self):
        result = SessionValidator().validate_session(_session("Monday", (9, 0), (10, 0)))
        assert result.is_valid

    @pytest.mark.parametrize("other", [((9, 0), (10, 0)), ((18, 0), (19, 0)), ((10, 0), (12, 0))])
    def test_same_day_conflicts_regardless_of_times(self, other):
        """Gleicher Wochentag = Konflikt, auch ohne zeitliche Überschneidung."""
        validator = SessionValidator()
        s1 = _session("Sunday", (9, 0), (10, 0))
        s2 = _session("Sunday", *other)
        assert validator.has_conflict(s2, [s1])

    def test_different_day_no_conflict(self):
        validator = SessionValidator()
        assert not validator.has_conflict(
            _session("Monday", (9, 0), (10, 0)), [_session("Sunday", (9, 0), (10, 0))]
        )

    def test_exclude_own_session_when_editing(self):
        """Beim Bearbeiten zählt der Termin selbst nicht als Konflikt."""
        existing = [_session("Sunday", (9, 0), (10, 0), session_id="session_a")]
        edited = _session("Sunday", (10, 0), (12, 0), session_id="session_a")
        result = SessionValidator().validate_session(edited, existing, "session_a")
        assert result.is_valid

    def test_custom_config_message(self):
        """Mindestdauer und Tage kommen aus der SchedulingConfig."""
        config = SchedulingConfig(
            allowed_days=[Weekday.MONDAY, Weekday.WEDNESDAY], min_session_minutes=90
        )
        result = SessionValidator(config).validate_session(_session("Sunday", (9, 0), (10, 0)))
        assert result.errors == [
            "Sessions can only be scheduled on Monday, Wednesday",
            "Session must be at least 90 minutes long",
        ]

    def test_validate_session_set_reports_conflict_once(self):
        """In einer Terminmenge wird jeder Tageskonflikt genau einmal gemeldet."""
        sessions = [
            _session("Sunday", (9, 0), (10, 0)),
            _session("Sunday", (12, 0), (13, 0)),
            _session("Tuesday", (9, 0), (10, 0)),
        ]
        result = SessionValidator().validate_session_set(sessions)
        assert result.errors == ["Sunday: A session already exists for Sunday"]


# ─── ZEIT-HELFER ──────────────────────────────────────────────────────────────

class TestTimeHelper:
    def test_create_time_and_components(self):
        t = create_time(14, 30)
        assert t == time(14, 30)
        assert get_time_components(t) == (14, 30)

    @pytest.mark.parametrize("hours,minutes", [(24, 0), (-1, 0), (10, 60)])
    def test_create_time_out_of_range(self, hours, minutes):
        with pytest.raises(ValueError):
            create_time(hours, minutes)

    @pytest.mark.parametrize("value,expected", [
        (time(9, 0), "9:00 AM"),
        (time(14, 0), "2:00 PM"),
        (time(0, 15), "12:15 AM"),
        (time(12, 0), "12:00 PM"),
    ])
    def test_format_time_12h(self, value, expected):
        assert format_time_12h(value) == expected

    def test_format_time_24h(self):
        assert format_time_24h(time(9, 5)) == "09:05"

    def test_format_session_time(self):
        assert format_session_time(_session("Sunday", (9, 0), (11, 0))) == \
            "Sunday - 09:00 → 11:00"

    def test_format_dates(self):
        start = datetime(2026, 10, 18, 9, 0)
        end = datetime(2026, 10, 18, 16, 0)
        assert format_date_with_day(start) == "Sun 10/18/2026, 09:00 AM"
        assert format_date_range(start, end) == \
            "Sun 10/18/2026, 09:00 AM, Sun 10/18/2026, 04:00 PM"

    def test_minutes_between(self):
        assert minutes_between(time(9, 0), time(10, 30)) == 90
        assert minutes_between(time(11, 0), time(9, 0)) == -120

    def test_time_options_default_interval(self):
        """15-Minuten-Raster → 96 Einträge von 00:00 bis 23:45."""
        options = generate_time_options()
        assert len(options) == 96
        assert (options[0].value, options[0].label) == ("00:00", "12:00 AM")
        assert (options[-1].value, options[-1].label) == ("23:45", "11:45 PM")

    def test_time_options_interval_must_divide_hour(self):
        assert len(generate_time_options(30)) == 48
        with pytest.raises(ValueError):
            generate_time_options(7)


# ─── GRUPPENNAME ──────────────────────────────────────────────────────────────

class TestGroupName:
    def test_single_session(self):
        sessions = [_session("Sunday", (9, 0), (11, 0))]
        assert generate_group_name(sessions) == "Sun [ 9:00 AM - 11:00 AM ]"

    def test_two_sessions(self):
        sessions = [
            _session("Sunday", (9, 0), (11, 0)),
            _session("Tuesday", (14, 0), (16, 0)),
        ]
        assert generate_group_name(sessions) == \
            "Sun [ 9:00 AM - 11:00 AM ] ~ Tue [ 2:00 PM - 4:00 PM ]"

    def test_two_sessions_sorted_by_day(self):
        """Eingabereihenfolge spielt keine Rolle, sortiert wird nach Wochentag."""
        sessions = [
            _session("Tuesday", (14, 0), (16, 0)),
            _session("Sunday", (9, 0), (11, 0)),
        ]
        assert generate_group_name(sessions).startswith("Sun ")

    @pytest.mark.parametrize("count", [3, 4, 5])
    def test_many_sessions(self, count):
        days = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday"][:count]
        sessions = [_session(d, (9, 0), (10, 0)) for d in days]
        assert generate_group_name(sessions) == f"Multiple ({count} Sessions)"

    def test_no_sessions_fallback(self):
        assert generate_group_name([]) == "New Group"
        assert generate_group_name([], "Neue Gruppe") == "Neue Gruppe"

    def test_idempotent(self):
        """Zwei Aufrufe auf derselben Terminmenge → identischer Name."""
        sessions = [
            _session("Wednesday", (17, 30), (19, 0)),
            _session("Monday", (8, 0), (9, 15)),
        ]
        assert generate_group_name(sessions) == generate_group_name(sessions)

    def test_unknown_day_sorts_last(self):
        sessions = [
            _session("Saturday", (9, 0), (10, 0)),
            _session("Thursday", (9, 0), (10, 0)),
        ]
        ordered = sort_sessions_by_day(sessions)
        assert [s.day for s in ordered] == [Weekday.THURSDAY, Weekday.SATURDAY]
        assert generate_group_name(sessions).endswith("Sat [ 9:00 AM - 10:00 AM ]")


# ─── START-/ENDDATUM ──────────────────────────────────────────────────────────

class TestDates:
    def test_envelope_min_start_max_end(self):
        sessions = [
            _session("Sunday", (10, 0), (12, 0)),
            _session("Tuesday", (8, 30), (10, 0)),
            _session("Thursday", (15, 0), (17, 45)),
        ]
        assert start_date(sessions, NOW) == datetime(2026, 10, 18, 8, 30)
        assert end_date(sessions, NOW) == datetime(2026, 10, 18, 17, 45)

    def test_empty_sessions_return_now(self):
        assert date_envelope([], NOW) == (NOW, NOW)

    def test_envelope_idempotent(self):
        sessions = [_session("Monday", (9, 0), (11, 0))]
        assert date_envelope(sessions, NOW) == date_envelope(sessions, NOW)


# ─── PREISE ───────────────────────────────────────────────────────────────────

class TestPricing:
    def test_monthly_price(self):
        """800 EGP × ceil(8/4) = 1600 EGP."""
        total = calculate_total_price([_sub("monthly", 800, "egp", 8)])
        assert total == Cost(amount=1600, currency=Currency.EGP)

    def test_monthly_rounds_up_months(self):
        """9 Lektionen bei 4 pro Monat → 3 Monate."""
        assert calculate_total_price([_sub("monthly", 100, "egp", 9)]).amount == 300

    def test_level_price_flat(self):
        total = calculate_total_price([_sub("level", 300, "usd", 40)])
        assert total == Cost(amount=300, currency=Currency.USD)

    def test_both_types_summed(self):
        total = calculate_total_price([
            _sub("monthly", 800, "egp", 8),
            _sub("level", 3000, "egp", 24),
        ])
        assert total == Cost(amount=4600, currency=Currency.EGP)

    def test_empty_is_zero_default_currency(self):
        assert calculate_total_price([]) == Cost(amount=0, currency=Currency.EGP)

    def test_mixed_currency_logs_warning(self, caplog):
        """Keine Umrechnung: Währung des ersten Abonnements, Warnung im Log."""
        with caplog.at_level(logging.WARNING, logger="engine.pricing"):
            total = calculate_total_price([
                _sub("level", 300, "usd", 10),
                _sub("monthly", 100, "egp", 4),
            ])
        assert total == Cost(amount=400, currency=Currency.USD)
        assert "ohne Umrechnung" in caplog.text

    def test_contribution_and_lookup(self):
        engine = PricingEngine()
        monthly = _sub("monthly", 500, "egp", 12)
        assert engine.months_needed(monthly) == 3
        assert engine.subscription_contribution(monthly) == 1500
        assert has_subscription_type([monthly], SubscriptionType.MONTHLY)
        assert not has_subscription_type([monthly], SubscriptionType.LEVEL)


# ─── LEKTIONS-ZUORDNUNGEN ─────────────────────────────────────────────────────

class TestAssignmentTracker:
    def test_update_creates_scheduled_entry(self):
        result = LectureAssignmentTracker().update_assignment([], 1, "teacher_1")
        assert result == [LectureAssignment(lecture_number=1, teacher_id="teacher_1")]
        assert result[0].status == LectureStatus.SCHEDULED

    def test_update_merges_existing(self):
        """Bestehender Eintrag: Lehrkraft ersetzt, Status/Notiz bleiben ohne Angabe."""
        original = [LectureAssignment(
            lecture_number=2, teacher_id="teacher_1",
            status=LectureStatus.CURRENT, notes="Raum 3",
        )]
        result = LectureAssignmentTracker().update_assignment(original, 2, "teacher_2")
        assert result[0].teacher_id == "teacher_2"
        assert result[0].status == LectureStatus.CURRENT
        assert result[0].notes == "Raum 3"

    def test_update_does_not_mutate_input(self):
        original = [LectureAssignment(lecture_number=1, teacher_id="teacher_1")]
        LectureAssignmentTracker().update_assignment(
            original, 1, "teacher_2", LectureStatus.COMPLETED
        )
        assert original[0].teacher_id == "teacher_1"

    def test_bulk_update(self):
        tracker = LectureAssignmentTracker()
        original = [
            LectureAssignment(lecture_number=1, teacher_id="teacher_1", notes="alt"),
            LectureAssignment(lecture_number=2, teacher_id="teacher_1"),
        ]
        result = tracker.bulk_update_assignments(original, [
            AssignmentUpdate(lecture_number=1, status=LectureStatus.COMPLETED, notes=None),
            AssignmentUpdate(lecture_number=2, teacher_id="teacher_3"),
            AssignmentUpdate(lecture_number=3, teacher_id="teacher_2"),
        ])
        assert [(a.lecture_number, a.teacher_id) for a in result] == [
            (1, "teacher_1"), (2, "teacher_3"), (3, "teacher_2"),
        ]
        assert result[0].status == LectureStatus.COMPLETED
        assert result[0].notes is None
        assert result[2].status == LectureStatus.SCHEDULED

    def test_bulk_skips_new_entry_without_teacher(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="engine.assignments"):
            result = LectureAssignmentTracker().bulk_update_assignments(
                [], [AssignmentUpdate(lecture_number=5, status=LectureStatus.NEXT)]
            )
        assert result == []
        assert "übersprungen" in caplog.text

    def test_get_assignments_by_teacher(self):
        assignments = [
            LectureAssignment(lecture_number=1, teacher_id="teacher_1"),
            LectureAssignment(lecture_number=2, teacher_id="teacher_2"),
            LectureAssignment(lecture_number=3, teacher_id="teacher_1"),
        ]
        result = LectureAssignmentTracker().get_assignments_by_teacher(assignments, "teacher_1")
        assert [a.lecture_number for a in result] == [1, 3]
