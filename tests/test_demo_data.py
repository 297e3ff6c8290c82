"""Tests für den Demo-Daten-Generator."""

from datetime import datetime

import pytest

from config.defaults import DEMO_TEACHERS, default_engine_config
from data.demo_data import DemoDataGenerator, lecture_status_for
from models.group import GroupStatus
from models.lecture_assignment import LectureStatus
from models.subscription import SubscriptionType
from services.group_service import GroupService
from services.repository import InMemoryGroupRepository


def _populate(count: int = 12, seed: int = 42):
    config = default_engine_config()
    service = GroupService(
        InMemoryGroupRepository(), config, clock=lambda: datetime(2026, 10, 18, 8, 0)
    )
    return DemoDataGenerator(config, seed=seed).populate(service, count=count)


class TestLectureStatus:
    @pytest.mark.parametrize("number,expected", [
        (1, LectureStatus.COMPLETED),
        (4, LectureStatus.CURRENT),
        (5, LectureStatus.NEXT),
        (6, LectureStatus.UPCOMING),
    ])
    def test_relative_to_current(self, number, expected):
        assert lecture_status_for(number, current=4) == expected

    def test_no_current_lecture(self):
        assert lecture_status_for(3, current=0) == LectureStatus.SCHEDULED


class TestDemoData:
    def test_all_drafts_accepted(self):
        """Jeder erzeugte Entwurf besteht die Prüfungen des Service."""
        groups = _populate(count=20)
        assert len(groups) == 20

    def test_special_cases(self):
        groups = _populate()
        assert groups[0].name == "New Group"
        assert groups[0].start_date == groups[0].end_date
        assert groups[1].name == "Multiple (3 Sessions)"

        canceled = groups[2]
        assert canceled.status == GroupStatus.CANCELED
        assert LectureStatus.DISMISSED in {a.status for a in canceled.teacher_assignments}

        both = groups[3]
        assert {s.type for s in both.subscriptions} == set(SubscriptionType)

    def test_reproducible_with_seed(self):
        first = [(g.name, g.price, g.total_lectures) for g in _populate(seed=7)]
        second = [(g.name, g.price, g.total_lectures) for g in _populate(seed=7)]
        assert first == second

    def test_assignments_within_lecture_range(self):
        for group in _populate():
            numbers = [a.lecture_number for a in group.teacher_assignments]
            assert numbers == list(range(1, group.total_lectures + 1))
            assert all(a.teacher_id in DEMO_TEACHERS for a in group.teacher_assignments)

    def test_completed_groups_have_only_completed_lectures(self):
        for group in _populate(count=30):
            if group.status == GroupStatus.COMPLETED:
                assert {a.status for a in group.teacher_assignments} == {LectureStatus.COMPLETED}
