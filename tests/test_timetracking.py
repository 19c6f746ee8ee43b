"""Tests for apps.timetracking.services."""

from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest
from django.core.exceptions import ValidationError

from apps.timetracking.models import TimeEntry
from apps.timetracking.services import (
    calculate_worked_time,
    finish_tracking,
    format_worked_time,
    pause_tracking,
    resume_tracking,
    start_tracking,
)

# 12:00 in Europe/Moscow
T0 = datetime(2024, 1, 15, 9, 0, tzinfo=dt_timezone.utc)
DAY = date(2024, 1, 15)

pytestmark = pytest.mark.django_db


class TestSessionLifecycle:
    def test_start_records_local_date(self, user):
        entry = start_tracking(user, now=T0)

        assert entry.status == TimeEntry.Status.WORKING
        assert entry.date == DAY

    def test_second_start_is_rejected(self, user):
        start_tracking(user, now=T0)

        with pytest.raises(ValidationError):
            start_tracking(user, now=T0 + timedelta(minutes=5))

    def test_pause_resume_finish(self, user):
        entry = start_tracking(user, now=T0)

        pause_tracking(entry, now=T0 + timedelta(hours=1))
        assert entry.status == TimeEntry.Status.PAUSED
        assert entry.total_hours == pytest.approx(1.0)

        resume_tracking(entry, now=T0 + timedelta(hours=1, minutes=30))
        assert entry.pause_duration == pytest.approx(30)
        assert entry.paused_at is None

        finish_tracking(entry, now=T0 + timedelta(hours=3))
        entry.refresh_from_db()
        assert entry.status == TimeEntry.Status.FINISHED
        assert entry.total_hours == pytest.approx(2.5)

    def test_finish_while_paused_counts_the_pause(self, user):
        entry = start_tracking(user, now=T0)
        pause_tracking(entry, now=T0 + timedelta(hours=1))

        finish_tracking(entry, now=T0 + timedelta(hours=2))

        assert entry.pause_duration == pytest.approx(60)
        assert entry.total_hours == pytest.approx(1.0)

    def test_invalid_transitions(self, user):
        entry = start_tracking(user, now=T0)

        with pytest.raises(ValidationError):
            resume_tracking(entry, now=T0)

        finish_tracking(entry, now=T0 + timedelta(hours=1))
        with pytest.raises(ValidationError):
            pause_tracking(entry, now=T0)
        with pytest.raises(ValidationError):
            finish_tracking(entry, now=T0)


class TestWorkedTime:
    def test_sums_finished_and_running_sessions(self, user):
        morning = start_tracking(user, now=T0 - timedelta(hours=3))
        finish_tracking(morning, now=T0 - timedelta(hours=1))
        start_tracking(user, now=T0)

        total = calculate_worked_time(user, day=DAY, now=T0 + timedelta(minutes=45))

        assert total == (2 * 60 + 45) * 60 * 1000

    def test_other_days_are_ignored(self, user):
        entry = start_tracking(user, now=T0 - timedelta(days=1))
        finish_tracking(entry, now=T0 - timedelta(days=1) + timedelta(hours=1))

        assert calculate_worked_time(user, day=DAY, now=T0) == 0

    @pytest.mark.parametrize('ms, expected', [
        (0, '0ч 0м'),
        (59 * 1000, '0ч 0м'),
        ((2 * 60 + 30) * 60 * 1000, '2ч 30м'),
        (10 * 60 * 60 * 1000 + 5 * 60 * 1000, '10ч 5м'),
    ])
    def test_format(self, ms, expected):
        assert format_worked_time(ms) == expected


class TestWorkedTodayView:
    def test_returns_total(self, client, user):
        client.force_login(user)

        data = client.get('/time/today/').json()

        assert data == {'total_ms': 0, 'formatted': '0ч 0м'}
