"""
Unit tests for the scoring rules.
"""

from datetime import datetime, timedelta

import pytest

from app.core.config import Settings
from app.domains.lifecycle.scoring import ScoringLedger, ScoringPolicy, completion_awards
from app.exceptions.project import DevLeadRequiredError
from models import Project

DEADLINE = datetime(2026, 3, 31, 18, 0, 0)


class TestCompletionAwards:
    """Test cases for completion_awards."""

    def test_on_time_same_day(self):
        awards = completion_awards(DEADLINE, DEADLINE - timedelta(hours=5), ScoringPolicy())

        assert awards == [(10, "Project Delivery"), (5, "On-Time Bonus")]

    def test_exactly_on_deadline_counts_as_on_time(self):
        awards = completion_awards(DEADLINE, DEADLINE, ScoringPolicy())

        assert (5, "On-Time Bonus") in awards

    def test_early_days_are_whole_days(self):
        awards = completion_awards(DEADLINE, DEADLINE - timedelta(hours=30), ScoringPolicy())

        assert awards[-1] == (1, "Early Delivery Bonus (1 days)")

    def test_ten_days_early(self):
        awards = completion_awards(
            DEADLINE, DEADLINE - timedelta(days=10, hours=2), ScoringPolicy()
        )

        assert sum(points for points, _ in awards) == 25

    def test_late_within_a_day_only_costs_missed_penalty(self):
        awards = completion_awards(DEADLINE, DEADLINE + timedelta(hours=5), ScoringPolicy())

        assert awards == [(10, "Project Delivery"), (-10, "Deadline Missed Penalty")]

    def test_three_days_late(self):
        awards = completion_awards(DEADLINE, DEADLINE + timedelta(days=3, hours=1), ScoringPolicy())

        assert awards == [
            (10, "Project Delivery"),
            (-10, "Deadline Missed Penalty"),
            (-6, "Delay Penalty (3 days)"),
        ]

    def test_zero_rate_suppresses_per_day_entries(self):
        policy = ScoringPolicy(early_per_day=0, delay_per_day=0)

        early = completion_awards(DEADLINE, DEADLINE - timedelta(days=4), policy)
        late = completion_awards(DEADLINE, DEADLINE + timedelta(days=4), policy)

        assert len(early) == 2
        assert len(late) == 2


class TestScoringPolicy:
    """Test cases for ScoringPolicy."""

    def test_defaults(self):
        policy = ScoringPolicy()

        assert policy.delivery == 10
        assert policy.on_time == 5
        assert policy.qa_first_pass == 2
        assert policy.qa_rejection == -5
        assert policy.deadline_missed == -10
        assert policy.delay_per_day == -2

    def test_from_settings(self):
        config = Settings(scoring_delivery=25, scoring_qa_rejection=-1)

        policy = ScoringPolicy.from_settings(config)

        assert policy.delivery == 25
        assert policy.qa_rejection == -1
        assert policy.on_time == 5


class TestScoringLedger:
    """Test cases for ScoringLedger guards."""

    def test_require_dev_lead(self):
        with pytest.raises(DevLeadRequiredError):
            ScoringLedger.require_dev_lead(Project(assigned_dev_manager_id=None))
