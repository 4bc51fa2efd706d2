"""Leaderboard schemas."""

from uuid import UUID

from .base import BaseSchema


class RankingEntry(BaseSchema):
    rank: int
    user_id: UUID
    name: str
    total_points: int
    monthly_points: int
    completed_this_month: int
    # Whole percentages; None when the user has nothing to measure yet
    qa_first_time_right_rate: int | None = None
    on_time_delivery_rate: int | None = None
    has_data: bool
