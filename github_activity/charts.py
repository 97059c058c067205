from dataclasses import dataclass
from datetime import date
from typing import Sequence

from github_activity.schemas import DailyCommitPoint

NO_COMMITS_COLOR = "#ebedf0"
# (maximum commits count, color), checked in order
COMMIT_COLOR_TIERS = (
    (0, NO_COMMITS_COLOR),
    (2, "#9be9a8"),
    (5, "#40c463"),
)
MANY_COMMITS_COLOR = "#216e39"


@dataclass(frozen=True)
class ContributionBar:
    date: date
    count: int
    color: str


def commit_color(count: int) -> str:
    """Returns Github-style color of a day with count commits."""
    for max_count, color in COMMIT_COLOR_TIERS:
        if count <= max_count:
            return color
    return MANY_COMMITS_COLOR


def recent_activity(
        series: Sequence[DailyCommitPoint],
        size: int = 90
) -> list[DailyCommitPoint]:
    """
    Returns the last size entries of the series.
    The series isn't contiguous, so it may span more than size days.
    """
    if size < 1:
        raise ValueError("Window size must be positive.")
    return list(series[-size:])


def build_contribution_bars(
        series: Sequence[DailyCommitPoint],
        size: int = 90
) -> list[ContributionBar]:
    return [
        ContributionBar(
            date=point.date,
            count=point.count,
            color=commit_color(point.count)
        )
        for point in recent_activity(series, size)
    ]


def build_activity_line(
        series: Sequence[DailyCommitPoint]
) -> list[DailyCommitPoint]:
    return list(series)


def total_commits(series: Sequence[DailyCommitPoint]) -> int:
    return sum(point.count for point in series)
