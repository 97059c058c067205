from datetime import date

from pydantic import BaseModel


class RepositoryResponse(BaseModel):
    """Public repository of a user, as shown in the repositories grid."""

    id: int
    name: str
    url: str
    description: str | None
    language: str | None
    stars: int
    forks: int


class DailyCommitsResponse(BaseModel):
    """Number of commits made in one day (UTC)."""

    date: date
    count: int


class ContributionBarResponse(DailyCommitsResponse):
    """Day of the recent contribution bar chart with its color."""

    color: str


class DashboardResponse(BaseModel):
    """Everything the dashboard page needs for one user."""

    username: str
    repositories: list[RepositoryResponse]
    contribution_bars: list[ContributionBarResponse]
    activity_line: list[DailyCommitsResponse]
    total_commits: int
    error: str | None = None
