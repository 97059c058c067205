from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any


class FailureKind(StrEnum):
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"
    PARTIAL_DATA_LOSS = "partial_data_loss"


@dataclass(frozen=True)
class RepositorySummary:
    id: int
    name: str
    url: str
    description: str | None
    language: str | None
    stars: int
    forks: int


@dataclass(frozen=True)
class WeeklyActivityRecord:
    week: int
    days: tuple[int, ...]
    total: int


@dataclass(frozen=True)
class DailyCommitPoint:
    date: date
    count: int


@dataclass
class RepositoryActivityResult:
    """Outcome of fetching commit activity of one repository."""
    repository: str
    weeks: list[WeeklyActivityRecord] = field(default_factory=list)
    failure: FailureKind | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None


@dataclass
class GithubResponse:
    status: int
    links: dict[str, Any] | None
    data: Any
