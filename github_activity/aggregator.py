from collections import Counter
from datetime import datetime, UTC, date, timedelta
from typing import Iterable, Protocol, Sequence

from github_activity.logger import logger
from github_activity.tracing import TraceHook, Tracer
from github_activity.utils import async_execute
from github_activity.exceptions import GithubActivityError
from github_activity.schemas import (
    FailureKind,
    DailyCommitPoint,
    RepositorySummary,
    WeeklyActivityRecord,
    RepositoryActivityResult
)


class ActivitySource(Protocol):
    """Source of repositories and their commit activity (GithubClient)."""
    max_concurrent_requests: int

    async def list_repositories(
            self,
            username: str
    ) -> list[RepositorySummary]: ...

    async def get_commit_activity(
            self,
            owner: str,
            repo: str
    ) -> list[WeeklyActivityRecord]: ...


class CommitActivityAggregator:
    """
    Folds weekly commit activity of the first repositories of a user
    into a single daily series.
    Statistics of the repositories are fetched concurrently and a failure
    of one repository never breaks the whole aggregation.
    """
    def __init__(
            self,
            source: ActivitySource,
            max_repos_for_stats: int = 5,
            trace_hooks: Sequence[TraceHook] = ()
    ):
        """
        Parameters
        ----------
        source: ActivitySource
            Object used to fetch repositories and their statistics.
            Usually GithubClient.
        max_repos_for_stats: int
            Maximum number of repositories whose statistics are fetched.
            Bounds the number of parallel requests to Github API.
        trace_hooks: Sequence[TraceHook]
            Callables notified about aggregation events.
        """
        if max_repos_for_stats < 0:
            raise ValueError("max_repos_for_stats cannot be negative.")
        self._source = source
        self._max_repos_for_stats = max_repos_for_stats
        self._tracer = Tracer(trace_hooks)

    async def aggregate_commit_activity(
            self,
            username: str
    ) -> list[DailyCommitPoint]:
        """
        Lists repositories of the user and aggregates their commit activity.
        Never raises: an empty series is returned if repositories
        can't be listed.

        Parameters
        ----------
        username: str
            Login of the Github user.

        Returns
        ----------
        list[DailyCommitPoint]
            Daily series sorted by date.
        """
        try:
            repositories = await self._source.list_repositories(username)
        except (GithubActivityError, ValueError) as error:
            logger.bind(username=username).warning(
                f"Couldn't list repositories, commit activity is empty: "
                f"{error}"
            )
            self._tracer.emit(
                "repositories_listing_failed",
                username=username,
                error=str(error)
            )
            return []
        return await self.aggregate_repositories(username, repositories)

    async def aggregate_repositories(
            self,
            username: str,
            repositories: Sequence[RepositorySummary]
    ) -> list[DailyCommitPoint]:
        """
        Aggregates commit activity of already listed repositories.

        Parameters
        ----------
        username: str
            Login of the owner of the repositories.
        repositories: Sequence[RepositorySummary]
            Repositories in the order returned by Github.

        Returns
        ----------
        list[DailyCommitPoint]
            Daily series sorted by date.
        """
        results = await self.collect_repositories_activity(
            username,
            repositories
        )
        series = fold_commit_activity(
            week for result in results for week in result.weeks
        )
        self._tracer.emit(
            "commit_activity_folded",
            username=username,
            repositories=len(results),
            failed=sum(result.failed for result in results),
            points=len(series)
        )
        return series

    async def collect_repositories_activity(
            self,
            username: str,
            repositories: Sequence[RepositorySummary]
    ) -> list[RepositoryActivityResult]:
        """
        Fetches commit activity of the first max_repos_for_stats
        repositories concurrently and waits for all of them.

        Returns
        ----------
        list[RepositoryActivityResult]
            One result per selected repository, in selection order.
        """
        selected = list(repositories[:self._max_repos_for_stats])
        logger.bind(username=username).debug(
            f"Repositories to fetch commit activity: "
            f"{[repository.name for repository in selected]}"
        )
        self._tracer.emit(
            "repositories_selected",
            username=username,
            repositories=[repository.name for repository in selected]
        )
        return await async_execute(
            self._fetch_repository_activity,
            [(username, repository) for repository in selected],
            max_workers=max(1, self._source.max_concurrent_requests)
        )

    async def _fetch_repository_activity(
            self,
            username: str,
            repository: RepositorySummary
    ) -> RepositoryActivityResult:
        """Fetches activity of one repository, substituting failures."""
        _logger = logger.bind(username=username, repo=repository.name)
        try:
            weeks = await self._source.get_commit_activity(
                username,
                repository.name
            )
        except GithubActivityError as error:
            _logger.warning(
                f"Commit activity is unavailable, counting it as zero: "
                f"{error}"
            )
            self._tracer.emit(
                "repository_activity_failed",
                username=username,
                repository=repository.name,
                error=str(error)
            )
            return RepositoryActivityResult(
                repository=repository.name,
                failure=FailureKind.PARTIAL_DATA_LOSS
            )
        _logger.debug(f"Retrieved {len(weeks)} weeks of commit activity")
        self._tracer.emit(
            "repository_activity_fetched",
            username=username,
            repository=repository.name,
            weeks=len(weeks)
        )
        return RepositoryActivityResult(
            repository=repository.name,
            weeks=list(weeks)
        )


def week_day_date(week: int, day_index: int) -> date:
    """
    Returns UTC calendar date of the day_index-th day of the week
    starting at week (Unix seconds).
    """
    week_start = datetime.fromtimestamp(week, UTC).date()
    return week_start + timedelta(days=day_index)


def fold_commit_activity(
        weeks: Iterable[WeeklyActivityRecord]
) -> list[DailyCommitPoint]:
    """
    Sums commits of all weekly records per calendar date.

    Parameters
    ----------
    weeks: Iterable[WeeklyActivityRecord]
        Records of any number of repositories, in any order.

    Returns
    ----------
    list[DailyCommitPoint]
        One point per date covered by a record, sorted by date.
        Days without commits are kept with zero count.
    """
    commits_by_date: Counter[date] = Counter()
    for week in weeks:
        for day_index, count in enumerate(week.days):
            commits_by_date[week_day_date(week.week, day_index)] += count
    return [
        DailyCommitPoint(date=day, count=count)
        for day, count in sorted(commits_by_date.items())
    ]
