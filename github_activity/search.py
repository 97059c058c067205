from dataclasses import dataclass, field
from typing import Sequence

from github_activity.logger import logger
from github_activity.tracing import TraceHook, Tracer
from github_activity.aggregator import ActivitySource, CommitActivityAggregator
from github_activity.exceptions import UserNotFoundError, GithubUpstreamError
from github_activity.schemas import (
    FailureKind,
    DailyCommitPoint,
    RepositorySummary
)

ERROR_MESSAGES = {
    FailureKind.NOT_FOUND: "User not found",
    FailureKind.UPSTREAM_ERROR: "Error fetching data",
}


@dataclass
class SearchResult:
    username: str
    generation: int
    repositories: list[RepositorySummary] = field(default_factory=list)
    commit_activity: list[DailyCommitPoint] = field(default_factory=list)
    failure: FailureKind | None = None

    @property
    def error_message(self) -> str | None:
        """Message to be shown to the user, None for successful searches."""
        if self.failure is None:
            return None
        return ERROR_MESSAGES.get(
            self.failure,
            ERROR_MESSAGES[FailureKind.UPSTREAM_ERROR]
        )


class DashboardSearch:
    """
    Runs user searches for the dashboard: repositories of the user
    and their aggregated commit activity.

    Every search gets a new generation token. A search finishing after
    a newer one has started is stale and its result is discarded,
    so that the latest search always wins.
    """
    def __init__(
            self,
            source: ActivitySource,
            max_repos_for_stats: int = 5,
            trace_hooks: Sequence[TraceHook] = ()
    ):
        self._source = source
        self._aggregator = CommitActivityAggregator(
            source,
            max_repos_for_stats=max_repos_for_stats,
            trace_hooks=trace_hooks
        )
        self._tracer = Tracer(trace_hooks)
        self._generation = 0
        self.current: SearchResult | None = None

    @property
    def generation(self) -> int:
        return self._generation

    async def search(self, username: str) -> SearchResult | None:
        """
        Searches repositories and commit activity of the user.

        Parameters
        ----------
        username: str
            Login of the Github user. Blank usernames are ignored.

        Returns
        ----------
        SearchResult | None
            Result of the search. None if username is blank or
            a newer search was started while this one was running.
        """
        username = (username or "").strip()
        if not username:
            return None
        self._generation += 1
        generation = self._generation
        _logger = logger.bind(username=username, generation=generation)
        _logger.info("Searching Github activity")
        self._tracer.emit(
            "search_started",
            username=username,
            generation=generation
        )
        result = await self._run(username, generation)
        if generation != self._generation:
            _logger.info(
                f"Discarding stale search result "
                f"(latest generation is {self._generation})"
            )
            self._tracer.emit(
                "search_discarded",
                username=username,
                generation=generation,
                latest_generation=self._generation
            )
            return None
        self.current = result
        _logger.info(
            f"Search finished: {len(result.repositories)} repositories, "
            f"{len(result.commit_activity)} days of activity, "
            f"failure: {result.failure}"
        )
        self._tracer.emit(
            "search_finished",
            username=username,
            generation=generation,
            failure=result.failure
        )
        return result

    async def _run(self, username: str, generation: int) -> SearchResult:
        try:
            repositories = await self._source.list_repositories(username)
        except UserNotFoundError:
            return SearchResult(
                username=username,
                generation=generation,
                failure=FailureKind.NOT_FOUND
            )
        except GithubUpstreamError as error:
            logger.bind(username=username).warning(
                f"Error fetching repositories: {error}"
            )
            return SearchResult(
                username=username,
                generation=generation,
                failure=FailureKind.UPSTREAM_ERROR
            )
        commit_activity = await self._aggregator.aggregate_repositories(
            username,
            repositories
        )
        return SearchResult(
            username=username,
            generation=generation,
            repositories=repositories,
            commit_activity=commit_activity
        )
