from dataclasses import asdict
from typing import Annotated

from fastapi import Depends, HTTPException

from github_activity import charts
from github_activity.settings import settings
from github_activity.client import GithubClient
from github_activity.search import DashboardSearch, ERROR_MESSAGES
from github_activity.aggregator import CommitActivityAggregator
from github_activity.web.dependencies import get_github_client
from github_activity.exceptions import UserNotFoundError, GithubUpstreamError
from github_activity.schemas import FailureKind
from github_activity.web.api.schemas import (
    DashboardResponse,
    RepositoryResponse,
    DailyCommitsResponse,
    ContributionBarResponse
)


class GithubActivityService:
    def __init__(
            self,
            github_client: Annotated[
                GithubClient,
                Depends(get_github_client)
            ]
    ):
        self._github_client = github_client

    async def get_repositories(
            self,
            username: str
    ) -> list[RepositoryResponse]:
        """Returns public repositories of the user."""
        try:
            repositories = await self._github_client.list_repositories(
                username
            )
        except UserNotFoundError:
            raise HTTPException(
                status_code=404,
                detail=ERROR_MESSAGES[FailureKind.NOT_FOUND]
            )
        except GithubUpstreamError:
            raise HTTPException(
                status_code=502,
                detail=ERROR_MESSAGES[FailureKind.UPSTREAM_ERROR]
            )
        except ValueError as error:
            raise HTTPException(status_code=422, detail=str(error))
        return [
            RepositoryResponse(**asdict(repository))
            for repository in repositories
        ]

    async def get_commit_activity(
            self,
            username: str
    ) -> list[DailyCommitsResponse]:
        """Returns daily commit activity of the user's first repositories."""
        aggregator = CommitActivityAggregator(
            self._github_client,
            max_repos_for_stats=settings.max_repos_for_stats
        )
        series = await aggregator.aggregate_commit_activity(username)
        return [DailyCommitsResponse(**asdict(point)) for point in series]

    async def get_dashboard(self, username: str) -> DashboardResponse:
        """Returns repositories and chart data of the user."""
        search = DashboardSearch(
            self._github_client,
            max_repos_for_stats=settings.max_repos_for_stats
        )
        result = await search.search(username)
        if result is None:
            raise HTTPException(
                status_code=422,
                detail="Username must not be empty."
            )
        series = result.commit_activity
        return DashboardResponse(
            username=result.username,
            repositories=[
                RepositoryResponse(**asdict(repository))
                for repository in result.repositories
            ],
            contribution_bars=[
                ContributionBarResponse(**asdict(bar))
                for bar in charts.build_contribution_bars(
                    series,
                    settings.chart_window
                )
            ],
            activity_line=[
                DailyCommitsResponse(**asdict(point))
                for point in charts.build_activity_line(series)
            ],
            total_commits=charts.total_commits(series),
            error=result.error_message
        )
