from typing import Annotated

from fastapi import APIRouter, Depends

from github_activity.web.api.services import GithubActivityService
from github_activity.web.api.schemas import (
    DashboardResponse,
    RepositoryResponse,
    DailyCommitsResponse
)


router = APIRouter()


@router.get("/users/{username}/repositories")
async def get_repositories(
        username: str,
        github_activity_service: Annotated[
            GithubActivityService,
            Depends(GithubActivityService)
        ]
) -> list[RepositoryResponse]:
    """Returns public repositories of a Github user."""
    return await github_activity_service.get_repositories(username)


@router.get("/users/{username}/commit-activity")
async def get_commit_activity(
        username: str,
        github_activity_service: Annotated[
            GithubActivityService,
            Depends(GithubActivityService)
        ]
) -> list[DailyCommitsResponse]:
    """Returns daily commit activity of a Github user."""
    return await github_activity_service.get_commit_activity(username)


@router.get("/users/{username}/dashboard")
async def get_dashboard(
        username: str,
        github_activity_service: Annotated[
            GithubActivityService,
            Depends(GithubActivityService)
        ]
) -> DashboardResponse:
    """Returns repositories and commit activity charts of a Github user."""
    return await github_activity_service.get_dashboard(username)
