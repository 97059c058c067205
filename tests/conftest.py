import asyncio

import pytest
from fastapi.testclient import TestClient

from github_activity.web.app import create_app
from github_activity.web.dependencies import get_github_client
from github_activity.exceptions import GithubNotAvailableError
from github_activity.schemas import RepositorySummary, WeeklyActivityRecord

# 2023-11-19 00:00:00 UTC, Sunday
WEEK = 1700352000
NEXT_WEEK = WEEK + 7 * 24 * 60 * 60


def make_repository(repo_id: int, name: str = None) -> RepositorySummary:
    return RepositorySummary(
        id=repo_id,
        name=name or f"repo{repo_id}",
        url=f"https://github.com/octocat/repo{repo_id}",
        description=None,
        language="Python",
        stars=repo_id,
        forks=0
    )


def make_week(week: int, days: list[int]) -> WeeklyActivityRecord:
    return WeeklyActivityRecord(week=week, days=tuple(days), total=sum(days))


class FakeActivitySource:
    def __init__(
            self,
            repositories=None,
            activity=None,
            failing=(),
            list_error=None,
            max_concurrent_requests=5
    ):
        self.repositories = repositories or []
        self.activity = activity or {}
        self.failing = set(failing)
        self.list_error = list_error
        self.max_concurrent_requests = max_concurrent_requests
        self.list_calls = []
        self.requested = []

    async def list_repositories(self, username):
        self.list_calls.append(username)
        await asyncio.sleep(0)
        if self.list_error:
            raise self.list_error
        return list(self.repositories)

    async def get_commit_activity(self, owner, repo):
        self.requested.append((owner, repo))
        await asyncio.sleep(0)
        if repo in self.failing:
            raise GithubNotAvailableError(f"{repo} is not available")
        return list(self.activity.get(repo, []))


@pytest.fixture
def repositories():
    return [make_repository(i) for i in range(1, 8)]


@pytest.fixture
def fake_source(repositories):
    return FakeActivitySource(
        repositories=repositories,
        activity={
            "repo1": [make_week(WEEK, [1, 0, 0, 2, 0, 0, 3])],
            "repo2": [
                make_week(WEEK, [0, 0, 0, 2, 0, 0, 0]),
                make_week(NEXT_WEEK, [4, 0, 0, 0, 0, 0, 1]),
            ],
        }
    )


@pytest.fixture(scope="function")
def test_client(fake_source):
    app = create_app()
    app.dependency_overrides[get_github_client] = lambda: fake_source
    return TestClient(app=app)
