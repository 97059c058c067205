import pytest
from fastapi.testclient import TestClient

from github_activity.exceptions import (
    UserNotFoundError,
    GithubResponseError,
    GithubNotAvailableError
)


def test_repositories_api_returns_repositories(test_client: TestClient):
    response = test_client.get("/api/users/octocat/repositories")
    assert response.status_code == 200
    repositories = response.json()
    assert len(repositories) == 7
    assert repositories[0] == {
        "id": 1,
        "name": "repo1",
        "url": "https://github.com/octocat/repo1",
        "description": None,
        "language": "Python",
        "stars": 1,
        "forks": 0,
    }


def test_repositories_api_returns_404_for_unknown_user(
        test_client: TestClient,
        fake_source
):
    fake_source.list_error = UserNotFoundError("ghost")
    response = test_client.get("/api/users/ghost/repositories")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


@pytest.mark.parametrize(
    "error",
    [GithubResponseError(500), GithubNotAvailableError()]
)
def test_repositories_api_returns_502_on_upstream_errors(
        test_client: TestClient,
        fake_source,
        error
):
    fake_source.list_error = error
    response = test_client.get("/api/users/octocat/repositories")
    assert response.status_code == 502
    assert response.json()["detail"] == "Error fetching data"


def test_commit_activity_api_returns_daily_series(test_client: TestClient):
    response = test_client.get("/api/users/octocat/commit-activity")
    assert response.status_code == 200
    series = response.json()
    assert len(series) == 14
    assert series[0] == {"date": "2023-11-19", "count": 1}
    assert series[3] == {"date": "2023-11-22", "count": 4}
    dates = [point["date"] for point in series]
    assert dates == sorted(set(dates))


def test_commit_activity_api_never_fails(
        test_client: TestClient,
        fake_source
):
    fake_source.list_error = GithubNotAvailableError()
    response = test_client.get("/api/users/octocat/commit-activity")
    assert response.status_code == 200
    assert response.json() == []


def test_dashboard_api(test_client: TestClient):
    response = test_client.get("/api/users/octocat/dashboard")
    assert response.status_code == 200
    dashboard = response.json()
    assert dashboard["username"] == "octocat"
    assert dashboard["error"] is None
    assert len(dashboard["repositories"]) == 7
    assert dashboard["total_commits"] == 13
    assert len(dashboard["activity_line"]) == 14
    assert dashboard["contribution_bars"][0] == {
        "date": "2023-11-19",
        "count": 1,
        "color": "#9be9a8",
    }
    assert dashboard["contribution_bars"][3]["color"] == "#40c463"


def test_dashboard_api_reports_unknown_user(
        test_client: TestClient,
        fake_source
):
    fake_source.list_error = UserNotFoundError("ghost")
    response = test_client.get("/api/users/ghost/dashboard")
    assert response.status_code == 200
    dashboard = response.json()
    assert dashboard["error"] == "User not found"
    assert dashboard["repositories"] == []
    assert dashboard["contribution_bars"] == []
    assert dashboard["total_commits"] == 0


def test_dashboard_api_rejects_blank_username(test_client: TestClient):
    response = test_client.get("/api/users/%20/dashboard")
    assert response.status_code == 422
