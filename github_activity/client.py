import asyncio
from datetime import datetime, UTC, timedelta
from typing import Any
from urllib.parse import quote

from aiohttp import ClientSession, ClientError, ClientTimeout
from aiolimiter import AsyncLimiter

from github_activity.logger import logger
from github_activity.settings import settings
from github_activity.exceptions import (
    UserNotFoundError,
    GithubResponseError,
    GithubNotAvailableError,
    GithubMalformedResponseError
)
from github_activity.schemas import (
    GithubResponse,
    RepositorySummary,
    WeeklyActivityRecord
)

# Statistics are still being computed (202) or repository is empty (204).
NO_DATA_STATUSES = (202, 204)


class GithubClient:
    """
    Client of Github REST API fetching public repositories of a user
    and weekly commit activity of the repositories.
    """
    def __init__(
            self,
            access_token: str | None = None,
            base_url: str = "https://api.github.com",
            repo_page_size: int = 100,
            max_concurrent_requests: int = 5,
            requests_per_second: int = 10,
            request_timeout: float | None = None
    ):
        """
        Parameters
        ----------
        access_token: str | None
            Optional token to be used during requests to Github API.
            Anonymous requests are made without it (lower rate limits).
        base_url: str
            Base url to Github API, without endpoint. You more likely shouldn't
            override it, provided you don't want to use another
            Github API host (proxy etc.)
        repo_page_size: int
            Number of repositories requested when listing user repositories.
            Cannot be more than 100 (Github API limitations).
        max_concurrent_requests: int
            Maximum number of requests executed concurrently.
        requests_per_second: int
            Maximum number of requests executed in one second.
        request_timeout: float | None
            Total timeout of one request in seconds.
            aiohttp default is used when None.
        """
        _validate_page_size(repo_page_size)
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        self._session = None
        self._github_api_base_url = base_url
        self._repo_page_size = repo_page_size
        self._max_concurrent_requests = max_concurrent_requests
        self._requests_semaphore = asyncio.Semaphore(max_concurrent_requests)
        self._requests_limiter = AsyncLimiter(requests_per_second, 1)
        self._request_timeout = request_timeout
        self.__access_token = access_token

    @classmethod
    def from_settings(cls) -> "GithubClient":
        """Creates a client configured with application settings."""
        return cls(
            access_token=settings.github_access_token,
            base_url=settings.github_api_base_url,
            repo_page_size=settings.repo_page_size,
            max_concurrent_requests=settings.max_concurrent_requests,
            requests_per_second=settings.requests_per_second,
            request_timeout=settings.request_timeout
        )

    @property
    def max_concurrent_requests(self) -> int:
        return self._max_concurrent_requests

    async def __aenter__(self):
        self.__create_client_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """
        This method had better be used at the end of your work with client.
        It does async cleanup (close connections etc.)
        """
        if self._session:
            await self._session.close()

    async def list_repositories(
            self,
            username: str,
            page_size: int | None = None
    ) -> list[RepositorySummary]:
        """
        Fetches public repositories of a Github user.
        Only the first page is requested, repositories beyond it are omitted.

        Parameters
        ----------
        username: str
            Login of the Github user.
        page_size: int | None
            Maximum number of repositories to fetch.
            Client repo_page_size is used when None.

        Returns
        ----------
        list[RepositorySummary]
            Repositories in the order returned by Github, unique by id.

        Raises
        ----------
        UserNotFoundError
            Github doesn't know the user.
        GithubUpstreamError
            Any other failure of the request or an unexpected payload.
        """
        username = _validate_username(username)
        if page_size is None:
            page_size = self._repo_page_size
        _validate_page_size(page_size)
        _logger = logger.bind(username=username)
        _logger.debug(f"Listing repositories (page size {page_size})")
        try:
            response = await self.__make_request(
                endpoint=f"users/{quote(username, safe='')}/repos",
                params={"per_page": page_size}
            )
        except GithubResponseError as error:
            if error.status == 404:
                raise UserNotFoundError(username) from error
            raise
        if not isinstance(response.data, list):
            raise GithubMalformedResponseError(
                f"Expected a list of repositories, got {type(response.data)}."
            )
        repositories, seen_ids = [], set()
        for raw_repository in response.data:
            repository = _parse_repository(raw_repository)
            if repository.id in seen_ids:
                _logger.debug(f"Skipping duplicated repository {repository}")
                continue
            seen_ids.add(repository.id)
            repositories.append(repository)
        _logger.debug(f"Retrieved {len(repositories)} repositories")
        return repositories

    async def get_commit_activity(
            self,
            owner: str,
            repo: str
    ) -> list[WeeklyActivityRecord]:
        """
        Fetches weekly commit activity of the repository for the last year.

        Parameters
        ----------
        owner: str
            Login of an owner of the repository.
        repo: str
            Name of the repository.

        Returns
        ----------
        list[WeeklyActivityRecord]
            Weekly records. Empty when Github is still computing statistics.

        Raises
        ----------
        GithubUpstreamError
            The request failed or the payload is malformed.
        """
        _logger = logger.bind(owner=owner, repo=repo)
        response = await self.__make_request(
            endpoint=(
                f"repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
                f"/stats/commit_activity"
            )
        )
        if response.status in NO_DATA_STATUSES or response.data is None:
            _logger.debug(
                f"No commit activity available yet (HTTP {response.status})"
            )
            return []
        if not isinstance(response.data, list):
            raise GithubMalformedResponseError(
                f"Expected a list of weeks, got {type(response.data)}."
            )
        return [_parse_week(raw_week) for raw_week in response.data]

    def __create_client_session(self):
        """Creates aiohttp client session object when necessary."""
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.__access_token:
            headers["Authorization"] = f"Bearer {self.__access_token}"
        else:
            logger.debug("Github client is not authenticated.")
        kwargs = {"headers": headers}
        if self._request_timeout is not None:
            kwargs["timeout"] = ClientTimeout(total=self._request_timeout)
        self._session = ClientSession(**kwargs)

    async def __make_request(
            self,
            endpoint: str,
            method: str = "GET",
            params: dict[str, Any] | None = None
    ) -> GithubResponse:
        """
        Makes a single request to Github API, without retries.

        Parameters
        ----------
        endpoint: str
            Endpoint of the API to use.
        method: str
            HTTP request method to use (GET, POST, PUT, DELETE...).
        params: dict[str, Any] | None
            Query parameters to use with the request.

        Returns
        ----------
        GithubResponse
            Response of the Github API. Its data is None
            for responses without content to decode.
        """
        _logger = logger.bind(method=method, endpoint=endpoint, params=params)
        _logger.debug("Making a request")
        if endpoint.startswith("/"):
            endpoint = endpoint[1:]
        if not self._session:
            self.__create_client_session()
        async with self._requests_semaphore:
            try:
                async with self._requests_limiter:
                    async with self._session.request(
                        method=method,
                        url=f"{self._github_api_base_url}/{endpoint}",
                        params=params
                    ) as response:
                        if response.status in NO_DATA_STATUSES:
                            return GithubResponse(
                                status=response.status,
                                links=None,
                                data=None
                            )
                        if response.status < 400:
                            _logger.debug("Successful request.")
                            return GithubResponse(
                                status=response.status,
                                links=(
                                    dict(response.links)
                                    if response.links
                                    else None
                                ),
                                data=await response.json()
                            )
                        _logger.debug(
                            f"Unsuccessful HTTP status response: "
                            f"{response.status}"
                        )
                        if response.status == 401:
                            raise GithubResponseError(
                                response.status,
                                "Github API returned UNAUTHORIZED (401). "
                                "Please check your access token."
                            )
                        if (
                            response.status == 403
                            and response.headers.get(
                                "X-RateLimit-Remaining"
                            ) == "0"
                        ):
                            raise GithubResponseError(
                                response.status,
                                "Github API rate limit exceeded."
                            )
                        raise GithubResponseError(response.status)
            except (ClientError, asyncio.TimeoutError) as error:
                _logger.debug(
                    f"Error during Github API request: "
                    f"{type(error)}, {error.args}"
                )
                raise GithubNotAvailableError(
                    f"Couldn't get a response from Github API: {error!r}"
                ) from error
            except ValueError as error:
                raise GithubMalformedResponseError(
                    f"Github API returned invalid JSON: {error}"
                ) from error


def _validate_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise ValueError("Username must not be empty.")
    return username


def _validate_page_size(page_size: int):
    if not 1 <= page_size <= 100:
        raise ValueError(
            "Github API doesn't allow to use page size "
            "out of 1..100 range."
        )


def _parse_repository(raw: Any) -> RepositorySummary:
    """Converts raw repository object of Github API to RepositorySummary."""
    try:
        return RepositorySummary(
            id=int(raw["id"]),
            name=str(raw["name"]),
            url=raw["html_url"],
            description=raw.get("description"),
            language=raw.get("language"),
            stars=int(raw.get("stargazers_count") or 0),
            forks=int(raw.get("forks_count") or 0)
        )
    except (KeyError, TypeError, ValueError, AttributeError) as error:
        raise GithubMalformedResponseError(
            f"Malformed repository object: {raw!r}"
        ) from error


def _parse_week(raw: Any) -> WeeklyActivityRecord:
    """Converts raw commit activity week of Github API to a record."""
    try:
        days = tuple(int(count) for count in raw["days"])
        record = WeeklyActivityRecord(
            week=int(raw["week"]),
            days=days,
            total=int(raw.get("total", sum(days)))
        )
        # week and its last day must be representable dates
        datetime.fromtimestamp(record.week, UTC).date() + timedelta(days=6)
    except (
            KeyError,
            TypeError,
            ValueError,
            AttributeError,
            OverflowError,
            OSError
    ) as error:
        raise GithubMalformedResponseError(
            f"Malformed commit activity week: {raw!r}"
        ) from error
    if len(record.days) != 7 or any(count < 0 for count in record.days):
        raise GithubMalformedResponseError(
            f"Commit activity week must have 7 non-negative days: {raw!r}"
        )
    return record
