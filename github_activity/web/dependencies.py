from typing import AsyncGenerator

from fastapi import Request

from github_activity.client import GithubClient


async def get_github_client(
        request: Request = None
) -> AsyncGenerator[GithubClient, None]:
    """
    Returns Github client shared by the application.
    If FastAPI app is initialized, it uses a client created during startapp,
    otherwise creates a new one, closed after the request.

    Parameters
    ----------
    request: Request
        Current request object, if exists.

    Returns
    -------
    GithubClient
        Client ready to use.
    """
    if (
            request
            and request.app.state
            and hasattr(request.app.state, "github_client")
    ):
        yield request.app.state.github_client
        return
    async with GithubClient.from_settings() as client:
        yield client
