from contextlib import asynccontextmanager

from fastapi import FastAPI

from github_activity.logger import logger
from github_activity.settings import settings
from github_activity.client import GithubClient
from github_activity.web.api.views import router as github_activity_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Github Activity Dashboard",
        debug=settings.debug,
        lifespan=lifespan
    )
    register_routes(app)
    return app


def register_routes(app: FastAPI):
    routes = (
        (github_activity_router, "/api"),
    )
    for router, path in routes:
        app.include_router(router, prefix=path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Github Activity Dashboard API")
    app.state.github_client = GithubClient.from_settings()
    yield
    await app.state.github_client.close()
