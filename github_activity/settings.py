from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    debug: bool = False
    log_level: str = "INFO"

    github_access_token: str | None = None
    github_api_base_url: str = "https://api.github.com"

    repo_page_size: int = Field(default=100, ge=1, le=100)
    max_repos_for_stats: int = Field(default=5, ge=0)
    max_concurrent_requests: int = Field(default=5, ge=1)
    requests_per_second: int = Field(default=10, ge=1)
    request_timeout: float | None = Field(default=None, gt=0)

    chart_window: int = Field(default=90, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GITHUB_ACTIVITY_"
    )

settings = Settings()
