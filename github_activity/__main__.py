import sys
import json
import asyncio
import argparse
from dataclasses import asdict

from github_activity import charts
from github_activity.settings import settings
from github_activity.logger import configure_logger
from github_activity.client import GithubClient
from github_activity.search import DashboardSearch


async def main(
        username: str,
        page_size: int,
        max_repos: int,
        window: int
) -> int:
    client = GithubClient(
        access_token=settings.github_access_token,
        base_url=settings.github_api_base_url,
        repo_page_size=page_size,
        max_concurrent_requests=settings.max_concurrent_requests,
        requests_per_second=settings.requests_per_second,
        request_timeout=settings.request_timeout
    )
    async with client:
        result = await DashboardSearch(
            client,
            max_repos_for_stats=max_repos
        ).search(username)
    if result is None:
        print("Username must not be empty.", file=sys.stderr)
        return 2
    series = result.commit_activity
    dashboard = {
        "username": result.username,
        "error": result.error_message,
        "repositories": [asdict(repo) for repo in result.repositories],
        "total_commits": charts.total_commits(series),
        "contribution_bars": [
            asdict(bar)
            for bar in charts.build_contribution_bars(series, window)
        ],
        "activity_line": [
            asdict(point) for point in charts.build_activity_line(series)
        ],
    }
    print(json.dumps(dashboard, indent=2, default=str))
    return 1 if result.failure else 0


def parse_cmd_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Github Activity Dashboard")
    parser.add_argument(
        "username",
        help="Login of the Github user to analyze"
    )
    parser.add_argument(
        "-p",
        "--page-size",
        type=int,
        default=settings.repo_page_size,
        help="Maximum number of listed repositories of the user (1..100)."
    )
    parser.add_argument(
        "-m",
        "--max-repos",
        type=int,
        default=settings.max_repos_for_stats,
        help="Maximum number of repositories to fetch commit activity of."
    )
    parser.add_argument(
        "-w",
        "--window",
        type=int,
        default=settings.chart_window,
        help="Number of latest days shown in the contribution bars."
    )
    args = parser.parse_args()
    if not 1 <= args.page_size <= 100:
        parser.error("--page-size must be in 1..100 range")
    if args.max_repos < 0:
        parser.error("--max-repos cannot be negative")
    if args.window < 1:
        parser.error("--window must be positive")
    return args


if __name__ == "__main__":
    cmd_args = parse_cmd_args()
    configure_logger(sink=sys.stderr)
    sys.exit(
        asyncio.run(
            main(
                username=cmd_args.username,
                page_size=cmd_args.page_size,
                max_repos=cmd_args.max_repos,
                window=cmd_args.window
            )
        )
    )
