class GithubActivityError(Exception):
    message: str = "There was an error while fetching Github activity."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class UserNotFoundError(GithubActivityError):
    message: str = "User not found."

    def __init__(self, username: str = None, message: str = None):
        self.username = username
        if message is None and username:
            message = f"Github user {username!r} not found."
        super().__init__(message)


class GithubUpstreamError(GithubActivityError):
    message: str = "Error fetching data from Github API."


class GithubNotAvailableError(GithubUpstreamError):
    message: str = "Github is not available at the moment."


class GithubResponseError(GithubUpstreamError):
    message: str = "Github API returned an unsuccessful response."

    def __init__(self, status: int, message: str = None):
        self.status = status
        super().__init__(message or f"{self.message} (HTTP {status})")


class GithubMalformedResponseError(GithubUpstreamError):
    message: str = "Github API returned a malformed payload."
