class LeaderboardError(Exception):
    """Base class for errors that end a leaderboard request."""


class ValidationError(LeaderboardError):
    """A submitted field failed validation. The message is safe to show to clients."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class RateLimitError(LeaderboardError):
    def __init__(self, retry_after: int, headers: dict[str, str] | None = None) -> None:
        super().__init__(f"Rate limit exceeded, retry in {retry_after}s")
        self.retry_after = retry_after
        self.headers = headers or {}


class PersistenceError(LeaderboardError):
    """Storage read or write failed. Details stay in the chained exception and the logs."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Storage operation failed: {operation}")
        self.operation = operation
