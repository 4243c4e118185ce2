"""Retry policy for failed deliveries."""


class RetryPolicy:
    """Decides whether a failed item is retried or dropped."""

    DEFAULT_MAX_ATTEMPTS = 3

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts

    def should_drop(self, attempts_after_failure: int) -> bool:
        """Return True once an item has used up its delivery attempts."""
        return attempts_after_failure >= self.max_attempts

    def __repr__(self) -> str:
        return f"RetryPolicy(max_attempts={self.max_attempts})"
