"""Domain errors raised by the wellness chat services.

Services raise these without knowing about HTTP; the exception handlers in
app.main translate them to status codes and JSON bodies.
"""


class ChatError(Exception):
    """Base class for errors surfaced to the chat client."""

    status_code: int = 500
    default_message: str = "Unable to process request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_content(self) -> dict:
        return {"error": self.message}


class QuotaExceededError(ChatError):
    """The user has used every AI message their tier allows today."""

    status_code = 429
    default_message = "Daily message limit reached"

    def __init__(
        self,
        limit: int,
        current: int,
        upgrade_message: str,
        retry_after: int | None = None,
    ):
        super().__init__()
        self.limit = limit
        self.current = current
        self.upgrade_message = upgrade_message
        self.retry_after = retry_after

    def to_content(self) -> dict:
        return {
            "error": self.message,
            "limit": self.limit,
            "current": self.current,
            "upgradeMessage": self.upgrade_message,
        }


class StorageError(ChatError):
    """Usage or FAQ persistence failed; nothing was generated or billed."""

    status_code = 500
    default_message = "Unable to access chat usage records. Please try again later."


class GenerativeRateLimitedError(ChatError):
    """The AI provider returned HTTP 429."""

    status_code = 429
    default_message = "AI service rate limit exceeded. Please try again later."


class GenerativeCapacityExceededError(ChatError):
    """The AI provider returned HTTP 402 (credits exhausted)."""

    status_code = 402
    default_message = "AI service payment required. Please contact support."


class UnknownUpstreamError(ChatError):
    """Any other AI provider failure. The client only sees a generic message."""

    status_code = 500
    default_message = "AI service error. Please try again later."

    def __init__(self, detail: str | None = None, upstream_status: int | None = None):
        super().__init__()
        self.detail = detail
        self.upstream_status = upstream_status
