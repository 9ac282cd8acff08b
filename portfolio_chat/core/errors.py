"""Error taxonomy for the chat pipeline.

ChatError subclasses are user-visible rejections and carry their HTTP status.
ExternalServiceError covers the generative model and is never surfaced:
the response selector recovers from it with a local fallback.
"""


class ChatError(Exception):
    """Base class for errors that reject a chat turn."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ChatError):
    """External-model credential missing."""
    status_code = 503


class ValidationError(ChatError):
    """Malformed message, body, or conversation history."""
    status_code = 400


class RateLimitError(ChatError):
    """Client key exhausted its window."""
    status_code = 429

    def __init__(self, message: str, reset_at: float, retry_after: int):
        super().__init__(message)
        self.reset_at = reset_at
        self.retry_after = retry_after


class ExternalServiceError(Exception):
    """The generative model failed, timed out, or returned an error status."""
    pass
