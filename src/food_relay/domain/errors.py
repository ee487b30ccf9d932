"""Errors surfaced to relay clients."""


class RelayError(Exception):
    """Error rendered as `{"success": false, "error": message}`."""

    def __init__(
        self, status_code: int, message: str, raw_content: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.raw_content = raw_content


CONFIGURATION_ERROR = "Server configuration error: OpenAI API key not set"
SERVER_ERROR = "Server error processing request"
INVALID_UPSTREAM_RESPONSE = "Invalid response from OpenAI"
RATE_LIMITED = "Too many requests, please try again later."


def upstream_error(status_code: int) -> RelayError:
    """Propagate a provider status code with a generic message."""
    return RelayError(status_code, f"OpenAI API error: {status_code}")
