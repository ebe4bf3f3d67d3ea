class MovieChatError(Exception):
    """Base class for errors raised by the recommendation pipeline."""


class ConfigurationError(MovieChatError):
    """A required setting is missing; raised before any request is sent."""

    def __init__(self, missing: str):
        self.missing = missing
        super().__init__(
            f"{missing} is not configured. Please check your .env file.")


class UpstreamRequestError(MovieChatError):
    """A call to TMDB or the generative-text service failed."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service} request failed: {message}")


class ParseError(MovieChatError):
    """The generative response is not a JSON array of title strings."""

    def __init__(self, raw: str, message: str = "expected a JSON array of strings"):
        self.raw = raw
        super().__init__(f"Failed to parse movie titles: {message}")
