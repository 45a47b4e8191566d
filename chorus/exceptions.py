"""Custom exceptions for Chorus services."""


class ChorusError(Exception):
    """Base class for service errors."""


class UpstreamError(ChorusError):
    """A peer service could not be reached or answered unexpectedly."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)

