"""
Errors raised while collecting props. Every one of them is fatal for the run.
"""
from typing import Optional


class PropsError(Exception):
    pass


class TransportError(PropsError):
    """A service could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class MalformedResponseError(PropsError):
    """A response did not have the expected shape."""
