"""Exception types raised by the GameSense client."""

from __future__ import annotations


class GameSenseError(RuntimeError):
    pass


class DiscoveryError(GameSenseError):
    """The local service address could not be determined."""


class RequestError(GameSenseError):
    """A POST to the service failed or returned a non-200 status."""

    def __init__(self, message: str, status: int | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.path = path
