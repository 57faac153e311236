"""Exception classes for the Twigga CLI."""

from __future__ import annotations

from pathlib import Path


class TwiggaError(Exception):
    """Base exception for all Twigga CLI errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PlatformAPIError(TwiggaError):
    """Error returned from the Twigga service.

    Attributes:
        status_code: HTTP status code, or 0 for transport failures.
        message: Error message (the response body for HTTP errors).
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"

    @property
    def is_retryable(self) -> bool:
        """Check if retrying the same call later could succeed."""
        return self.status_code == 429 or self.status_code >= 500


class RateLimitError(PlatformAPIError):
    """Too many requests from this client."""

    def __init__(
        self, message: str = "too many requests per IP, please try again later"
    ) -> None:
        super().__init__(429, message)


class MalformedResponseError(PlatformAPIError):
    """Response is missing a field the client depends on."""


class ProfileError(TwiggaError):
    """Reading or writing the local profile failed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class LoginError(TwiggaError):
    """Browser login did not produce a session token."""


class LoginTimeoutError(LoginError):
    """No callback arrived before the login deadline."""


class NoTokenError(LoginError):
    """Callback arrived without a recognizable token."""


class DeployError(TwiggaError):
    """A step of the site deploy pipeline failed."""
