"""Forge installer exception hierarchy.

All installer-specific exceptions inherit from ForgeError,
enabling structured error handling and cleaner catch clauses.
"""


class ForgeError(Exception):
    """Base exception for all installer errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ConfigError(ForgeError):
    """Invalid or missing configuration."""


class CatalogError(ForgeError):
    """Unknown bundle or malformed identifier."""


class FetchError(ForgeError):
    """Error downloading a catalog file from the remote repository."""

    def __init__(
        self,
        message: str = "",
        *,
        kind: str = "unknown_error",
        url: str = "",
        hint: str = "",
        retryable: bool = True,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.kind = kind
        self.url = url
        self.hint = hint


class InstallError(ForgeError):
    """Error writing an installed file to disk."""
