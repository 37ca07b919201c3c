"""Custom exceptions for the Keptn event source."""

from typing import Optional


class KeptnSourceError(Exception):
    """Base class for every error raised by this package."""


class ConfigMergeError(KeptnSourceError):
    """Raised when configuration fragments cannot be merged.

    ``fields`` lists every offending path, e.g. ``fragments[1].url``,
    so the host can point the user at the broken setting.
    """

    def __init__(self, fields: list[str], reason: Optional[str] = None):
        self.fields = list(fields)
        self.reason = reason or "invalid configuration value"
        super().__init__(
            f"Cannot merge source configuration: {self.reason} "
            f"({', '.join(self.fields)})"
        )


class ClientConstructionError(KeptnSourceError):
    """Raised when the API client cannot be built from the configured URL."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot create Keptn client for '{url}': {reason}")


class PollRequestError(KeptnSourceError):
    """A single poll cycle failed. The stream logs it and keeps going."""


class NetworkError(PollRequestError):
    """Transport failure or non-2xx response from the events endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DecodeError(PollRequestError):
    """The events endpoint answered with a payload we could not parse."""
