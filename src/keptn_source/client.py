"""HTTP client for the Keptn events endpoint."""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import ValidationError

from .exceptions import ClientConstructionError, DecodeError, NetworkError
from .schema import Event

logger = logging.getLogger("keptn_source.client")

DEFAULT_TIMEOUT_SECONDS = 10.0
EVENTS_PATH = "/events"


def format_from_time(from_time: datetime) -> str:
    """Format a timestamp the way the Keptn API expects: UTC, millisecond precision."""
    if from_time.tzinfo is None:
        from_time = from_time.replace(tzinfo=timezone.utc)
    utc = from_time.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


class KeptnClient:
    """Fetches events from a Keptn API endpoint.

    One GET per call, bearer authentication when a token is configured.
    There is no retry and no pagination: callers get whatever the single
    request returned, or a ``PollRequestError`` subclass.
    """

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as exc:
            raise ClientConstructionError(url, str(exc)) from exc
        if parsed.scheme not in ("http", "https"):
            raise ClientConstructionError(url, "URL scheme must be http or https")
        if not parsed.host:
            raise ClientConstructionError(url, "URL has no host")
        if not token.isascii():
            raise ClientConstructionError(url, "token must contain only ASCII characters")

        self._endpoint_url = url.rstrip("/")
        self._token = token
        self._timeout = timeout

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def events(self, project: str, from_time: datetime) -> list[Event]:
        """List events of ``project`` created after ``from_time``.

        Raises:
            NetworkError: on transport failure or a non-2xx response.
            DecodeError: when the body is not a valid events payload.
        """
        params = {"fromTime": format_from_time(from_time)}
        if project:
            params["project"] = project

        try:
            response = httpx.get(
                f"{self._endpoint_url}{EVENTS_PATH}",
                params=params,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
            raise NetworkError(f"Keptn events request failed: {type(exc).__name__}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Keptn events request rejected (HTTP {response.status_code}): {response.text[:200]}",
                status_code=response.status_code,
            )
        if response.status_code == 204:
            return []

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"Keptn events response is not JSON: {exc}") from exc

        return _decode_events(payload)


def _decode_events(payload: object) -> list[Event]:
    items: Optional[object] = payload
    if isinstance(payload, dict):
        items = payload.get("events")
        if items is None:
            items = []
    if not isinstance(items, list):
        raise DecodeError(f"Keptn events payload has unexpected shape: {type(payload).__name__}")

    try:
        events = [Event.model_validate(item) for item in items]
    except ValidationError as exc:
        raise DecodeError(f"Keptn event failed validation: {exc.error_count()} error(s)") from exc

    logger.debug("Decoded %d Keptn event(s)", len(events))
    return events
