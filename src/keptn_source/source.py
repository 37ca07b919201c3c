"""Main entry point for the Keptn event source."""

import logging
import threading
from typing import Iterable, Optional

from .client import DEFAULT_TIMEOUT_SECONDS, KeptnClient
from .config import DEFAULT_URL, ConfigFragment, merge_configs
from .schema import MetadataOutput
from .stream import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_QUEUE_SIZE, EventStream

logger = logging.getLogger("keptn_source.source")

PLUGIN_NAME = "keptn"

DESCRIPTION = "Keptn plugin polls events from configured Keptn API endpoint."


def json_schema() -> dict:
    """Declarative schema of the configuration keys the source understands."""
    return {
        "$schema": "http://json-schema.org/draft-04/schema#",
        "title": "Keptn",
        "description": DESCRIPTION,
        "type": "object",
        "properties": {
            "url": {
                "description": "Keptn API endpoint",
                "type": "string",
                "default": DEFAULT_URL,
            },
            "token": {
                "description": "Keptn API Token",
                "type": "string",
            },
            "project": {
                "description": "Keptn Project",
                "type": "string",
            },
            "service": {
                "description": "Keptn Service",
                "type": "string",
            },
        },
        "required": [],
    }


class KeptnSource:
    """Source plugin that republishes Keptn events as notifications.

    Usage:
        source = KeptnSource(version="1.2.0")
        stream = source.stream([{"url": "https://keptn.example/api", "token": "..."}])

        for event in stream:
            host.publish(event.message)

        # On shutdown:
        stream.stop()
    """

    def __init__(
        self,
        version: str = "dev",
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.version = version
        self.poll_interval = poll_interval
        self.queue_size = queue_size
        self.timeout = timeout

    def stream(
        self,
        configs: Iterable[ConfigFragment],
        cancel: Optional[threading.Event] = None,
    ) -> EventStream:
        """Start a stream session.

        Args:
            configs: Configuration fragments supplied by the host, merged
                with the last non-empty value winning.
            cancel: Optional cancellation signal shared with the host.
                Setting it stops the session, as does ``EventStream.stop()``.

        Raises:
            ConfigMergeError: if the fragments cannot be merged.
            ClientConstructionError: if the configured URL is unusable.
        """
        config = merge_configs(configs)
        client = KeptnClient(config.url, token=config.token, timeout=self.timeout)
        logger.debug("Starting Keptn stream session for %s", client.endpoint_url)
        return EventStream(
            client=client,
            config=config,
            poll_interval=self.poll_interval,
            queue_size=self.queue_size,
            cancel=cancel,
        )

    def metadata(self) -> MetadataOutput:
        return MetadataOutput(
            version=self.version,
            description=DESCRIPTION,
            json_schema=json_schema(),
        )


def new_source(version: str = "dev") -> KeptnSource:
    """Factory the host registers under ``PLUGIN_NAME``."""
    return KeptnSource(version=version)
