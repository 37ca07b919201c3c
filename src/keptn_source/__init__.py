"""Keptn event source — polls Keptn events and republishes them as notifications."""

from .source import KeptnSource, PLUGIN_NAME, new_source
from .client import KeptnClient
from .config import SourceConfig, merge_configs
from .schema import Event, EventData, Message, MetadataOutput, OutgoingEvent, Section
from .formatter import format_message
from .stream import EventStream
from .exceptions import (
    ClientConstructionError,
    ConfigMergeError,
    DecodeError,
    KeptnSourceError,
    NetworkError,
    PollRequestError,
)
from ._version import __version__

__all__ = [
    "KeptnSource",
    "PLUGIN_NAME",
    "new_source",
    "KeptnClient",
    "SourceConfig",
    "merge_configs",
    "Event",
    "EventData",
    "Message",
    "MetadataOutput",
    "OutgoingEvent",
    "Section",
    "format_message",
    "EventStream",
    "ClientConstructionError",
    "ConfigMergeError",
    "DecodeError",
    "KeptnSourceError",
    "NetworkError",
    "PollRequestError",
    "__version__",
]
