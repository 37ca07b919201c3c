"""Event and message models exchanged with the Keptn API and the host."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _none_as_empty(value: Any) -> Any:
    return "" if value is None else value


class EventData(BaseModel):
    """Payload of a Keptn event. Only the fields we render are modelled."""

    status: str = ""
    message: str = ""

    normalize_none = field_validator("status", "message", mode="before")(_none_as_empty)


class Event(BaseModel):
    """A single event returned by the Keptn events endpoint.

    Unknown wire keys (``time``, ``shkeptncontext``, ...) are ignored and
    ``null`` values are read as empty strings.
    """

    id: str = ""
    source: str = ""
    type: str = ""
    data: EventData = Field(default_factory=EventData)

    normalize_none = field_validator("id", "source", "type", mode="before")(_none_as_empty)

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_anonymized_event_details(self) -> dict[str, Any]:
        """Analytics labels for this event.

        Only non-identifying fields are included: no ID, source or
        free-text message ever leaves through the labels.
        """
        return {
            "type": self.type,
            "status": self.data.status,
        }


class Section(BaseModel):
    header: str = ""
    body_plaintext: str = ""


class Message(BaseModel):
    """Rendered notification as handed to the host."""

    sections: list[Section] = []


class OutgoingEvent(BaseModel):
    """One item on the stream's output queue."""

    message: Message
    raw_object: Event
    analytics_labels: dict[str, Any] = {}


class MetadataOutput(BaseModel):
    version: str
    description: str
    json_schema: dict[str, Any]
