"""Rendering of Keptn events into host notification messages."""

from types import MappingProxyType
from typing import Mapping

from .schema import Event, Message, OutgoingEvent, Section

DEFAULT_EMOJI = ":email:"

EMOJI_FOR_STATUS: Mapping[str, str] = MappingProxyType({
    "succeeded": ":large_green_circle:",
    "errored": ":x:",
    "aborted": ":warning:",
    "": DEFAULT_EMOJI,
})

BULLET = "• "


def emoji_for_status(status: str) -> str:
    """Return the emoji for a terminal status, ``:email:`` when unknown."""
    return EMOJI_FOR_STATUS.get(status, DEFAULT_EMOJI)


def _append_if_not_empty(lines: list[str], title: str, value: str) -> None:
    if value:
        lines.append(f"{title}: {value}")


def _bullet_list(lines: list[str]) -> str:
    return "".join(f"{BULLET}{line}\n" for line in lines)


def format_body(event: Event) -> str:
    """Bulleted ``Labels`` list of the event's non-empty ID, source and message.

    Values are passed through verbatim; markdown and emoji shortcodes are
    left for the host's renderer to interpret.
    """
    labels: list[str] = []
    _append_if_not_empty(labels, "ID", event.id)
    _append_if_not_empty(labels, "Source", event.source)
    _append_if_not_empty(labels, "Message", event.data.message)
    if not labels:
        return ""
    return f"*Labels:*\n{_bullet_list(labels)}"


def format_message(event: Event) -> Message:
    """Render one event as a single-section message."""
    header = f"{emoji_for_status(event.data.status)} {event.type}"
    return Message(sections=[Section(header=header, body_plaintext=format_body(event))])


def build_outgoing_event(event: Event) -> OutgoingEvent:
    return OutgoingEvent(
        message=format_message(event),
        raw_object=event,
        analytics_labels=event.to_anonymized_event_details(),
    )
