"""Background poll loop publishing formatted Keptn events onto a queue."""

import atexit
import logging
import queue
import threading
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from .client import KeptnClient
from .config import SourceConfig
from .exceptions import PollRequestError
from .formatter import build_outgoing_event
from .schema import OutgoingEvent

logger = logging.getLogger("keptn_source.stream")

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_QUEUE_SIZE = 1

# Granularity at which a blocked put or an idle iterator re-checks cancellation.
_CANCEL_CHECK_SECONDS = 0.1


class EventStream:
    """One stream session: a poll thread feeding an output queue.

    Every ``poll_interval`` seconds the worker asks the client for events
    created in the last interval, formats them, and puts them on
    ``events`` one by one. Puts block while the queue is full, so a
    consumer that stops reading also stops polling. ``queue_size=0``
    makes the queue unbounded.

    Cancellation is cooperative: setting ``cancel`` (or calling
    ``stop()``) ends the loop before the next request. A request that is
    already in flight runs until it completes or times out.
    """

    def __init__(
        self,
        client: KeptnClient,
        config: SourceConfig,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        cancel: Optional[threading.Event] = None,
    ):
        self.client = client
        self.config = config
        self.poll_interval = poll_interval
        self.events: queue.Queue = queue.Queue(maxsize=queue_size)
        self._cancel = cancel if cancel is not None else threading.Event()
        self._worker = threading.Thread(target=self._run, name="keptn-source-poll", daemon=True)
        self._worker.start()
        atexit.register(self.stop)

    @property
    def is_running(self) -> bool:
        return self._worker.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def _run(self):
        """Poll until cancelled."""
        logger.info(
            "Keptn event stream started (endpoint=%s, project=%r, interval=%.1fs)",
            self.client.endpoint_url,
            self.config.project,
            self.poll_interval,
        )
        try:
            while not self._cancel.is_set():
                self._poll_once()
                # Wakes up immediately when the stream is cancelled.
                self._cancel.wait(self.poll_interval)
        finally:
            # A host-side cancel never goes through stop().
            atexit.unregister(self.stop)
        logger.info("Keptn event stream stopped")

    def _poll_once(self):
        from_time = datetime.now(timezone.utc) - timedelta(seconds=self.poll_interval)
        try:
            events = self.client.events(self.config.project, from_time)
        except PollRequestError as exc:
            logger.error("Failed to get Keptn events: %s", exc)
            return

        logger.debug("Fetched %d Keptn event(s) since %s", len(events), from_time.isoformat())
        for event in events:
            if not self._put(build_outgoing_event(event)):
                return

    def _put(self, item: OutgoingEvent) -> bool:
        """Block until the item is queued. Returns False if cancelled first."""
        while not self._cancel.is_set():
            try:
                self.events.put(item, timeout=_CANCEL_CHECK_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def get(self, timeout: Optional[float] = None) -> OutgoingEvent:
        """Take the next event off the queue. Raises ``queue.Empty`` on timeout."""
        return self.events.get(timeout=timeout)

    def __iter__(self) -> Iterator[OutgoingEvent]:
        """Yield events until the stream is stopped and the queue is drained."""
        while True:
            try:
                yield self.events.get(timeout=_CANCEL_CHECK_SECONDS)
            except queue.Empty:
                if not self._worker.is_alive():
                    return

    def stop(self, timeout: Optional[float] = None):
        """Cancel the poll loop and wait for the worker thread to exit."""
        self._cancel.set()
        atexit.unregister(self.stop)
        if self._worker is not threading.current_thread():
            self._worker.join(timeout=timeout)
