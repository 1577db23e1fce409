"""Event log — what the last collection runs did, newest last.

The recorder appends one event per source result, skipped item and finished
run.  Callers and tests read it back with ``query``.  The log is bounded;
a long-lived process collecting on a schedule keeps only the most recent
``max_events``.

Thread Safety:
    Appends and queries hold a ``threading.Lock``; source worker threads
    append concurrently.

"""

import threading
from collections import deque

from burrow.observability.events import CollectionEvent


class EventLog:
    """Bounded store of collection events.

    Args:
        max_events: Oldest events are dropped beyond this many.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[CollectionEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: CollectionEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        source: str | None = None,
        since_ns: int = 0,
        limit: int = 100,
    ) -> list[CollectionEvent]:
        """Matching events, newest first.

        Args:
            event_type: Keep only this event class (``SourceFailed``).
            source: Keep only events about this source; run-level events
                (``CollectionFinished``) carry no source and never match.
            since_ns: Keep only events stamped at or after this time.
            limit: At most this many events.

        """
        with self._lock:
            snapshot = list(self._events)
        matches: list[CollectionEvent] = []
        for event in reversed(snapshot):
            if len(matches) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if source is not None and getattr(event, "source", None) != source:
                continue
            if event.timestamp_ns < since_ns:
                continue
            matches.append(event)
        return matches

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
