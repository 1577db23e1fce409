"""Collection observability — structured events plus stderr warnings.

Quick Start:
    >>> from burrow.observability import EventLog, EventRecorder
    >>> log = EventLog()
    >>> recorder = EventRecorder(log)
    >>> # Pass recorder to the Collector and sources
    >>> # Inspect afterwards via log.query(event_type=SourceFailed)

"""

from burrow.observability.events import (
    CollectionEvent,
    CollectionFinished,
    EntrySkipped,
    SourceCollected,
    SourceFailed,
    now_ns,
)
from burrow.observability.log import EventLog
from burrow.observability.recorder import EventRecorder

__all__ = [
    "CollectionEvent",
    "CollectionFinished",
    "EntrySkipped",
    "EventLog",
    "EventRecorder",
    "SourceCollected",
    "SourceFailed",
    "now_ns",
]
