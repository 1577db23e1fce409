"""Event model for collection observability.

Every collection run records what each source contributed, what failed, and
what was skipped.  Events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Source events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceCollected:
    """A source finished and returned entries.

    Attributes:
        source: Source identifier.
        entries: Number of entries returned.
        duration_ms: Wall time of the ``collect`` call in milliseconds.
        language: Requested language code, if any.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    entries: int
    duration_ms: float
    language: str | None
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SourceFailed:
    """A source failed and contributed nothing.

    Attributes:
        source: Source identifier.
        error: Short description of the failure.
        reason: ``"error"`` for a raised exception, ``"timeout"`` when the
            per-source deadline expired.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    error: str
    reason: Literal["error", "timeout"]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class EntrySkipped:
    """A record, kind, or route was skipped inside a source.

    Attributes:
        source: Source identifier.
        subject: What was skipped (kind name, file path, route path).
        reason: Why it was skipped.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    subject: str
    reason: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Collector events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CollectionFinished:
    """A collection run completed.

    Attributes:
        language: Requested language code, if any.
        sources_run: Number of enabled sources invoked.
        entries: Entries in the final, deduplicated list.
        duplicates: Entries dropped by deduplication.
        duration_ms: Total run time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    language: str | None
    sources_run: int
    entries: int
    duplicates: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type CollectionEvent = (
    SourceCollected
    | SourceFailed
    | EntrySkipped
    | CollectionFinished
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
