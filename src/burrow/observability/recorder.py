"""Event recorder — the single logging seam for sources and the collector.

Warnings go to stderr as indented one-liners (the same register as the CLI
output) and are mirrored into the ``EventLog`` as structured events, so tests
and callers can inspect what a run skipped or lost.

Thread Safety:
    The recorder delegates to ``EventLog`` which is internally locked.
    Safe for concurrent use from multiple source worker threads.

"""

from __future__ import annotations

import sys
from typing import TextIO

from burrow.observability.events import (
    CollectionFinished,
    EntrySkipped,
    SourceCollected,
    SourceFailed,
    now_ns,
)
from burrow.observability.log import EventLog


class EventRecorder:
    """Records collection events and prints warnings.

    Args:
        log: The EventLog to store events in.
        stream: Where warnings are printed (default ``sys.stderr``, looked up
            at call time so test capture works).
        quiet: Suppress printed warnings; events are still recorded.

    """

    __slots__ = ("_log", "_quiet", "_stream")

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        stream: TextIO | None = None,
        quiet: bool = False,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._stream = stream
        self._quiet = quiet

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def warn(self, message: str) -> None:
        """Print a warning line to the configured stream."""
        if self._quiet:
            return
        print(f"  {message}", file=self._stream or sys.stderr)

    # ----- Source events -----

    def record_collected(
        self,
        source: str,
        entries: int,
        *,
        duration_ms: float = 0.0,
        language: str | None = None,
    ) -> None:
        """Record a successful source run."""
        self._log.append(
            SourceCollected(
                source=source,
                entries=entries,
                duration_ms=duration_ms,
                language=language,
                timestamp_ns=now_ns(),
            )
        )

    def record_failure(
        self,
        source: str,
        error: BaseException | str,
        *,
        timed_out: bool = False,
    ) -> None:
        """Record a failed source run and print a warning."""
        description = error if isinstance(error, str) else _describe(error)
        reason = "timeout" if timed_out else "error"
        self.warn(f"Source {source!r} failed ({reason}): {description}")
        self._log.append(
            SourceFailed(
                source=source,
                error=description,
                reason=reason,
                timestamp_ns=now_ns(),
            )
        )

    def record_skip(self, source: str, subject: str, reason: str) -> None:
        """Record that *subject* was skipped and print a warning."""
        self.warn(f"{source}: skipped {subject} ({reason})")
        self._log.append(
            EntrySkipped(
                source=source,
                subject=subject,
                reason=reason,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Collector events -----

    def record_finished(
        self,
        *,
        language: str | None,
        sources_run: int,
        entries: int,
        duplicates: int,
        duration_ms: float,
    ) -> None:
        """Record the end of a collection run."""
        self._log.append(
            CollectionFinished(
                language=language,
                sources_run=sources_run,
                entries=entries,
                duplicates=duplicates,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )


def _describe(error: BaseException) -> str:
    text = str(error)
    name = type(error).__name__
    return f"{name}: {text}" if text else name
