"""Tests for burrow.observability — collection events and warnings."""

import io
import threading

from burrow.observability.events import (
    CollectionFinished,
    EntrySkipped,
    SourceCollected,
    SourceFailed,
    now_ns,
)
from burrow.observability.log import EventLog
from burrow.observability.recorder import EventRecorder


def _collected(source: str = "static", entries: int = 1) -> SourceCollected:
    return SourceCollected(
        source=source, entries=entries, duration_ms=0.1, language=None, timestamp_ns=now_ns(),
    )


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_collected())
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_collected(entries=i))
        assert len(log) == 5
        assert [e.entries for e in log.query(limit=2)] == [9, 8]

    def test_query_by_type_and_source(self) -> None:
        log = EventLog()
        log.append(_collected("static"))
        log.append(_collected("pages"))
        log.append(SourceFailed(source="pages", error="boom", reason="error", timestamp_ns=now_ns()))

        assert len(log.query(event_type=SourceCollected)) == 2
        assert len(log.query(source="pages")) == 2
        failed = log.query(event_type=SourceFailed, source="pages")
        assert [e.error for e in failed] == ["boom"]

    def test_query_most_recent_first_with_limit(self) -> None:
        log = EventLog()
        for i in range(5):
            log.append(_collected(entries=i))
        results = log.query(limit=2)
        assert [e.entries for e in results] == [4, 3]

    def test_query_since(self) -> None:
        log = EventLog()
        log.append(SourceCollected("a", 0, 0.0, None, timestamp_ns=100))
        log.append(SourceCollected("b", 0, 0.0, None, timestamp_ns=200))
        assert [e.source for e in log.query(since_ns=150)] == ["b"]

    def test_run_events_have_no_source(self) -> None:
        log = EventLog()
        log.append(CollectionFinished(None, 1, 1, 0, 0.5, timestamp_ns=now_ns()))
        assert log.query(source="static") == []
        assert len(log.query(event_type=CollectionFinished)) == 1

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def writer() -> None:
            for _ in range(200):
                log.append(_collected())

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 800


# ---------------------------------------------------------------------------
# EventRecorder
# ---------------------------------------------------------------------------


class TestEventRecorder:
    """EventRecorder — events into the log, warnings onto a stream."""

    def test_record_failure_warns_and_logs(self) -> None:
        stream = io.StringIO()
        recorder = EventRecorder(stream=stream)
        recorder.record_failure("entities", RuntimeError("db down"))

        assert "Source 'entities' failed (error): RuntimeError: db down" in stream.getvalue()
        (event,) = recorder.log.query(event_type=SourceFailed)
        assert event.reason == "error"
        assert event.error == "RuntimeError: db down"

    def test_record_timeout(self) -> None:
        recorder = EventRecorder(quiet=True)
        recorder.record_failure("blog", "no result within 1s", timed_out=True)
        (event,) = recorder.log.query(event_type=SourceFailed)
        assert event.reason == "timeout"

    def test_record_skip(self) -> None:
        stream = io.StringIO()
        recorder = EventRecorder(stream=stream)
        recorder.record_skip("entities", "kind 'product'", "no URL pattern")
        assert stream.getvalue() == "  entities: skipped kind 'product' (no URL pattern)\n"
        assert len(recorder.log.query(event_type=EntrySkipped)) == 1

    def test_quiet_still_records(self) -> None:
        stream = io.StringIO()
        recorder = EventRecorder(stream=stream, quiet=True)
        recorder.record_skip("pages", "a.md", "bad front matter")
        assert stream.getvalue() == ""
        assert len(recorder.log) == 1

    def test_warn_defaults_to_stderr(self, capsys) -> None:
        EventRecorder().warn("site_url is not set")
        assert "  site_url is not set" in capsys.readouterr().err

    def test_record_collected_and_finished(self) -> None:
        recorder = EventRecorder(quiet=True)
        recorder.record_collected("static", 3, duration_ms=1.5, language="fr")
        recorder.record_finished(
            language="fr", sources_run=1, entries=3, duplicates=0, duration_ms=2.0,
        )
        (collected,) = recorder.log.query(event_type=SourceCollected)
        assert collected.language == "fr"
        (finished,) = recorder.log.query(event_type=CollectionFinished)
        assert finished.entries == 3
