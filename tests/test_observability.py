"""Tests for the observability system."""

import io
import logging
import json

import pytest

from soundkeeper.observability import ObservabilityHub, Sink, TraceLevel
from soundkeeper.observability.records import (
    EntrySkipRecord,
    ManifestErrorRecord,
    RootScanRecord,
    ScanEndRecord,
    ScanStartRecord,
)
from soundkeeper.observability.sinks import ConsoleSink, FileSink, MemorySink, NullSink


class FailingSink(Sink):
    def write(self, record):
        raise RuntimeError("sink broke")


class TestTraceLevel:
    """Tests for TraceLevel enum."""

    def test_ordering(self):
        """Test higher levels include lower ones."""
        assert TraceLevel.OFF < TraceLevel.MINIMAL < TraceLevel.NORMAL < TraceLevel.VERBOSE

    def test_parse(self):
        assert TraceLevel.parse("verbose") is TraceLevel.VERBOSE
        assert TraceLevel.parse(" Normal ") is TraceLevel.NORMAL

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown trace level"):
            TraceLevel.parse("loud")


class TestObservabilityHub:
    """Tests for ObservabilityHub."""

    def test_singleton(self):
        assert ObservabilityHub.get_instance() is ObservabilityHub.get_instance()

    def test_disabled_by_default(self):
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.add_sink(sink)
        hub.emit(ScanStartRecord())
        assert not hub.enabled
        assert len(sink) == 0

    def test_level_filtering(self):
        """Test records above the configured level are dropped."""
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.configure(level=TraceLevel.MINIMAL, sinks=[sink])

        hub.emit(ScanStartRecord())
        hub.emit(RootScanRecord(path="/a"))
        hub.emit(EntrySkipRecord(path="/a/x.txt", reason="suffix"))

        assert [r.record_type for r in sink.get_records()] == ["scan_start"]

    def test_verbose_receives_everything(self):
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.configure(level=TraceLevel.VERBOSE, sinks=[sink])

        hub.emit(ScanStartRecord())
        hub.emit(RootScanRecord(path="/a"))
        hub.emit(ManifestErrorRecord(path="/a/b.vst3", manifest="Info.plist"))

        assert len(sink) == 3

    def test_failing_sink_does_not_raise(self):
        hub = ObservabilityHub()
        good = MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[FailingSink(), good])
        hub.emit(RootScanRecord(path="/a"))
        assert len(good) == 1

    def test_remove_sink(self):
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[sink])
        hub.remove_sink(sink)
        hub.emit(RootScanRecord())
        assert len(sink) == 0

    def test_shutdown_turns_off(self):
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.NORMAL, sinks=[MemorySink()])
        hub.shutdown()
        assert not hub.enabled
        assert hub.level == TraceLevel.OFF

    def test_is_level_enabled(self):
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.NORMAL)
        assert hub.is_level_enabled(TraceLevel.MINIMAL)
        assert not hub.is_level_enabled(TraceLevel.VERBOSE)

    def test_configure_by_name(self):
        """Test a level name from a config file is accepted."""
        hub = ObservabilityHub()
        hub.configure(level="minimal")
        assert hub.level is TraceLevel.MINIMAL
        with pytest.raises(ValueError):
            hub.configure(level="loud")

    def test_configure_replace(self, tmp_path):
        hub = ObservabilityHub()
        first = FileSink(str(tmp_path / "first.jsonl"))
        second = MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[first])
        hub.emit(RootScanRecord(path="/a"))

        hub.configure(level=TraceLevel.NORMAL, sinks=[second], replace=True)

        assert hub.sinks == (second,)
        assert (tmp_path / "first.jsonl").read_text(encoding="utf-8").count("\n") == 1

    def test_stats(self):
        """Test delivered, filtered and failed emissions are counted."""
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.NORMAL, sinks=[FailingSink(), MemorySink()])

        hub.emit(RootScanRecord(path="/a"))
        hub.emit(RootScanRecord(path="/b"))
        hub.emit(EntrySkipRecord(path="/a/x.txt", reason="suffix"))

        stats = hub.get_stats()
        assert stats["level"] == "normal"
        assert stats["sinks"] == 2
        assert stats["emitted"] == {"root_scan": 2}
        assert stats["filtered"] == 1
        assert stats["sink_errors"] == 2

    def test_sink_failure_logged(self, caplog):
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.NORMAL, sinks=[FailingSink()])
        with caplog.at_level(logging.DEBUG, logger="soundkeeper.observability"):
            hub.emit(RootScanRecord(path="/a"))
        assert "FailingSink.write failed" in caplog.text


class TestRecords:
    """Tests for trace record serialisation."""

    def test_record_type_fixed(self):
        assert RootScanRecord().record_type == "root_scan"
        assert ScanEndRecord().record_type == "scan_end"

    def test_to_dict_hides_min_level(self):
        d = EntrySkipRecord(path="/x", reason="duplicate").to_dict()
        assert "min_level" not in d
        assert d["reason"] == "duplicate"
        assert "timestamp_ns" in d

    def test_to_json(self):
        record = ScanStartRecord(scan_id="abc", root_count=3, families=["au", "vst"])
        data = json.loads(record.to_json())
        assert data["record_type"] == "scan_start"
        assert data["families"] == ["au", "vst"]


class TestFileSink:
    """Tests for FileSink."""

    def test_writes_jsonl(self, tmp_path):
        path = tmp_path / "traces" / "scan.jsonl"
        sink = FileSink(str(path), buffer_size=10)
        sink.write(RootScanRecord(path="/a", records=2))
        sink.write(RootScanRecord(path="/b", exists=False))
        sink.close()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["records"] == 2
        assert json.loads(lines[1])["exists"] is False

    def test_append(self, tmp_path):
        path = tmp_path / "scan.jsonl"
        for _ in range(2):
            sink = FileSink(str(path), append=True)
            sink.write(ScanStartRecord())
            sink.close()
        assert len(path.read_text(encoding="utf-8").splitlines()) == 2


class TestConsoleSink:
    """Tests for ConsoleSink formatting."""

    def test_root_line(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream)
        sink.write(RootScanRecord(family="au", path="/AU", records=4, skipped=1))
        assert stream.getvalue() == "[ROOT] au /AU: 4 plugins, 1 skipped in 0ms\n"

    def test_missing_root(self):
        stream = io.StringIO()
        ConsoleSink(stream=stream).write(RootScanRecord(family="vst", path="/V", exists=False))
        assert "(missing)" in stream.getvalue()

    def test_scan_end(self):
        stream = io.StringIO()
        ConsoleSink(stream=stream).write(
            ScanEndRecord(total_records=7, roots_scanned=3, roots_missing=2, cancelled=True)
        )
        assert stream.getvalue().startswith("[SCAN] cancelled: 7 plugins from 3 roots (2 missing)")

    def test_skip_and_manifest(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream)
        sink.write(EntrySkipRecord(path="/x.txt", reason="suffix"))
        sink.write(ManifestErrorRecord(path="/b.vst3", manifest="Info.plist", error="bad"))
        lines = stream.getvalue().splitlines()
        assert lines == ["[SKIP] /x.txt (suffix)", "[MANIFEST] /b.vst3: Info.plist: bad"]

    def test_start_ignored(self):
        stream = io.StringIO()
        ConsoleSink(stream=stream).write(ScanStartRecord())
        assert stream.getvalue() == ""

    def test_custom_format(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, format_fn=lambda r: r.record_type)
        sink.write(ScanStartRecord())
        assert stream.getvalue() == "scan_start\n"


class TestMemorySink:
    """Tests for MemorySink."""

    def test_filter_by_type(self):
        sink = MemorySink()
        sink.write(ScanStartRecord())
        sink.write(RootScanRecord(path="/a"))
        assert len(sink.get_records("root_scan")) == 1

    def test_get_by_path(self):
        sink = MemorySink()
        sink.write(RootScanRecord(path="/a"))
        sink.write(EntrySkipRecord(path="/a/x"))
        sink.write(ManifestErrorRecord(path="/a"))
        assert len(sink.get_by_path("/a")) == 2

    def test_max_records(self):
        sink = MemorySink(max_records=2)
        for i in range(5):
            sink.write(RootScanRecord(path=f"/{i}"))
        assert [r.path for r in sink.get_records()] == ["/3", "/4"]

    def test_clear(self):
        sink = MemorySink()
        sink.write(ScanStartRecord())
        sink.clear()
        assert len(sink) == 0

    def test_null_sink(self):
        NullSink().write(ScanStartRecord())
