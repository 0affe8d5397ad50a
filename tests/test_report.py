"""Tests for report export."""

import csv
import io
from datetime import date, datetime

import pytest

from soundkeeper.core.formats import PluginFormat
from soundkeeper.core.record import UNKNOWN, PluginRecord
from soundkeeper.exceptions import ReportError
from soundkeeper.report import (
    COLUMNS,
    default_report_name,
    format_date,
    format_size,
    to_delimited_text,
    write_report,
)


def make_record(**kwargs) -> PluginRecord:
    defaults = dict(
        name="Reverb",
        format=PluginFormat.AU,
        path="/Library/Audio/Plug-Ins/Components/Reverb.component",
        version="2.1.4",
        manufacturer="Lumen Labs",
        size_bytes=12_000,
        modified_at=datetime(2024, 5, 1, 9, 5),
    )
    defaults.update(kwargs)
    return PluginRecord(**defaults)


class TestFormatSize:
    """Tests for human-readable sizes."""

    def test_zero(self):
        assert format_size(0) == "Zero KB"

    def test_bytes(self):
        assert format_size(1) == "1 byte"
        assert format_size(512) == "512 bytes"

    def test_kilobytes(self):
        assert format_size(12_000) == "12 KB"

    def test_megabytes(self):
        assert format_size(3_400_000) == "3.4 MB"
        assert format_size(5_000_000) == "5 MB"

    def test_gigabytes(self):
        assert format_size(1_250_000_000) == "1.25 GB"

    def test_rounding_carries_into_next_unit(self):
        assert format_size(999_999) == "1 MB"


class TestFormatDate:
    """Tests for human-readable dates."""

    def test_morning(self):
        assert format_date(datetime(2024, 5, 1, 9, 5)) == "May 1, 2024 at 9:05 AM"

    def test_afternoon(self):
        assert format_date(datetime(2023, 12, 24, 18, 30)) == "Dec 24, 2023 at 6:30 PM"

    def test_midnight_and_noon(self):
        assert format_date(datetime(2024, 1, 2, 0, 0)) == "Jan 2, 2024 at 12:00 AM"
        assert format_date(datetime(2024, 1, 2, 12, 0)) == "Jan 2, 2024 at 12:00 PM"


class TestDelimitedText:
    """Tests for to_delimited_text."""

    def test_header(self):
        text = to_delimited_text([])
        assert text == '"Name","Manufacturer","Version","Format","Path","Size","LastModified"\n'

    def test_row(self):
        lines = to_delimited_text([make_record()]).splitlines()
        assert lines[1] == (
            '"Reverb","Lumen Labs","2.1.4","Audio Unit",'
            '"/Library/Audio/Plug-Ins/Components/Reverb.component",'
            '"12 KB","May 1, 2024 at 9:05 AM"'
        )

    def test_unknown_is_quoted(self):
        """Test the sentinel renders as quoted text in its column."""
        record = make_record(manufacturer=UNKNOWN)
        row = to_delimited_text([record], include_header=False)
        assert '"Unknown"' in row
        assert next(csv.reader(io.StringIO(row)))[1] == "Unknown"

    def test_embedded_delimiter(self):
        record = make_record(name="Echo, Tape")
        row = next(csv.reader(io.StringIO(to_delimited_text([record], include_header=False))))
        assert row[0] == "Echo, Tape"
        assert len(row) == len(COLUMNS)

    def test_embedded_quote_escaped(self):
        """Test a literal quote does not break the column layout."""
        record = make_record(name='12" Mix Bus')
        text = to_delimited_text([record], include_header=False)
        assert '"12"" Mix Bus"' in text
        row = next(csv.reader(io.StringIO(text)))
        assert row[0] == '12" Mix Bus'
        assert len(row) == len(COLUMNS)

    def test_format_display_names(self):
        records = [
            make_record(format=PluginFormat.VST, path="/a"),
            make_record(format=PluginFormat.AAX, path="/b"),
        ]
        rows = list(csv.reader(io.StringIO(to_delimited_text(records))))
        assert [r[3] for r in rows[1:]] == ["VST/VST3", "AAX"]

    def test_custom_delimiter(self):
        text = to_delimited_text([make_record()], delimiter=";", include_header=False)
        assert text.startswith('"Reverb";"Lumen Labs";')

    def test_invalid_delimiter(self):
        with pytest.raises(ValueError):
            to_delimited_text([], delimiter='"')
        with pytest.raises(ValueError):
            to_delimited_text([], delimiter=",,")

    def test_order_preserved(self):
        records = [make_record(name=n, path=f"/{n}") for n in ("Zeta", "Alpha", "Mid")]
        rows = list(csv.reader(io.StringIO(to_delimited_text(records, include_header=False))))
        assert [r[0] for r in rows] == ["Zeta", "Alpha", "Mid"]


class TestWriteReport:
    """Tests for writing report files."""

    def test_default_name(self):
        assert default_report_name(date(2024, 5, 1)) == "Audio_Plugins_2024-05-01.csv"

    def test_write(self, tmp_path):
        path = write_report([make_record()], str(tmp_path / "plugins.csv"))
        content = (tmp_path / "plugins.csv").read_text(encoding="utf-8")
        assert path == str(tmp_path / "plugins.csv")
        assert content.startswith('"Name"')
        assert content.count("\n") == 2

    def test_extension_appended(self, tmp_path):
        path = write_report([], str(tmp_path / "inventory"))
        assert path.endswith("inventory.csv")
        assert (tmp_path / "inventory.csv").exists()

    def test_extension_case_kept(self, tmp_path):
        path = write_report([], str(tmp_path / "inventory.CSV"))
        assert path.endswith("inventory.CSV")

    def test_parent_created(self, tmp_path):
        write_report([], str(tmp_path / "reports" / "a.csv"))
        assert (tmp_path / "reports" / "a.csv").exists()

    def test_unwritable(self, tmp_path):
        """Test write failures surface as ReportError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ReportError) as exc_info:
            write_report([], str(blocker / "a.csv"))
        assert exc_info.value.path.endswith("a.csv")
