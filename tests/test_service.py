"""Tests for ScanService request serialisation."""

import threading

import pytest

from soundkeeper.core.catalog import CatalogRoot, PathCatalog
from soundkeeper.core.formats import PluginFamily
from soundkeeper.core.record import ScanResult
from soundkeeper.exceptions import ScanInProgressError
from soundkeeper.process import CancellationToken, ScanService, Scanner


class BlockingScanner(Scanner):
    """Scanner whose scans wait until released."""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def scan(self, catalog, token=None):
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return super().scan(catalog, token=token)


@pytest.fixture
def catalog(tmp_path, make_bundle):
    root = tmp_path / "VST3"
    make_bundle(root, "Synth.vst3")
    return PathCatalog([CatalogRoot(PluginFamily.VST, str(root))])


class TestRequestScan:
    """Tests for ScanService.request_scan."""

    def test_future_result(self, catalog):
        """Test the result is delivered through the future."""
        with ScanService(catalog=catalog) as service:
            result = service.request_scan().result(timeout=5)
        assert isinstance(result, ScanResult)
        assert len(result) == 1

    def test_callback(self, catalog):
        """Test the optional callback receives the result."""
        received = []
        done = threading.Event()

        def on_result(result):
            received.append(result)
            done.set()

        with ScanService(catalog=catalog) as service:
            future = service.request_scan(callback=on_result)
            future.result(timeout=5)
            assert done.wait(timeout=5)
        assert received[0] is future.result()

    def test_callback_error_does_not_break_service(self, catalog):
        def bad_callback(result):
            raise RuntimeError("boom")

        with ScanService(catalog=catalog) as service:
            service.request_scan(callback=bad_callback).result(timeout=5)
            assert len(service.scan()) == 1

    def test_fresh_result_each_scan(self, catalog):
        """Test every request returns a new result value."""
        with ScanService(catalog=catalog) as service:
            first = service.scan()
            second = service.scan()
        assert first is not second
        assert first.records == second.records

    def test_token_passed_through(self, catalog):
        token = CancellationToken()
        token.cancel()
        with ScanService(catalog=catalog) as service:
            result = service.request_scan(token=token).result(timeout=5)
        assert result.cancelled


class TestBusyPolicy:
    """Tests for overlapping requests."""

    def test_reject_while_running(self, catalog):
        """Test a second request is rejected while a scan is in flight."""
        scanner = BlockingScanner()
        service = ScanService(catalog=catalog, scanner=scanner, on_busy="reject")
        try:
            first = service.request_scan()
            assert scanner.started.wait(timeout=5)
            assert service.busy

            with pytest.raises(ScanInProgressError):
                service.request_scan()

            scanner.release.set()
            first.result(timeout=5)
            assert service.get_stats()["rejected"] == 1
        finally:
            scanner.release.set()
            service.shutdown()

    def test_accepts_after_completion(self, catalog):
        with ScanService(catalog=catalog, on_busy="reject") as service:
            service.scan()
            assert not service.busy
            service.scan()

    def test_queue_runs_in_order(self, catalog):
        """Test queued requests all run, one after another."""
        scanner = BlockingScanner()
        service = ScanService(catalog=catalog, scanner=scanner, on_busy="queue")
        try:
            first = service.request_scan()
            second = service.request_scan()
            scanner.release.set()

            assert len(first.result(timeout=5)) == 1
            assert len(second.result(timeout=5)) == 1
            assert scanner.calls == 2
        finally:
            scanner.release.set()
            service.shutdown()

    def test_invalid_policy(self, catalog):
        with pytest.raises(ValueError, match="on_busy"):
            ScanService(catalog=catalog, on_busy="drop")

    def test_request_after_shutdown(self, catalog):
        service = ScanService(catalog=catalog)
        service.shutdown()
        with pytest.raises(RuntimeError):
            service.request_scan()
