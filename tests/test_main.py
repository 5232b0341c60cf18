"""Tests for the monitor entry point."""
import pytest
import tempfile
import os
from src import handlers, main as main_module
from src.errors import FetchError
from src.main import IngestionResult


class StubMonitor:
    """Monitor stand-in used in place of AdvisoryMonitor."""

    instances = []
    error = None

    def __init__(self, config):
        config.validate()
        self.ran = False
        StubMonitor.instances.append(self)

    def run_once(self):
        if StubMonitor.error:
            raise StubMonitor.error
        self.ran = True
        return IngestionResult()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class TestMain:
    """Test cases for main --once."""

    @pytest.fixture(autouse=True)
    def environment(self, monkeypatch):
        fd, path = tempfile.mkstemp(suffix='.db')
        os.close(fd)
        monkeypatch.setenv('DATABASE_PATH', path)
        monkeypatch.setattr('sys.argv', ['advisory-monitor', '--once'])
        monkeypatch.setattr(handlers, 'AdvisoryMonitor', StubMonitor)
        StubMonitor.instances = []
        StubMonitor.error = None
        yield
        try:
            os.unlink(path)
        except OSError:
            pass

    def test_once_runs_trigger(self):
        main_module.main()

        assert len(StubMonitor.instances) == 1
        assert StubMonitor.instances[0].ran is True

    def test_once_fetch_failure_exits(self):
        StubMonitor.error = FetchError("upstream down")

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1

    def test_once_without_database_path(self, monkeypatch):
        monkeypatch.setenv('DATABASE_PATH', '')

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1
        assert StubMonitor.instances == []
