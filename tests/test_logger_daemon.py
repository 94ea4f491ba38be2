import os
import shutil
import tempfile
import threading
import time
from datetime import datetime

import pytest

from auroracore.buffer_manager import LogLevel
from auroracore.ipc_client import IPCClient
from auroracore.logger_daemon import LoggerDaemon, format_entry, main, parse_log_level


@pytest.fixture
def socket_path():
    directory = tempfile.mkdtemp(prefix="acd")
    yield os.path.join(directory, "sock")
    shutil.rmtree(directory, ignore_errors=True)


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.mark.parametrize(
    "message, expected",
    [
        ("[DEBUG] a", LogLevel.DEBUG),
        ("[INFO] b", LogLevel.INFO),
        ("[WARNING] c", LogLevel.WARNING),
        ("[ERROR] d", LogLevel.ERROR),
        ("[CRITICAL] e", LogLevel.CRITICAL),
        ("no prefix", LogLevel.INFO),
        ("[error] lower case", LogLevel.INFO),
    ],
)
def test_parse_log_level(message, expected):
    assert parse_log_level(message) is expected


def test_format_entry_uses_timestamp_prefix():
    now = datetime(2024, 1, 2, 3, 4, 5)
    assert format_entry("[INFO] hello", now) == "[2024-01-02 03:04:05] [INFO] hello\n"


def test_format_entry_defaults_to_current_time():
    entry = format_entry("msg")
    stamp = entry[1:20]
    assert datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S").year >= 2024
    assert entry.endswith("] msg\n")


def test_info_message_stays_buffered_until_flush(tmp_path, socket_path):
    log_path = tmp_path / "app.log"
    with LoggerDaemon(log_path=log_path, socket_path=socket_path) as daemon:
        daemon.handle_message("[INFO] buffered")
        assert log_path.read_bytes() == b""
        daemon.flush()
        assert daemon.buffer.is_empty()
    assert log_path.read_text().endswith("] [INFO] buffered\n")


@pytest.mark.parametrize("prefix", ["[ERROR]", "[CRITICAL]"])
def test_error_message_is_written_at_once(tmp_path, socket_path, prefix):
    log_path = tmp_path / "app.log"
    with LoggerDaemon(log_path=log_path, socket_path=socket_path) as daemon:
        daemon.handle_message("[INFO] earlier")
        daemon.handle_message(f"{prefix} disk failure")
        assert daemon.buffer.is_empty()
    lines = log_path.read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("[INFO] earlier")
    assert lines[1].endswith(f"{prefix} disk failure")


def test_full_buffer_writes_previous_entries(tmp_path, socket_path):
    log_path = tmp_path / "app.log"
    with LoggerDaemon(log_path=log_path, buffer_size=100, socket_path=socket_path) as daemon:
        daemon.handle_message("[INFO] first " + "a" * 40)
        daemon.handle_message("[INFO] second " + "b" * 40)
        written = log_path.read_text()
        assert "first" in written
        assert "second" not in written
        assert b"second" in daemon.buffer.data()


def test_run_receives_and_flushes_on_stop(tmp_path, socket_path):
    log_path = tmp_path / "app.log"
    with LoggerDaemon(log_path=log_path, socket_path=socket_path, sleep_ms=10) as daemon:
        thread = threading.Thread(target=daemon.run)
        thread.start()
        try:
            assert _wait_for(lambda: os.path.exists(socket_path))
            with IPCClient(socket_path) as client:
                client.log_info("hello daemon")
            assert _wait_for(lambda: not daemon.buffer.is_empty())
        finally:
            daemon.stop()
            thread.join(timeout=5)
    assert not thread.is_alive()
    assert "[INFO] hello daemon" in log_path.read_text()
    assert not os.path.exists(socket_path)


def test_run_honours_request_flush(tmp_path, socket_path):
    log_path = tmp_path / "app.log"
    with LoggerDaemon(log_path=log_path, socket_path=socket_path, sleep_ms=10) as daemon:
        thread = threading.Thread(target=daemon.run)
        thread.start()
        try:
            assert _wait_for(lambda: os.path.exists(socket_path))
            daemon.handle_message("[DEBUG] pending")
            daemon.request_flush()
            assert _wait_for(lambda: "pending" in log_path.read_text())
        finally:
            daemon.stop()
            thread.join(timeout=5)
    assert not thread.is_alive()


def test_main_help(capsys):
    assert main(["--help"]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_main_fails_when_log_file_cannot_open(tmp_path, socket_path):
    assert main(["-f", str(tmp_path / "missing" / "app.log"), "-p", socket_path]) == 1