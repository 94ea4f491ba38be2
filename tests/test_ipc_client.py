import os
import shutil
import socket
import tempfile

import pytest

from auroracore.buffer_manager import LogLevel
from auroracore.ipc_client import MAX_MESSAGE_BYTES, IPCClient, format_log_message


@pytest.fixture
def receiver():
    directory = tempfile.mkdtemp(prefix="aci")
    path = os.path.join(directory, "sock")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    sock.bind(path)
    sock.settimeout(5)
    yield path, sock
    sock.close()
    shutil.rmtree(directory, ignore_errors=True)


def test_format_log_message_prefixes_level():
    assert format_log_message("hello", LogLevel.WARNING) == "[WARNING] hello"
    assert format_log_message("System failure", LogLevel.CRITICAL) == "[CRITICAL] System failure"


def test_format_log_message_defaults_to_info():
    assert format_log_message("started") == "[INFO] started"


def test_format_log_message_is_truncated():
    formatted = format_log_message("x" * 10_000, LogLevel.DEBUG)
    assert len(formatted.encode("utf-8")) == MAX_MESSAGE_BYTES
    assert formatted.startswith("[DEBUG] xxx")


def test_send_before_connect_raises():
    client = IPCClient("/nonexistent/socket")
    assert not client.is_connected()
    with pytest.raises(ConnectionError):
        client.send_log("nothing")


def test_send_log_delivers_datagram(receiver):
    path, sock = receiver
    client = IPCClient(path)
    client.connect()
    sent = client.send_log("Application started", LogLevel.INFO)
    data = sock.recv(4096)
    client.close()
    assert data == b"[INFO] Application started"
    assert sent == len(data)


@pytest.mark.parametrize(
    "method, level",
    [
        ("log_debug", LogLevel.DEBUG),
        ("log_info", LogLevel.INFO),
        ("log_warning", LogLevel.WARNING),
        ("log_error", LogLevel.ERROR),
        ("log_critical", LogLevel.CRITICAL),
    ],
)
def test_level_helpers(receiver, method, level):
    path, sock = receiver
    with IPCClient(path) as client:
        getattr(client, method)("msg")
    assert sock.recv(4096).decode() == f"[{level.name}] msg"


def test_context_manager_connects_and_closes(receiver):
    path, _ = receiver
    with IPCClient(path) as client:
        assert client.is_connected()
    assert not client.is_connected()


def test_send_to_missing_socket_raises(tmp_path):
    with IPCClient(str(tmp_path / "absent")) as client:
        with pytest.raises(OSError):
            client.send_log("lost")