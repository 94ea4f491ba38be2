import threading
import time

import pytest

from auroracore.watcher_core import WatcherCore, expand_command


def test_expand_command_with_filename():
    assert expand_command("echo $FILE", "/tmp", "a.txt") == "echo /tmp/a.txt"


def test_expand_command_without_filename():
    assert expand_command("cat $FILE", "/tmp/x") == "cat /tmp/x"


def test_expand_command_replaces_first_only():
    assert expand_command("$FILE $FILE", "p", "f") == "p/f $FILE"


def test_expand_command_no_placeholder():
    assert expand_command("true", "p", "f") == "true"


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        WatcherCore().add_watch(str(tmp_path / "missing"), "true", 0x100)


def _wait_for(path, timeout=5):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if path.exists() and path.read_text().strip():
            return path.read_text().strip()
        time.sleep(0.05)
    return ""


def test_one_shot_runs_command(tmp_path):
    watched = tmp_path / "w"
    watched.mkdir()
    out = tmp_path / "out.txt"
    core = WatcherCore(one_shot=True)
    core.add_watch(str(watched), f"echo $FILE > {out}", 0x100)
    thread = threading.Thread(target=core.start)
    thread.start()
    time.sleep(0.3)
    (watched / "new.txt").write_text("x")
    thread.join(5)
    alive = thread.is_alive()
    core.stop()
    thread.join()
    assert not alive
    assert _wait_for(out) == f"{watched}/new.txt"


def test_periodic_check_detects_change(tmp_path):
    target = tmp_path / "p.txt"
    target.write_text("a")
    out = tmp_path / "out.txt"
    core = WatcherCore(periodic_interval=1, one_shot=True)
    core.add_watch(str(target), f"echo $FILE > {out}", 0)
    thread = threading.Thread(target=core.start)
    thread.start()
    time.sleep(0.2)
    target.write_text("changed")
    import os

    os.utime(target, (1, 1))
    thread.join(5)
    core.stop()
    thread.join()
    assert _wait_for(out) == str(target)