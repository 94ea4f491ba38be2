import threading
import time

import pytest

from auroracore.filewatcher_api import (
    EventType,
    FileWatcher,
    event_type_to_string,
    make_event_mask,
)


def test_detects_create_modify_delete(tmp_path):
    events = []
    seen = threading.Event()

    def handler(event):
        events.append(event)
        seen.set()

    watcher = FileWatcher()
    mask = make_event_mask([EventType.CREATE, EventType.MODIFY, EventType.DELETE])
    watcher.add_watch(str(tmp_path), handler, mask)
    watcher.start()
    assert watcher.is_running()
    time.sleep(0.3)
    target = tmp_path / "test_watch.txt"
    target.write_text("Hello, World!\n")
    time.sleep(0.1)
    with target.open("a") as fh:
        fh.write("Modified content\n")
    time.sleep(0.1)
    target.unlink()
    seen.wait(5)
    time.sleep(0.5)
    watcher.stop()
    assert not watcher.is_running()
    assert len(events) > 0
    assert all(e.path == str(tmp_path) for e in events)
    assert {e.filename for e in events} == {"test_watch.txt"}


def test_mask_filters_events(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("a")
    kinds = []
    watcher = FileWatcher()
    watcher.add_watch(str(tmp_path), lambda e: kinds.append(e.type), int(EventType.DELETE))
    with watcher:
        time.sleep(0.3)
        target.write_text("b")
        target.unlink()
        deadline = time.time() + 5
        while not kinds and time.time() < deadline:
            time.sleep(0.05)
    assert kinds and set(kinds) == {EventType.DELETE}


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileWatcher().add_watch(str(tmp_path / "nope"), lambda e: None)


def test_make_event_mask_values():
    assert make_event_mask([EventType.MODIFY, EventType.CREATE]) == 0x102
    assert make_event_mask([]) == 0


def test_event_type_to_string():
    assert event_type_to_string(EventType.MODIFY) == "MODIFY"
    assert event_type_to_string(EventType.ACCESS) == "ACCESS"
    assert event_type_to_string(EventType.CREATE | EventType.DELETE) == "UNKNOWN"