"""Demo application that ties the in-process logger and the file watcher together."""

from __future__ import annotations

import contextlib
import os
import shutil
import sys
import threading
import time
from collections.abc import Sequence

from auroracore import logger_api as log
from auroracore.filewatcher_api import (
    EventType,
    FileEvent,
    FileWatcher,
    event_type_to_string,
    make_event_mask,
)
from auroracore.logger_api import Config, LogLevel

LOG_NAME = "app_monitor.log"
CONFIG_NAME = "config.txt"
DATA_NAME = "data"
LOG_FORMAT = "[{timestamp}] thread:{thread_id} {level} - {message}"
TASK_INTERVAL_SECONDS = 2.0


class ApplicationMonitor:
    """Runs a periodic worker, logs its activity and reacts to config changes.

    All files live under ``workdir``: the log, ``config.txt`` and the
    ``data`` directory.
    """

    def __init__(self, workdir: str | os.PathLike[str] = ".") -> None:
        self.workdir = os.fspath(workdir)
        self.log_path = os.path.join(self.workdir, LOG_NAME)
        self.config_path = os.path.join(self.workdir, CONFIG_NAME)
        self.data_dir = os.path.join(self.workdir, DATA_NAME)
        self._lock = threading.Lock()
        self._running = False
        self._stop_event = threading.Event()
        self._worker: threading.Thread | None = None

        log.init_logger(
            Config(
                log_path=self.log_path,
                max_file_size=5 * 1024 * 1024,
                max_files=3,
                flush_interval_ms=500,
                min_log_level=LogLevel.DEBUG,
                log_format=LOG_FORMAT,
            )
        )
        log.info("ApplicationMonitor initialized")

        self._watcher = FileWatcher()
        self._setup_file_watcher()

    def __enter__(self) -> ApplicationMonitor:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()
        log.shutdown_logger()

    def _setup_file_watcher(self) -> None:
        # A path that does not exist yet is simply left unwatched.
        with contextlib.suppress(FileNotFoundError):
            self._watcher.add_watch(
                self.config_path,
                self._on_config_event,
                make_event_mask([EventType.MODIFY, EventType.CREATE, EventType.DELETE]),
            )
        with contextlib.suppress(FileNotFoundError):
            self._watcher.add_watch(
                self.data_dir,
                self._on_data_event,
                int(EventType.CREATE) | int(EventType.DELETE),
            )

    def _on_config_event(self, event: FileEvent) -> None:
        log.debug(
            f"Config file event: {event_type_to_string(event.type)} on {event.path}"
        )
        if event.type == EventType.MODIFY:
            self.reload_config()

    def _on_data_event(self, event: FileEvent) -> None:
        if event.filename:
            log.debug(
                f"Data file {event.filename} was {event_type_to_string(event.type)}"
            )

    def start(self) -> None:
        """Start the watcher and the periodic worker; a second call does nothing."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._stop_event.clear()

        log.info("ApplicationMonitor started")
        log.debug("Debug mode: enabled")

        self._watcher.start()
        self._worker = threading.Thread(target=self._worker_loop, daemon=True)
        self._worker.start()

    def stop(self) -> None:
        """Stop the watcher and the worker if they are running."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_event.set()

        log.warn("ApplicationMonitor stopping...")
        self._watcher.stop()
        if self._worker is not None:
            self._worker.join()
            self._worker = None
        log.info("ApplicationMonitor stopped")
        log.fatal(
            "Example of a FATAL error if something went critically wrong before stopping."
        )

    def _worker_loop(self) -> None:
        counter = 0
        while not self._stop_event.is_set():
            counter += 1
            log.info(f"Periodic task #{counter} executed")
            if self._stop_event.wait(TASK_INTERVAL_SECONDS):
                break
            if counter % 5 == 0:
                self.create_test_data_file(counter)

    def reload_config(self) -> None:
        """Log every line of the config file, or an error if it cannot be read."""
        log.info("Reloading configuration...")
        try:
            with open(self.config_path, encoding="utf-8") as config_file:
                for line in config_file:
                    log.debug("Config: " + line.rstrip("\n"))
        except OSError:
            log.error("Failed to open config.txt for reloading.")
        log.info("Configuration reloaded successfully")

    def create_test_data_file(self, counter: int) -> str:
        """Write ``data/test_<counter>.txt`` and return its path."""
        os.makedirs(self.data_dir, exist_ok=True)
        filename = os.path.join(self.data_dir, f"test_{counter}.txt")
        with open(filename, "w", encoding="utf-8") as data_file:
            data_file.write(f"Test data file #{counter}\n")
            data_file.write(f"Created at: {int(time.time())}\n")
        log.debug("Created test data file: " + filename)
        return filename


def _wait_for_enter() -> None:
    with contextlib.suppress(EOFError):
        input()


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    workdir = args[0] if args else "."

    print("AuroraCore API Example")
    print("=====================")

    config_path = os.path.join(workdir, CONFIG_NAME)
    with open(config_path, "w", encoding="utf-8") as config:
        config.write("app_name=AuroraCore-Example\n")
        config.write("log_level=INFO\n")
        config.write("max_connections=100\n")

    with ApplicationMonitor(workdir) as monitor:
        monitor.start()

        print("Application monitor started. Press Enter to modify config...")
        _wait_for_enter()

        with open(config_path, "a", encoding="utf-8") as config:
            config.write("debug_mode=true\n")
            config.write(f"updated_at={int(time.time())}\n")

        print("Config modified. Press Enter to stop...")
        _wait_for_enter()

        monitor.stop()

        with contextlib.suppress(FileNotFoundError):
            os.remove(config_path)
        shutil.rmtree(os.path.join(workdir, DATA_NAME), ignore_errors=True)

    print(f"\nCheck {LOG_NAME} for the complete log output.")
    return 0


if __name__ == "__main__":
    sys.exit(main())