[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "auroracore"
version = "0.1.0"
description = "Buffered rotating log daemon with a datagram client, an in-process logger and file watching tools"
requires-python = ">=3.10"
dependencies = [
    "watchdog",
]
keywords = ["logging", "daemon", "log rotation", "file watcher", "unix socket"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
logger-daemon = "auroracore.logger_daemon:main"
logger-client = "auroracore.logger_client:main"
filewatcher = "auroracore.filewatcher:main"
aurora-monitor = "auroracore.app_monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["auroracore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
