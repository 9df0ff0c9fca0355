"""PID-file guard that keeps a single bot process per session.

Two processes on one Telegram session would both receive every update and
both reply, which defeats the in-process dedup entirely.
"""

from __future__ import annotations

import logging
import os

LOGGER = logging.getLogger(__name__)


class InstanceLockError(RuntimeError):
    """Raised when another live process owns the PID file."""


def pid_is_running(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError:
        return False
    return True


def _read_pid(path: str) -> int:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return int(handle.read().strip() or -1)
    except (OSError, ValueError):
        return -1


class InstanceLock:
    """Own ``path`` for the lifetime of the process."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        current_pid = os.getpid()
        if os.path.exists(self._path):
            other_pid = _read_pid(self._path)
            if other_pid != current_pid and pid_is_running(other_pid):
                raise InstanceLockError(
                    f"Another bot process is already running (pid={other_pid}). Stop it first."
                )
            LOGGER.info("Removing stale PID file %s", self._path)
            os.remove(self._path)

        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._path, "x", encoding="utf-8") as handle:
            handle.write(str(current_pid))
        self._held = True
        LOGGER.info("PID file created: %s (pid %s)", self._path, current_pid)

    def release(self) -> None:
        if not self._held:
            return
        if _read_pid(self._path) in {-1, os.getpid()}:
            try:
                os.remove(self._path)
            except FileNotFoundError:
                pass
        self._held = False
        LOGGER.info("PID file removed")

    def __enter__(self) -> "InstanceLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
