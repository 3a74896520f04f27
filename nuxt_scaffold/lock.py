"""Advisory lock that serializes scaffold runs against one target directory.

The lock is a JSON record ``{"pid": ..., "created_at": ...}`` written with
exclusive-create semantics into the target root.  A lock whose holder is no
longer running is reclaimed; a lock held by a live process aborts the run
with ``ConcurrentRunDetected``.  The lock is advisory only: processes that do
not use it are not stopped, and on platforms without a reliable liveness
check a stale lock must be removed by hand.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from nuxt_scaffold.errors import ConcurrentRunDetected, ConfigurationError
from nuxt_scaffold.utils import print_debug, print_warning

LOCK_NAME = ".scaffold-nuxt-4.lock"


def is_process_alive(pid: int | None) -> bool:
    """Best-effort check whether *pid* is a running process.

    On Windows there is no side-effect-free probe via ``os.kill``, so any
    positive PID is treated as alive.
    """
    if not pid or pid <= 0:
        return False
    if sys.platform == "win32":
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except OSError:
        # EPERM: exists but owned by someone else.
        return True
    return True


def read_lock_record(path: Path) -> dict[str, Any] | None:
    """Parse a lock file. Returns ``None`` when it is missing or unreadable.

    Older lock files hold a bare PID; those are returned as ``{"pid": N}``.
    """
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if isinstance(data, int):
        return {"pid": data}
    if isinstance(data, dict) and isinstance(data.get("pid"), int):
        return data
    return None


class TargetLock:
    """Scoped advisory lock on a target directory.

    Usage::

        with TargetLock(target_root):
            ...  # lock released on every exit path
    """

    def __init__(self, target_root: Path, pid: int | None = None) -> None:
        self.path = Path(target_root) / LOCK_NAME
        self.pid = pid if pid is not None else os.getpid()
        self.acquired = False

    def __enter__(self) -> "TargetLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def acquire(self) -> None:
        """Create the lock file, reclaiming a stale one if necessary.

        Raises:
            ConcurrentRunDetected: The lock is held by a live process, or another
                run recreated it while a stale one was being reclaimed.
            ConfigurationError: The lock file cannot be created at all.
        """
        try:
            self._create()
            return
        except FileExistsError:
            pass
        except OSError as exc:
            raise ConfigurationError(f"Failed to create lock at {self.path}: {exc}") from exc

        record = read_lock_record(self.path)
        holder = record.get("pid") if record else None
        if is_process_alive(holder):
            raise ConcurrentRunDetected(
                f"Another scaffold process appears active (lock: {self.path}, pid {holder}).",
                pid=holder,
            )

        print_warning(f"Reclaiming stale lock {self.path} (pid {holder or 'unknown'} is not running).")
        try:
            self.path.unlink(missing_ok=True)
            self._create()
        except FileExistsError as exc:
            raise ConcurrentRunDetected(
                f"Another scaffold process took the lock while reclaiming it (lock: {self.path}).",
            ) from exc
        except OSError as exc:
            raise ConfigurationError(f"Failed to acquire lock at {self.path}: {exc}") from exc

    def release(self) -> None:
        """Remove the lock file if this instance created it. Idempotent."""
        if not self.acquired:
            return
        self.acquired = False
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            print_debug(f"could not remove lock {self.path}: {exc}")

    def _create(self) -> None:
        record = {
            "pid": self.pid,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        with open(self.path, "x", encoding="utf-8") as handle:
            json.dump(record, handle)
        self.acquired = True
        print_debug(f"lock acquired: {self.path}")
