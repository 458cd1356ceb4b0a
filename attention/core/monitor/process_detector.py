from __future__ import annotations

from typing import Optional, Protocol

import psutil


class ProcessLister(Protocol):
    """Process listing primitive. Both calls must be cheap enough for >= 2 Hz."""

    def pids(self) -> set[int]:
        ...

    def command_line(self, pid: int) -> Optional[str]:
        ...


class PsutilProcessLister:
    def pids(self) -> set[int]:
        return set(psutil.pids())

    def command_line(self, pid: int) -> Optional[str]:
        # The process may exit before we get to read it; that is a miss, not an error
        try:
            parts = psutil.Process(pid).cmdline()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess, OSError):
            return None
        line = " ".join(p for p in parts if p).strip()
        return line or None
