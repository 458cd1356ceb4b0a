from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MonitorStatus = Literal["STOPPED", "RUNNING"]

COMMAND_STARTED = "COMMAND_STARTED"
COMMAND_FINISHED = "COMMAND_FINISHED"


@dataclass(frozen=True)
class MonitorConfig:
    poll_interval_ms: int = 500


@dataclass(frozen=True)
class ProcessSnapshot:
    """The set of live pids seen at one poll tick."""
    pids: frozenset[int]
    taken_at_ms: int = 0

    def new_since(self, previous: "ProcessSnapshot") -> frozenset[int]:
        return self.pids - previous.pids

    def __contains__(self, pid: object) -> bool:
        return pid in self.pids

    def __len__(self) -> int:
        return len(self.pids)


EMPTY_SNAPSHOT = ProcessSnapshot(pids=frozenset())


@dataclass(frozen=True)
class TrackedProcess:
    pid: int
    command: str
    epoch: int  # tick number at which the pid was classified
    started_at_ms: int


@dataclass
class MonitorState:
    status: MonitorStatus = "STOPPED"
    tracked: dict[int, TrackedProcess] = field(default_factory=dict)
    tick_count: int = 0
