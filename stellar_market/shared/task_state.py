"""Lifecycle state for the app's background operations."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum


class TaskState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class TaskStatus:
    """Tracks one async operation: idle -> in flight -> settled.

    A settled task may be started again; an in-flight one may not.
    """

    name: str
    state: TaskState = TaskState.IDLE
    error: str = ""
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def is_busy(self) -> bool:
        return self.state == TaskState.IN_FLIGHT

    @property
    def is_settled(self) -> bool:
        return self.state in (TaskState.SUCCEEDED, TaskState.FAILED)

    def start(self) -> bool:
        if self.is_busy:
            return False
        self.state = TaskState.IN_FLIGHT
        self.error = ""
        self.started_at = time.time()
        self.finished_at = 0.0
        return True

    def succeed(self) -> None:
        self._settle(TaskState.SUCCEEDED)

    def fail(self, error: Exception | str) -> None:
        self._settle(TaskState.FAILED)
        self.error = str(error)

    def reset(self) -> None:
        self.state = TaskState.IDLE
        self.error = ""
        self.started_at = 0.0
        self.finished_at = 0.0

    def _settle(self, state: TaskState) -> None:
        if not self.is_busy:
            raise RuntimeError(f"{self.name} is not in flight (state: {self.state.value})")
        self.state = state
        self.finished_at = time.time()
