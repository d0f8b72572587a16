# MIT License (see LICENSE)
"""
Per-object motion history for graphs and diagnostics.

Samples are recorded at most once per `record_interval` of simulation
time per object, and each object's history is capped at `max_points`
(oldest samples dropped first).
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Callable

import numpy as np


@dataclass(frozen=True)
class HistoryPoint:
    t: float
    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float


Listener = Callable[[str, HistoryPoint], None]


class StateHistory:
    """
    Bounded position/velocity history keyed by object id.

    Example:
        history = StateHistory(record_interval=0.1)
        history.record("ball", position, velocity, t=0.5)
        ys = [p.y for p in history.history("ball")]
    """

    def __init__(self, record_interval: float = 0.016, max_points: int = 2000) -> None:
        self.record_interval = record_interval
        self.max_points = max_points
        self._positions: dict[str, np.ndarray] = {}
        self._velocities: dict[str, np.ndarray] = {}
        self._history: dict[str, deque[HistoryPoint]] = {}
        self._last_record: dict[str, float] = {}
        self._listeners: list[Listener] = []

    def record(self, object_id: str, position: np.ndarray, velocity: np.ndarray, t: float) -> bool:
        """
        Update the latest state and append a history point if due.

        Returns True when a point was appended.
        """
        self._positions[object_id] = np.array(position, dtype=np.float64)
        self._velocities[object_id] = np.array(velocity, dtype=np.float64)

        last = self._last_record.get(object_id)
        if last is not None and t - last < self.record_interval:
            return False

        point = HistoryPoint(
            t=float(t),
            x=float(position[0]), y=float(position[1]), z=float(position[2]),
            vx=float(velocity[0]), vy=float(velocity[1]), vz=float(velocity[2]),
        )
        hist = self._history.setdefault(object_id, deque(maxlen=self.max_points))
        hist.append(point)
        self._last_record[object_id] = t
        for listener in list(self._listeners):
            listener(object_id, point)
        return True

    def snapshot(self) -> dict[str, dict[str, np.ndarray]]:
        """Copy of the latest position and velocity per object."""
        return {
            "positions": {k: v.copy() for k, v in self._positions.items()},
            "velocities": {k: v.copy() for k, v in self._velocities.items()},
        }

    def history(self, object_id: str) -> list[HistoryPoint]:
        return list(self._history.get(object_id, ()))

    def object_ids(self) -> list[str]:
        return list(self._positions)

    def has_object(self, object_id: str) -> bool:
        return object_id in self._positions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for appended points; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        self._positions.clear()
        self._velocities.clear()
        self._history.clear()
        self._last_record.clear()
