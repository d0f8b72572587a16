# MIT License (see LICENSE)
"""
Section timing for the per-tick force pipeline.

The aggregator times each force module under its own name and the
session times solver readback and force application, so a slow module
shows up directly in the summary.

Example:
    profiler = Profiler()
    session = SimulationSession(scene, solver, profiler=profiler)
    for _ in range(240):
        session.step(1 / 240)
    print(profiler.stats.summary()["fluid"]["mean_ms"])
"""
from __future__ import annotations
import time
from dataclasses import dataclass, field


@dataclass
class ProfileStats:
    """Timing samples (seconds) per named section."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': slowest sample in milliseconds
            - 'total_ms': sum of all samples in milliseconds
        """
        out = {}
        for name, times in self.samples.items():
            total = sum(times)
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * total / len(times),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out


class _Section:
    def __init__(self, stats: ProfileStats, name: str) -> None:
        self.stats = stats
        self.name = name

    def __enter__(self) -> "_Section":
        self.t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stats.add(self.name, time.perf_counter() - self.t0)


class Profiler:
    """Context-manager based profiler; `with profiler.section("fluid"): ...`."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    def section(self, name: str) -> _Section:
        return _Section(self.stats, name)

    def reset(self) -> None:
        self.stats = ProfileStats()
