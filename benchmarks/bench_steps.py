"""
Microbenchmark: force-aggregation time per tick vs number of objects.
Run:
  python benchmarks/bench_steps.py
"""
import logging
import time

import numpy as np
from scene_forces import FluidConfig, GravitationConfig, PhysicsObject, Scene, session_for
from scene_forces.logging_config import setup_logging
from scene_forces.profiler import Profiler


def run(n: int, steps: int = 300):
    prof = Profiler()
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)

    # charged spheres in a grid straddling the fluid surface, small random jitter
    side = int(np.ceil(np.sqrt(n)))
    objects = []
    for k in range(n):
        ix, iz = k % side, k // side
        objects.append(PhysicsObject(
            id=f"s{k}",
            radius=0.2,
            mass=1.0,
            charge=1e-7 * float(rng.choice([-1.0, 1.0])),
            position=(0.5 * ix + 0.01 * float(rng.normal()), 0.2 * float(rng.normal()), 0.5 * iz),
        ))

    scene = Scene(
        objects=tuple(objects),
        fluid=FluidConfig(),
        gravitation=GravitationConfig(enabled=True, softening=0.05),
    )
    session = session_for(scene, profiler=prof)

    # warmup
    for _ in range(30):
        session.step(1 / 240)
    prof.reset()

    t0 = time.perf_counter()
    for _ in range(steps):
        session.step(1 / 240)
    t1 = time.perf_counter()

    total = t1 - t0
    per_step = total / steps
    return per_step, prof.stats.summary()


if __name__ == "__main__":
    setup_logging(logging.WARNING)
    for n in [10, 50, 100, 250]:
        per_step, summary = run(n)
        print(f"N={n:4d}  step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}")
        # print top sections
        for k in ["readback", "gravitation", "fluid", "electrostatic", "connections", "integrate"]:
            if k in summary:
                print(" ", k, summary[k])
        print()
