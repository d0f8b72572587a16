# examples/buoyancy_pool.py
import logging

from scene_forces import FluidConfig, PhysicsObject, Scene, session_for
from scene_forces.history import StateHistory
from scene_forces.logging_config import setup_logging

setup_logging(logging.INFO)

# A light ball dropped into water floats back up; a dense box sinks and settles on drag
fluid = FluidConfig(density=1000.0, surface_level=0.0, fluid_height=5.0, drag_coefficient=0.47)
ball = PhysicsObject(id="ball", type="Sphere", radius=0.25, mass=20.0, position=(0.0, 1.0, 0.0))
box = PhysicsObject(id="box", type="Box", dimensions=(0.3, 0.3, 0.3), mass=100.0, position=(1.0, 1.0, 0.0))

history = StateHistory(record_interval=0.25)
session = session_for(Scene(objects=(ball, box), fluid=fluid), history=history)

for _ in range(240 * 4):
    session.step(1 / 240)

for object_id in ("ball", "box"):
    ys = ", ".join(f"{p.y:+.2f}" for p in history.history(object_id))
    print(f"{object_id:4s} y: {ys}")

sample = session.module("fluid").samples["ball"]
print("ball submersion:", round(sample.submersion, 3), "fluid force:", session.aggregator.last_maps["fluid"]["ball"])
