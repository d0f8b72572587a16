# examples/coulomb_pair.py
from scene_forces import PhysicsObject, Scene, session_for
from scene_forces.logging_config import setup_logging

setup_logging()

# Two opposite charges in zero gravity; they pass each other and the pair keeps zero net force
a = PhysicsObject(id="a", radius=0.05, mass=1.0, charge=+2e-6, position=(-0.5, 0.0, 0.0), velocity=(0.0, 0.6, 0.0))
b = PhysicsObject(id="b", radius=0.05, mass=1.0, charge=-2e-6, position=(+0.5, 0.0, 0.0), velocity=(0.0, -0.6, 0.0))
session = session_for(Scene(objects=(a, b), gravity=(0.0, 0.0, 0.0)))

for _ in range(4000):
    forces = session.step(1 / 2000)

bodies = session.solver.bodies
print("a pos", bodies["a"].position, "v", bodies["a"].velocity)
print("b pos", bodies["b"].position, "v", bodies["b"].velocity)
print("net force", forces["a"] + forces["b"])
