import numpy as np
import pytest
from scene_forces.config import GravitationConfig
from scene_forces.constants import G_NEWTON, G_TERRESTRIAL
from scene_forces.core.gravitation import GravitationField
from scene_forces.types import PhysicsObject


def test_pair_attraction_magnitude():
    """|F| = G m1 m2 / d² with the terrestrial G."""
    a = PhysicsObject(id="a", mass=10.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", mass=20.0, position=(2, 0, 0))
    field = GravitationField(GravitationConfig(enabled=True))

    forces = field.compute([a, b], {}, {})

    expected = G_TERRESTRIAL * 10.0 * 20.0 / 4.0
    assert forces["a"] == pytest.approx([expected, 0.0, 0.0])
    assert forces["b"] == pytest.approx([-expected, 0.0, 0.0])


def test_astronomical_scale_uses_newton_constant():
    assert GravitationConfig(simulation_scale="astronomical").effective_constant == G_NEWTON
    assert GravitationConfig(gravitational_constant=1.0).effective_constant == 1.0


def test_static_bodies_attract_but_receive_nothing():
    planet = PhysicsObject(id="planet", mass=1e6, is_static=True, position=(0, 0, 0))
    moon = PhysicsObject(id="moon", mass=1.0, position=(0, 10, 0))
    field = GravitationField(GravitationConfig(enabled=True))

    forces = field.compute([planet, moon], {}, {})

    assert "planet" not in forces
    assert forces["moon"][1] < 0.0


def test_gravitational_mass_override_and_massless_bodies():
    a = PhysicsObject(id="a", mass=1.0, gravitational_mass=5.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", mass=1.0, position=(1, 0, 0))
    c = PhysicsObject(id="c", mass=0.0, position=(2, 0, 0))
    field = GravitationField(GravitationConfig(enabled=True, gravitational_constant=1.0))

    forces = field.compute([a, b, c], {}, {})

    assert "c" not in forces
    assert np.linalg.norm(forces["a"]) == pytest.approx(5.0)


def test_softening_and_min_distance():
    a = PhysicsObject(id="a", mass=1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", mass=1.0, position=(0, 0, 0))
    field = GravitationField(GravitationConfig(enabled=True, gravitational_constant=1.0))
    forces = field.compute([a, b], {}, {})
    assert np.all(forces["a"] == 0.0)

    soft = GravitationField(GravitationConfig(enabled=True, gravitational_constant=1.0, softening=1.0))
    b2 = PhysicsObject(id="b", mass=1.0, position=(1, 0, 0))
    f = soft.compute([a, b2], {}, {})
    # d² = 1 + 1, direction r/d with d = sqrt(2)
    assert f["a"][0] == pytest.approx(0.5 / np.sqrt(2.0))
