import numpy as np
from scene_forces.config import ElectrostaticConfig
from scene_forces.core.electrostatic import ElectrostaticField
from scene_forces.types import ObjectState, PhysicsObject


def _states(*objs):
    return {o.id: ObjectState(position=o.position, velocity=o.velocity) for o in objs}


def _handles(*objs):
    return {o.id: object() for o in objs}


def test_unit_charges_one_metre_apart():
    """
    Coulomb: |F| = k |q1 q2| / d² = 8.99e9 · 1 · 1 / 1² = 8.99e9 N,
    opposite charges attract.
    """
    a = PhysicsObject(id="a", type="Sphere", radius=0.5, charge=+1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", type="Sphere", radius=0.5, charge=-1.0, position=(1, 0, 0))

    forces = ElectrostaticField().compute([a, b], _states(a, b), _handles(a, b))

    assert np.allclose(forces["a"], [8.99e9, 0.0, 0.0])
    assert np.allclose(forces["b"], [-8.99e9, 0.0, 0.0])
    assert np.allclose(forces["a"] + forces["b"], 0.0)


def test_like_charges_repel():
    a = PhysicsObject(id="a", charge=2e-6, position=(0, 0, 0))
    b = PhysicsObject(id="b", charge=3e-6, position=(0, 2, 0))

    forces = ElectrostaticField().compute([a, b], _states(a, b), _handles(a, b))

    # a is pushed away from b (down), b away from a (up)
    assert forces["a"][1] < 0
    assert forces["b"][1] > 0
    expected = 8.99e9 * 6e-12 / 4.0
    assert np.isclose(np.linalg.norm(forces["a"]), expected)


def test_inverse_square_and_charge_product_scaling():
    def magnitude(q1, q2, d):
        a = PhysicsObject(id="a", charge=q1, position=(0, 0, 0))
        b = PhysicsObject(id="b", charge=q2, position=(d, 0, 0))
        f = ElectrostaticField().compute([a, b], _states(a, b), _handles(a, b))
        return np.linalg.norm(f["a"])

    base = magnitude(1e-6, 1e-6, 1.0)
    assert np.isclose(magnitude(1e-6, 1e-6, 2.0), base / 4.0)
    assert np.isclose(magnitude(2e-6, -3e-6, 1.0), base * 6.0)


def test_newton_third_law_many_bodies():
    rng = np.random.default_rng(7)
    objs = [
        PhysicsObject(id=f"q{i}", charge=float(rng.normal()) * 1e-6, position=rng.normal(size=3))
        for i in range(6)
    ]
    forces = ElectrostaticField().compute(objs, _states(*objs), _handles(*objs))

    total = sum(forces.values())
    assert np.allclose(total, 0.0, atol=1e-9)


def test_fewer_than_two_eligible_objects_gives_empty_map():
    a = PhysicsObject(id="a", charge=1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", charge=0.0, position=(1, 0, 0))
    c = PhysicsObject(id="c", charge=-1.0, position=(2, 0, 0))
    field = ElectrostaticField()

    assert field.compute([a], _states(a), _handles(a)) == {}
    assert field.compute([a, b], _states(a, b), _handles(a, b)) == {}
    # c has no live handle
    handles = {"a": object(), "b": object(), "c": None}
    assert field.compute([a, b, c], _states(a, b, c), handles) == {}


def test_uncharged_objects_get_no_entry():
    a = PhysicsObject(id="a", charge=1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", charge=0.0, position=(1, 0, 0))
    c = PhysicsObject(id="c", charge=1.0, position=(2, 0, 0))

    forces = ElectrostaticField().compute([a, b, c], _states(a, b, c), _handles(a, b, c))

    assert set(forces) == {"a", "c"}


def test_zero_separation_contributes_nothing():
    a = PhysicsObject(id="a", charge=1.0, position=(1, 1, 1))
    b = PhysicsObject(id="b", charge=1.0, position=(1, 1, 1))

    forces = ElectrostaticField().compute([a, b], _states(a, b), _handles(a, b))

    assert np.all(forces["a"] == 0.0)
    assert np.all(forces["b"] == 0.0)
    assert np.all(np.isfinite(forces["a"]))


def test_runtime_state_overrides_declared_position():
    a = PhysicsObject(id="a", charge=1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", charge=-1.0, position=(1, 0, 0))
    states = {
        "a": ObjectState(position=(0, 0, 0), velocity=(0, 0, 0)),
        "b": ObjectState(position=(0, 0, 2), velocity=(0, 0, 0)),
    }

    forces = ElectrostaticField().compute([a, b], states, _handles(a, b))

    assert np.allclose(forces["a"], [0.0, 0.0, 8.99e9 / 4.0])


def test_disabled_module_returns_empty():
    a = PhysicsObject(id="a", charge=1.0, position=(0, 0, 0))
    b = PhysicsObject(id="b", charge=-1.0, position=(1, 0, 0))
    field = ElectrostaticField(ElectrostaticConfig(enabled=False))

    assert field.compute([a, b], _states(a, b), _handles(a, b)) == {}
