import numpy as np
import pytest
from scene_forces.config import ConnectionConfig
from scene_forces.core.connections import ConnectionModule
from scene_forces.types import Connection, ObjectState, PhysicsObject


def _state(p):
    return ObjectState(position=p, velocity=(0.0, 0.0, 0.0))


def test_zero_forces_for_linked_active_objects_only():
    anchor = PhysicsObject(id="anchor", connections=(Connection("chain", target="bob"),))
    bob = PhysicsObject(id="bob")
    loose = PhysicsObject(id="loose", connections=(Connection("rigid_body", target="bob"),))
    handles = {"anchor": object(), "bob": object(), "loose": None}

    forces = ConnectionModule().compute([anchor, bob, loose], {}, handles)

    assert set(forces) == {"anchor"}
    assert np.all(forces["anchor"] == 0.0)


def test_chain_span_and_segments():
    anchor = PhysicsObject(id="anchor", connections=(Connection("chain", target="bob", params={"links": 4}),))
    bob = PhysicsObject(id="bob")
    handles = {"anchor": 1, "bob": 2}
    module = ConnectionModule()

    module.compute([anchor, bob], {"anchor": _state((0, 0, 0)), "bob": _state((0, -2, 0))}, handles)
    module.compute([anchor, bob], {"anchor": _state((0, 0, 0)), "bob": _state((0, -3, 0))}, handles)

    (link,) = module.links_for("anchor")
    assert link.updates == 2
    assert link.rest_span == pytest.approx(2.0)
    assert link.span == pytest.approx(3.0)
    assert link.segment_length == pytest.approx(0.75)
    assert link.stretch == pytest.approx(0.5)


def test_rigid_body_drift():
    a = PhysicsObject(id="a", connections=(Connection("rigid_body", target="b"),))
    b = PhysicsObject(id="b")
    handles = {"a": 1, "b": 1}
    module = ConnectionModule()

    module.compute([a, b], {"a": _state((0, 0, 0)), "b": _state((1, 0, 0))}, handles)
    module.compute([a, b], {"a": _state((0, 0, 0)), "b": _state((1, 0.5, 0))}, handles)

    (link,) = module.links_for("a")
    assert link.drift == pytest.approx(0.5)


def test_mechanical_link_travel():
    lever = PhysicsObject(id="lever", connections=(Connection("mechanical_link", target="load", params={"ratio": 3.0}),))
    handles = {"lever": 1}
    module = ConnectionModule()

    for x in (0.0, 1.0, 3.0):
        module.compute([lever], {"lever": _state((x, 0, 0))}, handles)

    (link,) = module.links_for("lever")
    assert link.travel == pytest.approx(3.0)
    assert link.output_travel == pytest.approx(9.0)
    # target has no runtime state
    assert link.span is None


def test_unknown_type_is_ignored_and_reset_clears():
    obj = PhysicsObject(id="o", connections=(Connection("spring", target="x"), Connection("chain")))
    module = ConnectionModule()

    forces = module.compute([obj], {}, {"o": 1})

    assert set(forces) == {"o"}
    links = module.links_for("o")
    assert [link.connection.type for link in links] == ["spring", "chain"]
    assert links[0].updates == 0
    assert links[1].updates == 1

    module.reset()
    assert module.links_for("o") == []


def test_disabled_module_returns_empty():
    obj = PhysicsObject(id="o", connections=(Connection("chain"),))
    assert ConnectionModule(ConnectionConfig(enabled=False)).compute([obj], {}, {"o": 1}) == {}


def test_links_dropped_when_owner_or_connection_goes_away():
    a = PhysicsObject(id="a", connections=(Connection("chain", target="b"), Connection("rigid_body", target="b")))
    b = PhysicsObject(id="b", connections=(Connection("chain", target="a"),))
    module = ConnectionModule()
    module.compute([a, b], {}, {"a": 1, "b": 1})
    assert len(module.links_for("a")) == 2 and len(module.links_for("b")) == 1

    # b left the solver; a now declares a single connection
    trimmed = PhysicsObject(id="a", connections=(Connection("chain", target="b"),))
    module.compute([trimmed, b], {}, {"a": 1, "b": None})

    assert [link.index for link in module.links_for("a")] == [0]
    assert module.links_for("a")[0].updates == 2
    assert module.links_for("b") == []

    module.compute([trimmed], {}, {"a": 1})
    assert set(module.links) == {("a", 0)}
