import logging
import math

import numpy as np
import pytest
from scene_forces.renderer import MeshHandle
from scene_forces.visual import VisualObject, VisualObjectStore


def _store(now=1.0):
    return VisualObjectStore(clock=lambda: now)


def test_add_then_merge_keeps_existing_fields():
    store = _store()
    store.add_object({"id": "lamp", "position": [1, 2, 3], "color": "#ff0000"})
    store.add_object({"id": "lamp", "opacity": 0.5})

    obj = store.get_object("lamp")
    assert obj.position == [1.0, 2.0, 3.0]
    assert obj.color == "#ff0000"
    assert obj.opacity == 0.5
    assert len(store) == 1


def test_animation_before_object_creates_placeholder():
    store = _store()
    assert store.animate_object("ring", {"type": "rotate", "speed": 2})

    placeholder = store.get_object("ring")
    assert placeholder.position == [0.0, 0.0, 0.0]
    assert placeholder.animation.axis == "y"

    store.add_object({"id": "ring", "position": [0, 4, 0], "scale": 2})
    obj = store.get_object("ring")
    assert obj.position == [0.0, 4.0, 0.0]
    assert obj.scale == [2.0, 2.0, 2.0]
    assert obj.animation.type == "rotate"
    assert obj.animation.speed == 2.0


def test_from_dict_requires_id():
    with pytest.raises(ValueError):
        VisualObject.from_dict({"position": [0, 0, 0]})


def test_unknown_ids_are_reported():
    store = _store()
    assert not store.update_transform("nope", {"position": [1, 1, 1]})
    assert not store.update_material("nope", {"opacity": 0.2})
    assert not store.remove_object("nope")


def test_transform_and_material_reach_handle():
    store = _store()
    store.add_object({"id": "box"})
    mesh = MeshHandle()
    store.register_mesh("box", mesh)

    store.update_transform("box", {"position": [1, 2, 3], "scale": 0.5})
    store.update_material("box", {"color": "#00ff00", "opacity": 0.25, "roughness": 0.1})

    assert mesh.position.to_list() == [1.0, 2.0, 3.0]
    assert mesh.scale.to_list() == [0.5, 0.5, 0.5]
    assert mesh.material.color == "#00ff00"
    assert mesh.material.transparent is True
    assert mesh.material.roughness == 0.1
    assert store.get_object("box").opacity == 0.25

    store.update_material("box", {"opacity": 1})
    assert mesh.material.transparent is False


def test_remove_and_clear_drop_handles():
    store = _store()
    store.add_object({"id": "a"})
    store.add_object({"id": "b"})
    store.register_mesh("a", MeshHandle())

    assert store.remove_object("a")
    assert "a" not in store
    assert store.handle("a") is None

    store.clear()
    assert len(store) == 0


def test_builtin_animations():
    """t = (now · speed) mod 2π with now = 1.0."""
    store = _store(now=1.0)
    meshes = {}
    for oid, pos, anim in (
        ("spin", [0, 0, 0], {"type": "rotate", "axis": "x"}),
        ("bob", [0, 2, 0], {"type": "oscillate", "axis": "y", "amplitude": 0.5}),
        ("moon", [1, 0, 1], {"type": "orbit", "radius": 5}),
    ):
        store.add_object({"id": oid, "position": pos, "animation": anim})
        meshes[oid] = MeshHandle()
        store.register_mesh(oid, meshes[oid])

    store.update_animations(1 / 60)

    assert meshes["spin"].rotation.x == pytest.approx(1.0)
    assert meshes["bob"].position.y == pytest.approx(2.0 + 0.5 * math.sin(1.0))
    assert meshes["moon"].position.x == pytest.approx(1.0 + 5.0 * math.cos(1.0))
    assert meshes["moon"].position.z == pytest.approx(1.0 + 5.0 * math.sin(1.0))


def test_phase_wraps_at_two_pi():
    store = _store(now=10.0)
    store.animate_object("spin", {"type": "rotate", "speed": 1})
    mesh = MeshHandle()
    store.register_mesh("spin", mesh)

    store.update_animations(0.0)

    assert mesh.rotation.y == pytest.approx(10.0 - 2 * math.pi)


def test_objects_without_handle_are_skipped():
    store = _store()
    store.animate_object("ghost", {"type": "rotate"})
    store.update_animations(1 / 60)
    assert store.get_object("ghost").animation is not None


def test_script_animation_runs():
    store = _store(now=0.5)
    store.add_object({
        "id": "bob",
        "position": [0, 3, 0],
        "animation": {"code": "mesh.position.y = obj.position[1] + Math.sin(t)\nmesh.material.opacity = 0.5"},
    })
    mesh = MeshHandle()
    store.register_mesh("bob", mesh)

    store.update_animations(1 / 60)

    assert mesh.position.y == pytest.approx(3.0 + math.sin(0.5))
    assert mesh.material.opacity == 0.5


def test_failing_script_is_removed_without_affecting_others(caplog):
    store = _store(now=1.0)
    store.add_object({"id": "bad", "animation": {"code": "mesh.position.x = 1 / 0"}})
    store.add_object({"id": "evil", "animation": {"code": "import os"}})
    store.add_object({"id": "good", "animation": {"type": "rotate"}})
    for oid in ("bad", "evil", "good"):
        store.register_mesh(oid, MeshHandle())

    with caplog.at_level(logging.ERROR, logger="scene_forces.visual"):
        store.update_animations(1 / 60)

    assert store.get_object("bad").animation is None
    assert store.get_object("evil").animation is None
    assert store.handle("good").rotation.y == pytest.approx(1.0)
    assert "Animation script failed" in caplog.text

    # later ticks keep animating the healthy object
    store.update_animations(1 / 60)
    assert store.get_object("good").animation is not None


def test_add_then_animate_keeps_fields():
    store = _store()
    store.add_object({"id": "lamp", "position": [1, 2, 3], "color": "#ff0000", "opacity": 0.5})
    store.animate_object("lamp", {"type": "oscillate", "axis": "x"})

    obj = store.get_object("lamp")
    assert len(store) == 1
    assert obj.position == [1.0, 2.0, 3.0]
    assert obj.color == "#ff0000"
    assert obj.opacity == 0.5
    assert obj.animation.type == "oscillate"


def test_clear_forgets_every_id():
    store = _store()
    ids = ("a", "b", "c")
    for oid in ids:
        store.add_object({"id": oid})
        store.register_mesh(oid, MeshHandle())
    store.animate_object("d", {"type": "rotate"})

    store.clear()

    for oid in ids + ("d",):
        assert store.get_object(oid) is None
        assert store.handle(oid) is None
        assert oid not in store


def test_rotate_without_axis_uses_vertical_axis():
    store = _store(now=1.0)
    store.add_object({"id": "top", "animation": {"type": "rotate"}})
    mesh = MeshHandle()
    store.register_mesh("top", mesh)

    store.update_animations(1 / 60)

    assert mesh.rotation.y == pytest.approx(1.0)
    assert mesh.rotation.x == 0.0 and mesh.rotation.z == 0.0


def test_numpy_scalars_are_broadcast():
    store = _store()
    store.add_object({"id": "box", "scale": np.int64(2)})
    store.register_mesh("box", MeshHandle())

    store.update_transform("box", {"scale": np.float32(0.5), "position": np.array([1, 2, 3])})

    assert store.get_object("box").scale == [0.5, 0.5, 0.5]
    assert store.handle("box").position.to_list() == [1.0, 2.0, 3.0]
    assert VisualObject.from_dict({"id": "x", "scale": np.int64(2)}).scale == [2.0, 2.0, 2.0]
