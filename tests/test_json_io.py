import json

import numpy as np
import pytest
from scene_forces.io import load_scene, load_scene_raw, save_scene, scene_from_dict, scene_to_dict
from scene_forces.io.json_io import object_from_dict

DESCRIPTOR = {
    "gravity": [0, -9.81, 0],
    "simulationScale": "terrestrial",
    "objects": [
        {"id": "ball", "type": "Sphere", "position": [0, 2, 0], "radius": 0.25, "charge": 1e-6},
        {"id": "crate", "type": "Box", "dimensions": [1, 0.5, 2], "mass": 4, "isStatic": True},
        {
            "id": "anchor",
            "connections": [
                {"type": "chain", "target": "ball", "links": 6},
                {"type": "mechanical_link", "targetId": "crate", "ratio": 2},
            ],
        },
    ],
    "fluid": {"density": 1025, "surfaceLevel": 0, "fluidHeight": 4},
    "connections": {"enabled": True},
    "gravitationalPhysics": {"enabled": True, "softening": 0.01},
}


def test_scene_from_dict():
    scene = scene_from_dict(DESCRIPTOR)

    ball, crate, anchor = scene.objects
    assert np.allclose(ball.position, [0.0, 2.0, 0.0])
    assert ball.radius == 0.25 and ball.mass == 1.0
    assert crate.dimensions == (1.0, 0.5, 2.0)
    assert crate.is_static and crate.mass == 4.0
    assert anchor.connections[0].target == "ball"
    assert anchor.connections[0].params == {"links": 6}
    assert anchor.connections[1].target == "crate"

    assert scene.fluid.density == 1025.0
    assert scene.fluid.bottom_level == -4.0
    assert scene.electrostatic.enabled
    assert scene.gravitation.enabled and scene.gravitation.softening == 0.01


def test_defaults_for_missing_blocks():
    scene = scene_from_dict({"objects": [{"id": "a"}]})

    assert scene.gravity == (0.0, -9.81, 0.0)
    assert scene.fluid is None
    assert scene.electrostatic.enabled
    assert scene.connections.enabled
    assert not scene.gravitation.enabled
    assert scene_to_dict(scene) == {
        "gravity": [0.0, -9.81, 0.0],
        "objects": [{"id": "a", "type": "Sphere", "position": [0.0, 0.0, 0.0]}],
    }


def test_explicit_zero_and_null_fluid_values():
    scene = scene_from_dict({"fluid": {"surfaceLevel": 0, "density": None, "fluidHeight": 0}})
    assert scene.fluid.surface_level == 0.0
    assert scene.fluid.density == 1000.0
    assert scene.fluid.fluid_height == 0.0


@pytest.mark.parametrize("obj", [
    {"type": "Sphere"},
    {"id": "a", "position": [0, 1]},
    {"id": "a", "velocity": "fast"},
    {"id": "a", "mass": "heavy"},
    {"id": "a", "connections": [{"target": "b"}]},
])
def test_malformed_objects(obj):
    with pytest.raises(ValueError):
        object_from_dict(obj)


def test_duplicate_ids_and_bad_gravity():
    with pytest.raises(ValueError):
        scene_from_dict({"objects": [{"id": "a"}, {"id": "a"}]})
    with pytest.raises(ValueError):
        scene_from_dict({"gravity": [0, -9.81]})


def test_save_and_load(tmp_path):
    path = tmp_path / "scene.json"
    scene = scene_from_dict(DESCRIPTOR)

    save_scene(scene, str(path))
    loaded = load_scene(str(path))

    assert scene_to_dict(loaded) == scene_to_dict(scene)
    raw = load_scene_raw(str(path))
    assert raw["gravitationalPhysics"]["softening"] == 0.01
    assert raw["objects"][2]["connections"][1] == {"type": "mechanical_link", "target": "crate", "ratio": 2}
    assert "electrostatic" not in raw


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scene(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_scene(str(broken))
