import io

from scene_forces.renderer import BufferedRenderer, DebugRenderer, MeshHandle, NullRenderer
from scene_forces.visual import VisualObjectStore


def _store():
    store = VisualObjectStore(clock=lambda: 0.5)
    store.add_object({"id": "spinner", "position": [0, 1, 0]})
    store.add_object({"id": "label"})
    mesh = MeshHandle()
    mesh.position.set(0, 1, 0)
    store.register_mesh("spinner", mesh)
    store.animate_object("spinner", {"type": "rotate"})
    return store


def test_buffered_renderer_records_handled_objects():
    store = _store()
    renderer = BufferedRenderer()

    for i in range(3):
        store.update_animations(1 / 60)
        renderer.render_store(store, i / 60)

    assert len(renderer.frames) == 3
    frame = renderer.frames[-1]
    assert frame["time"] == 2 / 60
    assert set(frame["objects"]) == {"spinner"}
    assert frame["objects"]["spinner"]["rotation"] == [0.0, 0.5, 0.0]
    assert frame["objects"]["spinner"]["scale"] == [1.0, 1.0, 1.0]

    renderer.clear()
    assert renderer.frames == []


def test_debug_renderer_output():
    store = _store()
    store.update_animations(1 / 60)
    out = io.StringIO()

    DebugRenderer(out).render_store(store, 1.25)

    text = out.getvalue()
    assert "=== Frame t=1.2500 ===" in text
    assert "[spinner] pos=(0.00, 1.00, 0.00) rot=(0.00, 0.50, 0.00) anim=rotate" in text
    assert "[label] (no handle)" in text


def test_null_renderer():
    NullRenderer().render_store(_store(), 0.0)
