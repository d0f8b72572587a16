# examples/animated_props.py
import logging
import time

from scene_forces import VisualObjectStore
from scene_forces.logging_config import setup_logging
from scene_forces.renderer import BufferedRenderer, DebugRenderer, MeshHandle

setup_logging(logging.DEBUG)

clock = {"now": 0.0}
store = VisualObjectStore(clock=lambda: clock["now"])

# the animation may arrive before the object it drives
store.animate_object("moon", {"type": "orbit", "radius": 3, "speed": 0.5})
store.add_object({"id": "moon", "position": [0, 1, 0], "color": "#cccccc"})
store.add_object({"id": "fan", "animation": {"type": "rotate", "axis": "z", "speed": 4}})
store.add_object({
    "id": "beacon",
    "position": [0, 2, 0],
    "animation": {
        "code": (
            "mesh.position.y = obj.position[1] + Math.sin(t * 2) * 0.25\n"
            "mesh.material.opacity = 0.5 + 0.5 * Math.cos(t)"
        ),
    },
})
store.add_object({"id": "broken", "animation": {"code": "mesh.position.x = 1 / 0"}})

for object_id in ("moon", "fan", "beacon", "broken"):
    store.register_mesh(object_id, MeshHandle())

recorder = BufferedRenderer()
debug = DebugRenderer()
t0 = time.perf_counter()
for frame in range(120):
    clock["now"] = frame / 60
    store.update_animations(1 / 60)
    recorder.render_store(store, clock["now"])
    if frame % 40 == 0:
        debug.render_store(store, clock["now"])

print(f"recorded {len(recorder.frames)} frames in {1e3 * (time.perf_counter() - t0):.1f} ms")
print("broken animation removed:", store.get_object("broken").animation is None)
