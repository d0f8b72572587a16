# MIT License (see LICENSE)
"""
Renderer adapters for the visual object store.

The store mutates render handles directly; these adapters read the
resulting frame back out, for console debugging or for recording
animations headlessly.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TextIO
import sys

if TYPE_CHECKING:
    from ..visual import VisualObject, VisualObjectStore


class RendererAdapter(ABC):
    """
    Abstract per-frame renderer.

    Usage:
        renderer.begin_frame(t)
        for obj, handle in pairs:
            renderer.draw_object(obj, handle)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render_store(store, t)
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        ...

    @abstractmethod
    def draw_object(self, obj: "VisualObject", handle: Any) -> None:
        """Draw one visual object through its render handle (handle may be None)."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_store(self, store: "VisualObjectStore", time: float) -> None:
        """Render every object in the store in insertion order."""
        self.begin_frame(time)
        for obj in store.objects():
            self.draw_object(obj, store.handle(obj.id))
        self.end_frame()


def _triple(v: Any) -> list[float]:
    return [float(v.x), float(v.y), float(v.z)]


class DebugRenderer(RendererAdapter):
    """
    Text renderer for development.

    Output:
        === Frame t=1.2500 ===
        [spinner] pos=(0.00, 1.00, 0.00) rot=(0.00, 1.25, 0.00) anim=rotate
        [label] (no handle)
    """

    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output or sys.stdout

    def begin_frame(self, time: float) -> None:
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_object(self, obj: "VisualObject", handle: Any) -> None:
        if handle is None:
            self.output.write(f"[{obj.id}] (no handle)\n")
            return
        p, r = _triple(handle.position), _triple(handle.rotation)
        line = (
            f"[{obj.id}] pos=({p[0]:.2f}, {p[1]:.2f}, {p[2]:.2f})"
            f" rot=({r[0]:.2f}, {r[1]:.2f}, {r[2]:.2f})"
        )
        if obj.animation is not None:
            line += f" anim={obj.animation.type or 'code'}"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_object(self, obj: "VisualObject", handle: Any) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records the transform of every handled object each frame.

    Example:
        renderer = BufferedRenderer()
        for i in range(60):
            store.update_animations(1 / 60)
            renderer.render_store(store, i / 60)
        ys = [f["objects"]["bob"]["position"][1] for f in renderer.frames]
    """

    def __init__(self) -> None:
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {"time": time, "objects": {}}

    def draw_object(self, obj: "VisualObject", handle: Any) -> None:
        if self._current_frame is None or handle is None:
            return
        self._current_frame["objects"][obj.id] = {
            "position": _triple(handle.position),
            "rotation": _triple(handle.rotation),
            "scale": _triple(handle.scale),
        }

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
