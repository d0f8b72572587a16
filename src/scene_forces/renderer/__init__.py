# MIT License (see LICENSE)
"""
Render handles and renderer adapters.

This subpackage provides:
    - Vector3, MeshMaterial, MeshHandle: in-memory render handles.
    - RendererAdapter: Abstract base class for frame readers.
    - DebugRenderer: Text/console output for debugging.
    - NullRenderer: No-op renderer.
    - BufferedRenderer: Records frames for playback or export.

Typical usage:
    from scene_forces.renderer import MeshHandle, DebugRenderer

    store.register_mesh("spinner", MeshHandle())
    DebugRenderer().render_store(store, time=0.0)
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    NullRenderer,
    BufferedRenderer,
)
from .handles import MeshHandle, MeshMaterial, Vector3

__all__ = [
    # Handles
    "Vector3",
    "MeshMaterial",
    "MeshHandle",
    # Adapters
    "RendererAdapter",
    "DebugRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
