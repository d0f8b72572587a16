# MIT License (see LICENSE)
"""
Structural connection bookkeeping (chains, rigid-body links, mechanical links).

This module never computes a force. The external constraint solver owns
the link mechanics; the module's job is to keep per-link state current so
that solver (and any diagnostics) can read it:

- chain:           current span and per-segment length
- rigid_body:      offset captured on first sight and drift from it
- mechanical_link: input travel of the driving object and the output
                   travel implied by the link ratio

compute() still returns a ForceMap so the aggregator can treat every
module the same way: a zero vector for every active object that owns at
least one connection.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from ..config import ConnectionConfig
from ..types import Connection, ForceMap, ObjectState, PhysicsObject
from ..util import norm, zero3

logger = logging.getLogger(__name__)


@dataclass
class LinkState:
    """
    Bookkeeping for one declared connection.

    Attributes:
        owner: Id of the object declaring the connection.
        index: Position of the connection in the owner's list.
        connection: The declared link.
        updates: Number of ticks this link has been advanced.
        span: Current owner -> target distance (None without a target state).
        rest_span: Span on the first tick both ends were known.
        offset: Target position relative to the owner, current tick.
        rest_offset: Offset on the first tick both ends were known.
        travel: Accumulated path length of the owner (mechanical links).
        last_position: Owner position on the previous tick.
    """
    owner: str
    index: int
    connection: Connection
    updates: int = 0
    span: float | None = None
    rest_span: float | None = None
    offset: np.ndarray | None = None
    rest_offset: np.ndarray | None = None
    travel: float = 0.0
    last_position: np.ndarray | None = field(default=None, repr=False)

    @property
    def segment_length(self) -> float | None:
        """Chain span divided over its links."""
        if self.span is None:
            return None
        links = max(1, int(self.connection.params.get("links", 1)))
        return self.span / links

    @property
    def stretch(self) -> float:
        """Relative change of span since rest (0 when unknown)."""
        if self.span is None or not self.rest_span:
            return 0.0
        return (self.span - self.rest_span) / self.rest_span

    @property
    def drift(self) -> float:
        """Distance the target has moved away from its rigid rest offset."""
        if self.offset is None or self.rest_offset is None:
            return 0.0
        return norm(self.offset - self.rest_offset)

    @property
    def output_travel(self) -> float:
        """Travel transmitted through a mechanical link (input travel times ratio)."""
        ratio = float(self.connection.params.get("ratio", 1.0))
        return self.travel * ratio


class ConnectionModule:
    """
    Advances LinkState for every connection on every active object.

    Usage:
        module = ConnectionModule(ConnectionConfig())
        module.compute(scene.objects, states, handles)
        module.links_for("chain_anchor")
    """

    name = "connections"

    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self.config = config or ConnectionConfig()
        self.links: dict[tuple[str, int], LinkState] = {}

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap:
        """Update link bookkeeping; return zero forces for every linked, active object."""
        if not self.enabled:
            return {}

        forces: ForceMap = {}
        seen: set[tuple[str, int]] = set()
        for obj in objects:
            if handles.get(obj.id) is None or not obj.connections:
                continue
            forces[obj.id] = zero3()

            for index, connection in enumerate(obj.connections):
                key = (obj.id, index)
                seen.add(key)
                link = self.links.get(key)
                if link is None or link.connection != connection:
                    link = LinkState(owner=obj.id, index=index, connection=connection)
                    self.links[key] = link

                if connection.type == "chain":
                    self._update_chain(link, obj, states)
                elif connection.type == "rigid_body":
                    self._update_rigid_body(link, obj, states)
                elif connection.type == "mechanical_link":
                    self._update_mechanical_link(link, obj, states)
                else:
                    logger.debug("Ignoring connection of unknown type %r on %r", connection.type, obj.id)
                    continue
                link.updates += 1

        # objects gone from the scene or the solver, and trimmed connection lists
        for key in self.links.keys() - seen:
            del self.links[key]
        return forces

    def links_for(self, object_id: str) -> list[LinkState]:
        """All tracked links owned by `object_id`, in declaration order."""
        return sorted(
            (link for (owner, _), link in self.links.items() if owner == object_id),
            key=lambda link: link.index,
        )

    def reset(self) -> None:
        self.links.clear()

    # -------------------------------------------------------------------------

    @staticmethod
    def _ends(link: LinkState, obj: PhysicsObject, states: Mapping[str, ObjectState]):
        owner = states[obj.id].position if obj.id in states else obj.position
        target_id = link.connection.target
        if target_id is None or target_id not in states:
            return owner, None
        return owner, states[target_id].position

    def _update_span(self, link: LinkState, obj: PhysicsObject, states: Mapping[str, ObjectState]) -> None:
        owner, target = self._ends(link, obj, states)
        if target is None:
            link.span = None
            link.offset = None
            return
        link.offset = target - owner
        link.span = norm(link.offset)
        if link.rest_span is None:
            link.rest_span = link.span
            link.rest_offset = link.offset.copy()

    def _update_chain(self, link: LinkState, obj: PhysicsObject, states: Mapping[str, ObjectState]) -> None:
        self._update_span(link, obj, states)

    def _update_rigid_body(self, link: LinkState, obj: PhysicsObject, states: Mapping[str, ObjectState]) -> None:
        self._update_span(link, obj, states)

    def _update_mechanical_link(self, link: LinkState, obj: PhysicsObject, states: Mapping[str, ObjectState]) -> None:
        self._update_span(link, obj, states)
        owner, _ = self._ends(link, obj, states)
        if link.last_position is not None:
            link.travel += norm(owner - link.last_position)
        link.last_position = owner.copy()
