"""
Overlay Composer - Layer Panel Drag Gesture

One DragGesture object tracks a single drag in the layer panel:

    idle -> dragging -> hovering(target, zone) -> committed | cancelled

The zone comes from where the pointer sits inside the hovered row: the top
quarter drops in front of the target ('before'), the bottom quarter behind it
('after'), and the middle half into it as a child ('into').

A drop that the scene rejects (missing node, dropping onto itself, would
create a cycle) ends the gesture as cancelled and changes nothing.
"""

import logging
from typing import Callable, Optional

from constants import (
    DROP_BEFORE, DROP_AFTER, DROP_INTO, DROP_ZONE_EDGE_FRACTION,
    GESTURE_IDLE, GESTURE_DRAGGING, GESTURE_HOVERING, GESTURE_COMMITTED, GESTURE_CANCELLED,
)

logger = logging.getLogger(__name__)


def zone_for_pointer(pointer_y: float, row_top: float, row_height: float,
                     edge_fraction: float = DROP_ZONE_EDGE_FRACTION) -> str:
    """Classify a pointer position within a row into a drop zone

    Args:
        pointer_y: Pointer y coordinate
        row_top: Top edge of the hovered row
        row_height: Height of the hovered row
        edge_fraction: Share of the height used by each edge zone

    Returns:
        'before', 'into' or 'after'; a row with no height is always 'before'
    """
    if row_height <= 0:
        return DROP_BEFORE
    relative = (pointer_y - row_top) / row_height
    if relative < edge_fraction:
        return DROP_BEFORE
    if relative >= 1.0 - edge_fraction:
        return DROP_AFTER
    return DROP_INTO


class DragGesture:
    """State machine for one layer panel drag

    Properties:
        state: Current gesture state
        source_id: Dragged node id
        target_id: Hovered node id (hovering only)
        zone: Drop zone over the target (hovering only)
    """

    def __init__(self, scene, on_commit: Optional[Callable[[str], None]] = None):
        """
        Args:
            scene: Scene the gesture operates on
            on_commit: Called with a description after the scene changed
        """
        self._scene = scene
        self._on_commit = on_commit
        self.state = GESTURE_IDLE
        self.source_id: Optional[str] = None
        self.target_id: Optional[str] = None
        self.zone: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.state in (GESTURE_DRAGGING, GESTURE_HOVERING)

    @property
    def is_finished(self) -> bool:
        return self.state in (GESTURE_COMMITTED, GESTURE_CANCELLED)

    def _require_state(self, *states):
        if self.state not in states:
            raise RuntimeError(f"Drag gesture is {self.state}, expected one of {states}")

    # ========================================
    # Transitions
    # ========================================

    def begin(self, source_id: str) -> bool:
        """Start dragging a node

        Returns:
            True if dragging; False (and cancelled) if the node does not exist

        Raises:
            RuntimeError: If the gesture already started
        """
        self._require_state(GESTURE_IDLE)
        self.source_id = source_id
        if not self._scene.has_node(source_id):
            logger.info(f"Drag of unknown node {source_id} cancelled")
            self.state = GESTURE_CANCELLED
            return False
        self.state = GESTURE_DRAGGING
        return True

    def hover(self, target_id: str, pointer_y: float, row_top: float, row_height: float) -> str:
        """Move the pointer over a row

        Returns:
            The drop zone now in effect
        """
        self._require_state(GESTURE_DRAGGING, GESTURE_HOVERING)
        self.target_id = target_id
        self.zone = zone_for_pointer(pointer_y, row_top, row_height)
        self.state = GESTURE_HOVERING
        return self.zone

    def leave(self):
        """Pointer left every row"""
        self._require_state(GESTURE_DRAGGING, GESTURE_HOVERING)
        self.target_id = None
        self.zone = None
        self.state = GESTURE_DRAGGING

    def can_drop(self) -> bool:
        """Check whether dropping now would be accepted"""
        if self.state != GESTURE_HOVERING:
            return False
        return self._scene.plan_drop(self.source_id, self.target_id, self.zone) is not None

    def drop(self) -> bool:
        """Release over the hovered row

        Dropping while not over any row cancels the gesture.

        Returns:
            True if the scene changed
        """
        self._require_state(GESTURE_DRAGGING, GESTURE_HOVERING)
        if self.state == GESTURE_DRAGGING:
            self.cancel()
            return False

        plan = self._scene.plan_drop(self.source_id, self.target_id, self.zone)
        if plan is None:
            logger.info(f"Drop of {self.source_id} {self.zone} {self.target_id} rejected")
            self.state = GESTURE_CANCELLED
            return False
        return self._finish(plan, f"Move layer {self.zone} {self.target_id}")

    def drop_on_root(self) -> bool:
        """Release over the root-level drop zone

        Returns:
            True if the scene changed
        """
        self._require_state(GESTURE_DRAGGING, GESTURE_HOVERING)
        plan = self._scene.plan_root_drop(self.source_id)
        if plan is None:
            self.state = GESTURE_CANCELLED
            return False
        self.target_id = None
        self.zone = None
        return self._finish(plan, "Move layer to root")

    def cancel(self):
        """Abort the gesture (escape key, drop outside the panel)"""
        if not self.is_finished:
            self.state = GESTURE_CANCELLED

    def _finish(self, plan, description: str) -> bool:
        changed = self._scene.apply_plan(plan)
        self.state = GESTURE_COMMITTED
        if changed and self._on_commit is not None:
            self._on_commit(description)
        return changed
