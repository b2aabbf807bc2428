"""
Scene Serialization Mixin

Provides snapshot and layout conversion methods for the Scene model:
- Snapshots for undo/redo (cheap: node tuples are immutable)
- Layout dictionaries in the web editor's LayoutConfig shape
  ({name, dimensions, backgroundColor, components[]})
"""

from typing import Any, Dict, Mapping

from ._internal.node import Node
from constants import DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT


class SceneSerializationMixin:
    """Mixin providing serialization methods for Scene model"""

    # ========================================
    # Snapshots
    # ========================================

    def get_snapshot(self) -> Dict[str, Any]:
        """Get complete state snapshot (for undo)

        Nodes are frozen, so the node tuple is shared rather than copied.
        """
        return {
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'background_color': self.background_color,
            'nodes': self._nodes,
        }

    def set_snapshot(self, snapshot: Mapping[str, Any]):
        """Restore state from snapshot (for undo)

        Restoring is a new version step, so trees memoized for the previous
        state are not reused.

        Args:
            snapshot: Dictionary from get_snapshot()
        """
        self.name = snapshot.get('name', self.name)
        self.width = snapshot.get('width', self.width)
        self.height = snapshot.get('height', self.height)
        self.background_color = snapshot.get('background_color', self.background_color)
        self._commit(tuple(snapshot['nodes']), "restore snapshot")

    # ========================================
    # Layout dictionaries
    # ========================================

    def to_layout_dict(self) -> Dict[str, Any]:
        """Export to the layout dictionary format"""
        layout = {
            'name': self.name,
            'dimensions': {'width': self.width, 'height': self.height},
            'components': [node.to_dict() for node in self._nodes],
        }
        if self.background_color is not None:
            layout['backgroundColor'] = self.background_color
        return layout

    def load_layout_dict(self, layout: Mapping[str, Any]):
        """Replace the scene contents with a layout dictionary

        Raises:
            ValueError: If a component has an unknown type or ids collide
        """
        nodes = tuple(Node.from_dict(c) for c in layout.get('components') or [])
        dimensions = layout.get('dimensions') or {}
        self.name = layout.get('name') or self.name
        self.width = int(dimensions.get('width', DEFAULT_CANVAS_WIDTH))
        self.height = int(dimensions.get('height', DEFAULT_CANVAS_HEIGHT))
        self.background_color = layout.get('backgroundColor')
        self._commit(self._checked_nodes(nodes), f"load layout '{self.name}'")

    @classmethod
    def from_layout_dict(cls, layout: Mapping[str, Any]):
        """Create a scene from a layout dictionary

        Raises:
            ValueError: If a component has an unknown type or ids collide
        """
        scene = cls()
        scene.load_layout_dict(layout)
        return scene
