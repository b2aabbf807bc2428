"""
Overlay Composer - Scene Data Model

THE MODEL of the overlay editor. Owns the node collection and every
structural operation on it.

This class handles:
- Node collection (flat, insertion-ordered, UUID-identified)
- Hierarchy queries (via a per-version SceneTree)
- Render list derivation (effective layer keys, visibility)
- Node management (add, remove with cascade, duplicate, move, update)
- Drag-and-drop reparent/reorder (planned, then committed atomically)
- Template capture, instantiation and slot list expansion
- Snapshot API (for undo/redo support)
- Layout JSON import/export

The node collection is copy-on-write: the scene holds an immutable tuple that
is replaced wholesale by every mutation, and `version` increases by one per
committed change. A caller holding an older tuple (or tree) keeps a consistent
view of the scene as it was.

The Scene model is INDEPENDENT of UI:
- No selection state (callers pass selections in)
- No undo stack (EditorSession manages that with snapshots)
- No collapsed/expanded state for the layer panel

Usage:
    scene = Scene()
    group_id = scene.add_node('group', name='Scoreboard')
    score_id = scene.add_node('score', parent_id=group_id, data_binding='homeTeam.score')

    for entry in scene.render_list(game_data):
        draw(entry.node, entry.is_visible)

    scene.drop(score_id, group_id, 'before')
    snapshot = scene.get_snapshot()
"""

import logging
from typing import Iterable, Optional, Tuple

from constants import DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT
from ._internal.node import Node
from ._internal.tree import SceneTree
from .query_mixin import SceneQueryMixin
from .node_mixin import SceneNodeMixin
from .ordering_mixin import SceneOrderingMixin
from .reorder_mixin import SceneReorderMixin
from .template_mixin import SceneTemplateMixin
from .serialization_mixin import SceneSerializationMixin


class Scene(SceneNodeMixin, SceneReorderMixin, SceneTemplateMixin, SceneSerializationMixin,
            SceneOrderingMixin, SceneQueryMixin):
    """Overlay scene with full operation API

    Properties:
        name: Layout name
        width, height: Canvas dimensions in pixels
        background_color: Opaque background value carried through export
        nodes: Current immutable node tuple
        version: Monotonic change counter
        tree: SceneTree for the current version
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None, name: str = 'Untitled Layout',
                 width: int = DEFAULT_CANVAS_WIDTH, height: int = DEFAULT_CANVAS_HEIGHT,
                 background_color: Optional[str] = None):
        """Create a scene, optionally pre-populated

        Raises:
            ValueError: If two nodes share an id
        """
        self._logger = logging.getLogger('Scene')
        self.name = name
        self.width = width
        self.height = height
        self.background_color = background_color

        self._nodes: Tuple[Node, ...] = ()
        self._version = 0
        self._tree_cache: Optional[Tuple[int, SceneTree]] = None

        if nodes:
            self._nodes = self._checked_nodes(tuple(nodes))

        self._logger.debug(f"Created scene '{name}' with {len(self._nodes)} nodes")

    def clear(self):
        """Remove every node"""
        self._commit((), "clear")

    # ========================================
    # Properties
    # ========================================

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def version(self) -> int:
        return self._version

    @property
    def tree(self) -> SceneTree:
        """Hierarchy index for the current version (built at most once per version)"""
        if self._tree_cache is None or self._tree_cache[0] != self._version:
            self._tree_cache = (self._version, SceneTree(self._nodes))
        return self._tree_cache[1]

    # ========================================
    # Internal helpers
    # ========================================

    def _commit(self, nodes: Tuple[Node, ...], description: str = ""):
        """Swap in a new node tuple as one version step"""
        self._nodes = tuple(nodes)
        self._version += 1
        self._logger.debug(f"Commit v{self._version}: {description} ({len(self._nodes)} nodes)")

    def _require(self, node_id: str) -> Node:
        """Get a node or raise

        Raises:
            ValueError: If the id is unknown
        """
        node = self.tree.get(node_id)
        if node is None:
            raise ValueError(f"Node with id '{node_id}' not found")
        return node

    @staticmethod
    def _checked_nodes(nodes: Tuple[Node, ...]) -> Tuple[Node, ...]:
        seen = set()
        for node in nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id '{node.id}'")
            seen.add(node.id)
        return nodes

    def _replace_nodes(self, updated: dict, description: str = ""):
        """Commit replacements for some nodes, keeping order"""
        self._commit(tuple(updated.get(n.id, n) for n in self._nodes), description)
