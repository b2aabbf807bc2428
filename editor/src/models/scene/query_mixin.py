"""
Query Mixin for Scene Model

Provides read-only query methods for editor components to retrieve scene
state. All queries follow these conventions:
- Prefix with get_ for retrieving data
- Raise ValueError if a node id is not found
- Return immutable values (Node is frozen, collections are tuples or new lists)
"""

from typing import Iterable, List, Optional, Tuple

from ._internal.node import Node
from ._internal.tree import DisplayRow


class SceneQueryMixin:
    """Mixin providing query API for Scene model

    This mixin assumes the class has:
    - self.tree: SceneTree for the current version
    - self._require(node_id): lookup raising ValueError
    """

    # ========================================
    # Single node queries
    # ========================================

    def get_node(self, node_id: str) -> Node:
        """Get a node by id

        Raises:
            ValueError: If the id is not found
        """
        return self._require(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.tree

    def get_node_count(self) -> int:
        return len(self.tree)

    def get_node_ids(self) -> List[str]:
        """Get all node ids in insertion order"""
        return [node.id for node in self.tree.nodes]

    # ========================================
    # Hierarchy queries
    # ========================================

    def get_roots(self) -> Tuple[Node, ...]:
        """Get root-level nodes, frontmost first"""
        return self.tree.roots()

    def get_children(self, node_id: Optional[str]) -> Tuple[Node, ...]:
        """Get direct children, frontmost first

        Args:
            node_id: Parent id, or None for the root level

        Raises:
            ValueError: If the id is not found
        """
        if node_id is not None:
            self._require(node_id)
        return self.tree.children(node_id)

    def get_descendants(self, node_id: str) -> List[Node]:
        """Get every descendant in pre-order

        Raises:
            ValueError: If the id is not found
        """
        self._require(node_id)
        return self.tree.descendants(node_id)

    def get_ancestors(self, node_id: str) -> List[Node]:
        """Get ancestors, nearest first

        Raises:
            ValueError: If the id is not found
        """
        self._require(node_id)
        return self.tree.ancestors(node_id)

    def get_parent(self, node_id: str) -> Optional[Node]:
        """Get the parent node (None at root level or if the reference dangles)

        Raises:
            ValueError: If the id is not found
        """
        self._require(node_id)
        return self.tree.parent_of(node_id)

    def is_descendant(self, ancestor_id: str, candidate_id: str) -> bool:
        """Check whether candidate sits anywhere below ancestor"""
        return self.tree.is_descendant(ancestor_id, candidate_id)

    def has_children(self, node_id: str) -> bool:
        return bool(self.tree.children(node_id))

    def flattened_display_order(self, collapsed: Optional[Iterable[str]] = None) -> List[DisplayRow]:
        """Get layer panel rows (pre-order, frontmost first, collapsed ids folded)"""
        return self.tree.flattened_display_order(collapsed)

    # ========================================
    # Geometry queries
    # ========================================

    def get_nodes_bounds(self, node_ids: Iterable[str]):
        """Get the bounding box of a set of nodes

        Raises:
            ValueError: If any id is not found
        """
        from services.template_operations import bounding_box
        return bounding_box([self._require(node_id) for node_id in node_ids])
