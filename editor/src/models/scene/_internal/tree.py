"""
SceneTree - parent/children index over an immutable node tuple.

The scene stores nodes as a flat tuple where each node optionally names its
parent. SceneTree derives the hierarchy once, in a single pass, and answers
every structural query from that index:

- children / descendants / ancestors / parent_of
- root list
- is_descendant (cycle guard for reparenting)
- flattened_display_order for the layer panel

Sibling groups are sorted frontmost first: layer descending, and for equal
layers the later-inserted node first, so the panel always mirrors paint order.

A node whose parent id does not resolve is listed among the roots. A node
caught in a parent cycle (only possible in hand-edited data) is also promoted
to a root so it is never lost from the panel.

The tree never mutates anything; Scene memoizes one per version.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from .node import Node


@dataclass(frozen=True)
class DisplayRow:
    """One row of the flattened layer panel"""
    node: Node
    depth: int
    has_children: bool


class SceneTree:
    """Read-only hierarchy index for a node sequence"""

    def __init__(self, nodes: Sequence[Node]):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._by_id: Dict[str, Node] = {}
        self._order: Dict[str, int] = {}
        for index, node in enumerate(self._nodes):
            self._by_id[node.id] = node
            self._order[node.id] = index

        # Effective parent: None when dangling or cyclic
        self._parent: Dict[str, Optional[str]] = {}
        for node in self._nodes:
            parent_id = node.parent_id
            if parent_id is None or parent_id not in self._by_id or self._in_cycle(node.id):
                self._parent[node.id] = None
            else:
                self._parent[node.id] = parent_id

        children: Dict[str, List[Node]] = {}
        roots: List[Node] = []
        for node in self._nodes:
            parent_id = self._parent[node.id]
            if parent_id is None:
                roots.append(node)
            else:
                children.setdefault(parent_id, []).append(node)

        self._roots = self._sorted_siblings(roots)
        self._children = {pid: self._sorted_siblings(kids) for pid, kids in children.items()}

    def _in_cycle(self, node_id: str) -> bool:
        """Check whether following parent links from node_id loops back to it"""
        visited = set()
        current = self._by_id[node_id].parent_id
        while current is not None and current in self._by_id and current not in visited:
            if current == node_id:
                return True
            visited.add(current)
            current = self._by_id[current].parent_id
        return False

    def _sorted_siblings(self, siblings: Iterable[Node]) -> Tuple[Node, ...]:
        return tuple(sorted(siblings, key=lambda n: (-n.layer, -self._order[n.id])))

    # ========================================
    # Lookups
    # ========================================

    @property
    def nodes(self) -> Tuple[Node, ...]:
        """All nodes in insertion order"""
        return self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        """Get a node by id, or None if absent"""
        if node_id is None:
            return None
        return self._by_id.get(node_id)

    def insertion_index(self, node_id: str) -> int:
        """Get a node's position in the insertion-ordered tuple"""
        return self._order[node_id]

    # ========================================
    # Structure queries
    # ========================================

    def roots(self) -> Tuple[Node, ...]:
        """Get root-level nodes, frontmost first"""
        return self._roots

    def children(self, node_id: Optional[str]) -> Tuple[Node, ...]:
        """Get direct children, frontmost first

        Args:
            node_id: Parent id, or None for the root level
        """
        if node_id is None:
            return self._roots
        return self._children.get(node_id, ())

    def siblings_of(self, node_id: str) -> Tuple[Node, ...]:
        """Get the sibling group containing node_id (node included)"""
        return self.children(self.parent_of_id(node_id))

    def parent_of_id(self, node_id: str) -> Optional[str]:
        """Get the effective parent id (None when root or dangling)"""
        return self._parent.get(node_id)

    def parent_of(self, node_id: str) -> Optional[Node]:
        """Get the parent node, None when root-level or the reference dangles"""
        parent_id = self._parent.get(node_id)
        return self._by_id.get(parent_id) if parent_id is not None else None

    def ancestors(self, node_id: str) -> List[Node]:
        """Get ancestors, nearest first

        The walk stops at a dangling parent reference.
        """
        result = []
        current = self._parent.get(node_id)
        while current is not None:
            result.append(self._by_id[current])
            current = self._parent.get(current)
        return result

    def descendants(self, node_id: str) -> List[Node]:
        """Get all descendants in pre-order (frontmost branch first)"""
        result = []
        stack = list(reversed(self.children(node_id)))
        while stack:
            node = stack.pop()
            result.append(node)
            stack.extend(reversed(self.children(node.id)))
        return result

    def descendant_ids(self, node_id: str) -> Set[str]:
        return {node.id for node in self.descendants(node_id)}

    def is_descendant(self, ancestor_id: str, candidate_id: Optional[str]) -> bool:
        """Check whether candidate sits anywhere below ancestor

        Walks candidate's parent chain, so cost is proportional to depth.
        """
        visited = set()
        current = self._parent.get(candidate_id) if candidate_id is not None else None
        while current is not None and current not in visited:
            if current == ancestor_id:
                return True
            visited.add(current)
            current = self._parent.get(current)
        return False

    def depth(self, node_id: str) -> int:
        return len(self.ancestors(node_id))

    # ========================================
    # Layer panel
    # ========================================

    def flattened_display_order(self, collapsed: Optional[Iterable[str]] = None) -> List[DisplayRow]:
        """Flatten the hierarchy into layer panel rows

        Args:
            collapsed: Ids whose children are hidden from the panel

        Returns:
            Pre-order list of DisplayRow, frontmost first at each level
        """
        collapsed_ids: FrozenSet[str] = frozenset(collapsed or ())
        rows: List[DisplayRow] = []
        stack = [(node, 0) for node in reversed(self._roots)]
        while stack:
            node, depth = stack.pop()
            kids = self.children(node.id)
            rows.append(DisplayRow(node=node, depth=depth, has_children=bool(kids)))
            if node.id not in collapsed_ids:
                stack.extend((kid, depth + 1) for kid in reversed(kids))
        return rows
