"""
Scene Node Management Mixin

This mixin provides node CRUD operations for the Scene model.

Methods:
    Node CRUD:
        - add_node
        - insert_nodes
        - remove_node
        - remove_nodes
        - requires_delete_confirmation
        - duplicate_node
        - update_node

    Placement:
        - set_node_visible
        - set_node_layer
        - set_node_parent
        - move_node
        - set_node_position
        - set_node_size
        - toggle_node_state
"""

from dataclasses import replace
from typing import Any, Iterable, List, Optional

from ._internal.node import Node, new_node_id, props_class_for_kind
from ._internal.reorder import creates_cycle, next_layer
from models.transform import Vec2, Size
from constants import (
    DEFAULT_POSITION_X, DEFAULT_POSITION_Y,
    DEFAULT_NODE_SIZES, DEFAULT_NODE_SIZE,
    DUPLICATE_OFFSET_X, DUPLICATE_OFFSET_Y,
    TEAM_BOUND_KINDS, DEFAULT_TEAM_SIDE,
)

# Fields that update_node refuses; they have dedicated operations
_STRUCTURAL_FIELDS = ('id', 'parent_id')


class SceneNodeMixin:
    """Mixin providing node management operations for Scene

    This mixin assumes the parent class has:
        - self._nodes: current node tuple
        - self.tree: SceneTree for the current version
        - self._commit / self._replace_nodes / self._require
        - self._logger: logging.Logger instance
    """

    # ========================================
    # Node CRUD Operations
    # ========================================

    def add_node(self, kind: str, parent_id: Optional[str] = None,
                 position: Optional[Vec2] = None, size: Optional[Size] = None,
                 name: str = '', side: Optional[str] = None,
                 data_binding: Optional[str] = None, visibility_binding: Optional[str] = None,
                 props: Any = None) -> str:
        """Add a new node in front of its siblings

        Args:
            kind: Node kind (see constants.NODE_KINDS)
            parent_id: Parent id, None for root level
            position: Top-left corner, defaults to (192, 108)
            size: Defaults to the kind's default size
            name: Display name
            side: Team side; team-bound kinds default to 'home'
            data_binding: Data path for the displayed value
            visibility_binding: Data path of a boolean visibility gate
            props: Kind payload, defaults to the kind's empty payload

        Returns:
            Id of the new node

        Raises:
            ValueError: If the kind is unknown or the parent does not exist
        """
        if parent_id is not None:
            self._require(parent_id)
        props_class_for_kind(kind)

        if position is None:
            position = Vec2(DEFAULT_POSITION_X, DEFAULT_POSITION_Y)
        if size is None:
            size = Size(*DEFAULT_NODE_SIZES.get(kind, DEFAULT_NODE_SIZE))
        if side is None and kind in TEAM_BOUND_KINDS:
            side = DEFAULT_TEAM_SIDE

        node = Node(
            id=new_node_id(),
            kind=kind,
            position=Vec2(*position),
            size=Size(*size),
            layer=next_layer(n.layer for n in self.tree.children(parent_id)),
            parent_id=parent_id,
            data_binding=data_binding,
            visibility_binding=visibility_binding,
            props=props,
            name=name,
            side=side,
        )
        self._commit(self._nodes + (node,), f"add {kind} {node.id}")
        return node.id

    def insert_nodes(self, nodes: Iterable[Node]) -> List[str]:
        """Merge ready-made nodes (template instances, pasted nodes) into the scene

        Returns:
            Ids of the inserted nodes

        Raises:
            ValueError: If an id collides with an existing or another new node
        """
        new_nodes = tuple(nodes)
        if not new_nodes:
            return []
        merged = self._checked_nodes(self._nodes + new_nodes)
        self._commit(merged, f"insert {len(new_nodes)} nodes")
        return [node.id for node in new_nodes]

    def remove_node(self, node_id: str) -> List[str]:
        """Remove a node and every descendant

        Args:
            node_id: Node to remove

        Returns:
            Ids of all removed nodes (the node first)

        Raises:
            ValueError: If the id is not found
        """
        return self.remove_nodes([node_id])

    def remove_nodes(self, node_ids: Iterable[str]) -> List[str]:
        """Remove several nodes, each with its descendants

        Raises:
            ValueError: If any id is not found
        """
        removed: List[str] = []
        doomed = set()
        for node_id in node_ids:
            self._require(node_id)
            for doomed_id in [node_id] + [n.id for n in self.tree.descendants(node_id)]:
                if doomed_id not in doomed:
                    doomed.add(doomed_id)
                    removed.append(doomed_id)
        if not removed:
            return []
        self._commit(tuple(n for n in self._nodes if n.id not in doomed), f"remove {len(removed)} nodes")
        return removed

    def requires_delete_confirmation(self, node_id: str) -> bool:
        """Check whether deleting a node would also delete children

        Raises:
            ValueError: If the id is not found
        """
        node = self._require(node_id)
        return node.is_group and bool(self.tree.children(node_id))

    def duplicate_node(self, node_id: str, dx: float = DUPLICATE_OFFSET_X,
                       dy: float = DUPLICATE_OFFSET_Y) -> str:
        """Duplicate a node (with its subtree) next to the original

        The copy lands in front of its siblings, offset by (dx, dy); copied
        descendants keep their relative structure under fresh ids.

        Returns:
            Id of the duplicated top node

        Raises:
            ValueError: If the id is not found
        """
        original = self._require(node_id)
        parent_id = self.tree.parent_of_id(node_id)
        subtree = [original] + self.tree.descendants(node_id)

        id_map = {node.id: new_node_id() for node in subtree}
        copies = []
        for node in subtree:
            clone = node.translated(dx, dy).with_changes(
                id=id_map[node.id],
                parent_id=id_map.get(node.parent_id, parent_id),
            )
            if node.id == node_id:
                clone = clone.with_changes(layer=next_layer(n.layer for n in self.tree.children(parent_id)))
            copies.append(clone)

        self._commit(self._nodes + tuple(copies), f"duplicate {node_id} -> {id_map[node_id]}")
        return id_map[node_id]

    def update_node(self, node_id: str, **changes) -> Node:
        """Replace node fields

        Args:
            node_id: Node to update
            **changes: Node fields (name, visible, data_binding, props, ...)

        Returns:
            Updated node

        Raises:
            ValueError: If the id is not found, or id/parent_id is passed
        """
        node = self._require(node_id)
        for field_name in _STRUCTURAL_FIELDS:
            if field_name in changes:
                raise ValueError(f"Use the dedicated operation to change '{field_name}'")
        if not changes:
            return node
        updated = node.with_changes(**changes)
        if updated != node:
            self._replace_nodes({node_id: updated}, f"update {node_id}: {', '.join(changes)}")
        return updated

    # ========================================
    # Placement
    # ========================================

    def set_node_visible(self, node_id: str, visible: bool) -> Node:
        return self.update_node(node_id, visible=visible)

    def set_node_layer(self, node_id: str, layer: int) -> Node:
        """Set a node's sibling layer (clamped to >= 0)"""
        return self.update_node(node_id, layer=layer)

    def set_node_parent(self, node_id: str, parent_id: Optional[str]) -> bool:
        """Reparent a node, placing it in front of its new siblings

        Returns:
            True if reparented, False if it would create a cycle or nothing changed

        Raises:
            ValueError: If either id is not found
        """
        node = self._require(node_id)
        if parent_id is not None:
            self._require(parent_id)
        if creates_cycle(self.tree, node_id, parent_id):
            self._logger.info(f"Refused to parent {node_id} under {parent_id}: cycle")
            return False
        if node.parent_id == parent_id:
            return False
        layer = next_layer(n.layer for n in self.tree.children(parent_id) if n.id != node_id)
        self._replace_nodes({node_id: node.with_changes(parent_id=parent_id, layer=layer)},
                            f"reparent {node_id} -> {parent_id}")
        return True

    def move_node(self, node_id: str, dx: float, dy: float) -> List[str]:
        """Translate a node and all its descendants

        Returns:
            Ids of every moved node

        Raises:
            ValueError: If the id is not found
        """
        node = self._require(node_id)
        moving = [node] + self.tree.descendants(node_id)
        if dx == 0 and dy == 0:
            return [n.id for n in moving]
        self._replace_nodes({n.id: n.translated(dx, dy) for n in moving}, f"move {node_id} by ({dx}, {dy})")
        return [n.id for n in moving]

    def set_node_position(self, node_id: str, x: float, y: float) -> List[str]:
        """Move a node to an absolute position, carrying its descendants along"""
        node = self._require(node_id)
        return self.move_node(node_id, x - node.position.x, y - node.position.y)

    def set_node_size(self, node_id: str, width: float, height: float) -> Node:
        return self.update_node(node_id, size=Size(max(0.0, width), max(0.0, height)))

    def toggle_node_state(self, node_id: str) -> Node:
        """Flip a toggleable data display between its two states

        Raises:
            ValueError: If the id is not found or the node has no toggle states
        """
        node = self._require(node_id)
        toggle = getattr(node.props, 'toggle', None)
        if toggle is None:
            raise ValueError(f"Node '{node_id}' has no toggle states")
        return self.update_node(node_id, props=replace(node.props, toggle=toggle.toggled()))
