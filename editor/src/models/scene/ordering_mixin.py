"""
Ordering Mixin for Scene Model

Exposes the effective ordering engine on the scene: paint-order keys,
visibility and the render list, all derived from the current tree.
"""

from typing import Any, List

from ._internal.ordering import (
    RenderEntry, build_render_list, effective_layer_key, is_hard_visible, own_visibility,
)


class SceneOrderingMixin:
    """Mixin providing render order queries for Scene model"""

    def render_list(self, data: Any = None) -> List[RenderEntry]:
        """Build the ordered render list

        Args:
            data: External data object used to resolve visibility bindings

        Returns:
            RenderEntry list, back to front; groups and hidden nodes excluded
        """
        return build_render_list(self.tree, data)

    def get_effective_layer(self, node_id: str) -> int:
        """Get a node's composite paint-order key

        Raises:
            ValueError: If the id is not found
        """
        return effective_layer_key(self.tree, self._require(node_id))

    def is_node_rendered(self, node_id: str, data: Any = None) -> bool:
        """Check whether a node passes hard visibility (and is not a group)

        Raises:
            ValueError: If the id is not found
        """
        node = self._require(node_id)
        return not node.is_group and is_hard_visible(self.tree, node, data)

    def get_node_opacity_visible(self, node_id: str, data: Any = None) -> bool:
        """Resolve the node's own visibility binding (the fade signal)

        Raises:
            ValueError: If the id is not found
        """
        return own_visibility(self._require(node_id), data)
