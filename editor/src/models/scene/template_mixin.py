"""
Template Mixin for Scene Model

Connects the scene to the template engine:
- capture a selection as a slot Template or a group-preserving ComponentTemplate
- instantiate either kind of template into the scene
- expand slot list placeholders (read-only, for preview and export)
"""

from typing import Any, Callable, Iterable, List, Optional

from ._internal.node import Node
from ._internal.ordering import RenderEntry, build_render_list
from ._internal.reorder import next_layer
from ._internal.tree import SceneTree
from models.transform import Vec2, Size


class SceneTemplateMixin:
    """Mixin providing template operations for Scene model

    This mixin assumes the class has:
        - self.tree, self._nodes, self._require, self.insert_nodes
        - self._logger: logging.Logger instance
    """

    def capture_template(self, selected_ids: Iterable[str], name: str, description: str = '',
                         custom_slot_size: Optional[Size] = None, template_id: Optional[str] = None):
        """Capture selected nodes (and their descendants) as a template

        Groups are left out; nodes whose parent is not captured become
        top-level in the template.

        Raises:
            ValueError: If any selected id is not found
        """
        from services.template_operations import capture_template

        selected = list(selected_ids)
        for node_id in selected:
            self._require(node_id)
        return capture_template(self.tree, selected, name, description, custom_slot_size, template_id)

    def capture_component_template(self, selected_ids: Iterable[str], name: str, description: str = '',
                                   template_id: Optional[str] = None):
        """Capture selected nodes (and their descendants) keeping groups and hierarchy

        Raises:
            ValueError: If any selected id is not found
        """
        from services.template_operations import capture_component_template

        selected = list(selected_ids)
        for node_id in selected:
            self._require(node_id)
        return capture_component_template(self.tree, selected, name, description, template_id)

    def instantiate_template(self, template, position: Vec2, parent_id: Optional[str] = None) -> List[str]:
        """Stamp a template into the scene at a position

        The new top-level nodes stack in front of the existing nodes at the
        target level.

        Returns:
            Ids of the created nodes

        Raises:
            ValueError: If parent_id is given but not found
        """
        from services.template_operations import instantiate_template

        if parent_id is not None:
            self._require(parent_id)
        base = next_layer(n.layer for n in self.tree.children(parent_id))
        nodes = instantiate_template(template, Vec2(*position), parent_id, base)
        return self.insert_nodes(nodes)

    def expand_slot_list(self, node_id: str, template, data: Any = None) -> List[Node]:
        """Expand one slot list placeholder without modifying the scene

        Raises:
            ValueError: If the id is not found or is not a slot list
        """
        from services.template_operations import expand_slot_list

        placeholder = self._require(node_id)
        if not placeholder.is_slot_list:
            raise ValueError(f"Node '{node_id}' is not a slot list")
        return expand_slot_list(placeholder, template, data)

    def expanded_nodes(self, lookup: Callable, data: Any = None) -> List[Node]:
        """Get the node list with every slot list replaced by its expansion

        Args:
            lookup: Callable resolving a template id to a Template or None
            data: Optional live data for slot compaction
        """
        from services.template_operations import expand_layout
        return expand_layout(self._nodes, lookup, data)

    def expanded_render_list(self, lookup: Callable, data: Any = None) -> List[RenderEntry]:
        """Build the render list of the fully expanded scene"""
        return build_render_list(SceneTree(self.expanded_nodes(lookup, data)), data)
