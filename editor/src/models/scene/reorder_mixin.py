"""
Reorder Mixin for Scene Model

Drag-and-drop reparent/reorder for the layer panel. Every drop is planned
first (pure, against the current tree) and then committed as one version
step. Rejected drops (missing node, dropping onto itself, cycles) change
nothing and report False.
"""

from typing import Optional

from ._internal.reorder import ReorderPlan, plan_reorder, plan_root_drop, creates_cycle


class SceneReorderMixin:
    """Mixin providing drag-and-drop reordering for Scene model

    This mixin assumes the class has:
        - self.tree: SceneTree for the current version
        - self._replace_nodes(updated, description)
        - self._logger: logging.Logger instance
    """

    def plan_drop(self, source_id: str, target_id: str, intent: str) -> Optional[ReorderPlan]:
        """Plan a drop without applying it

        Returns:
            ReorderPlan, or None if the drop is not allowed
        """
        return plan_reorder(self.tree, source_id, target_id, intent)

    def plan_root_drop(self, source_id: str) -> Optional[ReorderPlan]:
        return plan_root_drop(self.tree, source_id)

    def apply_plan(self, plan: Optional[ReorderPlan]) -> bool:
        """Commit a reorder plan atomically

        The plan is re-checked against the current tree, so a stale plan that
        would now create a cycle is rejected.

        Returns:
            True if the scene changed
        """
        if plan is None:
            return False
        tree = self.tree
        source = tree.get(plan.source_id)
        if source is None or creates_cycle(tree, plan.source_id, plan.new_parent_id):
            self._logger.info(f"Rejected stale reorder plan for {plan.source_id}")
            return False
        if plan.new_parent_id is not None and plan.new_parent_id not in tree:
            self._logger.info(f"Rejected reorder plan: parent {plan.new_parent_id} is gone")
            return False

        updated = {}
        for node_id, layer in plan.layers.items():
            node = tree.get(node_id)
            if node is not None and node.layer != layer:
                updated[node_id] = node.with_changes(layer=layer)

        moved = updated.get(plan.source_id, source)
        if moved.parent_id != plan.new_parent_id:
            updated[plan.source_id] = moved.with_changes(parent_id=plan.new_parent_id)

        if not updated:
            return False
        self._replace_nodes(updated, f"reorder {plan.source_id} ({plan.intent})")
        return True

    def drop(self, source_id: str, target_id: str, intent: str) -> bool:
        """Drop source before/after/into target

        Args:
            source_id: Dragged node
            target_id: Node under the pointer
            intent: 'before', 'after' or 'into'

        Returns:
            True if the scene changed, False for a rejected or no-op drop
        """
        plan = self.plan_drop(source_id, target_id, intent)
        if plan is None:
            self._logger.info(f"Drop of {source_id} {intent} {target_id} rejected")
            return False
        return self.apply_plan(plan)

    def drop_on_root(self, source_id: str) -> bool:
        """Move source to the front of the root level

        Returns:
            True if the scene changed
        """
        plan = self.plan_root_drop(source_id)
        if plan is None:
            self._logger.info(f"Root drop of {source_id} rejected")
            return False
        return self.apply_plan(plan)
