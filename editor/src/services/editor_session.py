"""
Overlay Composer - Editor Session

Binds together everything one open layout needs:
- the Scene (the model)
- a HistoryManager holding scene snapshots for undo/redo
- optional stores for slot templates and component templates
- layer panel drag gestures

Every operation that changes the scene records exactly one history entry
with a human-readable description. Operations that change nothing (rejected
drops, no-op moves) record nothing.
"""

import logging
from typing import Any, Iterable, List, Optional

from constants import MAX_HISTORY
from models.scene import Scene, Node, RenderEntry
from models.template import Template, ComponentTemplate
from models.transform import Vec2, Size
from services.drag_gesture import DragGesture
from utils.history_manager import HistoryManager


class EditorSession:
    """Scene + history + templates for one open layout

    Properties:
        scene: The Scene being edited
        history: HistoryManager with scene snapshots
        store: TemplateStore, or None when templates are unavailable
        component_store: ComponentTemplateStore, or None
        is_saved: False once a change is recorded, until mark_saved()
    """

    def __init__(self, scene: Optional[Scene] = None, store=None, max_history: int = MAX_HISTORY,
                 component_store=None):
        self._logger = logging.getLogger('EditorSession')
        self.scene = scene if scene is not None else Scene()
        self.store = store
        self.component_store = component_store
        self.history = HistoryManager(max_history=max_history)
        self.is_saved = True
        self._is_applying_history = False
        self.history.save_state(self.scene.get_snapshot(), "New Layout")

    # ========================================
    # History
    # ========================================

    def _save_state(self, description: str):
        """Record the current scene in history"""
        if self._is_applying_history:
            return
        self.history.save_state(self.scene.get_snapshot(), description)
        self.is_saved = False

    def _restore_state(self, snapshot) -> bool:
        if snapshot is None:
            return False
        self._is_applying_history = True
        try:
            self.scene.set_snapshot(snapshot)
        finally:
            self._is_applying_history = False
        self.is_saved = False
        return True

    def undo(self) -> bool:
        """Revert the last recorded change

        Returns:
            True if a state was restored
        """
        return self._restore_state(self.history.undo())

    def redo(self) -> bool:
        """Reapply the last undone change

        Returns:
            True if a state was restored
        """
        return self._restore_state(self.history.redo())

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def mark_saved(self):
        self.is_saved = True

    # ========================================
    # Node operations
    # ========================================

    def add_node(self, kind: str, **kwargs) -> str:
        """Add a node (see Scene.add_node) and record it"""
        node_id = self.scene.add_node(kind, **kwargs)
        self._save_state(f"Add {kind} component")
        return node_id

    def remove_node(self, node_id: str, confirmed: bool = False) -> List[str]:
        """Delete a node and its descendants

        A group that still has children is only deleted when confirmed.

        Returns:
            Removed ids (empty when confirmation was required but not given)

        Raises:
            ValueError: If the id is not found
        """
        if self.scene.requires_delete_confirmation(node_id) and not confirmed:
            self._logger.info(f"Delete of group {node_id} needs confirmation")
            return []
        node = self.scene.get_node(node_id)
        removed = self.scene.remove_node(node_id)
        self._save_state(f"Delete {node.display_name}")
        return removed

    def duplicate_node(self, node_id: str) -> str:
        new_id = self.scene.duplicate_node(node_id)
        self._save_state(f"Duplicate {self.scene.get_node(node_id).display_name}")
        return new_id

    def update_node(self, node_id: str, **changes) -> Node:
        """Update node fields and record it when anything changed"""
        before = self.scene.version
        node = self.scene.update_node(node_id, **changes)
        if self.scene.version != before:
            self._save_state(f"Update {node.display_name} properties")
        return node

    def set_node_visible(self, node_id: str, visible: bool) -> Node:
        return self.update_node(node_id, visible=visible)

    def move_node(self, node_id: str, dx: float, dy: float) -> List[str]:
        before = self.scene.version
        moved = self.scene.move_node(node_id, dx, dy)
        if self.scene.version != before:
            self._save_state(f"Move {self.scene.get_node(node_id).display_name}")
        return moved

    def set_node_parent(self, node_id: str, parent_id: Optional[str]) -> bool:
        changed = self.scene.set_node_parent(node_id, parent_id)
        if changed:
            self._save_state("Change parent")
        return changed

    def toggle_node_state(self, node_id: str) -> Node:
        node = self.scene.toggle_node_state(node_id)
        self._save_state(f"Toggle {node.display_name}")
        return node

    # ========================================
    # Drag and drop
    # ========================================

    def start_drag(self, source_id: str) -> DragGesture:
        """Begin a layer panel drag; committing it records history"""
        gesture = DragGesture(self.scene, on_commit=self._save_state)
        gesture.begin(source_id)
        return gesture

    def drop(self, source_id: str, target_id: str, intent: str) -> bool:
        """Drop in one call (no intermediate hover states)"""
        changed = self.scene.drop(source_id, target_id, intent)
        if changed:
            self._save_state(f"Move layer {intent} {target_id}")
        return changed

    def drop_on_root(self, source_id: str) -> bool:
        changed = self.scene.drop_on_root(source_id)
        if changed:
            self._save_state("Move layer to root")
        return changed

    # ========================================
    # Templates
    # ========================================

    def _require_store(self):
        if self.store is None:
            raise RuntimeError("No template store configured for this session")
        return self.store

    def lookup_template(self, template_id: Optional[str]) -> Optional[Template]:
        """Resolve a template id (None when missing or no store is configured)"""
        if self.store is None:
            return None
        return self.store.get(template_id)

    def save_template(self, selected_ids: Iterable[str], name: str, description: str = '',
                      custom_slot_size: Optional[Size] = None) -> Template:
        """Capture the selection and store it as a template

        Raises:
            RuntimeError: If no template store is configured
            ValueError: If a selected id is not found
        """
        store = self._require_store()
        template = self.scene.capture_template(selected_ids, name, description, custom_slot_size)
        return store.add(template)

    def instantiate_template(self, template_id: str, position: Vec2,
                             parent_id: Optional[str] = None) -> List[str]:
        """Stamp a stored template into the scene

        Raises:
            RuntimeError: If no template store is configured
            ValueError: If the template or parent is not found
        """
        template = self._require_store().get(template_id)
        if template is None:
            raise ValueError(f"Template with id '{template_id}' not found")
        ids = self.scene.instantiate_template(template, position, parent_id)
        if ids:
            self._save_state(f"Insert template {template.name}")
        return ids

    def _require_component_store(self):
        if self.component_store is None:
            raise RuntimeError("No component template store configured for this session")
        return self.component_store

    def save_component_template(self, selected_ids: Iterable[str], name: str,
                                description: str = '') -> ComponentTemplate:
        """Capture the selection with its groups and store it

        Raises:
            RuntimeError: If no component template store is configured
            ValueError: If a selected id is not found
        """
        store = self._require_component_store()
        template = self.scene.capture_component_template(selected_ids, name, description)
        return store.add(template)

    def instantiate_component_template(self, template_id: str, position: Vec2,
                                       parent_id: Optional[str] = None) -> List[str]:
        """Stamp a stored component template into the scene

        Raises:
            RuntimeError: If no component template store is configured
            ValueError: If the template or parent is not found
        """
        template = self._require_component_store().get(template_id)
        if template is None:
            raise ValueError(f"Component template with id '{template_id}' not found")
        ids = self.scene.instantiate_template(template, position, parent_id)
        if ids:
            self._save_state(f"Insert component template {template.name}")
        return ids

    # ========================================
    # Layout I/O and preview
    # ========================================

    def load_layout(self, layout: dict):
        """Replace the scene with a layout and restart history"""
        self.scene.load_layout_dict(layout)
        self.history.clear()
        self.history.save_state(self.scene.get_snapshot(), "Load Layout")
        self.is_saved = True

    def export_layout(self, expand: bool = False, data: Any = None) -> dict:
        """Export the layout dictionary

        Args:
            expand: Replace slot list placeholders with concrete nodes
            data: Optional live data for slot compaction when expanding
        """
        layout = self.scene.to_layout_dict()
        if expand:
            nodes = self.scene.expanded_nodes(self.lookup_template, data)
            layout['components'] = [node.to_dict() for node in nodes]
        return layout

    def preview(self, data: Any = None) -> List[RenderEntry]:
        """Render list of the expanded scene, as the live preview paints it"""
        return self.scene.expanded_render_list(self.lookup_template, data)
