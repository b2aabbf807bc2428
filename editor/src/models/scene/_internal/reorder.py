"""
Reorder planning for layer panel drag-and-drop.

Every drop is computed as a ReorderPlan against a SceneTree before anything
changes. The scene then applies the plan as a single version step, so a
rejected drop never leaves a partial edit behind.

Sibling renumbering: the affected sibling list is ordered frontmost first and
renumbered so index 0 gets N-1 and the last entry gets 0. Only the dragged
node's parent_id ever changes.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from constants import DROP_BEFORE, DROP_AFTER, DROP_INTO, DROP_ROOT, DEFAULT_LAYER
from .node import Node
from .tree import SceneTree


@dataclass(frozen=True)
class ReorderPlan:
    """Outcome of a drop, ready to be committed

    Properties:
        source_id: Dragged node
        new_parent_id: Parent after the drop (None = root level)
        parent_changed: True if the dragged node changes level
        layers: New layer value per affected node id
        intent: 'before', 'after', 'into' or 'root'
    """
    source_id: str
    new_parent_id: Optional[str]
    parent_changed: bool
    layers: Mapping[str, int] = field(default_factory=dict)
    intent: str = DROP_INTO


def next_layer(layers) -> int:
    """Get the layer that puts a node in front of the given sibling layers"""
    layers = list(layers)
    return max(layers) + 1 if layers else DEFAULT_LAYER


def renumber(ordered: List[Node]) -> Dict[str, int]:
    """Assign layers to a frontmost-first sibling list (first gets N-1, last gets 0)"""
    count = len(ordered)
    return {node.id: count - 1 - index for index, node in enumerate(ordered)}


def creates_cycle(tree: SceneTree, source_id: str, new_parent_id: Optional[str]) -> bool:
    """Check whether parenting source under new_parent would close a loop"""
    if new_parent_id is None:
        return False
    return new_parent_id == source_id or tree.is_descendant(source_id, new_parent_id)


def plan_reorder(tree: SceneTree, source_id: str, target_id: str, intent: str) -> Optional[ReorderPlan]:
    """Plan dropping source relative to target

    Args:
        tree: Current hierarchy
        source_id: Dragged node id
        target_id: Hovered node id
        intent: 'before' (in front of target), 'after' (behind target) or 'into'

    Returns:
        ReorderPlan, or None when the drop is not allowed (missing node,
        source == target, cycle, unknown intent)
    """
    source = tree.get(source_id)
    target = tree.get(target_id)
    if source is None or target is None or source_id == target_id:
        return None

    old_parent_id = tree.parent_of_id(source_id)

    if intent == DROP_INTO:
        new_parent_id = target_id
        if creates_cycle(tree, source_id, new_parent_id):
            return None
        ordered = [n for n in tree.children(target_id) if n.id != source_id]
        ordered.insert(0, source)
    elif intent in (DROP_BEFORE, DROP_AFTER):
        new_parent_id = tree.parent_of_id(target_id)
        if creates_cycle(tree, source_id, new_parent_id):
            return None
        ordered = [n for n in tree.children(new_parent_id) if n.id != source_id]
        target_index = next(i for i, n in enumerate(ordered) if n.id == target_id)
        insert_at = target_index if intent == DROP_BEFORE else target_index + 1
        ordered.insert(insert_at, source)
    else:
        return None

    return ReorderPlan(
        source_id=source_id,
        new_parent_id=new_parent_id,
        parent_changed=new_parent_id != old_parent_id,
        layers=renumber(ordered),
        intent=intent,
    )


def plan_root_drop(tree: SceneTree, source_id: str) -> Optional[ReorderPlan]:
    """Plan dropping source on the root-level zone

    The node goes to the front of the root level; other roots keep their
    layers.
    """
    source = tree.get(source_id)
    if source is None:
        return None
    layer = next_layer(n.layer for n in tree.roots() if n.id != source_id)
    old_parent_id = tree.parent_of_id(source_id)
    return ReorderPlan(
        source_id=source_id,
        new_parent_id=None,
        parent_changed=old_parent_id is not None or source.parent_id is not None,
        layers={source_id: layer},
        intent=DROP_ROOT,
    )
