"""
Effective ordering and visibility.

Paint order is derived, never stored: each node's own layer is combined with
every ancestor's layer, each ancestor level weighted by a further factor of
EFFECTIVE_LAYER_BASE. The render list is every renderable, hard-visible node
sorted ascending by that key (ties keep insertion order).

Visibility has two channels:
- hard: own visible flag, every ancestor's visible flag, and every ancestor's
  visibility binding (strict booleans only; anything else is no constraint)
- soft: the node's own visibility binding, reported as an opacity signal so
  the renderer can fade the node instead of removing it
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from constants import EFFECTIVE_LAYER_BASE
from utils.data_binding import is_bound_path, resolve_bool
from .node import Node
from .tree import SceneTree


@dataclass(frozen=True)
class RenderEntry:
    """One paintable node with its derived ordering and visibility"""
    node: Node
    effective_layer: int
    is_visible: bool
    opacity_binding: Optional[str] = None


def effective_layer_key(tree: SceneTree, node: Node) -> int:
    """Compute a node's composite paint-order key

    key = own layer + sum(ancestor.layer * 1000^k), k = 1 for the parent,
    2 for the grandparent, and so on. The walk stops at a dangling parent.
    """
    key = node.layer
    multiplier = EFFECTIVE_LAYER_BASE
    for ancestor in tree.ancestors(node.id):
        key += ancestor.layer * multiplier
        multiplier *= EFFECTIVE_LAYER_BASE
    return key


def is_hard_visible(tree: SceneTree, node: Node, data: Any = None) -> bool:
    """Check whether a node survives hard visibility filtering"""
    if not node.visible:
        return False
    for ancestor in tree.ancestors(node.id):
        if not ancestor.visible:
            return False
        if resolve_bool(data, ancestor.visibility_binding) is False:
            return False
    return True


def own_visibility(node: Node, data: Any = None) -> bool:
    """Resolve a node's own visibility binding (True when unbound or non-boolean)"""
    value = resolve_bool(data, node.visibility_binding)
    return True if value is None else value


def build_render_list(tree: SceneTree, data: Any = None) -> List[RenderEntry]:
    """Build the ordered render list for a scene

    Args:
        tree: Scene hierarchy index
        data: External data object for binding resolution (may be None)

    Returns:
        RenderEntry list, back to front
    """
    entries = []
    for node in tree.nodes:
        if node.is_group:
            continue
        if not is_hard_visible(tree, node, data):
            continue
        binding = node.visibility_binding if is_bound_path(node.visibility_binding) else None
        entries.append(RenderEntry(
            node=node,
            effective_layer=effective_layer_key(tree, node),
            is_visible=own_visibility(node, data),
            opacity_binding=binding,
        ))
    # sorted() is stable, so equal keys keep insertion order
    return sorted(entries, key=lambda entry: entry.effective_layer)
