"""
Overlay Composer - Template Operations Service

Pure functions for capturing scene fragments as templates and stamping them
back out, either once at a position or repeatedly into a slot list:

- bounding_box: AABB of a node set
- capture_template: selection -> normalized slot Template (groups dropped)
- capture_component_template: selection -> ComponentTemplate (groups kept)
- instantiate_template: either kind -> fresh nodes at a position
- slot_offsets / slot_scale: slot list geometry
- expand_slot_list: placeholder + Template -> one clone set per slot
- expand_layout: replace every placeholder in a node list with its expansion

None of these touch a Scene; callers merge the returned nodes themselves.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from constants import (
    SLOT_DIRECTION_HORIZONTAL, SLOT_ACTIVE_FIELD, DEFAULT_TEAM_SIDE, DEFAULT_LAYER,
)
from models.transform import Vec2, Size, Rect
from models.scene import Node, SceneTree, SlotListProps, new_node_id
from models.template import Template, ComponentTemplate
from utils.data_binding import is_bound_path, join_path, resolve_path

logger = logging.getLogger(__name__)

TemplateLookup = Callable[[Optional[str]], Optional[Template]]


# ========================================
# Geometry
# ========================================

def bounding_box(nodes: Sequence[Node]) -> Rect:
    """Calculate the axis-aligned bounding box of a node set

    Returns:
        Rect enclosing every node; Rect(0, 0, 0, 0) for an empty set
    """
    if not nodes:
        return Rect(0.0, 0.0, 0.0, 0.0)
    positions = np.array([[n.position.x, n.position.y] for n in nodes], dtype=float)
    sizes = np.array([[n.size.width, n.size.height] for n in nodes], dtype=float)
    mins = positions.min(axis=0)
    maxs = (positions + sizes).max(axis=0)
    return Rect(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def slot_offsets(count: int, direction: str, slot_size: Size, spacing: float) -> np.ndarray:
    """Generate per-slot offsets in unscaled template coordinates

    Returns:
        Nx2 numpy array [[dx, dy], ...], one row per visible slot index
    """
    if count < 1:
        return np.zeros((0, 2))
    steps = np.arange(count, dtype=float)
    offsets = np.zeros((count, 2))
    if direction == SLOT_DIRECTION_HORIZONTAL:
        offsets[:, 0] = steps * (slot_size.width + spacing)
    else:
        offsets[:, 1] = steps * (slot_size.height + spacing)
    return offsets


def natural_extent(count: int, direction: str, slot_size: Size, spacing: float) -> Tuple[float, float]:
    """Size of `count` slots laid end to end along direction"""
    along = count * (slot_size.width if direction == SLOT_DIRECTION_HORIZONTAL else slot_size.height)
    along += max(0, count - 1) * spacing
    if direction == SLOT_DIRECTION_HORIZONTAL:
        return along, slot_size.height
    return slot_size.width, along


def slot_scale(box: Size, natural: Tuple[float, float]) -> np.ndarray:
    """Per-axis scale mapping the natural extent onto the placeholder box

    An axis with no natural extent is left unscaled.
    """
    box_arr = np.array([box.width, box.height], dtype=float)
    natural_arr = np.array(natural, dtype=float)
    scale = np.ones(2)
    np.divide(box_arr, natural_arr, out=scale, where=natural_arr > 0)
    return scale


# ========================================
# Capture / instantiate
# ========================================

def collect_capture_set(tree: SceneTree, selected_ids: Iterable[str], keep_groups: bool = False) -> List[Node]:
    """Expand a selection with descendants, in scene order

    Groups are left out unless keep_groups is set. Unknown ids are ignored.
    """
    wanted = set()
    for node_id in selected_ids:
        if node_id not in tree:
            continue
        wanted.add(node_id)
        wanted.update(tree.descendant_ids(node_id))
    return [n for n in tree.nodes if n.id in wanted and (keep_groups or not n.is_group)]


def _normalize_fragment(retained: Sequence[Node], origin: Vec2) -> List[Node]:
    """Move a node set so origin lands on (0,0), with fresh ids

    Parent links inside the set are remapped; links leaving it are dropped.
    """
    id_map = {node.id: new_node_id() for node in retained}
    return [
        node.with_changes(
            id=id_map[node.id],
            parent_id=id_map.get(node.parent_id),
            position=Vec2(node.position.x - origin.x, node.position.y - origin.y),
            slot=None,
        )
        for node in retained
    ]


def capture_template(tree: SceneTree, selected_ids: Iterable[str], name: str,
                     description: str = '', custom_slot_size: Optional[Size] = None,
                     template_id: Optional[str] = None) -> Template:
    """Capture a selection as a normalized slot template

    Args:
        tree: Scene hierarchy
        selected_ids: Selected node ids (descendants are included automatically)
        name: Template name
        description: Optional description
        custom_slot_size: Slot size to use instead of the bounding box size
        template_id: Id to reuse (when replacing an existing template)

    Returns:
        Template whose nodes start at (0,0), with fresh ids and no groups
    """
    retained = collect_capture_set(tree, selected_ids)
    bounds = bounding_box(retained)
    captured = _normalize_fragment(retained, bounds.origin)

    slot_size = custom_slot_size if custom_slot_size is not None else bounds.size
    logger.debug(f"Captured template '{name}': {len(captured)} nodes, slot {slot_size.width}x{slot_size.height}")
    return Template(
        id=template_id or Template.new_id(),
        name=name,
        nodes=tuple(captured),
        slot_size=slot_size,
        original_slot_size=slot_size,
        description=description,
    )


def capture_component_template(tree: SceneTree, selected_ids: Iterable[str], name: str,
                               description: str = '',
                               template_id: Optional[str] = None) -> ComponentTemplate:
    """Capture a selection as a group-preserving component template

    Groups stay in the fragment with their parent links, so the stamped copy
    keeps its shared stacking and visibility scope. Groups have no visual
    extent of their own: the bounding box covers the other nodes, and only
    falls back to the groups when nothing else was captured.

    Returns:
        ComponentTemplate whose visible content starts at (0,0)
    """
    retained = collect_capture_set(tree, selected_ids, keep_groups=True)
    bounds = bounding_box([n for n in retained if not n.is_group] or retained)
    captured = _normalize_fragment(retained, bounds.origin)

    logger.debug(f"Captured component template '{name}': {len(captured)} nodes, "
                 f"{sum(1 for n in captured if n.is_group)} groups")
    return ComponentTemplate(
        id=template_id or ComponentTemplate.new_id(),
        name=name,
        nodes=tuple(captured),
        bounding_size=bounds.size,
        description=description,
    )


def _clone_fragment(nodes: Sequence[Node], root_parent_id: Optional[str]) -> Tuple[Dict[str, str], List[Node]]:
    """Give every fragment node a fresh id and remap internal parent links

    Nodes whose parent is outside the fragment are attached to root_parent_id.
    """
    id_map = {node.id: new_node_id() for node in nodes}
    clones = []
    for node in nodes:
        if node.parent_id in id_map:
            parent_id = id_map[node.parent_id]
        else:
            parent_id = root_parent_id
        clones.append(node.with_changes(id=id_map[node.id], parent_id=parent_id))
    return id_map, clones


def instantiate_template(template: Union[Template, ComponentTemplate], position: Vec2, parent_id: Optional[str] = None,
                         base_layer: int = DEFAULT_LAYER) -> List[Node]:
    """Create concrete nodes from a template

    Args:
        template: Slot or component template to stamp out
        position: Where the template origin lands
        parent_id: Parent for the fragment's top-level nodes
        base_layer: Added to the layer of the fragment's top-level nodes

    Returns:
        New nodes in template order
    """
    x, y = position
    internal_ids = {node.id for node in template.nodes}
    _, clones = _clone_fragment(template.nodes, parent_id)
    result = []
    for original, clone in zip(template.nodes, clones):
        clone = clone.translated(x, y)
        if original.parent_id not in internal_ids:
            clone = clone.with_changes(layer=base_layer + original.layer)
        result.append(clone)
    logger.debug(f"Instantiated template '{template.name}' at ({x}, {y}): {len(result)} nodes")
    return result


# ========================================
# Slot lists
# ========================================

def slot_data_prefix(props: SlotListProps, side: str, slot_index: int) -> str:
    """Data path prefix for one slot, e.g. 'leaderboardSlots.home.slot2'"""
    return join_path(props.data_path_prefix, side, f"slot{slot_index}")


def active_slot_indices(props: SlotListProps, side: str, data: Any = None) -> List[int]:
    """Get the slot indices that should be laid out

    Without compaction, or without data, every slot is kept. With compaction,
    slots whose 'active' field is not truthy are dropped.
    """
    indices = list(range(props.slot_count))
    if not props.hide_inactive_slots or data is None:
        return indices
    return [i for i in indices
            if resolve_path(data, join_path(slot_data_prefix(props, side, i), SLOT_ACTIVE_FIELD))]


def expand_slot_list(placeholder: Node, template: Optional[Template], data: Any = None) -> List[Node]:
    """Expand a slot list placeholder into concrete nodes

    Each slot gets one clone of every template node, positioned along the
    list direction and scaled so all slots fill the placeholder's box. Data
    paths are rewritten under '<prefix>.<side>.slot<i>.'.

    Args:
        placeholder: slotList node
        template: Template referenced by the placeholder, None if missing
        data: Optional live data, used to compact inactive slots away

    Returns:
        Expanded nodes (empty when the template is missing)
    """
    if template is None:
        logger.warning(f"Slot list {placeholder.id}: template not found, expanding to nothing")
        return []
    props = placeholder.props
    if not isinstance(props, SlotListProps):
        raise ValueError(f"Node '{placeholder.id}' is not a slot list")

    side = placeholder.side or DEFAULT_TEAM_SIDE
    count = props.slot_count
    natural = natural_extent(count, props.direction, template.slot_size, props.slot_spacing)
    scale = slot_scale(placeholder.size, natural)
    slots = active_slot_indices(props, side, data)
    offsets = slot_offsets(len(slots), props.direction, template.slot_size, props.slot_spacing)

    origin = np.array([placeholder.position.x, placeholder.position.y], dtype=float)
    internal_ids = {node.id for node in template.nodes}
    expanded = []
    for visible_index, slot_index in enumerate(slots):
        prefix = slot_data_prefix(props, side, slot_index)
        _, clones = _clone_fragment(template.nodes, placeholder.parent_id)
        for original, clone in zip(template.nodes, clones):
            local = np.array([original.position.x, original.position.y]) + offsets[visible_index]
            pos = origin + local * scale
            changes = {
                'slot': slot_index,
                'position': Vec2(float(pos[0]), float(pos[1])),
                'size': Size(float(original.size.width * scale[0]), float(original.size.height * scale[1])),
            }
            if is_bound_path(original.data_binding):
                changes['data_binding'] = join_path(prefix, original.data_binding)
            if is_bound_path(original.visibility_binding):
                changes['visibility_binding'] = join_path(prefix, original.visibility_binding)
            elif props.hide_inactive_slots:
                changes['visibility_binding'] = join_path(prefix, SLOT_ACTIVE_FIELD)
            if original.parent_id not in internal_ids:
                changes['layer'] = placeholder.layer + original.layer
            expanded.append(clone.with_changes(**changes))

    logger.debug(f"Expanded slot list {placeholder.id}: {len(slots)} slots x "
                 f"{len(template.nodes)} nodes = {len(expanded)}")
    return expanded


def expand_layout(nodes: Sequence[Node], lookup: TemplateLookup, data: Any = None) -> List[Node]:
    """Replace every slot list placeholder with its expansion

    Args:
        nodes: Scene nodes in order
        lookup: Callable resolving a template id to a Template (or None)
        data: Optional live data for compaction

    Returns:
        Node list with placeholders expanded in place
    """
    result = []
    for node in nodes:
        if node.is_slot_list:
            result.extend(expand_slot_list(node, lookup(node.props.template_id), data))
        else:
            result.append(node)
    return result
