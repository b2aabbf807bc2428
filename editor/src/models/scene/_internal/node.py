"""
Overlay Composer - Node Data Model

Provides the immutable scene node and its per-kind payloads:
- Node: positioned, sized, layered unit of the scene
- DataDisplayProps, IndicatorListProps, LeaderboardProps, SlotListProps,
  GroupProps: the fields each kind's renderer needs
- ToggleStates: two-state appearance overlay with a pure resolver

Nodes are frozen. Every edit produces a new Node through with_changes(),
which lets the Scene swap whole node tuples without readers ever seeing a
half-updated node.

Data-binding and visibility-binding paths are common to every kind and live
on the Node itself, not in the payload.

Usage:
    node = Node(id=new_node_id(), kind='custom', data_binding='homeTeam.score')
    moved = node.translated(10, 0)
    data = moved.to_dict()
    same = Node.from_dict(data)
"""

import math
import uuid as uuid_module
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from constants import (
    NODE_KINDS, DATA_DISPLAY_KINDS,
    KIND_DYNAMIC_LIST, KIND_LEADERBOARD, KIND_SLOT_LIST, KIND_GROUP,
    DEFAULT_POSITION_X, DEFAULT_POSITION_Y, DEFAULT_NODE_SIZE,
    DEFAULT_LAYER, VALUE_FORMATS, TEAM_SIDES,
    SLOT_DIRECTIONS, DEFAULT_SLOT_COUNT, DEFAULT_SLOT_SPACING,
    DEFAULT_SLOT_DIRECTION, DEFAULT_DATA_PATH_PREFIX,
)
from models.transform import Vec2, Size, Rect
from utils.data_binding import resolve_path


def new_node_id() -> str:
    """Mint a fresh node id"""
    return str(uuid_module.uuid4())


def clamp_layer(value: Any) -> int:
    """Coerce a layer value to a non-negative integer

    Non-numeric values fall back to the default layer rather than raising.
    """
    try:
        layer = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LAYER
    return max(0, layer)


def clamp_count(value: Any, default: int = 0) -> int:
    """Coerce a repetition count to a non-negative integer"""
    if value is None:
        return default
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return max(0, count)


def clamp_spacing(value: Any, default: float = 0.0) -> float:
    """Coerce a spacing value to a finite non-negative float"""
    if value is None:
        return default
    try:
        spacing = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(spacing):
        return default
    return max(0.0, spacing)


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay overrides onto base, merging nested mappings key by key"""
    merged = deepcopy(dict(base))
    for key, value in (overrides or {}).items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


# ========================================
# Per-kind payloads
# ========================================

@dataclass(frozen=True)
class ToggleStates:
    """Two-state appearance for toggleable data displays

    The renderer never merges state props itself; it asks for
    resolve_active_view() which returns base overlaid with the active state's
    overrides.
    """
    base: Mapping[str, Any] = field(default_factory=dict)
    state1_overrides: Mapping[str, Any] = field(default_factory=dict)
    state2_overrides: Mapping[str, Any] = field(default_factory=dict)
    active: int = 1

    def __post_init__(self):
        object.__setattr__(self, 'active', 2 if self.active == 2 else 1)

    def resolve_active_view(self) -> Dict[str, Any]:
        """Get the effective appearance for the active state"""
        overrides = self.state2_overrides if self.active == 2 else self.state1_overrides
        return deep_merge(self.base, overrides)

    def toggled(self) -> 'ToggleStates':
        """Return a copy with the other state active"""
        return replace(self, active=1 if self.active == 2 else 2)


@dataclass(frozen=True)
class DataDisplayProps:
    """Payload for single-value displays (team name, score, clock, custom, ...)"""
    label: str = ''
    format: str = 'text'
    prefix: str = ''
    suffix: str = ''
    style: Mapping[str, Any] = field(default_factory=dict)
    toggle: Optional[ToggleStates] = None

    _KEYS = ('label', 'format', 'prefix', 'suffix', 'canToggle', 'toggleState',
             'state1Props', 'state2Props')

    def __post_init__(self):
        if self.format not in VALUE_FORMATS:
            object.__setattr__(self, 'format', 'text')

    def resolve_style(self) -> Dict[str, Any]:
        """Get the appearance to render, honoring the active toggle state"""
        if self.toggle is not None:
            return self.toggle.resolve_active_view()
        return dict(self.style)

    def to_props_dict(self) -> Dict[str, Any]:
        props = deepcopy(dict(self.style))
        props.update({
            'label': self.label,
            'format': self.format,
            'prefix': self.prefix,
            'suffix': self.suffix,
        })
        if self.toggle is not None:
            props['canToggle'] = True
            props['toggleState'] = self.toggle.active == 2
            props['state1Props'] = deepcopy(dict(self.toggle.state1_overrides))
            props['state2Props'] = deepcopy(dict(self.toggle.state2_overrides))
        return props

    @classmethod
    def from_props_dict(cls, raw: Mapping[str, Any]) -> 'DataDisplayProps':
        style = {k: deepcopy(v) for k, v in raw.items()
                 if k not in cls._KEYS and k not in _BINDING_KEYS}
        toggle = None
        if raw.get('canToggle'):
            toggle = ToggleStates(
                base=style,
                state1_overrides=deepcopy(raw.get('state1Props') or {}),
                state2_overrides=deepcopy(raw.get('state2Props') or {}),
                active=2 if raw.get('toggleState') else 1,
            )
        return cls(
            label=str(raw.get('label') or ''),
            format=str(raw.get('format') or 'text'),
            prefix=str(raw.get('prefix') or ''),
            suffix=str(raw.get('suffix') or ''),
            style=style,
            toggle=toggle,
        )


@dataclass(frozen=True)
class IndicatorListProps:
    """Payload for list-of-N indicators (timeouts, fouls pips, ...)"""
    total_count_path: Optional[str] = None
    active_count_path: Optional[str] = None
    total_count: int = 1
    active_count: int = 0
    direction: str = 'horizontal'
    item_spacing: float = 4.0
    style: Mapping[str, Any] = field(default_factory=dict)

    _KEYS = ('totalCountPath', 'activeCountPath', 'totalCount', 'activeCount',
             'direction', 'itemSpacing')

    def resolve_counts(self, data: Any) -> Tuple[int, int]:
        """Resolve (total, active) against data

        Total is at least 1 and active is clamped into [0, total]. Paths that
        fail to resolve fall back to the static counts.
        """
        total = resolve_path(data, self.total_count_path) if self.total_count_path else None
        active = resolve_path(data, self.active_count_path) if self.active_count_path else None
        if total is None:
            total = self.total_count
        if active is None:
            active = self.active_count
        safe_total = max(1, clamp_count(_as_number(total), 1))
        safe_active = min(safe_total, clamp_count(_as_number(active), 0))
        return safe_total, safe_active

    def to_props_dict(self) -> Dict[str, Any]:
        props = deepcopy(dict(self.style))
        props.update({
            'totalCountPath': self.total_count_path,
            'activeCountPath': self.active_count_path,
            'totalCount': self.total_count,
            'activeCount': self.active_count,
            'direction': self.direction,
            'itemSpacing': self.item_spacing,
        })
        return props

    @classmethod
    def from_props_dict(cls, raw: Mapping[str, Any]) -> 'IndicatorListProps':
        style = {k: deepcopy(v) for k, v in raw.items()
                 if k not in cls._KEYS and k not in _BINDING_KEYS}
        return cls(
            total_count_path=raw.get('totalCountPath'),
            active_count_path=raw.get('activeCountPath'),
            total_count=max(1, clamp_count(raw.get('totalCount'), 1)),
            active_count=clamp_count(raw.get('activeCount'), 0),
            direction=raw.get('direction') or 'horizontal',
            item_spacing=clamp_spacing(raw.get('itemSpacing'), 4.0),
            style=style,
        )


@dataclass(frozen=True)
class LeaderboardProps:
    """Payload for the built-in leaderboard list"""
    max_visible: int = 5
    slot_height: float = 60.0
    slot_spacing: float = 5.0
    cycle_enabled: bool = False
    cycle_interval_ms: int = 5000
    style: Mapping[str, Any] = field(default_factory=dict)

    _KEYS = ('maxVisible', 'slotHeight', 'slotSpacing', 'cycleEnabled', 'cycleInterval')

    def to_props_dict(self) -> Dict[str, Any]:
        props = deepcopy(dict(self.style))
        props.update({
            'maxVisible': self.max_visible,
            'slotHeight': self.slot_height,
            'slotSpacing': self.slot_spacing,
            'cycleEnabled': self.cycle_enabled,
            'cycleInterval': self.cycle_interval_ms,
        })
        return props

    @classmethod
    def from_props_dict(cls, raw: Mapping[str, Any]) -> 'LeaderboardProps':
        style = {k: deepcopy(v) for k, v in raw.items()
                 if k not in cls._KEYS and k not in _BINDING_KEYS}
        return cls(
            max_visible=clamp_count(raw.get('maxVisible'), 5),
            slot_height=clamp_spacing(raw.get('slotHeight'), 60.0),
            slot_spacing=clamp_spacing(raw.get('slotSpacing'), 5.0),
            cycle_enabled=bool(raw.get('cycleEnabled', False)),
            cycle_interval_ms=clamp_count(raw.get('cycleInterval'), 5000),
            style=style,
        )


@dataclass(frozen=True)
class SlotListProps:
    """Payload for a repeated-slot placeholder

    The placeholder repeats a template slot_count times along direction.
    Counts and spacing are clamped, an unknown direction falls back to vertical.
    """
    template_id: Optional[str] = None
    slot_count: int = DEFAULT_SLOT_COUNT
    direction: str = DEFAULT_SLOT_DIRECTION
    slot_spacing: float = DEFAULT_SLOT_SPACING
    data_path_prefix: str = DEFAULT_DATA_PATH_PREFIX
    hide_inactive_slots: bool = False

    _KEYS = ('templateId', 'slotCount', 'direction', 'slotSpacing',
             'dataPathPrefix', 'hideInactiveSlots', 'team')

    def __post_init__(self):
        object.__setattr__(self, 'slot_count', clamp_count(self.slot_count, DEFAULT_SLOT_COUNT))
        object.__setattr__(self, 'slot_spacing', clamp_spacing(self.slot_spacing, DEFAULT_SLOT_SPACING))
        if self.direction not in SLOT_DIRECTIONS:
            object.__setattr__(self, 'direction', DEFAULT_SLOT_DIRECTION)
        if not self.data_path_prefix:
            object.__setattr__(self, 'data_path_prefix', DEFAULT_DATA_PATH_PREFIX)

    def to_props_dict(self) -> Dict[str, Any]:
        return {
            'templateId': self.template_id,
            'slotCount': self.slot_count,
            'direction': self.direction,
            'slotSpacing': self.slot_spacing,
            'dataPathPrefix': self.data_path_prefix,
            'hideInactiveSlots': self.hide_inactive_slots,
        }

    @classmethod
    def from_props_dict(cls, raw: Mapping[str, Any]) -> 'SlotListProps':
        return cls(
            template_id=raw.get('templateId'),
            slot_count=raw.get('slotCount', DEFAULT_SLOT_COUNT),
            direction=raw.get('direction') or DEFAULT_SLOT_DIRECTION,
            slot_spacing=raw.get('slotSpacing', DEFAULT_SLOT_SPACING),
            data_path_prefix=raw.get('dataPathPrefix') or DEFAULT_DATA_PATH_PREFIX,
            hide_inactive_slots=bool(raw.get('hideInactiveSlots', False)),
        )


@dataclass(frozen=True)
class GroupProps:
    """Payload for organizational groups (nothing to render)"""

    def to_props_dict(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def from_props_dict(cls, raw: Mapping[str, Any]) -> 'GroupProps':
        return cls()


NodeProps = Union[DataDisplayProps, IndicatorListProps, LeaderboardProps, SlotListProps, GroupProps]

# Keys hoisted from the props bag onto the Node
_BINDING_KEYS = ('dataPath', 'visibilityPath')


def props_class_for_kind(kind: str):
    """Get the payload class used by a node kind"""
    if kind in DATA_DISPLAY_KINDS:
        return DataDisplayProps
    if kind == KIND_DYNAMIC_LIST:
        return IndicatorListProps
    if kind == KIND_LEADERBOARD:
        return LeaderboardProps
    if kind == KIND_SLOT_LIST:
        return SlotListProps
    if kind == KIND_GROUP:
        return GroupProps
    raise ValueError(f"Unknown node kind: {kind}")


def _as_number(value: Any) -> Any:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# ========================================
# Node
# ========================================

@dataclass(frozen=True)
class Node:
    """A positioned, sized, typed unit of the scene

    Properties:
        id: Stable unique identifier
        kind: One of constants.NODE_KINDS
        position, size: Absolute device pixels
        layer: Stacking order among siblings (higher = painted later)
        parent_id: Parent node id, None at root level
        visible: Hard visibility flag, inherited by descendants
        data_binding: Dotted path of the displayed value
        visibility_binding: Dotted path of a boolean gating visibility
        props: Kind-specific payload
        name: Display name shown in the layer panel
        side: Team side ('home'/'away') for team-bound kinds
        slot: Slot index tag set by slot-list expansion
    """
    id: str
    kind: str
    position: Vec2 = Vec2(DEFAULT_POSITION_X, DEFAULT_POSITION_Y)
    size: Size = Size(*DEFAULT_NODE_SIZE)
    layer: int = DEFAULT_LAYER
    parent_id: Optional[str] = None
    visible: bool = True
    data_binding: Optional[str] = None
    visibility_binding: Optional[str] = None
    props: Optional[NodeProps] = None
    name: str = ''
    side: Optional[str] = None
    slot: Optional[int] = None

    def __post_init__(self):
        if self.kind not in NODE_KINDS:
            raise ValueError(f"Unknown node kind: {self.kind}")
        object.__setattr__(self, 'layer', clamp_layer(self.layer))
        object.__setattr__(self, 'visible', bool(self.visible))
        if self.props is None:
            object.__setattr__(self, 'props', props_class_for_kind(self.kind)())
        if self.side is not None and self.side not in TEAM_SIDES:
            object.__setattr__(self, 'side', None)

    @property
    def is_group(self) -> bool:
        return self.kind == KIND_GROUP

    @property
    def is_slot_list(self) -> bool:
        return self.kind == KIND_SLOT_LIST

    @property
    def rect(self) -> Rect:
        """Get the node's occupied rectangle"""
        return Rect(
            self.position.x,
            self.position.y,
            self.position.x + self.size.width,
            self.position.y + self.size.height,
        )

    @property
    def display_name(self) -> str:
        """Get the name shown in the layer panel, falling back to the kind"""
        return self.name or self.kind

    def with_changes(self, **changes) -> 'Node':
        """Return a copy with the given fields replaced"""
        return replace(self, **changes)

    def translated(self, dx: float, dy: float) -> 'Node':
        """Return a copy moved by (dx, dy)"""
        return replace(self, position=self.position.offset(dx, dy))

    # ========================================
    # Serialization (web editor component shape)
    # ========================================

    def to_dict(self) -> Dict[str, Any]:
        """Export to the layout component dictionary format

        Returns:
            Dict with id, type, position, size, layer, parentId, visible,
            displayName, team, slot and a props bag holding the bindings
        """
        props = self.props.to_props_dict()
        if self.data_binding is not None:
            props['dataPath'] = self.data_binding
        if self.visibility_binding is not None:
            props['visibilityPath'] = self.visibility_binding

        result = {
            'id': self.id,
            'type': self.kind,
            'position': {'x': self.position.x, 'y': self.position.y},
            'size': {'width': self.size.width, 'height': self.size.height},
            'layer': self.layer,
            'visible': self.visible,
            'props': props,
        }
        if self.parent_id is not None:
            result['parentId'] = self.parent_id
        if self.name:
            result['displayName'] = self.name
        if self.side is not None:
            result['team'] = self.side
            if self.is_slot_list:
                props['team'] = self.side
        if self.slot is not None:
            result['slot'] = self.slot
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], regenerate_id: bool = False) -> 'Node':
        """Parse a node from the layout component dictionary format

        Args:
            data: Component dictionary
            regenerate_id: If True, always mint a new id (for paste operations)

        Returns:
            New Node

        Raises:
            ValueError: If the component type is unknown
        """
        kind = data.get('type')
        raw_props = data.get('props') or {}
        props = props_class_for_kind(kind).from_props_dict(raw_props)

        position = data.get('position') or {}
        size = data.get('size') or {}
        default_w, default_h = DEFAULT_NODE_SIZE

        if regenerate_id or not data.get('id'):
            node_id = new_node_id()
        else:
            node_id = str(data['id'])

        side = data.get('team') or raw_props.get('team')
        if side == 'both':
            side = None

        slot = data.get('slot')
        return cls(
            id=node_id,
            kind=kind,
            position=Vec2(float(position.get('x', DEFAULT_POSITION_X)),
                          float(position.get('y', DEFAULT_POSITION_Y))),
            size=Size(float(size.get('width', default_w)),
                      float(size.get('height', default_h))),
            layer=data.get('layer', DEFAULT_LAYER),
            parent_id=data.get('parentId') or None,
            visible=data.get('visible', True) is not False,
            data_binding=raw_props.get('dataPath'),
            visibility_binding=raw_props.get('visibilityPath') or None,
            props=props,
            name=data.get('displayName') or '',
            side=side,
            slot=int(slot) if isinstance(slot, (int, float)) and not isinstance(slot, bool) else None,
        )
