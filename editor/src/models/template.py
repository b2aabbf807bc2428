"""
Overlay Composer - Template Data Model

A Template is a normalized, reusable fragment of a scene: its nodes are
translated so their bounding box starts at (0,0), parent references only
point inside the fragment, and data paths are stored exactly as authored
(relative to whichever slot the template is later stamped into).

A ComponentTemplate is the group-preserving variant: groups and the whole
parent hierarchy are kept, and it is stamped back once rather than repeated
into slots.

Templates have no live link to the scene they were captured from, or to
the scenes they are instantiated into.
"""

import time
import uuid as uuid_module
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from models.transform import Size
from models.scene import Node


def now_ms() -> int:
    """Current time in epoch milliseconds"""
    return int(time.time() * 1000)


def _size_from_dict(raw: Optional[Mapping[str, Any]]) -> Optional[Size]:
    """Parse a {width, height} dictionary (None when absent or empty)"""
    if not raw:
        return None
    return Size(float(raw.get('width', 0.0)), float(raw.get('height', 0.0)))


@dataclass(frozen=True)
class Template:
    """Normalized reusable node fragment

    Properties:
        id: Template identifier (kept when a same-name template is replaced)
        name: Display name, unique within a store
        nodes: Fragment nodes in capture order, bounding box at the origin
        slot_size: Nominal size of one slot
        original_slot_size: Slot size at capture time
        description: Optional free text
        created_at, updated_at: Epoch milliseconds
        is_preset: Legacy preset marker (filtered out by the store)
    """
    id: str
    name: str
    nodes: Tuple[Node, ...] = ()
    slot_size: Size = Size(0.0, 0.0)
    original_slot_size: Optional[Size] = None
    description: str = ''
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)
    is_preset: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'nodes', tuple(self.nodes))
        if self.original_slot_size is None:
            object.__setattr__(self, 'original_slot_size', self.slot_size)

    @staticmethod
    def new_id() -> str:
        return str(uuid_module.uuid4())

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def with_changes(self, **changes) -> 'Template':
        """Return a copy with fields replaced and updated_at refreshed"""
        changes.setdefault('updated_at', now_ms())
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Export to the stored template dictionary format"""
        result = {
            'id': self.id,
            'name': self.name,
            'components': [node.to_dict() for node in self.nodes],
            'slotSize': {'width': self.slot_size.width, 'height': self.slot_size.height},
            'originalSlotSize': {
                'width': self.original_slot_size.width,
                'height': self.original_slot_size.height,
            },
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        if self.description:
            result['description'] = self.description
        if self.is_preset:
            result['isPreset'] = True
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Template':
        """Parse a stored template dictionary

        Raises:
            ValueError: If a component has an unknown type
            KeyError: If the template has no name
        """
        return cls(
            id=str(data.get('id') or cls.new_id()),
            name=data['name'],
            nodes=tuple(Node.from_dict(c) for c in data.get('components') or []),
            slot_size=_size_from_dict(data.get('slotSize')) or Size(0.0, 0.0),
            original_slot_size=_size_from_dict(data.get('originalSlotSize')),
            description=data.get('description') or '',
            created_at=int(data.get('createdAt') or now_ms()),
            updated_at=int(data.get('updatedAt') or now_ms()),
            is_preset=bool(data.get('isPreset', False)),
        )


@dataclass(frozen=True)
class ComponentTemplate:
    """Saved component group, stamped back as-is

    Unlike a slot Template, a component template keeps its group nodes and
    the whole parent hierarchy, so an instantiated copy shares z-order and
    visibility scope the way the original selection did.

    Properties:
        id: Template identifier (kept when a same-name template is replaced)
        name: Display name, unique within a store
        nodes: Fragment nodes, groups included, bounding box at the origin
        bounding_size: Width and height of the captured fragment
        description: Optional free text
        created_at, updated_at: Epoch milliseconds
    """
    id: str
    name: str
    nodes: Tuple[Node, ...] = ()
    bounding_size: Size = Size(0.0, 0.0)
    description: str = ''
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    def __post_init__(self):
        object.__setattr__(self, 'nodes', tuple(self.nodes))

    @staticmethod
    def new_id() -> str:
        return str(uuid_module.uuid4())

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def with_changes(self, **changes) -> 'ComponentTemplate':
        changes.setdefault('updated_at', now_ms())
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'name': self.name,
            'components': [node.to_dict() for node in self.nodes],
            'boundingBox': {'width': self.bounding_size.width, 'height': self.bounding_size.height},
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        if self.description:
            result['description'] = self.description
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ComponentTemplate':
        """Parse a stored component template dictionary

        Raises:
            ValueError: If a component has an unknown type
            KeyError: If the template has no name
        """
        return cls(
            id=str(data.get('id') or cls.new_id()),
            name=data['name'],
            nodes=tuple(Node.from_dict(c) for c in data.get('components') or []),
            bounding_size=_size_from_dict(data.get('boundingBox')) or Size(0.0, 0.0),
            description=data.get('description') or '',
            created_at=int(data.get('createdAt') or now_ms()),
            updated_at=int(data.get('updatedAt') or now_ms()),
        )
