"""Scene model mixins package"""

from ._internal.node import (
    Node, ToggleStates,
    DataDisplayProps, IndicatorListProps, LeaderboardProps, SlotListProps, GroupProps,
    new_node_id, props_class_for_kind,
)
from ._internal.tree import SceneTree, DisplayRow
from ._internal.ordering import (
    RenderEntry, build_render_list, effective_layer_key, is_hard_visible, own_visibility,
)
from ._internal.reorder import ReorderPlan, plan_reorder, plan_root_drop
from .query_mixin import SceneQueryMixin
from .node_mixin import SceneNodeMixin
from .ordering_mixin import SceneOrderingMixin
from .reorder_mixin import SceneReorderMixin
from .template_mixin import SceneTemplateMixin
from .serialization_mixin import SceneSerializationMixin
from .core import Scene

__all__ = [
    'Scene',
    'Node',
    'ToggleStates',
    'DataDisplayProps',
    'IndicatorListProps',
    'LeaderboardProps',
    'SlotListProps',
    'GroupProps',
    'SceneTree',
    'DisplayRow',
    'RenderEntry',
    'ReorderPlan',
    'build_render_list',
    'effective_layer_key',
    'is_hard_visible',
    'own_visibility',
    'plan_reorder',
    'plan_root_drop',
    'new_node_id',
    'props_class_for_kind',
    'SceneQueryMixin',
    'SceneNodeMixin',
    'SceneOrderingMixin',
    'SceneReorderMixin',
    'SceneTemplateMixin',
    'SceneSerializationMixin',
]
