"""
Tests for drag-and-drop reparent/reorder.

Covers:
- Pure planning (before/after/into/root) and sibling renumbering
- Rejections: missing nodes, source == target, cycles, unknown intent
- Atomic commit as one version step
- Order <-> layer correspondence and acyclicity after sequences of drops
"""
import random

import pytest

from models.scene import Scene, Node, SceneTree, plan_reorder, plan_root_drop


def panel_ids(scene, parent_id=None):
    return [n.id for n in scene.get_children(parent_id)]


@pytest.fixture
def scene():
    """Root: g (group, layer 2) > [a(2), b(1), c(0)], plus roots x(1), y(0)"""
    return Scene([
        Node(id='g', kind='group', layer=2),
        Node(id='a', kind='custom', parent_id='g', layer=2),
        Node(id='b', kind='custom', parent_id='g', layer=1),
        Node(id='c', kind='custom', parent_id='g', layer=0),
        Node(id='x', kind='custom', layer=1),
        Node(id='y', kind='custom', layer=0),
    ])


# ══════════════════════════════════════════════════════════════════════════
# Planning
# ══════════════════════════════════════════════════════════════════════════

class TestPlanReorder:

    def test_before_within_siblings(self, scene):
        plan = plan_reorder(scene.tree, 'c', 'a', 'before')
        assert plan.new_parent_id == 'g'
        assert plan.parent_changed is False
        assert dict(plan.layers) == {'c': 2, 'a': 1, 'b': 0}

    def test_after_within_siblings(self, scene):
        plan = plan_reorder(scene.tree, 'a', 'c', 'after')
        assert dict(plan.layers) == {'b': 2, 'c': 1, 'a': 0}

    def test_before_moves_to_other_level(self, scene):
        plan = plan_reorder(scene.tree, 'x', 'b', 'before')
        assert plan.new_parent_id == 'g'
        assert plan.parent_changed is True
        assert dict(plan.layers) == {'a': 3, 'x': 2, 'b': 1, 'c': 0}

    def test_into_makes_frontmost_child(self, scene):
        plan = plan_reorder(scene.tree, 'y', 'g', 'into')
        assert plan.new_parent_id == 'g'
        assert dict(plan.layers) == {'y': 3, 'a': 2, 'b': 1, 'c': 0}

    def test_into_leaf(self, scene):
        plan = plan_reorder(scene.tree, 'y', 'x', 'into')
        assert plan.new_parent_id == 'x'
        assert dict(plan.layers) == {'y': 0}

    def test_root_drop(self, scene):
        plan = plan_root_drop(scene.tree, 'b')
        assert plan.new_parent_id is None
        assert plan.parent_changed is True
        assert dict(plan.layers) == {'b': 3}

    def test_root_drop_only_root(self):
        tree = SceneTree([Node(id='g', kind='group'), Node(id='c', kind='custom', parent_id='g', layer=4)])
        assert dict(plan_root_drop(tree, 'c').layers) == {'c': 1}

    @pytest.mark.parametrize('source,target,intent', [
        ('missing', 'a', 'before'),
        ('a', 'missing', 'after'),
        ('a', 'a', 'into'),
        ('g', 'a', 'into'),      # into own child
        ('g', 'b', 'before'),    # beside own child
        ('a', 'b', 'sideways'),
    ])
    def test_rejected(self, scene, source, target, intent):
        assert plan_reorder(scene.tree, source, target, intent) is None

    def test_deep_cycle_rejected(self):
        tree = SceneTree([
            Node(id='top', kind='group'),
            Node(id='mid', kind='group', parent_id='top'),
            Node(id='leaf', kind='custom', parent_id='mid'),
        ])
        assert plan_reorder(tree, 'top', 'leaf', 'into') is None
        assert plan_reorder(tree, 'top', 'leaf', 'after') is None

    def test_root_drop_missing(self, scene):
        assert plan_root_drop(scene.tree, 'missing') is None


# ══════════════════════════════════════════════════════════════════════════
# Committing
# ══════════════════════════════════════════════════════════════════════════

class TestDrop:

    def test_drop_reorders_panel(self, scene):
        assert scene.drop('c', 'a', 'before') is True
        assert panel_ids(scene, 'g') == ['c', 'a', 'b']

    def test_drop_single_version_step(self, scene):
        before = scene.version
        scene.drop('x', 'b', 'before')
        assert scene.version == before + 1

    def test_drop_only_changes_source_parent(self, scene):
        scene.drop('x', 'b', 'after')
        parents = {n.id: n.parent_id for n in scene.nodes}
        assert parents == {'g': None, 'a': 'g', 'b': 'g', 'c': 'g', 'x': 'g', 'y': None}

    def test_rejected_drop_changes_nothing(self, scene):
        nodes = scene.nodes
        version = scene.version
        assert scene.drop('g', 'a', 'into') is False
        assert scene.nodes is nodes
        assert scene.version == version

    def test_noop_drop_reports_false(self, scene):
        assert scene.drop('a', 'b', 'before') is False

    def test_drop_on_root(self, scene):
        assert scene.drop_on_root('b') is True
        assert panel_ids(scene) == ['b', 'g', 'x', 'y']
        assert panel_ids(scene, 'g') == ['a', 'c']

    def test_drop_keeps_old_tuple_intact(self, scene):
        old = scene.nodes
        scene.drop('y', 'g', 'into')
        assert next(n for n in old if n.id == 'y').parent_id is None

    def test_stale_plan_rejected(self, scene):
        plan = scene.plan_drop('a', 'x', 'into')
        scene.drop('x', 'a', 'into')  # now x sits under a
        assert scene.apply_plan(plan) is False

    def test_apply_none(self, scene):
        assert scene.apply_plan(None) is False


class TestReorderProperties:

    def test_order_matches_layers_after_commit(self, scene):
        scene.drop('y', 'b', 'after')
        children = scene.get_children('g')
        layers = [n.layer for n in children]
        assert layers == sorted(layers, reverse=True)
        assert len(set(layers)) == len(layers)

    def test_random_drops_stay_acyclic(self):
        rng = random.Random(1234)
        scene = Scene()
        ids = [scene.add_node('group') for _ in range(4)] + [scene.add_node('custom') for _ in range(4)]
        for _ in range(200):
            source, target = rng.choice(ids), rng.choice(ids)
            scene.drop(source, target, rng.choice(['before', 'after', 'into']))
            for node_id in ids:
                assert not scene.is_descendant(node_id, node_id)
                chain = [n.id for n in scene.get_ancestors(node_id)]
                assert node_id not in chain
                assert len(chain) == len(set(chain))
        assert sum(1 for _ in scene.flattened_display_order()) == len(ids)
