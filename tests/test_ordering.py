"""
Tests for effective ordering and visibility.

Covers:
- Effective layer key formula (own layer + ancestor layers x 1000^k)
- Render order ascending, ties in insertion order
- Groups never rendered but still propagate order and visibility
- Hard visibility (own flag, ancestor flags, ancestor bindings)
- Own visibility binding surfaced as the opacity signal
"""
import pytest

from models.scene import (
    Node, SceneTree, Scene,
    effective_layer_key, is_hard_visible, own_visibility, build_render_list,
)


def make(node_id, parent=None, layer=0, kind='custom', visible=True, vis=None):
    return Node(id=node_id, kind=kind, parent_id=parent, layer=layer,
                visible=visible, visibility_binding=vis)


# ══════════════════════════════════════════════════════════════════════════
# Effective layer key
# ══════════════════════════════════════════════════════════════════════════

class TestEffectiveLayer:

    def test_root_is_own_layer(self):
        tree = SceneTree([make('a', layer=7)])
        assert effective_layer_key(tree, tree.get('a')) == 7

    def test_parent_weighted_by_1000(self):
        tree = SceneTree([make('g', kind='group', layer=2), make('c', parent='g', layer=3)])
        assert effective_layer_key(tree, tree.get('c')) == 2003

    def test_grandparent_weighted_by_million(self):
        tree = SceneTree([
            make('gp', kind='group', layer=1),
            make('p', parent='gp', kind='group', layer=2),
            make('c', parent='p', layer=3),
        ])
        assert effective_layer_key(tree, tree.get('c')) == 3 + 2 * 1000 + 1 * 1000000

    def test_dangling_parent_truncates(self):
        tree = SceneTree([make('c', parent='ghost', layer=4)])
        assert effective_layer_key(tree, tree.get('c')) == 4

    def test_sibling_monotonicity(self):
        tree = SceneTree([
            make('g', kind='group', layer=5),
            make('low', parent='g', layer=1),
            make('high', parent='g', layer=9),
        ])
        assert effective_layer_key(tree, tree.get('low')) < effective_layer_key(tree, tree.get('high'))


# ══════════════════════════════════════════════════════════════════════════
# Render list
# ══════════════════════════════════════════════════════════════════════════

class TestRenderList:

    def test_sorted_ascending(self):
        tree = SceneTree([make('top', layer=3), make('bottom', layer=1), make('mid', layer=2)])
        ids = [e.node.id for e in build_render_list(tree)]
        assert ids == ['bottom', 'mid', 'top']

    def test_ties_keep_insertion_order(self):
        tree = SceneTree([make('first'), make('second'), make('third')])
        ids = [e.node.id for e in build_render_list(tree)]
        assert ids == ['first', 'second', 'third']

    def test_groups_excluded_children_included(self):
        tree = SceneTree([make('g', kind='group', layer=1), make('c', parent='g')])
        entries = build_render_list(tree)
        assert [e.node.id for e in entries] == ['c']
        assert entries[0].effective_layer == 1000

    def test_group_layer_orders_children(self):
        tree = SceneTree([
            make('back', kind='group', layer=1),
            make('front', kind='group', layer=2),
            make('in_front', parent='front', layer=0),
            make('in_back', parent='back', layer=99),
        ])
        ids = [e.node.id for e in build_render_list(tree)]
        assert ids == ['in_back', 'in_front']

    def test_scene_render_list_matches(self, sample_scene):
        ids = [e.node.id for e in sample_scene.render_list()]
        # slot list placeholder renders as a node of its own until expanded
        assert ids == ['clock', 'penalties', 'away-score', 'home-score']


# ══════════════════════════════════════════════════════════════════════════
# Visibility
# ══════════════════════════════════════════════════════════════════════════

class TestVisibility:

    def test_hidden_node_excluded(self):
        tree = SceneTree([make('a', visible=False), make('b')])
        assert [e.node.id for e in build_render_list(tree)] == ['b']

    def test_hidden_ancestor_hides_descendants(self):
        tree = SceneTree([
            make('g', kind='group', visible=False),
            make('p', parent='g', kind='group'),
            make('c', parent='p'),
        ])
        assert build_render_list(tree) == []

    def test_hiding_node_leaves_siblings(self):
        tree = SceneTree([
            make('g', kind='group'),
            make('a', parent='g', visible=False),
            make('b', parent='g'),
        ])
        assert [e.node.id for e in build_render_list(tree)] == ['b']

    def test_ancestor_binding_false_hides(self):
        tree = SceneTree([make('g', kind='group', vis='showBug'), make('c', parent='g')])
        assert build_render_list(tree, {'showBug': False}) == []
        assert len(build_render_list(tree, {'showBug': True})) == 1

    @pytest.mark.parametrize('value', [0, 'no', None, 'false'])
    def test_ancestor_binding_non_boolean_no_constraint(self, value):
        tree = SceneTree([make('g', kind='group', vis='showBug'), make('c', parent='g')])
        assert len(build_render_list(tree, {'showBug': value})) == 1

    def test_own_binding_does_not_exclude(self):
        tree = SceneTree([make('c', vis='showClock')])
        entries = build_render_list(tree, {'showClock': False})
        assert len(entries) == 1
        assert entries[0].is_visible is False
        assert entries[0].opacity_binding == 'showClock'

    def test_own_binding_default_visible(self):
        tree = SceneTree([make('c', vis='showClock'), make('d')])
        entries = {e.node.id: e for e in build_render_list(tree, {})}
        assert entries['c'].is_visible is True
        assert entries['d'].is_visible is True
        assert entries['d'].opacity_binding is None

    def test_is_hard_visible_and_own_visibility(self):
        tree = SceneTree([make('g', kind='group', vis='x'), make('c', parent='g', vis='y')])
        node = tree.get('c')
        assert not is_hard_visible(tree, node, {'x': False, 'y': True})
        assert is_hard_visible(tree, node, {'x': True, 'y': False})
        assert own_visibility(node, {'y': False}) is False

    def test_scene_visibility_queries(self, sample_scene, sample_data):
        assert sample_scene.is_node_rendered('clock', sample_data)
        assert not sample_scene.is_node_rendered('bug')
        sample_data['clockRunning'] = False
        assert sample_scene.get_node_opacity_visible('clock', sample_data) is False

    def test_scene_effective_layer(self, sample_scene):
        assert sample_scene.get_effective_layer('home-score') == 2001
        with pytest.raises(ValueError):
            sample_scene.get_effective_layer('missing')

    def test_toggle_visibility_in_scene(self):
        scene = Scene()
        a = scene.add_node('custom')
        b = scene.add_node('custom')
        scene.set_node_visible(a, False)
        assert [e.node.id for e in scene.render_list()] == [b]
        scene.set_node_visible(a, True)
        assert len(scene.render_list()) == 2
