"""
Shared fixtures for Overlay Composer tests.

Provides reusable scenes, sample layouts, live data and template stores.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))


# ── Sample layout (web editor LayoutConfig shape) ───────────────────────

SAMPLE_LAYOUT = {
    'name': 'Hockey Scorebug',
    'dimensions': {'width': 1920, 'height': 1080},
    'backgroundColor': '#000000',
    'components': [
        {
            'id': 'bug',
            'type': 'group',
            'displayName': 'Scorebug',
            'position': {'x': 0, 'y': 0},
            'size': {'width': 0, 'height': 0},
            'layer': 2,
            'props': {},
        },
        {
            'id': 'home-score',
            'type': 'score',
            'team': 'home',
            'parentId': 'bug',
            'position': {'x': 100, 'y': 900},
            'size': {'width': 288, 'height': 194},
            'layer': 1,
            'props': {'dataPath': 'homeTeam.score', 'format': 'number', 'fontSize': 72},
        },
        {
            'id': 'away-score',
            'type': 'score',
            'team': 'away',
            'parentId': 'bug',
            'position': {'x': 400, 'y': 900},
            'size': {'width': 288, 'height': 194},
            'layer': 0,
            'props': {'dataPath': 'awayTeam.score', 'format': 'number'},
        },
        {
            'id': 'clock',
            'type': 'clock',
            'position': {'x': 800, 'y': 40},
            'size': {'width': 384, 'height': 162},
            'layer': 1,
            'props': {'dataPath': 'gameClock', 'format': 'time',
                      'visibilityPath': 'clockRunning'},
        },
        {
            'id': 'penalties',
            'type': 'slotList',
            'team': 'home',
            'position': {'x': 200, 'y': 200},
            'size': {'width': 100, 'height': 160},
            'layer': 3,
            'props': {'templateId': 'tpl-penalty', 'slotCount': 3, 'direction': 'vertical',
                      'slotSpacing': 5, 'dataPathPrefix': 'penaltySlots'},
        },
    ],
}

SAMPLE_TEMPLATE = {
    'id': 'tpl-penalty',
    'name': 'Penalty Row',
    'components': [
        {
            'id': 'tpl-jersey',
            'type': 'custom',
            'position': {'x': 0, 'y': 0},
            'size': {'width': 100, 'height': 50},
            'layer': 0,
            'props': {'dataPath': 'jersey'},
        },
    ],
    'slotSize': {'width': 100, 'height': 50},
    'originalSlotSize': {'width': 100, 'height': 50},
    'createdAt': 1700000000000,
    'updatedAt': 1700000000000,
}

SAMPLE_DATA = {
    'homeTeam': {'score': 3},
    'awayTeam': {'score': 1},
    'gameClock': 754,
    'clockRunning': True,
    'penaltySlots': {
        'home': {
            'slot0': {'active': True, 'jersey': 12},
            'slot1': {'active': False},
            'slot2': {'active': True, 'jersey': 7},
        },
    },
}


@pytest.fixture
def sample_layout():
    """Layout with a group, two children, a clock and a slot list"""
    import copy
    return copy.deepcopy(SAMPLE_LAYOUT)


@pytest.fixture
def sample_template_dict():
    import copy
    return copy.deepcopy(SAMPLE_TEMPLATE)


@pytest.fixture
def sample_data():
    """Live data snapshot matching the sample layout's bindings"""
    import copy
    return copy.deepcopy(SAMPLE_DATA)


@pytest.fixture
def empty_scene():
    """Fresh scene with no nodes"""
    from models.scene import Scene
    return Scene()


@pytest.fixture
def sample_scene(sample_layout):
    """Scene loaded from the sample layout"""
    from models.scene import Scene
    return Scene.from_layout_dict(sample_layout)


@pytest.fixture
def sample_template(sample_template_dict):
    from models.template import Template
    return Template.from_dict(sample_template_dict)


@pytest.fixture
def template_store(tmp_path):
    """Template store backed by a temporary file"""
    from services.template_store import TemplateStore
    return TemplateStore(str(tmp_path / 'templates.json'))
