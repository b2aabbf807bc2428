"""
Overlay Composer - Constants and Configuration

This module contains all constant values used throughout the application:
- Component kinds and their default sizes
- Stacking order constants
- Drag-and-drop drop zone geometry
- Slot list defaults
- History and persistence settings
"""

# ======================================================================
# COMPONENT KINDS
# ======================================================================
# Kinds that display a single bound data value
DATA_DISPLAY_KINDS = (
    'teamName', 'score', 'clock', 'period', 'fouls',
    'timeouts', 'bonus', 'custom',
)

KIND_DYNAMIC_LIST = 'dynamicList'
KIND_LEADERBOARD = 'leaderboardList'
KIND_SLOT_LIST = 'slotList'
KIND_GROUP = 'group'

NODE_KINDS = DATA_DISPLAY_KINDS + (
    KIND_DYNAMIC_LIST, KIND_LEADERBOARD, KIND_SLOT_LIST, KIND_GROUP,
)

# Kinds that are bound to a team side by default
TEAM_BOUND_KINDS = ('teamName', 'score', 'fouls', 'timeouts', 'bonus')

TEAM_SIDES = ('home', 'away')
DEFAULT_TEAM_SIDE = 'home'

# ======================================================================
# DEFAULT GEOMETRY (pixels, 1920x1080 base resolution)
# ======================================================================
DEFAULT_CANVAS_WIDTH = 1920
DEFAULT_CANVAS_HEIGHT = 1080

DEFAULT_POSITION_X = 192.0
DEFAULT_POSITION_Y = 108.0

DEFAULT_NODE_SIZES = {
    'teamName': (480.0, 130.0),
    'score': (288.0, 194.0),
    'clock': (384.0, 162.0),
    'period': (230.0, 162.0),
    'fouls': (192.0, 130.0),
    'timeouts': (384.0, 86.0),
    'bonus': (154.0, 130.0),
    'custom': (192.0, 108.0),
}
DEFAULT_NODE_SIZE = (192.0, 108.0)

# Offset applied to duplicated nodes so the copy does not sit on the original
DUPLICATE_OFFSET_X = 40.0
DUPLICATE_OFFSET_Y = 40.0

# ======================================================================
# STACKING ORDER
# ======================================================================
# Each ancestor level multiplies its layer contribution by this base,
# so an ancestor's layer always dominates every descendant's own layer.
EFFECTIVE_LAYER_BASE = 1000

DEFAULT_LAYER = 0

# ======================================================================
# DRAG AND DROP
# ======================================================================
# Fraction of a row's height at the top (before) and bottom (after) edges.
# The remaining middle band drops the node into the target.
DROP_ZONE_EDGE_FRACTION = 0.25

DROP_BEFORE = 'before'
DROP_AFTER = 'after'
DROP_INTO = 'into'
DROP_INTENTS = (DROP_BEFORE, DROP_AFTER, DROP_INTO)

# ======================================================================
# DATA BINDING
# ======================================================================
# Sentinel data path meaning "not bound to any field"
UNBOUND_DATA_PATH = 'none'

VALUE_FORMATS = ('text', 'number', 'time', 'boolean')
MISSING_VALUE_TEXT = '--'

# ======================================================================
# SLOT LISTS
# ======================================================================
SLOT_DIRECTION_VERTICAL = 'vertical'
SLOT_DIRECTION_HORIZONTAL = 'horizontal'
SLOT_DIRECTIONS = (SLOT_DIRECTION_VERTICAL, SLOT_DIRECTION_HORIZONTAL)

DEFAULT_SLOT_COUNT = 5
DEFAULT_SLOT_SPACING = 5.0
DEFAULT_SLOT_DIRECTION = SLOT_DIRECTION_VERTICAL
DEFAULT_DATA_PATH_PREFIX = 'leaderboardSlots'

# Field under each slot's data that marks the slot as populated
SLOT_ACTIVE_FIELD = 'active'

# ======================================================================
# HISTORY AND PERSISTENCE
# ======================================================================
MAX_HISTORY = 50

CONFIG_DIR_NAME = '.overlay_composer'
CONFIG_HOME_ENV = 'OVERLAY_COMPOSER_HOME'
TEMPLATES_FILE_NAME = 'templates.json'
COMPONENT_TEMPLATES_FILE_NAME = 'component_templates.json'

# Templates whose name starts with this prefix are legacy presets and are
# filtered out when the store is loaded
PRESET_NAME_PREFIX = '[Preset]'

# ======================================================================
# DRAG GESTURE STATES
# ======================================================================
GESTURE_IDLE = 'idle'
GESTURE_DRAGGING = 'dragging'
GESTURE_HOVERING = 'hovering'
GESTURE_COMMITTED = 'committed'
GESTURE_CANCELLED = 'cancelled'

# Intent recorded for drops on the root-level zone
DROP_ROOT = 'root'
