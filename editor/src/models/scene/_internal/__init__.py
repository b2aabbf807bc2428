"""
Scene Internal Package - DO NOT IMPORT FROM HERE

This package contains INTERNAL implementation for the Scene model:
- node.py: Node and per-kind payload data structures
- tree.py: Parent/children index built from the node tuple
- ordering.py: Effective layer keys, visibility and the render list
- reorder.py: Pure drag-and-drop reorder planning

FORBIDDEN: Do not import from models.scene._internal.* directly
CORRECT: Import from models.scene (the public API)

Example:
    from models.scene import Scene, Node, SceneTree
"""

# This package is internal - do not populate __all__
# External code must use models.scene
