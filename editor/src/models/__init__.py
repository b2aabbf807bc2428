"""
Overlay Composer - Data Models

This module contains the data model classes for the overlay scene.
This is the MODEL in MVC architecture.

Public API: Import Scene, Node and the payload classes from models.scene,
Template from models.template.
The models/scene/_internal/ subdirectory contains internal implementation only.
"""

from .scene import Scene, Node, SceneTree, RenderEntry
from .template import Template, ComponentTemplate

__all__ = ['Scene', 'Node', 'SceneTree', 'RenderEntry', 'Template', 'ComponentTemplate']
