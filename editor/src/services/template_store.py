"""
Overlay Composer - Template Store Service

Persists templates as a JSON list in the per-user config directory
(~/.overlay_composer/templates.json unless overridden). Component group
templates live in their own file next to it (component_templates.json).

- Saving a template whose name already exists replaces it in place, keeping
  the stored id and creation time
- Legacy preset slot templates are dropped on load and the cleaned list is
  written back
- Entries this build cannot parse (e.g. a component type it does not know)
  are kept verbatim and written back with every save
- A missing file is an empty store; a corrupt file is logged and treated as
  empty
"""

import os
import json
import logging
from typing import Any, List, Optional

from constants import (
    CONFIG_DIR_NAME, CONFIG_HOME_ENV, TEMPLATES_FILE_NAME, COMPONENT_TEMPLATES_FILE_NAME,
    PRESET_NAME_PREFIX,
)
from models.template import Template, ComponentTemplate, now_ms
from utils.logger import loggerRaise

logger = logging.getLogger(__name__)


def default_config_dir() -> str:
    """Resolve the config directory (OVERLAY_COMPOSER_HOME wins over ~/.overlay_composer)"""
    override = os.environ.get(CONFIG_HOME_ENV)
    if override:
        return os.path.expanduser(override)
    return os.path.join(os.path.expanduser('~'), CONFIG_DIR_NAME)


def is_legacy_preset(template: Template) -> bool:
    return template.is_preset or template.name.startswith(PRESET_NAME_PREFIX)


def _is_raw_preset(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    name = entry.get('name')
    return bool(entry.get('isPreset')) or (isinstance(name, str) and name.startswith(PRESET_NAME_PREFIX))


class TemplateStore:
    """JSON file backed collection of slot templates"""

    template_class = Template
    file_name = TEMPLATES_FILE_NAME
    filters_presets = True

    def __init__(self, path: Optional[str] = None):
        """
        Args:
            path: Template file path; defaults to the store's file in the config dir
        """
        self.path = path or os.path.join(default_config_dir(), self.file_name)
        # Raw entries from the last load that could not be parsed
        self._unreadable: List[Any] = []

    # ========================================
    # File I/O
    # ========================================

    def load(self) -> List[Template]:
        """Load all stored templates, presets filtered out

        Raises:
            OSError: If the file exists but cannot be read
        """
        self._unreadable = []
        if not os.path.exists(self.path):
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Template file {self.path} is corrupt, treating as empty: {e}")
            return []
        except OSError as e:
            loggerRaise(e, f"Error reading templates from {self.path}")

        if not isinstance(raw, list):
            logger.warning(f"Template file {self.path} does not hold a list, treating as empty")
            return []

        templates = []
        dropped = 0
        for entry in raw:
            try:
                template = self.template_class.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                if self.filters_presets and _is_raw_preset(entry):
                    dropped += 1
                else:
                    logger.warning(f"Keeping unreadable template entry as-is: {e}")
                    self._unreadable.append(entry)
                continue
            if self.filters_presets and is_legacy_preset(template):
                dropped += 1
            else:
                templates.append(template)

        if dropped:
            logger.info(f"Dropped {dropped} legacy preset templates")
            self.save(templates)
        return templates

    def save(self, templates: List[Template]):
        """Write the full template list

        Entries the last load could not parse are written back unchanged
        after the given templates.

        Raises:
            OSError: If the directory or file cannot be written
        """
        entries: List[Any] = [t.to_dict() for t in templates] + list(self._unreadable)
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(entries, f, indent=2)
        except OSError as e:
            loggerRaise(e, f"Error saving templates to {self.path}")
        logger.debug(f"Saved {len(entries)} templates to {self.path}")

    # ========================================
    # Queries
    # ========================================

    def list(self) -> List[Template]:
        return self.load()

    def get(self, template_id: Optional[str]) -> Optional[Template]:
        """Get a template by id (None if absent)"""
        if not template_id:
            return None
        return next((t for t in self.load() if t.id == template_id), None)

    def get_by_name(self, name: str) -> Optional[Template]:
        return next((t for t in self.load() if t.name == name), None)

    # ========================================
    # Mutations
    # ========================================

    def add(self, template: Template) -> Template:
        """Store a template, replacing any template with the same name

        A replaced template keeps its stored id and creation time.

        Returns:
            The template as stored
        """
        templates = self.load()
        index = next((i for i, t in enumerate(templates) if t.name == template.name), None)
        if index is None:
            templates.append(template)
            stored = template
        else:
            existing = templates[index]
            stored = template.with_changes(id=existing.id, created_at=existing.created_at,
                                           updated_at=now_ms())
            templates[index] = stored
            logger.info(f"Replaced template '{template.name}' ({existing.id})")
        self.save(templates)
        return stored

    def update(self, template_id: str, **changes) -> Optional[Template]:
        """Update fields of a stored template

        Returns:
            Updated template, or None if the id is unknown
        """
        templates = self.load()
        for i, template in enumerate(templates):
            if template.id == template_id:
                templates[i] = template.with_changes(**changes)
                self.save(templates)
                return templates[i]
        return None

    def delete(self, template_id: str) -> bool:
        """Delete a template

        Returns:
            True if a template was removed
        """
        templates = self.load()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            return False
        self.save(remaining)
        return True


class ComponentTemplateStore(TemplateStore):
    """JSON file backed collection of component group templates"""

    template_class = ComponentTemplate
    file_name = COMPONENT_TEMPLATES_FILE_NAME
    filters_presets = False
