"""
Overlay Composer - File Operations Service

This module handles file I/O for layouts and live data snapshots.
Separates file operations from the model and the CLI.
"""

import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def load_layout_from_file(filename: str) -> Dict[str, Any]:
    """Load a layout dictionary from a JSON file

    Args:
        filename: Path to layout file

    Returns:
        Layout dictionary ({name, dimensions, components, ...})

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not a JSON layout object
    """
    with open(filename, 'r', encoding='utf-8-sig') as f:
        layout = json.load(f)

    if not isinstance(layout, dict) or not isinstance(layout.get('components', []), list):
        raise ValueError(f"{filename} is not a layout file - expected an object with a 'components' list")

    logger.info(f"Layout loaded from {filename}")
    return layout


def save_json_to_file(payload: Any, filename: str):
    """Save a layout dictionary (or any JSON payload) to a file

    Raises:
        OSError: If the file write fails
    """
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)

    logger.info(f"Saved {filename}")


def load_data_from_file(filename: str) -> Any:
    """Load a live data snapshot (the object data paths resolve against)

    Raises:
        OSError: If the file cannot be read
        json.JSONDecodeError: If the file is not valid JSON
    """
    with open(filename, 'r', encoding='utf-8-sig') as f:
        return json.load(f)
