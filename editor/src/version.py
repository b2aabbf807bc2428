"""Application version module.

Installed: reads the version from the package metadata.
From a source checkout: falls back to the VERSION file at the project root.
"""

from pathlib import Path

DIST_NAME = 'overlay-composer'


def get_version() -> str:
    """Get the application version string (e.g. '0.1.0')."""
    from importlib.metadata import version, PackageNotFoundError
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return _source_version()


def _source_version() -> str:
    """Read VERSION from the project root (editor/src/version.py -> ../../VERSION)."""
    version_file = Path(__file__).resolve().parent.parent.parent / "VERSION"
    try:
        return version_file.read_text().strip()
    except FileNotFoundError:
        return "0.0.0"
