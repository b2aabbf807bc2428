"""
Data binding helpers - resolve dotted paths against live game data.

Every overlay component reads its value from an external data object using a
dotted key path such as ``homeTeam.score`` or ``leaderboardSlots.home.slot0.name``.
Resolution never raises: a missing key, a None along the way, or an
unsupported container yields None.
"""

from typing import Any, Mapping, Optional

from constants import UNBOUND_DATA_PATH, MISSING_VALUE_TEXT


def is_bound_path(path: Optional[str]) -> bool:
    """Check whether a data path actually points at a field

    Args:
        path: Data path as authored, may be None, empty or the 'none' sentinel

    Returns:
        True if the path should be resolved against data
    """
    if not isinstance(path, str):
        return False
    stripped = path.strip()
    return bool(stripped) and stripped != UNBOUND_DATA_PATH


def join_path(*parts: Any) -> str:
    """Join path fragments with dots, skipping empty fragments"""
    return '.'.join(str(p) for p in parts if p is not None and str(p) != '')


def resolve_path(data: Any, path: Optional[str]) -> Any:
    """Resolve a dotted key path against a data object

    Mappings are indexed by key, lists and tuples by integer position.

    Args:
        data: Root data object (usually a dict decoded from JSON)
        path: Dotted path, e.g. 'penaltySlots.home.slot0.jersey'

    Returns:
        Resolved value, or None if any step is missing
    """
    if data is None or not is_bound_path(path):
        return None

    current = data
    for key in path.strip().split('.'):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, (list, tuple)):
            try:
                index = int(key)
            except ValueError:
                return None
            if not 0 <= index < len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def resolve_bool(data: Any, path: Optional[str]) -> Optional[bool]:
    """Resolve a path as a strict boolean

    Returns:
        True/False only when the resolved value is an actual bool,
        None for anything else (missing, numbers, strings)
    """
    value = resolve_path(data, path)
    if isinstance(value, bool):
        return value
    return None


def format_value(value: Any, value_format: str = 'text') -> str:
    """Format a resolved data value for display

    Args:
        value: Resolved value (None means missing)
        value_format: 'text', 'number', 'time' or 'boolean'

    Returns:
        Display string; missing values render as '--'
    """
    if value is None:
        return MISSING_VALUE_TEXT

    if value_format == 'number':
        try:
            number = float(value)
        except (TypeError, ValueError):
            return str(value)
        if number.is_integer():
            return str(int(number))
        return str(number)

    if value_format == 'time':
        if isinstance(value, str):
            return value
        try:
            total = int(value)
        except (TypeError, ValueError):
            return str(value)
        return f"{total // 60}:{total % 60:02d}"

    if value_format == 'boolean':
        return 'YES' if value else 'NO'

    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def display_text(data: Any, path: Optional[str], value_format: str = 'text',
                 prefix: str = '', suffix: str = '') -> str:
    """Build the text a data display shows for a bound path

    An unbound path shows nothing at all rather than the missing marker.
    """
    if not is_bound_path(path):
        return ''
    return f"{prefix}{format_value(resolve_path(data, path), value_format)}{suffix}"
