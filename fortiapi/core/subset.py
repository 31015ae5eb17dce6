"""
Subset Lookup

Finds a keyed value inside a response payload whose collection field may
hold either a single object or a list of objects:

    {"result": {"status": {...}}}          single embedded object
    {"result": [{"status": {...}}, ...]}   sequence of objects
"""

from typing import Any, Dict, Optional

from fortiapi.exceptions import ConfigurationError


def _matches(element: Any, key: str, url: Optional[str]) -> bool:
    if not isinstance(element, dict) or element.get(key) is None:
        return False
    return url is None or element.get('url', 'unknown_url') == url


def _fallback(default: Any) -> Any:
    return default if default is not None else {}


def subset_position(
    root: Dict[str, Any],
    field: str,
    key: str,
    url: Optional[str] = None,
    start: Optional[int] = None,
    index: Optional[int] = None
) -> Optional[int]:
    """
    Position of the first matching element in root[field].

    Args:
        root: Payload to search
        field: Name of the collection field in root
        key: Key that must be present in the element
        url: Only match elements whose 'url' equals this value
        start: Position to resume scanning from (default 0)
        index: Examine this position only, no search

    Returns:
        The matching position, or None when root[field] is not a list or
        nothing matches. To iterate over every match, call again with
        start=position + 1.
    """
    collection = root.get(field) if isinstance(root, dict) else None
    if not isinstance(collection, list):
        return None

    if index is not None:
        if 0 <= index < len(collection) and _matches(collection[index], key, url):
            return index
        return None

    for position in range(max(start or 0, 0), len(collection)):
        if _matches(collection[position], key, url):
            return position
    return None


def subset(
    root: Dict[str, Any],
    field: str,
    key: str,
    url: Optional[str] = None,
    default: Any = None,
    start: Optional[int] = None,
    index: Optional[int] = None
) -> Any:
    """
    Return root[field][key] for a single object, or the key's value in the
    first matching element when root[field] is a list.

    Example:
        >>> payload = {"result": [{"url": "sys/status", "status": {"code": 0}}]}
        >>> subset(payload, "result", "status")
        {'code': 0}

    Args:
        root: Payload to search
        field: Name of the collection field in root
        key: Key to return
        url: Only match an object whose 'url' equals this value
        default: Returned when nothing matches (an empty dict when None)
        start: Position to resume scanning from; list collections only
        index: Examine this position only; list collections only

    Raises:
        ConfigurationError: If root, field or key is missing
    """
    if root is None or field is None or key is None:
        raise ConfigurationError("Root, set and key are required")

    collection = root.get(field) if isinstance(root, dict) else None

    if isinstance(collection, dict):
        return collection[key] if _matches(collection, key, url) else _fallback(default)

    position = subset_position(root, field, key, url=url, start=start, index=index)
    if position is None:
        return _fallback(default)
    return collection[position][key]
