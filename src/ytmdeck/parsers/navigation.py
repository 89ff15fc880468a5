"""Safe accessors for untyped upstream JSON.

Responses are nested dicts/lists with no stable schema. Every accessor here
returns None (or an empty list) on a missing key or a value of the wrong
type, so parsers can chain lookups without try/except.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

JsonDict = dict[str, Any]

# Nesting bound for recursive fallbacks over unknown response shapes
MAX_SEARCH_DEPTH = 10


def as_dict(value: Any) -> JsonDict | None:
    return value if isinstance(value, dict) else None


def as_list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def dicts(value: Any) -> list[JsonDict]:
    """Dict elements of a list value; empty for anything else."""
    return [item for item in value if isinstance(item, dict)] if isinstance(value, list) else []


def nav(root: Any, *path: str | int) -> Any:
    """Walk ``path`` through dicts (str keys) and lists (int indexes).

    Example:
        >>> nav(data, "contents", "tabs", 0, "tabRenderer")

    Returns:
        The value at the end of the path, or None if any step is missing
        or has the wrong type.
    """
    current = root
    for step in path:
        if isinstance(step, int):
            items = as_list(current)
            if items is None or not -len(items) <= step < len(items):
                return None
            current = items[step]
        else:
            mapping = as_dict(current)
            if mapping is None:
                return None
            current = mapping.get(step)
        if current is None:
            return None
    return current


def runs(node: Any) -> list[JsonDict]:
    """The ``runs`` list of a styled-text node."""
    return dicts(nav(node, "runs"))


def runs_text(node: Any) -> str | None:
    """Text of a styled-text node.

    Accepts a plain string, ``{"simpleText": ...}`` or ``{"runs": [...]}``
    (run texts are concatenated). Returns None when nothing is found.
    """
    if isinstance(node, str):
        return node
    simple = as_str(nav(node, "simpleText"))
    if simple is not None:
        return simple
    parts = [text for run in runs(node) if (text := as_str(run.get("text"))) is not None]
    return "".join(parts) if parts else None


def walk_dicts(root: Any, max_depth: int = MAX_SEARCH_DEPTH) -> Iterator[tuple[JsonDict, int]]:
    """Depth-first walk over every dict below ``root``, bounded by depth."""
    stack: list[tuple[Any, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            continue
        if isinstance(node, dict):
            yield node, depth
            children = list(node.values())
        elif isinstance(node, list):
            children = node
        else:
            continue
        for child in reversed(children):
            if isinstance(child, (dict, list)):
                stack.append((child, depth + 1 if isinstance(node, dict) else depth))
