"""
Dotted path helpers for manifest dictionaries.

Paths look like `spec.template.spec.containers[0].env`.
"""

import copy
import re
from typing import Any, Dict, List, Union

_TOKEN = re.compile(r'([^.\[\]]+)|\[(\d+)\]')

PathToken = Union[str, int]


def parse_path(path: str) -> List[PathToken]:
    """Split a dotted path into keys (str) and list indexes (int)."""
    tokens: List[PathToken] = []
    for key, index in _TOKEN.findall(path):
        tokens.append(int(index) if index else key)
    if not tokens:
        raise ValueError(f"Empty manifest path: '{path}'")
    return tokens


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    current = obj
    for token in parse_path(path):
        try:
            current = current[token]
        except (KeyError, IndexError, TypeError):
            return default
    return current


def set_path(obj: Dict[str, Any], path: str, value: Any) -> None:
    """Set a value, creating intermediate dicts and lists.

    An index into an existing list must refer to an existing element.

    Raises:
        IndexError: If a list index is out of range
    """
    tokens = parse_path(path)
    current: Any = obj
    for position, token in enumerate(tokens[:-1]):
        following = tokens[position + 1]
        if isinstance(token, int):
            if not isinstance(current, list) or token >= len(current):
                raise IndexError(f"Index {token} out of range at '{path}'")
            if current[token] is None:
                current[token] = [] if isinstance(following, int) else {}
            current = current[token]
        else:
            if current.get(token) is None:
                current[token] = [] if isinstance(following, int) else {}
            current = current[token]

    last = tokens[-1]
    if isinstance(last, int):
        if not isinstance(current, list) or last >= len(current):
            raise IndexError(f"Index {last} out of range at '{path}'")
    current[last] = value


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new dict with override merged into base; dicts recurse, anything else replaces."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result
