"""Path-addressed operators shared by the JSON store and the remote store.

Each operator validates its operand and the value currently stored at the
path before touching the tree, so a rejected call leaves the document as it
was.
"""

from __future__ import annotations

import copy
import json
from enum import Enum
from typing import Any, Callable, MutableMapping

from ..domain.checks import ensure_amount, is_number
from ..domain.exceptions import InvalidTypeError
from .paths import NOT_FOUND, resolve_read, resolve_write, split_path

Matcher = Callable[[Any], bool]


class Operation(str, Enum):
    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"
    PUSH = "push"
    PULL = "pull"
    DELETE = "delete"


def ensure_serializable(value: Any) -> Any:
    """Return ``value`` as it reads back from JSON: keys become strings, tuples lists."""
    try:
        return json.loads(json.dumps(value, allow_nan=False))
    except (TypeError, ValueError) as exc:
        raise InvalidTypeError(f"Value {value!r} cannot be stored as JSON") from exc


def _current_number(root: MutableMapping[str, Any], path: str) -> int | float:
    current = resolve_read(root, path)
    if current is NOT_FOUND or current is None:
        return 0
    if not is_number(current):
        raise InvalidTypeError(
            f"Value at '{path}' is a {type(current).__name__}, expected a number"
        )
    return current


def _current_list(root: MutableMapping[str, Any], path: str) -> list[Any]:
    current = resolve_read(root, path)
    if current is NOT_FOUND or current is None:
        return []
    if not isinstance(current, list):
        raise InvalidTypeError(
            f"Value at '{path}' is a {type(current).__name__}, expected an array"
        )
    return list(current)


def apply_set(root: MutableMapping[str, Any], path: str, value: Any) -> Any:
    stored = ensure_serializable(value)
    parent, key = resolve_write(root, path)
    parent[key] = stored
    return copy.deepcopy(stored)


def apply_add(root: MutableMapping[str, Any], path: str, amount: Any) -> int | float:
    amount = ensure_amount(amount)
    result = _current_number(root, path) + amount
    parent, key = resolve_write(root, path)
    parent[key] = result
    return result


def apply_subtract(root: MutableMapping[str, Any], path: str, amount: Any) -> int | float:
    amount = ensure_amount(amount)
    result = _current_number(root, path) - amount
    parent, key = resolve_write(root, path)
    parent[key] = result
    return result


def apply_push(root: MutableMapping[str, Any], path: str, item: Any) -> list[Any]:
    stored = ensure_serializable(item)
    items = _current_list(root, path)
    items.append(stored)
    parent, key = resolve_write(root, path)
    parent[key] = items
    return copy.deepcopy(items)


def apply_pull(root: MutableMapping[str, Any], path: str, matcher: Any) -> list[Any]:
    """Remove every element matching a predicate, or the first element equal to a value."""
    items = _current_list(root, path)
    if callable(matcher):
        items = [item for item in items if not matcher(item)]
    elif matcher in items:
        items.remove(matcher)
    parent, key = resolve_write(root, path)
    parent[key] = items
    return copy.deepcopy(items)


def apply_delete(root: MutableMapping[str, Any], path: str) -> bool:
    segments = split_path(path)
    node: Any = root
    for segment in segments[:-1]:
        if not isinstance(node, MutableMapping) or segment not in node:
            return False
        node = node[segment]
    if not isinstance(node, MutableMapping) or segments[-1] not in node:
        return False
    del node[segments[-1]]
    return True


_OPERATORS: dict[Operation, Callable[..., Any]] = {
    Operation.SET: apply_set,
    Operation.ADD: apply_add,
    Operation.SUBTRACT: apply_subtract,
    Operation.PUSH: apply_push,
    Operation.PULL: apply_pull,
}


def apply(
    root: MutableMapping[str, Any], path: str, operation: Operation, operand: Any = None
) -> Any:
    if operation is Operation.DELETE:
        return apply_delete(root, path)
    return _OPERATORS[operation](root, path, operand)


__all__ = [
    "Matcher",
    "Operation",
    "apply",
    "apply_add",
    "apply_delete",
    "apply_pull",
    "apply_push",
    "apply_set",
    "apply_subtract",
    "ensure_amount",
    "ensure_serializable",
    "is_number",
]
