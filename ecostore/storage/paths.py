"""Dot-path resolution over nested document trees.

A dot-path such as ``"guild.member.money"`` names a sequence of keys to
descend. Reads never mutate the tree and report absence with the
:data:`NOT_FOUND` sentinel; writes create the missing intermediate mappings
and refuse to descend through a value that is present but not a mapping.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping

from ..domain.exceptions import InvalidPathError, InvalidTypeError


class _NotFound:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Any = _NotFound()


def split_path(path: str) -> list[str]:
    if not isinstance(path, str):
        raise InvalidTypeError(f"Path must be a string, received {type(path).__name__}")
    segments = path.split(".")
    if not path or any(not segment for segment in segments):
        raise InvalidPathError(path, f"Path '{path}' contains an empty segment")
    return segments


def resolve_read(root: Mapping[str, Any], path: str) -> Any:
    """Return the value stored at ``path`` or :data:`NOT_FOUND`."""
    node: Any = root
    for segment in split_path(path):
        if not isinstance(node, Mapping) or segment not in node:
            return NOT_FOUND
        node = node[segment]
    return node


def resolve_write(
    root: MutableMapping[str, Any], path: str
) -> tuple[MutableMapping[str, Any], str]:
    """Return the mapping that owns the terminal slot of ``path`` and its key.

    Missing intermediate segments are created as empty dicts. The whole path
    is checked before anything is created, so a conflicting path leaves
    ``root`` untouched.
    """
    segments = split_path(path)
    node: Any = root
    depth = 0
    for depth, segment in enumerate(segments[:-1]):
        child = node.get(segment, NOT_FOUND)
        if child is NOT_FOUND:
            break
        if not isinstance(child, MutableMapping):
            raise InvalidPathError(
                path,
                f"Cannot descend into '{segment}' of path '{path}': "
                f"it holds a {type(child).__name__}",
            )
        node = child
    else:
        return node, segments[-1]

    for segment in segments[depth:-1]:
        created: dict[str, Any] = {}
        node[segment] = created
        node = created
    return node, segments[-1]


def scope_of(path: str) -> tuple[str, ...]:
    """Return the owner/entity scope (first two segments) addressed by ``path``."""
    return tuple(split_path(path)[:2])


__all__ = ["NOT_FOUND", "resolve_read", "resolve_write", "scope_of", "split_path"]
