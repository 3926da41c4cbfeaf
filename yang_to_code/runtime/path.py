"""
Path structs: typed handles on schema nodes.

A path struct knows the path elements from its parent struct and the key
values of the last element. Generated code subclasses NodePath for every
directory and leaf, and RootPath for the fakeroot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

# Key value matching every entry of a list
WILDCARD = "*"


@dataclass
class PathElem:
    """One element of a data tree path."""

    name: str
    keys: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.name + "".join(f"[{k}={v}]" for k, v in self.keys.items())


class NodePath:
    """Path to a schema node, relative to its parent path struct."""

    # Schema order of the keys of a list node. Keys not listed follow in set order.
    KEY_ORDER: ClassVar[tuple[str, ...]] = ()

    def __init__(self, rel_path: list[str], keys: dict[str, Any] | None = None, parent: NodePath | None = None):
        self._rel_path = list(rel_path)
        self._keys = dict(keys or {})
        self._parent = parent

    @property
    def parent(self) -> NodePath | None:
        return self._parent

    def relative_elems(self) -> list[PathElem]:
        """Elements from the parent; key values are attached to the last one."""
        elems = [PathElem(name) for name in self._rel_path]
        if elems and self._keys:
            elems[-1].keys = {k: _key_string(self._keys[k]) for k in self._ordered_key_names()}
        return elems

    def _ordered_key_names(self) -> list[str]:
        rank = {name: i for i, name in enumerate(self.KEY_ORDER)}
        return sorted(self._keys, key=lambda name: rank.get(name, len(rank)))

    def path_elems(self) -> list[PathElem]:
        """Elements from the root to this node."""
        elems: list[PathElem] = []
        node: NodePath | None = self
        while node is not None:
            elems[:0] = node.relative_elems()
            node = node._parent
        return elems

    def with_key(self, name: str, value: Any) -> NodePath:
        """Set the value of one key of this node, in place."""
        self._keys[name] = value
        return self

    def is_wildcard(self) -> bool:
        """Whether any key on the path from the root is a wildcard."""
        return any(v == WILDCARD for elem in self.path_elems() for v in elem.keys.values())

    def __str__(self) -> str:
        return "/" + "/".join(str(elem) for elem in self.path_elems())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class RootPath(NodePath):
    """Path struct of the fakeroot, the root of every other path."""

    def __init__(self) -> None:
        super().__init__([])


def _key_string(value: Any) -> str:
    """String form of a key value; enums are named by their schema value."""
    yang_name = getattr(value, "yang_name", None)
    if isinstance(yang_name, str):
        return yang_name
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
