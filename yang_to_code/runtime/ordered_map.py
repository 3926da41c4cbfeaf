"""
Insertion-ordered keyed collection for lists that are ordered by the user.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, ClassVar, Generic, TypeVar

from .enums import YangEnum

K = TypeVar("K")
V = TypeVar("V")


def _is_unset(part: Any) -> bool:
    """Whether a key field holds no value. Enumerated keys are unset at 0 (UNSET)."""
    return part is None or (isinstance(part, YangEnum) and part == 0)


class OrderedMap(Generic[K, V]):
    """
    Elements of a user-ordered list, addressable by key.

    Generated code subclasses this once per list and sets ELEMENT_TYPE and
    KEY_FIELDS (and KEY_TYPE for lists with more than one key). The key of an
    element is read from its KEY_FIELDS attributes: a single value for
    single-key lists, a KEY_TYPE tuple otherwise.

    The key order and the key -> value table are always updated together.
    Instances are not safe to share between threads.
    """

    ELEMENT_TYPE: ClassVar[type | None] = None
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ()
    KEY_TYPE: ClassVar[type | None] = None

    def __init__(self) -> None:
        self._keys: list[K] = []
        self._values: dict[K, V] = {}

    def key_of(self, value: V) -> K:
        """
        Compute the key of an element.

        Raises:
            ValueError: If any key field of the element is unset
        """
        parts = []
        for key_field in self.KEY_FIELDS:
            part = getattr(value, key_field, None)
            if _is_unset(part):
                raise ValueError(f"key field {key_field!r} of {type(value).__name__} is not set")
            parts.append(part)
        return self._make_key(parts)

    def _make_key(self, parts: list[Any]) -> K:
        if len(parts) == 1:
            return parts[0]
        if self.KEY_TYPE is not None:
            return self.KEY_TYPE(*parts)
        return tuple(parts)

    def append(self, value: V) -> None:
        """
        Add an element at the end.

        Raises:
            ValueError: If an element with the same key exists or a key field is unset
        """
        key = self.key_of(value)
        if key in self._values:
            raise ValueError(f"duplicate key {key!r}")
        self._keys.append(key)
        self._values[key] = value

    def append_new(self, *keys: Any) -> V:
        """
        Create an element with the given key values and add it at the end.

        Args:
            keys: One value per key field, in key order

        Returns:
            The new element

        Raises:
            ValueError: If the key already exists, a key value is unset or the wrong
                number of keys is given
        """
        if self.ELEMENT_TYPE is None:
            raise TypeError(f"{type(self).__name__} does not define ELEMENT_TYPE")
        if len(keys) != len(self.KEY_FIELDS):
            raise ValueError(f"expected {len(self.KEY_FIELDS)} key values, got {len(keys)}")
        for key_field, part in zip(self.KEY_FIELDS, keys):
            if _is_unset(part):
                raise ValueError(f"key field {key_field!r} is not set")
        key = self._make_key(list(keys))
        if key in self._values:
            raise ValueError(f"duplicate key {key!r}")
        value = self.ELEMENT_TYPE(**dict(zip(self.KEY_FIELDS, keys)))
        self._keys.append(key)
        self._values[key] = value
        return value

    def get(self, key: K) -> V | None:
        """Get the element with a key, or None."""
        return self._values.get(key)

    @staticmethod
    def get_or_none(ordered_map: OrderedMap[K, V] | None, key: K) -> V | None:
        """Like get(), but also accepts a missing map."""
        if ordered_map is None:
            return None
        return ordered_map.get(key)

    def delete(self, key: K) -> bool:
        """
        Remove the element with a key.

        Returns:
            True if an element was removed, False if the key was not found
        """
        if key not in self._values:
            return False
        del self._values[key]
        self._keys.remove(key)
        return True

    def keys(self) -> list[K]:
        return list(self._keys)

    def values(self) -> list[V]:
        return [self._values[key] for key in self._keys]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[V]:
        return iter(self.values())

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values()!r})"
