"""Prefix tree with single-substitution lookup.

Keys are walked one character per level. ``find`` returns the values stored
under the exact key plus, unless exact matching is requested, the values under
every key that differs from it in exactly one position other than the first.
"""

from __future__ import annotations

from typing import Dict, Generic, List, TypeVar

ValueType = TypeVar("ValueType")


class _Node(Generic[ValueType]):
    __slots__ = ("children", "values")

    def __init__(self) -> None:
        self.children: Dict[str, _Node[ValueType]] = {}
        self.values: List[ValueType] = []


class Trie(Generic[ValueType]):
    """Map strings to lists of values; repeated inserts accumulate."""

    def __init__(self) -> None:
        self._root: _Node[ValueType] = _Node()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def reset(self) -> None:
        self._root = _Node()
        self._size = 0

    def insert(self, key: str, value: ValueType) -> None:
        node = self._root
        for char in key:
            child = node.children.get(char)
            if child is None:
                child = _Node()
                node.children[char] = child
            node = child
        node.values.append(value)
        self._size += 1

    def find(self, key: str, exact_match_only: bool) -> List[ValueType]:
        """Return values stored within one substitution of ``key``.

        The first character is never allowed to differ. Results come back in
        depth-first order with children visited in insertion order.
        """

        values: List[ValueType] = []
        if not key:
            return values
        first = self._root.children.get(key[0])
        if first is not None:
            self._collect(first, key, 1, exact_match_only, values)
        return values

    def _collect(
        self,
        node: _Node[ValueType],
        key: str,
        depth: int,
        mismatch_spent: bool,
        values: List[ValueType],
    ) -> None:
        if depth == len(key):
            values.extend(node.values)
            return

        char = key[depth]
        for child_id, child in node.children.items():
            if child_id == char:
                self._collect(child, key, depth + 1, mismatch_spent, values)
            elif not mismatch_spent:
                self._collect(child, key, depth + 1, True, values)
