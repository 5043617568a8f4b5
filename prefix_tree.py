"""
Prefix Tree — a trie keyed by sequences of hashable elements.

Techniques used:
  - Node-as-tree: the tree is its own root node, so every subtree is a
    complete ``PrefixTree`` and structural equality is plain ``==``.
  - Shortest-prefix matching: lookups and removals can stop at the first
    node holding a value, leaving the rest of an iterator unconsumed.
  - Path-recorded pruning: removals remember the ``(parent, element)`` pairs
    they walked through and unwind them to drop branches left empty.
  - Iterative traversal: no public method recurses, so long sequences never
    hit the interpreter's recursion limit.

Complexity (n = consumed sequence length, N = number of nodes):
  insert / get_* / replace_* / remove_*   — O(n)
  len / node_count                        — O(N)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable


class _Missing:
    """Marker for a node that holds no value; ``None`` is a valid value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass
class PrefixTree:
    """A prefix tree mapping sequences to arbitrary values.

    >>> t = PrefixTree()
    >>> t.insert("a", 1)
    >>> t.insert("ab", 2)
    >>> t.get_exact_match("ab")
    2
    >>> t.get_by_shortest_prefix("abc")
    1
    >>> rest = iter("abc")
    >>> t.get_by_shortest_prefix(rest)
    1
    >>> "".join(rest)
    'bc'
    >>> t.remove_exact_match("ab")
    2
    >>> t
    PrefixTree(value=MISSING, children={'a': PrefixTree(value=1, children={})})
    """

    value: Any = MISSING
    children: dict[Hashable, PrefixTree] = field(default_factory=dict)

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING

    def is_empty(self) -> bool:
        """Return ``True`` if this node holds no value and has no children."""
        return self.value is MISSING and not self.children

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, sequence: Iterable[Hashable], value: Any) -> Any:
        """Store *value* at *sequence*; return the value it replaced, if any."""
        node = self
        for item in sequence:
            child = node.children.get(item)
            if child is None:
                child = node.children[item] = PrefixTree()
            node = child
        previous, node.value = node.value, value
        return None if previous is MISSING else previous

    def get_exact_match(self, sequence: Iterable[Hashable], default: Any = None) -> Any:
        """Return the value stored at exactly *sequence*, or *default*."""
        node = self._find_exact(sequence)
        if node is None or node.value is MISSING:
            return default
        return node.value

    def get_by_shortest_prefix(
        self, sequence: Iterable[Hashable], default: Any = None
    ) -> Any:
        """Return the value at the shortest prefix of *sequence* holding one.

        Elements are consumed one at a time, so an iterator passed in is left
        positioned just past the matched prefix.
        """
        node = self._find_shortest(iter(sequence))
        if node is None:
            return default
        return node.value

    def replace_exact_match(
        self, sequence: Iterable[Hashable], value: Any, default: Any = None
    ) -> Any:
        """Overwrite an existing value at exactly *sequence*.

        Returns the old value, or *default* without touching the tree when
        nothing is stored there. Never creates nodes, unlike ``insert``.
        """
        node = self._find_exact(sequence)
        if node is None or node.value is MISSING:
            return default
        previous, node.value = node.value, value
        return previous

    def replace_by_shortest_prefix(
        self, sequence: Iterable[Hashable], value: Any, default: Any = None
    ) -> Any:
        """Overwrite the value found by ``get_by_shortest_prefix``."""
        node = self._find_shortest(iter(sequence))
        if node is None:
            return default
        previous, node.value = node.value, value
        return previous

    def remove_exact_match(self, sequence: Iterable[Hashable], default: Any = None) -> Any:
        """Remove and return the value at exactly *sequence*, or *default*.

        Branches left without values or children are pruned. A sequence that
        is not in the tree leaves it untouched.
        """
        path: list[tuple[PrefixTree, Hashable]] = []
        node = self
        for item in sequence:
            child = node.children.get(item)
            if child is None:
                return default
            path.append((node, item))
            node = child
        return self._take(node, path, default)

    def remove_by_shortest_prefix(
        self, sequence: Iterable[Hashable], default: Any = None
    ) -> Any:
        """Remove and return the value at the shortest matching prefix.

        Descent stops at the first node holding a value, so a value on the
        root is removed without consuming anything.
        """
        items = iter(sequence)
        path: list[tuple[PrefixTree, Hashable]] = []
        node = self
        while node.value is MISSING:
            item = next(items, MISSING)
            if item is MISSING:
                return default
            child = node.children.get(item)
            if child is None:
                return default
            path.append((node, item))
            node = child
        return self._take(node, path, default)

    def node_count(self) -> int:
        """Return the number of nodes in the tree, the root included."""
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children.values())
        return count

    def __len__(self) -> int:
        size = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if node.value is not MISSING:
                size += 1
            stack.extend(node.children.values())
        return size

    def __contains__(self, sequence: Iterable[Hashable]) -> bool:
        return self.get_exact_match(sequence, MISSING) is not MISSING

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_exact(self, sequence: Iterable[Hashable]) -> PrefixTree | None:
        """Walk all of *sequence*; return the landing node or None."""
        node = self
        for item in sequence:
            node = node.children.get(item)
            if node is None:
                return None
        return node

    def _find_shortest(self, items) -> PrefixTree | None:
        """Walk *items* until a node with a value is reached."""
        node = self
        while node.value is MISSING:
            item = next(items, MISSING)
            if item is MISSING:
                return None
            node = node.children.get(item)
            if node is None:
                return None
        return node

    @staticmethod
    def _take(node: PrefixTree, path: list[tuple[PrefixTree, Hashable]], default: Any) -> Any:
        value, node.value = node.value, MISSING
        # Drop emptied nodes bottom-up; the root is never on the child side
        # of a path entry, so it always survives.
        while path and node.is_empty():
            parent, item = path.pop()
            del parent.children[item]
            node = parent
        return default if value is MISSING else value


# ------------------------------------------------------------------
# Quick demo
# ------------------------------------------------------------------

if __name__ == "__main__":
    tree = PrefixTree()

    routes = {
        "/api": "gateway",
        "/api/v2": "gateway-v2",
        "/static": "assets",
        "/users/admin": "admin",
    }
    for route, handler in routes.items():
        tree.insert(route.strip("/").split("/"), handler)

    print(f"Entries: {len(tree)}  nodes: {tree.node_count()}")
    print(f"exact ['api', 'v2']              → {tree.get_exact_match(['api', 'v2'])}")
    print(f"shortest ['api', 'v2', 'users']  → {tree.get_by_shortest_prefix(['api', 'v2', 'users'])}")
    print(f"shortest ['users']               → {tree.get_by_shortest_prefix(['users'])}")

    tree.remove_exact_match(["users", "admin"])
    print(f"\nAfter removing ['users', 'admin']:")
    print(f"'users' branch present → {'users' in tree.children}")
    print(f"Entries: {len(tree)}  nodes: {tree.node_count()}")
