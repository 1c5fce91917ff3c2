"""
Fluent builder for constructing mask trees.

Example::

    mask = (
        MaskBuilder()
        .include("id")
        .exclude("secret")
        .nested("friends")
            .paginate(start=0, count=10)
            .include("name")
        .end()
        .build()
    )
    # → id,-secret,friends:(start:0,count:10,name)

    mask = MaskBuilder().include("author", "profile", "name").build()
    # → author:(profile:(name))
"""

from __future__ import annotations

from .tree import (
    COUNT,
    RANGE_KEYS,
    START,
    MaskOperation,
    MaskTree,
    MaskValue,
    Range,
    validate_field_name,
)


class MaskBuilder:
    """
    Fluent builder for composing mask trees.

    Fields are added to the current group, which is the root until
    ``nested()`` opens a group; ``end()`` closes it again. Multi-segment
    paths (``include("a", "b")``) create or reuse the intermediate groups.
    """

    def __init__(self) -> None:
        self._root = MaskTree()
        self._stack: list[MaskTree] = [self._root]

    # -- leaf entries --------------------------------------------------------

    def include(self, *path: str) -> MaskBuilder:
        """Mark the field at *path* as included."""
        self._set(path, MaskOperation.POSITIVE)
        return self

    def exclude(self, *path: str) -> MaskBuilder:
        """Mark the field at *path* as excluded."""
        self._set(path, MaskOperation.NEGATIVE)
        return self

    def paginate(self, start: int | None = None, count: int | None = None) -> MaskBuilder:
        """Set ``start`` / ``count`` bounds on the current group."""
        if start is None and count is None:
            raise ValueError("paginate() needs start, count or both")
        node = self._stack[-1]
        if start is not None:
            node._put(START, Range(start))
        if count is not None:
            node._put(COUNT, Range(count))
        return self

    # -- grouping ------------------------------------------------------------

    def nested(self, name: str) -> MaskBuilder:
        """Open the group for *name*.  Close with ``end()``."""
        self._stack.append(self._group(self._stack[-1], name))
        return self

    def end(self) -> MaskBuilder:
        """Close the current group."""
        if len(self._stack) == 1:
            raise ValueError("No open group to close")
        self._stack.pop()
        return self

    # -- build ---------------------------------------------------------------

    def build(self) -> MaskTree:
        """
        Finalise and return the mask.

        The builder is reset afterwards so the returned tree is never
        modified again.

        Raises:
            ValueError: If groups are still open.
        """
        if len(self._stack) > 1:
            raise ValueError(
                f"{len(self._stack) - 1} group(s) still open, call end() before build()"
            )
        mask = self._root
        self.reset()
        return mask

    def reset(self) -> MaskBuilder:
        """Discard everything added so far and return ``self`` for reuse."""
        self._root = MaskTree()
        self._stack = [self._root]
        return self

    # -- internals -----------------------------------------------------------

    def _set(self, path: tuple[str, ...], value: MaskValue) -> None:
        if not path:
            raise ValueError("A field path needs at least one segment")
        node = self._stack[-1]
        for segment in path[:-1]:
            node = self._group(node, segment)
        node._put(validate_field_name(path[-1]), value)

    @staticmethod
    def _group(node: MaskTree, name: str) -> MaskTree:
        """Return the nested group bound to *name*, creating it if missing."""
        validate_field_name(name)
        if name in RANGE_KEYS:
            raise ValueError(f"{name!r} holds a range bound and cannot be a group")
        existing = node.get(name)
        if isinstance(existing, MaskTree):
            return existing
        if existing is not None:
            raise ValueError(f"Field {name!r} is already set to {existing!r}")
        child = MaskTree()
        node._put(name, child)
        return child
