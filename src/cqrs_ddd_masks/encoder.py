"""MaskEncoder - mask tree -> compact textual form."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .tree import RANGE_KEYS, MaskOperation, MaskTree, Range

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("cqrs_ddd.masks")


class MaskEncoder:
    """
    Serialise a mask tree depth-first.

    The root is emitted bare; every nested node is wrapped in ``:(`` … ``)``.
    The output is not URL-encoded; callers percent-encode it before
    placing it in a request URI.
    """

    def encode(self, mask: MaskTree | Mapping[str, Any]) -> str:
        """Return the textual form of *mask*.

        Plain dicts in the simplified form are accepted and converted via
        :meth:`MaskTree.from_dict`.
        """
        tree = mask if isinstance(mask, MaskTree) else MaskTree.from_dict(mask)
        encoded = self._encode_node(tree, parenthesize=False)
        logger.debug("Encoded mask with %d top-level field(s)", len(tree))
        return encoded

    def _encode_node(self, node: MaskTree, *, parenthesize: bool) -> str:
        parts: list[str] = []
        for key, value in node.items():
            if isinstance(value, Range):
                assert key in RANGE_KEYS, f"Range value under non-range key {key!r}"
                parts.append(f"{key}:{value.value}")
            elif isinstance(value, MaskTree):
                parts.append(key + self._encode_node(value, parenthesize=True))
            elif value is MaskOperation.NEGATIVE:
                parts.append(f"-{key}")
            else:
                parts.append(key)
        body = ",".join(parts)
        return f":({body})" if parenthesize else body


def encode_mask(mask: MaskTree | Mapping[str, Any]) -> str:
    """Serialise *mask* to its compact textual form."""
    return MaskEncoder().encode(mask)
