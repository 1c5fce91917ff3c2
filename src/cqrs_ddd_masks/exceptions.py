"""
Mask codec exception hierarchy.

All exceptions inherit from ``MaskError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from typing import Any

_FRAGMENT_LIMIT = 32


class MaskError(Exception):
    """Base exception for all mask codec errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class MalformedMaskError(MaskError):
    """
    The textual mask does not follow the mask grammar.

    Carries the failure ``reason``, the cursor ``position`` and the
    unconsumed input ``fragment`` at that point.

    Example error message::

        Malformed mask syntax: expected '(' token at position 1: ':5,b'
    """

    def __init__(self, reason: str, *, position: int = 0, fragment: str = "") -> None:
        self.reason = reason
        self.position = position
        if len(fragment) > _FRAGMENT_LIMIT:
            fragment = fragment[:_FRAGMENT_LIMIT] + "..."
        self.fragment = fragment
        super().__init__(
            f"Malformed mask syntax: {reason} at position {position}: {fragment!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_MASK",
            "message": str(self),
            "reason": self.reason,
            "position": self.position,
            "fragment": self.fragment,
        }


class InternalInconsistencyError(MaskError):
    """The parser automaton reached a state that should be unreachable.

    Indicates a defect in the decoder, not bad input.
    """
