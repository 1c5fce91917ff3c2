"""
MaskDecoder - compact textual form -> mask tree.

Grammar::

    mask          := fieldList
    fieldList     := field ("," field)*
    field         := "-"? name (":" rangeOrNested)?
    rangeOrNested := digit+ | "(" fieldList ")"

``start`` / ``count`` take ``digit+`` after ``:``; every other name takes a
parenthesised group.

The parser is a finite-state automaton (:class:`ParseState`) over a cursor
into the input, with an explicit stack of open nodes instead of recursion.
The top of the stack is the node currently being populated; each nested
node is bound into its parent before it is pushed, so the root is the only
reference left once parsing completes.
"""

from __future__ import annotations

import logging
from enum import Enum

from .exceptions import InternalInconsistencyError, MalformedMaskError
from .settings import MaskCodecSettings
from .tree import RANGE_KEYS, MaskOperation, MaskTree, Range

logger = logging.getLogger("cqrs_ddd.masks")

_DIGITS: frozenset[str] = frozenset("0123456789")
_NAME_TERMINATORS: frozenset[str] = frozenset(",:)")
_NAME_FORBIDDEN: frozenset[str] = frozenset("(-")


class ParseState(Enum):
    """States of the decoding automaton."""

    PARSE_FIELDS = "parse_fields"
    TRAVERSE = "traverse"
    DESCEND = "descend"
    ASCEND = "ascend"


class _Cursor:
    """Read position into the input; everything before ``pos`` is consumed."""

    __slots__ = ("pos", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str | None:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else None

    def startswith(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def advance(self, count: int = 1) -> None:
        self.pos += count

    def skip_space(self) -> None:
        while not self.at_end and self.text[self.pos].isspace():
            self.pos += 1

    def malformed(self, reason: str, position: int | None = None) -> MalformedMaskError:
        at = self.pos if position is None else position
        return MalformedMaskError(reason, position=at, fragment=self.text[at:])

    def inconsistent(self, state: ParseState) -> InternalInconsistencyError:
        return InternalInconsistencyError(
            f"Internal error parsing mask: unexpected parse buffer "
            f"{self.text[self.pos :]!r} while in state {state.name}"
        )


class MaskDecoder:
    """Parse the textual mask form into a :class:`MaskTree`.

    The input must already be URL-decoded. Decoders hold no per-call
    state and may be shared between threads.
    """

    def __init__(self, settings: MaskCodecSettings | None = None) -> None:
        self._settings = settings if settings is not None else MaskCodecSettings()

    @property
    def settings(self) -> MaskCodecSettings:
        return self._settings

    def decode(self, text: str) -> MaskTree:
        """
        Return the mask tree described by *text*.

        Raises:
            MalformedMaskError: If *text* does not follow the mask grammar
                or exceeds a configured limit.
            TypeError: If *text* is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"Mask must be a str, got {type(text).__name__}")
        limit = self._settings.max_length
        if limit is not None and len(text) > limit:
            raise MalformedMaskError(
                f"input longer than {limit} character(s)",
                position=limit,
                fragment=text[limit:],
            )
        if not text.strip():
            return MaskTree()

        cursor = _Cursor(text)
        root = MaskTree()
        stack: list[MaskTree] = [root]
        # (position of ':(', key) for every group still open
        opened: list[tuple[int, str]] = []
        state = ParseState.PARSE_FIELDS
        previous: ParseState | None = None
        pending_key: str | None = None

        while not cursor.at_end:
            if state is ParseState.PARSE_FIELDS:
                next_state, pending_key = self._parse_fields(cursor, stack[-1], previous)
            elif state is ParseState.TRAVERSE:
                self._traverse(cursor)
                next_state = ParseState.PARSE_FIELDS
            elif state is ParseState.DESCEND:
                at = cursor.pos
                self._descend(cursor, stack, pending_key)
                opened.append((at, pending_key or ""))
                pending_key = None
                next_state = ParseState.PARSE_FIELDS
            else:
                self._ascend(cursor, stack)
                opened.pop()
                next_state = ParseState.PARSE_FIELDS
            previous, state = state, next_state

        if previous is ParseState.TRAVERSE:
            # input ended on ',': the last field name is empty
            self._skip_empty(cursor, negated=False, previous=previous, token=None)
        if opened:
            at, key = opened[-1]
            raise cursor.malformed(
                f"unmatched nesting, group {key!r} left open "
                f"({len(opened)} unclosed in total)",
                position=at,
            )
        logger.debug(
            "Decoded mask of %d character(s) into %d top-level field(s)",
            len(text),
            len(root),
        )
        return root

    # -- states --------------------------------------------------------------

    def _parse_fields(
        self,
        cursor: _Cursor,
        node: MaskTree,
        previous: ParseState | None,
    ) -> tuple[ParseState, str | None]:
        """Scan one field and commit it, or record it as the key to descend into."""
        cursor.skip_space()
        negated = cursor.peek() == "-"
        value = MaskOperation.NEGATIVE if negated else MaskOperation.POSITIVE
        if negated:
            cursor.advance()

        begin = cursor.pos
        while not cursor.at_end:
            ch = cursor.peek()
            if ch in _NAME_TERMINATORS:
                break
            if ch in _NAME_FORBIDDEN:
                raise cursor.malformed(f"unexpected {ch!r} token in field name")
            cursor.advance()
        name = cursor.text[begin : cursor.pos].strip()
        token = cursor.peek()

        if token == ":":
            if name in RANGE_KEYS:
                # a leading '-' has no meaning for a range bound and is dropped
                cursor.advance()
                node._put(name, self._scan_range(cursor))
                return self._after_range(cursor), None
            if cursor.peek(1) != "(":
                raise cursor.malformed("expected '(' token")
            if not name:
                raise cursor.malformed("empty parent field name")
            return ParseState.DESCEND, name

        if name:
            node._put(name, value)
        else:
            self._skip_empty(cursor, negated=negated, previous=previous, token=token)

        if token == ",":
            return ParseState.TRAVERSE, None
        if token == ")":
            return ParseState.ASCEND, None
        return ParseState.PARSE_FIELDS, None

    def _traverse(self, cursor: _Cursor) -> None:
        if not cursor.startswith(","):
            raise cursor.inconsistent(ParseState.TRAVERSE)
        cursor.advance()

    def _descend(self, cursor: _Cursor, stack: list[MaskTree], key: str | None) -> None:
        if key is None or not cursor.startswith(":("):
            raise cursor.inconsistent(ParseState.DESCEND)
        max_depth = self._settings.max_depth
        if max_depth is not None and len(stack) > max_depth:
            raise cursor.malformed(f"mask nested deeper than {max_depth} level(s)")
        child = MaskTree()
        stack[-1]._put(key, child)
        stack.append(child)
        cursor.advance(2)

    def _ascend(self, cursor: _Cursor, stack: list[MaskTree]) -> None:
        if not cursor.startswith(")"):
            raise cursor.inconsistent(ParseState.ASCEND)
        if len(stack) == 1:
            raise cursor.malformed("unexpected ')' token")
        stack.pop()
        cursor.advance()

    # -- helpers -------------------------------------------------------------

    def _scan_range(self, cursor: _Cursor) -> Range:
        """Consume ``digit+`` up to ``,``, ``)`` or end of input."""
        if cursor.peek() not in _DIGITS:
            raise cursor.malformed("unexpected range value")
        begin = cursor.pos
        while not cursor.at_end:
            ch = cursor.peek()
            if ch == "," or ch == ")":
                break
            if ch not in _DIGITS:
                raise cursor.malformed("unexpected range value")
            cursor.advance()

        digits = cursor.text[begin : cursor.pos].lstrip("0") or "0"
        ceiling = self._settings.max_range_value
        # int() refuses very long digit strings, compare lengths first
        if len(digits) > len(str(ceiling)) or int(digits) > ceiling:
            raise cursor.malformed(
                f"range value exceeds {ceiling}", position=begin
            )
        return Range(int(digits))

    @staticmethod
    def _after_range(cursor: _Cursor) -> ParseState:
        token = cursor.peek()
        if token is None:
            return ParseState.PARSE_FIELDS
        return ParseState.TRAVERSE if token == "," else ParseState.ASCEND

    def _skip_empty(
        self,
        cursor: _Cursor,
        *,
        negated: bool,
        previous: ParseState | None,
        token: str | None,
    ) -> None:
        """Handle an empty field name at a commit point.

        Directly after ``)``, or between ``(`` and ``)``, an empty name is
        part of the structure. Anywhere else it comes from a redundant
        separator, which strict settings reject.
        """
        structural = not negated and (
            previous is ParseState.ASCEND
            or (previous is ParseState.DESCEND and token == ")")
        )
        if structural:
            return
        if self._settings.strict_separators:
            raise cursor.malformed("empty field name")
        logger.debug("Skipping empty field name at position %d", cursor.pos)


def decode_mask(text: str, *, settings: MaskCodecSettings | None = None) -> MaskTree:
    """Parse *text* into a :class:`MaskTree`."""
    return MaskDecoder(settings).decode(text)
