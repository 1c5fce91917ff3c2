"""
Mask tree - ordered, immutable projection tree.

A mask maps field names to one of:

- :attr:`MaskOperation.POSITIVE` - include the field,
- :attr:`MaskOperation.NEGATIVE` - exclude the field,
- :class:`Range` - a pagination bound (only under ``start`` / ``count``),
- a nested :class:`MaskTree` restricting the field's own fields.

Example::

    MaskTree({
        "id": MaskOperation.POSITIVE,
        "secret": MaskOperation.NEGATIVE,
        "friends": MaskTree({"start": Range(0), "count": Range(10)}),
    })
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

START = "start"
COUNT = "count"
RANGE_KEYS: frozenset[str] = frozenset({START, COUNT})
RANGE_MAX = 2**31 - 1

# Characters with a meaning in the textual form
RESERVED_CHARS: frozenset[str] = frozenset(",:()-")


class MaskOperation(Enum):
    """Polarity of a mask entry.

    Values are the integer representations used by the simplified
    plain-dict form (see :meth:`MaskTree.to_dict`).
    """

    POSITIVE = 1
    NEGATIVE = 0

    @property
    def representation(self) -> int:
        return int(self.value)


@dataclass(frozen=True)
class Range:
    """Pagination bound stored under ``start`` or ``count``."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Range value must be an int, got {self.value!r}")
        if not 0 <= self.value <= RANGE_MAX:
            raise ValueError(
                f"Range value must be between 0 and {RANGE_MAX}, got {self.value}"
            )

    def __int__(self) -> int:
        return self.value


MaskValue = Union[MaskOperation, Range, "MaskTree"]


def validate_field_name(name: Any) -> str:
    """Return *name* if it is usable as a mask key, raise otherwise."""
    if not isinstance(name, str):
        raise TypeError(f"Mask field name must be a str, got {type(name).__name__}")
    if not name or name != name.strip():
        raise ValueError(f"Invalid mask field name: {name!r}")
    bad = sorted(RESERVED_CHARS.intersection(name))
    if bad:
        raise ValueError(
            f"Mask field name {name!r} contains reserved character(s): {''.join(bad)}"
        )
    return name


def _validate_entry(key: str, value: Any) -> None:
    validate_field_name(key)
    if isinstance(value, Range):
        if key not in RANGE_KEYS:
            raise ValueError(
                f"Range value is only allowed under {START!r} or {COUNT!r}, "
                f"not under {key!r}"
            )
        return
    if isinstance(value, MaskTree) and key in RANGE_KEYS:
        raise ValueError(f"{key!r} holds a range bound and cannot hold a nested mask")
    if not isinstance(value, MaskOperation | MaskTree):
        raise TypeError(
            f"Invalid mask value for {key!r}: {value!r} "
            f"(expected MaskOperation, Range or MaskTree)"
        )


class MaskTree(Mapping[str, MaskValue]):
    """
    Immutable, insertion-ordered mapping of field name to mask value.

    Equality is structural and order-sensitive: two masks are equal when
    they hold the same keys in the same order with equal values at every
    depth.
    """

    __slots__ = ("_data", "_hash")

    def __init__(
        self,
        entries: Mapping[str, MaskValue] | Iterable[tuple[str, MaskValue]] | None = None,
    ) -> None:
        self._data: dict[str, MaskValue] = {}
        self._hash: int | None = None
        if entries is None:
            return
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, value in items:
            _validate_entry(key, value)
            self._data[key] = value

    # -- assembly ------------------------------------------------------------

    def _put(self, key: str, value: MaskValue) -> None:
        """Bind *key* while the tree is still being assembled.

        Only the decoder and :class:`~cqrs_ddd_masks.builder.MaskBuilder`
        call this, before the tree is handed out.
        """
        self._data[key] = value
        self._hash = None

    # -- Mapping -------------------------------------------------------------

    def __getitem__(self, key: str) -> MaskValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return list(self._data.items()) == list(other.items())

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(self._data.items()))
        return self._hash

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"MaskTree({{{inner}}})"

    # -- helpers -------------------------------------------------------------

    @property
    def depth(self) -> int:
        """Number of nested levels below this node."""
        nested = [v.depth for v in self._data.values() if isinstance(v, MaskTree)]
        return 1 + max(nested) if nested else 0

    @property
    def start(self) -> int | None:
        value = self._data.get(START)
        return value.value if isinstance(value, Range) else None

    @property
    def count(self) -> int | None:
        value = self._data.get(COUNT)
        return value.value if isinstance(value, Range) else None

    # -- simplified form -----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the simplified plain-dict form.

        Polarity becomes ``1`` / ``0``, range bounds plain ints, nested
        masks nested dicts.
        """
        result: dict[str, Any] = {}
        for key, value in self._data.items():
            if isinstance(value, MaskTree):
                result[key] = value.to_dict()
            elif isinstance(value, Range):
                result[key] = value.value
            else:
                result[key] = value.representation
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MaskTree:
        """
        Build a mask from the simplified plain-dict form.

        Under ``start`` / ``count`` a plain int is always read as a range
        bound; elsewhere ``1`` / ``0`` are read as positive / negative.
        Already-typed values (``MaskOperation``, ``Range``, ``MaskTree``)
        pass through unchanged.
        """
        if isinstance(data, MaskTree):
            return data
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping, got {type(data).__name__}")
        entries: list[tuple[str, MaskValue]] = []
        for key, raw in data.items():
            entries.append((key, _coerce_value(key, raw)))
        return cls(entries)


def _coerce_value(key: str, raw: Any) -> MaskValue:
    if isinstance(raw, MaskOperation | Range | MaskTree):
        return raw
    if isinstance(raw, Mapping):
        return MaskTree.from_dict(raw)
    if isinstance(raw, int) and not isinstance(raw, bool):
        if key in RANGE_KEYS:
            return Range(raw)
        try:
            return MaskOperation(raw)
        except ValueError:
            raise ValueError(
                f"Invalid mask value for {key!r}: {raw!r} "
                f"(expected {MaskOperation.POSITIVE.value} or "
                f"{MaskOperation.NEGATIVE.value})"
            ) from None
    raise TypeError(f"Invalid mask value for {key!r}: {raw!r}")
