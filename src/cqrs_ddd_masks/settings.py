"""MaskCodecSettings - decoder limits and parsing policies."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .tree import RANGE_MAX


class MaskCodecSettings(BaseModel):
    """Immutable configuration shared by the decoder and the projection parser.

    Attributes:
        strict_separators: Reject redundant separators (``"a,,b"``, a
            trailing ``","`` or a lone ``"-"``) instead of skipping the
            empty field name.
        max_length: Reject inputs longer than this many characters.
        max_depth: Reject masks nested deeper than this many groups.
        max_range_value: Largest accepted ``start`` / ``count`` bound.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strict_separators: bool = False
    max_length: int | None = Field(default=None, ge=0)
    max_depth: int | None = Field(default=None, ge=0)
    max_range_value: int = Field(default=RANGE_MAX, ge=0, le=RANGE_MAX)
