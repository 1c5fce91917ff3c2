"""Projection masks - field mask tree and its compact query-string codec."""

from __future__ import annotations

from .builder import MaskBuilder
from .decoder import MaskDecoder, ParseState, decode_mask
from .encoder import MaskEncoder, encode_mask
from .exceptions import InternalInconsistencyError, MalformedMaskError, MaskError
from .projection import ProjectionParser
from .settings import MaskCodecSettings
from .tree import COUNT, RANGE_MAX, START, MaskOperation, MaskTree, Range

__all__ = [
    # Tree
    "COUNT",
    "RANGE_MAX",
    "START",
    "MaskOperation",
    "MaskTree",
    "Range",
    # Codec
    "MaskDecoder",
    "MaskEncoder",
    "ParseState",
    "decode_mask",
    "encode_mask",
    # Configuration
    "MaskCodecSettings",
    # Builder / query params
    "MaskBuilder",
    "ProjectionParser",
    # Exceptions
    "InternalInconsistencyError",
    "MalformedMaskError",
    "MaskError",
]
