"""ProjectionParser - mask query parameter <-> MaskTree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .decoder import MaskDecoder
from .encoder import MaskEncoder

if TYPE_CHECKING:
    from .settings import MaskCodecSettings
    from .tree import MaskTree

logger = logging.getLogger("cqrs_ddd.masks")


class ProjectionParser:
    """Read and write the projection mask carried in API query params.

    Values are expected already percent-decoded on the way in and are
    returned un-encoded on the way out; URL handling stays with the
    HTTP layer.
    """

    def __init__(self, settings: MaskCodecSettings | None = None) -> None:
        self._decoder = MaskDecoder(settings)
        self._encoder = MaskEncoder()

    def parse(
        self,
        query_params: dict[str, Any],
        *,
        fields_key: str = "fields",
    ) -> MaskTree | None:
        """
        Return the mask found under *fields_key*, or ``None`` if absent.

        A list value (repeated query parameter) is joined with ``,``.

        Raises:
            MalformedMaskError: If the parameter is not a valid mask.
        """
        raw = query_params.get(fields_key)
        if not raw:
            return None
        if isinstance(raw, list):
            raw = ",".join(str(part) for part in raw if part)
        elif not isinstance(raw, str):
            logger.debug(
                "Ignoring %r query param of type %s", fields_key, type(raw).__name__
            )
            return None
        return self._decoder.decode(raw)

    def to_query_params(
        self,
        mask: MaskTree,
        *,
        fields_key: str = "fields",
    ) -> dict[str, str]:
        """Return ``{fields_key: <mask text>}``, or ``{}`` for an empty mask."""
        encoded = self._encoder.encode(mask)
        return {fields_key: encoded} if encoded else {}
