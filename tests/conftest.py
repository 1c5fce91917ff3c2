"""Shared fixtures for mask codec tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_masks import MaskCodecSettings, MaskDecoder, MaskEncoder


@pytest.fixture
def decoder() -> MaskDecoder:
    """Decoder with default (permissive) settings."""
    return MaskDecoder()


@pytest.fixture
def strict_decoder() -> MaskDecoder:
    """Decoder that rejects redundant separators."""
    return MaskDecoder(MaskCodecSettings(strict_separators=True))


@pytest.fixture
def encoder() -> MaskEncoder:
    return MaskEncoder()
