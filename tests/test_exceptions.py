"""Tests for exceptions module."""

from __future__ import annotations

from cqrs_ddd_masks.exceptions import (
    InternalInconsistencyError,
    MalformedMaskError,
    MaskError,
)


def test_hierarchy():
    assert issubclass(MalformedMaskError, MaskError)
    assert issubclass(InternalInconsistencyError, MaskError)


def test_malformed_message():
    err = MalformedMaskError("expected '(' token", position=1, fragment=":5")
    assert str(err) == "Malformed mask syntax: expected '(' token at position 1: ':5'"
    assert err.reason == "expected '(' token"


def test_malformed_fragment_is_truncated():
    err = MalformedMaskError("unexpected range value", position=6, fragment="9" * 100)
    assert err.fragment == "9" * 32 + "..."
    assert len(str(err)) < 120


def test_malformed_to_dict():
    d = MalformedMaskError("unexpected ')' token", position=3, fragment="),a").to_dict()
    assert d["error"] == "MALFORMED_MASK"
    assert d["position"] == 3
    assert d["fragment"] == "),a"
    assert d["reason"] == "unexpected ')' token"


def test_base_to_dict():
    d = InternalInconsistencyError("bad state").to_dict()
    assert d == {"error": "InternalInconsistencyError", "message": "bad state"}
