"""Round-trip and fuzz properties of the mask codec."""

from __future__ import annotations

import random

import pytest

from cqrs_ddd_masks import (
    RANGE_MAX,
    MalformedMaskError,
    MaskOperation,
    MaskTree,
    Range,
    decode_mask,
    encode_mask,
)

POS = MaskOperation.POSITIVE
NEG = MaskOperation.NEGATIVE

_NAMES = ["id", "name", "friends", "items", "a", "b", "first name", "x_1", "start", "count"]
_RANGE_VALUES = [0, 1, 10, 999, RANGE_MAX]

# Terminal alphabet of the grammar plus a few names and digits
_TOKENS = ["a", "b", "start", "count", "0", "7", "42", ",", ":", "(", ")", "-", " "]


def _random_tree(rng: random.Random, depth: int) -> MaskTree:
    entries: list[tuple[str, object]] = []
    for _ in range(rng.randint(0, 4)):
        key = rng.choice(_NAMES)
        roll = rng.random()
        if key in ("start", "count"):
            value: object = Range(rng.choice(_RANGE_VALUES)) if roll < 0.6 else rng.choice(
                [POS, NEG]
            )
        elif depth > 0 and roll < 0.4:
            value = _random_tree(rng, depth - 1)
        else:
            value = rng.choice([POS, NEG])
        entries.append((key, value))
    return MaskTree(entries)  # type: ignore[arg-type]


def _paren_depth(text: str) -> int:
    depth = deepest = 0
    for ch in text:
        if ch == "(":
            depth += 1
            deepest = max(deepest, depth)
        elif ch == ")":
            depth -= 1
    return deepest


# -- fixed examples ---------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    [
        "",
        "id,-secret",
        "items:(start:5,count:15)",
        "a:(b,c:(d))",
        "id,name,-secret,friends:(start:0,count:10,name)",
        "a:()",
        "start,-count",
        "start:3",
    ],
)
def test_canonical_text_reencodes_identically(text):
    assert encode_mask(decode_mask(text)) == text


@pytest.mark.parametrize(
    ("text", "canonical"),
    [
        (" a , b ", "a,b"),
        ("a,,b,", "a,b"),
        ("start:007", "start:7"),
        ("x:( y ,start:01)", "x:(y,start:1)"),
        ("-start:5", "start:5"),
        ("a:(b)c", "a:(b),c"),
    ],
)
def test_non_canonical_text_normalises(text, canonical):
    assert encode_mask(decode_mask(text)) == canonical


# -- properties -------------------------------------------------------------


@pytest.mark.parametrize("seed", range(50))
def test_decode_inverts_encode(seed):
    rng = random.Random(seed)
    for _ in range(20):
        tree = _random_tree(rng, depth=3)
        assert decode_mask(encode_mask(tree)) == tree


@pytest.mark.parametrize("seed", range(50))
def test_decode_encode_decode_is_stable(seed):
    rng = random.Random(seed)
    for _ in range(20):
        text = encode_mask(_random_tree(rng, depth=3))
        first = decode_mask(text)
        assert decode_mask(encode_mask(first)) == first


@pytest.mark.parametrize("seed", range(50))
def test_fuzz_parses_or_raises_malformed(seed):
    rng = random.Random(seed)
    for _ in range(40):
        text = "".join(rng.choice(_TOKENS) for _ in range(rng.randint(0, 14)))
        try:
            tree = decode_mask(text)
        except MalformedMaskError:
            continue
        assert isinstance(tree, MaskTree), text
        assert tree.depth <= _paren_depth(text), text
        assert decode_mask(encode_mask(tree)) == tree, text
