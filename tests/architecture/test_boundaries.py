from pytest_archon import archrule


def test_tree_independence() -> None:
    """
    The tree and exception modules are the foundation.
    They must not import the codec, the builder or the query-param adapter.
    """
    (
        archrule("tree_is_independent")
        .match("cqrs_ddd_masks.tree")
        .match("cqrs_ddd_masks.exceptions")
        .should_not_import("cqrs_ddd_masks.encoder")
        .should_not_import("cqrs_ddd_masks.decoder")
        .should_not_import("cqrs_ddd_masks.builder")
        .should_not_import("cqrs_ddd_masks.projection")
        .check("cqrs_ddd_masks")
    )


def test_codec_halves_are_independent() -> None:
    """
    Encoder and decoder share only the tree; neither imports the other.
    """
    (
        archrule("encoder_independence")
        .match("cqrs_ddd_masks.encoder")
        .should_not_import("cqrs_ddd_masks.decoder")
        .should_not_import("cqrs_ddd_masks.settings")
        .check("cqrs_ddd_masks")
    )
    (
        archrule("decoder_independence")
        .match("cqrs_ddd_masks.decoder")
        .should_not_import("cqrs_ddd_masks.encoder")
        .check("cqrs_ddd_masks")
    )


def test_no_url_handling() -> None:
    """
    Percent-encoding belongs to the HTTP layer, never to the mask codec.
    """
    (
        archrule("no_url_handling")
        .match("cqrs_ddd_masks*")
        .should_not_import("urllib*")
        .check("cqrs_ddd_masks")
    )
