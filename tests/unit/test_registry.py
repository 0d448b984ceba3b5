from __future__ import annotations

import pytest

from bookfold.imposition.core import LayoutVariant, Orientation
from bookfold.imposition.registry import (
    ALL_VARIANTS,
    available_variants,
    resolve_variant,
    variant_for_id,
    variant_for_label,
)

pytestmark = pytest.mark.unit


def test_variant_ids_and_labels_are_unique() -> None:
    assert len({variant.spec.id for variant in ALL_VARIANTS}) == len(ALL_VARIANTS)
    assert len({variant.spec.label for variant in ALL_VARIANTS}) == len(ALL_VARIANTS)


def test_lookup_by_id_and_label() -> None:
    assert variant_for_id("sideFoldBooklet") is LayoutVariant.SIDE_FOLD_2UP
    assert variant_for_label("Cut and Stack") is LayoutVariant.CUT_LANDSCAPE


@pytest.mark.parametrize("value", ["calendar", "Calendar", " CALENDAR "])
def test_resolve_variant_is_case_insensitive(value: str) -> None:
    assert resolve_variant(value) is LayoutVariant.CALENDAR


def test_resolve_variant_accepts_enum_names() -> None:
    assert resolve_variant("folded_8up_8page") is LayoutVariant.FOLDED_8UP_8PAGE


def test_unknown_variant_lists_valid_ids() -> None:
    with pytest.raises(ValueError, match="unsupported layout 'zine', expected one of: original, sideFoldBooklet"):
        resolve_variant("zine")


@pytest.mark.parametrize(
    ("orientation", "expected"),
    [
        (
            Orientation.PORTRAIT,
            [
                LayoutVariant.NULL,
                LayoutVariant.SIDE_FOLD_2UP,
                LayoutVariant.SIDE_FOLD_4UP,
                LayoutVariant.SIDE_FOLD_4UP_SINGLE,
                LayoutVariant.FOLDED_8UP_8PAGE,
            ],
        ),
        (
            Orientation.LANDSCAPE,
            [
                LayoutVariant.NULL,
                LayoutVariant.SIDE_FOLD_4UP_SINGLE,
                LayoutVariant.CUT_LANDSCAPE,
                LayoutVariant.CALENDAR,
            ],
        ),
        (Orientation.SQUARE, [LayoutVariant.NULL, LayoutVariant.SQUARE_6UP]),
    ],
)
def test_available_variants_follow_input_orientation(
    orientation: Orientation, expected: list[LayoutVariant]
) -> None:
    assert available_variants(orientation) == expected
