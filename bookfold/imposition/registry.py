from __future__ import annotations

from typing import Final

from bookfold.imposition.core import LayoutVariant, Orientation

ALL_VARIANTS: Final[tuple[LayoutVariant, ...]] = tuple(LayoutVariant)


def _unsupported(value: str) -> ValueError:
    valid = ", ".join(variant.spec.id for variant in ALL_VARIANTS)
    return ValueError(f"unsupported layout '{value}', expected one of: {valid}")


def variant_for_id(variant_id: str) -> LayoutVariant:
    for variant in ALL_VARIANTS:
        if variant.spec.id == variant_id:
            return variant
    raise _unsupported(variant_id)


def variant_for_label(label: str) -> LayoutVariant:
    for variant in ALL_VARIANTS:
        if variant.spec.label == label:
            return variant
    raise _unsupported(label)


def resolve_variant(value: str) -> LayoutVariant:
    normalized = value.strip().lower()
    for variant in ALL_VARIANTS:
        if normalized in (variant.spec.id.lower(), variant.spec.label.lower(), variant.name.lower()):
            return variant
    raise _unsupported(value)


def available_variants(orientation: Orientation) -> list[LayoutVariant]:
    return [variant for variant in ALL_VARIANTS if variant.enabled_for(orientation)]
