from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from bookfold.imposition.errors import InternalLayoutError, InvalidInputError

VacantToken: TypeAlias = str
PageAssignment: TypeAlias = int | VacantToken

VACANT: VacantToken = "__VACANT__"


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    SQUARE = "square"

    @classmethod
    def of(cls, width: float, height: float) -> Orientation:
        if height > width:
            return cls.PORTRAIT
        if width > height:
            return cls.LANDSCAPE
        return cls.SQUARE


class Side(Enum):
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True, order=True)
class Quadrant:
    row: int
    column: int


TOP_LEFT = Quadrant(row=0, column=0)
TOP_RIGHT = Quadrant(row=0, column=1)
BOTTOM_LEFT = Quadrant(row=1, column=0)
BOTTOM_RIGHT = Quadrant(row=1, column=1)


@dataclass(frozen=True)
class VariantSpec:
    id: str
    label: str
    signature: int
    columns: int
    rows: int
    orientations: frozenset[Orientation]
    sides: tuple[Side, ...] = (Side.FRONT, Side.BACK)
    # Each logical slot is repeated down every row (several identical booklets per run).
    copies: int = 1
    upside_down_rows: frozenset[int] = frozenset()
    paper_matches_input: bool = False

    def quadrants(self) -> tuple[Quadrant, ...]:
        rows = 1 if self.copies > 1 else self.rows
        return tuple(Quadrant(row=row, column=column) for row in range(rows) for column in range(self.columns))

    def enabled_for(self, orientation: Orientation) -> bool:
        return orientation in self.orientations


_ANY_ORIENTATION = frozenset(Orientation)


class LayoutVariant(Enum):
    NULL = VariantSpec(
        id="original",
        label="Original",
        signature=1,
        columns=1,
        rows=1,
        orientations=_ANY_ORIENTATION,
        sides=(Side.FRONT,),
    )
    SIDE_FOLD_2UP = VariantSpec(
        id="sideFoldBooklet",
        label="Fold Booklet",
        signature=4,
        columns=2,
        rows=1,
        orientations=frozenset({Orientation.PORTRAIT}),
    )
    SIDE_FOLD_4UP = VariantSpec(
        id="sideFold4UpBooklet",
        label="Fold/Cut 4Up Booklet",
        signature=4,
        columns=2,
        rows=2,
        orientations=frozenset({Orientation.PORTRAIT}),
        copies=2,
        paper_matches_input=True,
    )
    SIDE_FOLD_4UP_SINGLE = VariantSpec(
        id="sideFoldCut4UpSingleBooklet",
        label="Fold/Cut Single 4Up Booklet",
        signature=8,
        columns=2,
        rows=2,
        orientations=frozenset({Orientation.PORTRAIT, Orientation.LANDSCAPE}),
        paper_matches_input=True,
    )
    FOLDED_8UP_8PAGE = VariantSpec(
        id="folded8Up8PageBooklet",
        label="Fold 8Up Booklet",
        signature=16,
        columns=4,
        rows=2,
        orientations=frozenset({Orientation.PORTRAIT}),
        upside_down_rows=frozenset({0}),
    )
    SQUARE_6UP = VariantSpec(
        id="square6UpBooklet",
        label="Fold/Cut 6Up Square Booklet",
        signature=12,
        columns=2,
        rows=3,
        orientations=frozenset({Orientation.SQUARE}),
    )
    CUT_LANDSCAPE = VariantSpec(
        id="cutBooklet",
        label="Cut and Stack",
        signature=4,
        columns=1,
        rows=2,
        orientations=frozenset({Orientation.LANDSCAPE}),
    )
    CALENDAR = VariantSpec(
        id="calendar",
        label="Calendar",
        signature=4,
        columns=1,
        rows=2,
        orientations=frozenset({Orientation.LANDSCAPE}),
    )

    @property
    def spec(self) -> VariantSpec:
        return self.value

    @property
    def signature(self) -> int:
        return self.value.signature

    def enabled_for(self, orientation: Orientation) -> bool:
        return self.value.enabled_for(orientation)


@dataclass(frozen=True)
class LayoutPlan:
    variant: LayoutVariant
    total_pages: int
    sheet_count: int
    slot_count: int
    vacancy_count: int

    @property
    def skip_last_row(self) -> bool:
        # At least half a sheet's worth of vacancies: leave whole rows blank.
        return self.vacancy_count * 2 >= self.variant.signature


def plan_layout(total_pages: int, variant: LayoutVariant) -> LayoutPlan:
    if total_pages < 1:
        raise InvalidInputError("document has no pages to impose")

    signature = variant.signature
    sheet_count = -(-total_pages // signature)
    slot_count = signature * sheet_count
    vacancy_count = slot_count - total_pages
    if not 0 <= vacancy_count < signature:
        raise InternalLayoutError(
            f"vacancy count {vacancy_count} outside [0, {signature}) for {total_pages} pages on '{variant.spec.id}'"
        )

    return LayoutPlan(
        variant=variant,
        total_pages=total_pages,
        sheet_count=sheet_count,
        slot_count=slot_count,
        vacancy_count=vacancy_count,
    )


def _overflow(plan: LayoutPlan, page: int) -> PageAssignment:
    return VACANT if page > plan.total_pages else page


def _leaf_pair(slot_count: int, leaf: int, side: Side) -> tuple[int, int]:
    # (superior, inferior) for leaf `leaf` of a nested 2-up booklet.
    if side is Side.FRONT:
        return slot_count - 2 * leaf + 2, 2 * leaf - 1
    return 2 * leaf, slot_count - 2 * leaf + 1


def _map_null(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    return sheet_index


def _map_side_fold(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    superior, inferior = _leaf_pair(plan.slot_count, sheet_index, side)
    return _overflow(plan, superior if quadrant.column == 0 else inferior)


def _map_square_6up(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    rows = plan.variant.spec.rows
    leaf = rows * (sheet_index - 1) + quadrant.row + 1
    superior, inferior = _leaf_pair(plan.slot_count, leaf, side)
    return _overflow(plan, superior if quadrant.column == 0 else inferior)


def _map_calendar(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    upper, lower = _leaf_pair(plan.slot_count, sheet_index, side)
    return _overflow(plan, upper if quadrant.row == 0 else lower)


def _map_cut_landscape(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    # Top halves form the first stack, bottom halves the second.
    stack_offset = 0 if quadrant.row == 0 else 2 * plan.sheet_count
    page = stack_offset + 2 * sheet_index - (1 if side is Side.FRONT else 0)
    return _overflow(plan, page)


_OCTAVO_FRONT: tuple[tuple[int, ...], ...] = ((5, 12, 9, 8), (4, 13, 16, 1))
_OCTAVO_BACK: tuple[tuple[int, ...], ...] = ((7, 10, 11, 6), (2, 15, 14, 3))


def _map_folded_8up(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    table = _OCTAVO_FRONT if side is Side.FRONT else _OCTAVO_BACK
    page = plan.variant.signature * (sheet_index - 1) + table[quadrant.row][quadrant.column]
    return _overflow(plan, page)


def _map_side_fold_4up_single(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    total = plan.total_pages
    skip_last_row = plan.skip_last_row
    on_first = sheet_index == 1
    on_last = sheet_index == plan.sheet_count

    top_left_front = plan.slot_count - 4 * (sheet_index - 1)
    if skip_last_row:
        top_left_front -= 4
    bottom_left_front = top_left_front - 2
    top_right_front = 4 * sheet_index - 3
    bottom_right_front = top_right_front + 2

    if side is Side.FRONT:
        pages = {
            TOP_LEFT: top_left_front,
            BOTTOM_LEFT: bottom_left_front,
            TOP_RIGHT: top_right_front,
            BOTTOM_RIGHT: bottom_right_front,
        }
    else:
        pages = {
            TOP_LEFT: top_right_front + 1,
            BOTTOM_LEFT: bottom_right_front + 1,
            TOP_RIGHT: top_left_front - 1,
            BOTTOM_RIGHT: bottom_left_front - 1,
        }
    page = pages[quadrant]

    if quadrant.row == 1 and on_last and skip_last_row:
        return VACANT
    if side is Side.FRONT and quadrant == TOP_RIGHT:
        return page
    if on_first and page > total:
        return VACANT
    return page


def resolve_slot(plan: LayoutPlan, sheet_index: int, side: Side, quadrant: Quadrant) -> PageAssignment:
    variant = plan.variant
    if quadrant not in variant.spec.quadrants():
        raise InternalLayoutError(f"'{variant.spec.id}' has no slot at {quadrant}")
    if variant is LayoutVariant.NULL:
        return _map_null(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.SIDE_FOLD_2UP or variant is LayoutVariant.SIDE_FOLD_4UP:
        return _map_side_fold(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.SIDE_FOLD_4UP_SINGLE:
        return _map_side_fold_4up_single(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.FOLDED_8UP_8PAGE:
        return _map_folded_8up(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.SQUARE_6UP:
        return _map_square_6up(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.CUT_LANDSCAPE:
        return _map_cut_landscape(plan, sheet_index, side, quadrant)
    if variant is LayoutVariant.CALENDAR:
        return _map_calendar(plan, sheet_index, side, quadrant)

    raise InternalLayoutError(f"no slot mapper for layout variant {variant!r}")
