from __future__ import annotations

from collections import Counter

import pytest

from bookfold.imposition import orchestrator
from bookfold.imposition.core import (
    BOTTOM_LEFT,
    BOTTOM_RIGHT,
    TOP_LEFT,
    TOP_RIGHT,
    VACANT,
    LayoutVariant,
    Quadrant,
    Side,
    plan_layout,
    resolve_slot,
)
from bookfold.imposition.errors import InternalLayoutError, InvalidInputError
from bookfold.imposition.orchestrator import impose_plan

pytestmark = pytest.mark.unit


def _side_pages(variant: LayoutVariant, total_pages: int) -> list[tuple[object, ...]]:
    return [side.pages for side in impose_plan(plan_layout(total_pages, variant))]


@pytest.mark.parametrize("variant", list(LayoutVariant))
@pytest.mark.parametrize("total_pages", range(1, 65))
def test_every_page_is_placed_exactly_once(variant: LayoutVariant, total_pages: int) -> None:
    plan = plan_layout(total_pages, variant)
    sides = impose_plan(plan)

    placed = Counter(slot.page for side in sides for slot in side.slots)
    vacancies = placed.pop(VACANT, 0)

    assert plan.sheet_count == -(-total_pages // variant.signature)
    assert vacancies == plan.slot_count - total_pages == plan.vacancy_count
    assert 0 <= plan.vacancy_count < variant.signature
    assert sorted(placed) == list(range(1, total_pages + 1))
    assert set(placed.values()) == {1}


def test_plan_layout_rejects_empty_document() -> None:
    with pytest.raises(InvalidInputError, match="no pages"):
        plan_layout(0, LayoutVariant.SIDE_FOLD_2UP)


def test_single_4up_booklet_eight_pages_fills_one_sheet() -> None:
    plan = plan_layout(8, LayoutVariant.SIDE_FOLD_4UP_SINGLE)

    assert (plan.sheet_count, plan.vacancy_count, plan.skip_last_row) == (1, 0, False)
    assert resolve_slot(plan, 1, Side.FRONT, TOP_RIGHT) == 1
    assert resolve_slot(plan, 1, Side.FRONT, TOP_LEFT) == 8
    assert _side_pages(LayoutVariant.SIDE_FOLD_4UP_SINGLE, 8) == [(8, 1, 6, 3), (2, 7, 4, 5)]


def test_single_4up_booklet_five_pages_leaves_three_vacancies() -> None:
    plan = plan_layout(5, LayoutVariant.SIDE_FOLD_4UP_SINGLE)

    assert (plan.sheet_count, plan.vacancy_count, plan.skip_last_row) == (1, 3, False)
    assert _side_pages(LayoutVariant.SIDE_FOLD_4UP_SINGLE, 5) == [
        (VACANT, 1, VACANT, 3),
        (2, VACANT, 4, 5),
    ]


def test_single_4up_booklet_twelve_pages_skips_last_sheet_bottom_row() -> None:
    plan = plan_layout(12, LayoutVariant.SIDE_FOLD_4UP_SINGLE)

    assert (plan.sheet_count, plan.vacancy_count, plan.skip_last_row) == (2, 4, True)
    for side in (Side.FRONT, Side.BACK):
        assert resolve_slot(plan, 2, side, BOTTOM_LEFT) == VACANT
        assert resolve_slot(plan, 2, side, BOTTOM_RIGHT) == VACANT
    assert _side_pages(LayoutVariant.SIDE_FOLD_4UP_SINGLE, 12) == [
        (12, 1, 10, 3),
        (2, 11, 4, 9),
        (8, 5, VACANT, VACANT),
        (6, 7, VACANT, VACANT),
    ]


@pytest.mark.parametrize(("total_pages", "expected"), [(4, True), (5, False), (12, True), (13, False), (9, True)])
def test_skip_last_row_starts_at_half_a_sheet_of_vacancies(total_pages: int, expected: bool) -> None:
    assert plan_layout(total_pages, LayoutVariant.SIDE_FOLD_4UP_SINGLE).skip_last_row is expected


def test_side_fold_booklet_nests_sheets_from_the_outside_in() -> None:
    assert _side_pages(LayoutVariant.SIDE_FOLD_2UP, 8) == [(8, 1), (2, 7), (6, 3), (4, 5)]


def test_side_fold_booklet_single_page_leaves_three_blanks() -> None:
    assert _side_pages(LayoutVariant.SIDE_FOLD_2UP, 1) == [(VACANT, 1), (VACANT, VACANT)]


def test_duplicated_4up_booklet_maps_one_row_of_logical_slots() -> None:
    assert _side_pages(LayoutVariant.SIDE_FOLD_4UP, 6) == [(VACANT, 1), (2, VACANT), (6, 3), (4, 5)]


def test_calendar_binds_along_the_top_edge() -> None:
    assert _side_pages(LayoutVariant.CALENDAR, 8) == [(8, 1), (2, 7), (6, 3), (4, 5)]


def test_cut_landscape_stacks_top_halves_before_bottom_halves() -> None:
    assert _side_pages(LayoutVariant.CUT_LANDSCAPE, 7) == [(1, 5), (2, 6), (3, 7), (4, VACANT)]


def test_square_6up_sheet_carries_three_nested_leaves() -> None:
    assert _side_pages(LayoutVariant.SQUARE_6UP, 12) == [
        (12, 1, 10, 3, 8, 5),
        (2, 11, 4, 9, 6, 7),
    ]


def test_folded_8up_uses_octavo_signature_per_sheet() -> None:
    assert _side_pages(LayoutVariant.FOLDED_8UP_8PAGE, 20) == [
        (5, 12, 9, 8, 4, 13, 16, 1),
        (7, 10, 11, 6, 2, 15, 14, 3),
        (VACANT, VACANT, VACANT, VACANT, 20, VACANT, VACANT, 17),
        (VACANT, VACANT, VACANT, VACANT, 18, VACANT, VACANT, 19),
    ]


def test_null_layout_passes_pages_through_in_order() -> None:
    assert _side_pages(LayoutVariant.NULL, 3) == [(1,), (2,), (3,)]


@pytest.mark.parametrize(
    ("variant", "quadrant"),
    [
        (LayoutVariant.SIDE_FOLD_4UP_SINGLE, Quadrant(row=2, column=0)),
        (LayoutVariant.FOLDED_8UP_8PAGE, Quadrant(row=0, column=4)),
        (LayoutVariant.SIDE_FOLD_4UP, BOTTOM_LEFT),
    ],
)
def test_resolve_slot_rejects_quadrant_outside_the_grid(variant: LayoutVariant, quadrant: Quadrant) -> None:
    plan = plan_layout(8, variant)

    with pytest.raises(InternalLayoutError, match=f"'{variant.spec.id}' has no slot at"):
        resolve_slot(plan, 1, Side.FRONT, quadrant)


def test_impose_plan_rejects_out_of_range_page(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(orchestrator, "resolve_slot", lambda plan, sheet, side, quadrant: plan.total_pages + 1)

    with pytest.raises(InternalLayoutError, match="expected 1..8"):
        impose_plan(plan_layout(8, LayoutVariant.SIDE_FOLD_2UP))


def test_impose_plan_rejects_vacancy_count_mismatch(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(orchestrator, "resolve_slot", lambda plan, sheet, side, quadrant: VACANT)

    with pytest.raises(InternalLayoutError, match="left 8 vacant slots for 8 pages, expected 0"):
        impose_plan(plan_layout(8, LayoutVariant.SIDE_FOLD_2UP))
