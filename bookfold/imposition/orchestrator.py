from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence

from bookfold.constants import BLEED_EPSILON_MM
from bookfold.imposition.core import (
    VACANT,
    LayoutPlan,
    LayoutVariant,
    Orientation,
    PageAssignment,
    Quadrant,
    Side,
    plan_layout,
    resolve_slot,
)
from bookfold.imposition.errors import InternalLayoutError, InvalidInputError, OrientationMismatchError
from bookfold.imposition.geometry import (
    LineSegment,
    Placement,
    Rect,
    bleed_boxes,
    compose_sheet,
    placement_targets,
)
from bookfold.imposition.paper import PaperTarget, sheet_dimensions

ScalingMode = Literal["proportional", "stretch", "original"]
SCALING_MODES: tuple[ScalingMode, ...] = ("proportional", "stretch", "original")

_LOGGER = logging.getLogger("bookfold.imposition")


def _log_event(level: int, event_name: str, **event_fields: Any) -> None:
    _LOGGER.log(
        level,
        event_name,
        extra={"event_name": event_name, "event_fields": event_fields},
    )


@dataclass(frozen=True)
class LayoutContext:
    paper_target: PaperTarget
    right_to_left: bool = False
    show_crop_marks: bool = False
    bleed_margin_mm: float = 0.0
    scaling_mode: ScalingMode = "proportional"

    def __post_init__(self) -> None:
        if self.bleed_margin_mm < 0:
            raise InvalidInputError("bleed_margin_mm must be >= 0")
        if self.scaling_mode not in SCALING_MODES:
            valid = ", ".join(SCALING_MODES)
            raise ValueError(f"unsupported scaling mode '{self.scaling_mode}', expected one of: {valid}")

    @property
    def applies_bleed(self) -> bool:
        return abs(self.bleed_margin_mm) >= BLEED_EPSILON_MM


@dataclass(frozen=True)
class SlotAssignment:
    quadrant: Quadrant
    page: PageAssignment

    @property
    def vacant(self) -> bool:
        return self.page == VACANT


@dataclass(frozen=True)
class ImposedSide:
    sheet_index: int
    side: Side
    slots: tuple[SlotAssignment, ...]

    @property
    def pages(self) -> tuple[PageAssignment, ...]:
        return tuple(slot.page for slot in self.slots)


@dataclass(frozen=True)
class LayoutResult:
    plan: LayoutPlan
    sides: tuple[ImposedSide, ...]
    output_pages: int


class PageSource(Protocol):
    def page_count(self) -> int: ...

    def pixel_dimensions(self, page_number: int) -> tuple[int, int]: ...

    def point_dimensions(self, page_number: int) -> tuple[float, float]: ...

    def render_page(self, page_number: int, surface: Any, placement: Placement) -> None: ...


class OutputSink(Protocol):
    def new_page(self, width: float, height: float) -> Any: ...

    def set_boxes(
        self,
        page: Any,
        *,
        trim_box: Rect | None = None,
        art_box: Rect | None = None,
        bleed_box: Rect | None = None,
        crop_box: Rect | None = None,
    ) -> None: ...

    def draw_lines(self, page: Any, segments: Sequence[LineSegment]) -> None: ...


def impose_plan(plan: LayoutPlan) -> list[ImposedSide]:
    spec = plan.variant.spec
    quadrants = spec.quadrants()
    sides: list[ImposedSide] = []
    vacancies = 0

    for sheet_index in range(1, plan.sheet_count + 1):
        for side in spec.sides:
            slots: list[SlotAssignment] = []
            for quadrant in quadrants:
                page = resolve_slot(plan, sheet_index, side, quadrant)
                if page == VACANT:
                    vacancies += 1
                elif not isinstance(page, int) or not 1 <= page <= plan.total_pages:
                    _log_event(
                        logging.ERROR,
                        "layout.internal_error",
                        variant=spec.id,
                        total_pages=plan.total_pages,
                        sheet_index=sheet_index,
                        side=side.value,
                        quadrant=(quadrant.row, quadrant.column),
                        page=page,
                    )
                    raise InternalLayoutError(
                        f"'{spec.id}' mapped sheet {sheet_index} {side.value} {quadrant} to page {page!r}, "
                        f"expected 1..{plan.total_pages}"
                    )
                slots.append(SlotAssignment(quadrant=quadrant, page=page))
            sides.append(ImposedSide(sheet_index=sheet_index, side=side, slots=tuple(slots)))

    if vacancies != plan.vacancy_count:
        _log_event(
            logging.ERROR,
            "layout.internal_error",
            variant=spec.id,
            total_pages=plan.total_pages,
            expected_vacancies=plan.vacancy_count,
            counted_vacancies=vacancies,
        )
        raise InternalLayoutError(
            f"'{spec.id}' left {vacancies} vacant slots for {plan.total_pages} pages, expected {plan.vacancy_count}"
        )

    return sides


def _check_orientation(variant: LayoutVariant, width: int, height: int) -> Orientation:
    orientation = Orientation.of(width, height)
    if not variant.enabled_for(orientation):
        _log_event(
            logging.WARNING,
            "layout.input.orientation_mismatch",
            variant=variant.spec.id,
            orientation=orientation.value,
        )
        enabled = ", ".join(sorted(item.value for item in variant.spec.orientations))
        raise OrientationMismatchError(
            f"layout '{variant.spec.id}' does not accept {orientation.value} pages, expected one of: {enabled}"
        )
    return orientation


def layout(
    source: PageSource,
    sink: OutputSink,
    variant: LayoutVariant,
    context: LayoutContext,
) -> LayoutResult:
    total_pages = source.page_count()
    if total_pages < 1:
        raise InvalidInputError("document has no pages to impose")

    input_width, input_height = source.pixel_dimensions(1)
    orientation = _check_orientation(variant, input_width, input_height)

    plan = plan_layout(total_pages, variant)
    _log_event(
        logging.DEBUG,
        "layout.plan.computed",
        variant=variant.spec.id,
        orientation=orientation.value,
        total_pages=plan.total_pages,
        sheet_count=plan.sheet_count,
        vacancy_count=plan.vacancy_count,
    )
    sides = impose_plan(plan)

    sheet_size = None
    if variant is not LayoutVariant.NULL:
        sheet_size = sheet_dimensions(variant, context.paper_target, input_width, input_height)

    for imposed_side in sides:
        # Pass-through keeps every page at its own size.
        paper_width, paper_height = sheet_size or source.point_dimensions(imposed_side.sheet_index)

        geometry = compose_sheet(paper_width, paper_height, show_crop_marks=context.show_crop_marks)
        page = sink.new_page(geometry.media_width, geometry.media_height)
        if context.show_crop_marks:
            sink.set_boxes(page, trim_box=geometry.trim_box)

        for slot in imposed_side.slots:
            if slot.vacant:
                continue
            for placement in placement_targets(
                variant,
                slot.quadrant,
                paper_width,
                paper_height,
                right_to_left=context.right_to_left,
            ):
                shifted = placement.translated(geometry.content_offset, geometry.content_offset)
                source.render_page(slot.page, page, shifted)

        if geometry.crop_marks:
            sink.draw_lines(page, geometry.crop_marks)

        if variant is LayoutVariant.NULL and context.applies_bleed:
            boxes = bleed_boxes(geometry.media_box, context.bleed_margin_mm)
            sink.set_boxes(
                page,
                trim_box=boxes.trim_box,
                art_box=boxes.art_box,
                bleed_box=boxes.bleed_box,
                crop_box=boxes.crop_box,
            )

    _log_event(
        logging.INFO,
        "layout.completed",
        variant=variant.spec.id,
        source_pages=plan.total_pages,
        sheets=plan.sheet_count,
        vacancies=plan.vacancy_count,
        output_pages=len(sides),
        right_to_left=context.right_to_left,
        crop_marks=context.show_crop_marks,
    )
    return LayoutResult(plan=plan, sides=tuple(sides), output_pages=len(sides))
