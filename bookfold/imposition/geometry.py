"""Sheet geometry in PDF user space (points, origin at the bottom-left corner)."""

from __future__ import annotations

from dataclasses import dataclass

from bookfold.constants import CROP_MARK_GAP_MM, CROP_MARK_MARGIN_MM, mm_to_points
from bookfold.imposition.core import LayoutVariant, Quadrant
from bookfold.imposition.errors import InvalidInputError


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    def translated(self, dx: float, dy: float) -> Rect:
        return Rect(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def inset(self, amount: float) -> Rect:
        return Rect(
            x=self.x + amount,
            y=self.y + amount,
            width=self.width - 2.0 * amount,
            height=self.height - 2.0 * amount,
        )

    def as_bounds(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.right, self.top


@dataclass(frozen=True)
class LineSegment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class SheetGeometry:
    paper_width: float
    paper_height: float
    media_width: float
    media_height: float
    trim_box: Rect
    content_offset: float
    crop_marks: tuple[LineSegment, ...]

    @property
    def media_box(self) -> Rect:
        return Rect(x=0.0, y=0.0, width=self.media_width, height=self.media_height)


@dataclass(frozen=True)
class Placement:
    rect: Rect
    rotation: int = 0

    def translated(self, dx: float, dy: float) -> Placement:
        return Placement(rect=self.rect.translated(dx, dy), rotation=self.rotation)


@dataclass(frozen=True)
class PageBoxes:
    trim_box: Rect
    art_box: Rect
    bleed_box: Rect
    crop_box: Rect


def crop_mark_segments(trim_box: Rect, *, margin: float, gap: float) -> tuple[LineSegment, ...]:
    segments: list[LineSegment] = []
    corners = (
        (trim_box.x, trim_box.top, -1.0, 1.0),
        (trim_box.right, trim_box.top, 1.0, 1.0),
        (trim_box.x, trim_box.y, -1.0, -1.0),
        (trim_box.right, trim_box.y, 1.0, -1.0),
    )
    for corner_x, corner_y, x_direction, y_direction in corners:
        segments.append(
            LineSegment(
                x1=corner_x + x_direction * gap,
                y1=corner_y,
                x2=corner_x + x_direction * margin,
                y2=corner_y,
            )
        )
        segments.append(
            LineSegment(
                x1=corner_x,
                y1=corner_y + y_direction * gap,
                x2=corner_x,
                y2=corner_y + y_direction * margin,
            )
        )
    return tuple(segments)


def compose_sheet(paper_width: float, paper_height: float, *, show_crop_marks: bool) -> SheetGeometry:
    if not show_crop_marks:
        return SheetGeometry(
            paper_width=paper_width,
            paper_height=paper_height,
            media_width=paper_width,
            media_height=paper_height,
            trim_box=Rect(x=0.0, y=0.0, width=paper_width, height=paper_height),
            content_offset=0.0,
            crop_marks=(),
        )

    margin = mm_to_points(CROP_MARK_MARGIN_MM)
    trim_box = Rect(x=margin, y=margin, width=paper_width, height=paper_height)
    return SheetGeometry(
        paper_width=paper_width,
        paper_height=paper_height,
        media_width=paper_width + 2.0 * margin,
        media_height=paper_height + 2.0 * margin,
        trim_box=trim_box,
        content_offset=margin,
        crop_marks=crop_mark_segments(trim_box, margin=margin, gap=mm_to_points(CROP_MARK_GAP_MM)),
    )


def column_left_edge(column: int, columns: int, paper_width: float, *, right_to_left: bool) -> float:
    cell_width = paper_width / columns
    position = columns - 1 - column if right_to_left else column
    return position * cell_width


def superior_page_left_edge(paper_width: float, *, right_to_left: bool) -> float:
    return column_left_edge(0, 2, paper_width, right_to_left=right_to_left)


def inferior_page_left_edge(paper_width: float, *, right_to_left: bool) -> float:
    return column_left_edge(1, 2, paper_width, right_to_left=right_to_left)


def placement_targets(
    variant: LayoutVariant,
    quadrant: Quadrant,
    paper_width: float,
    paper_height: float,
    *,
    right_to_left: bool,
) -> tuple[Placement, ...]:
    spec = variant.spec
    cell_width = paper_width / spec.columns
    cell_height = paper_height / spec.rows
    x = column_left_edge(quadrant.column, spec.columns, paper_width, right_to_left=right_to_left)
    rows = range(spec.rows) if spec.copies > 1 else (quadrant.row,)

    return tuple(
        Placement(
            rect=Rect(x=x, y=paper_height - (row + 1) * cell_height, width=cell_width, height=cell_height),
            rotation=180 if row in spec.upside_down_rows else 0,
        )
        for row in rows
    )


def bleed_boxes(media_box: Rect, bleed_mm: float) -> PageBoxes:
    bleed = mm_to_points(bleed_mm)
    trim_box = media_box.inset(bleed)
    if trim_box.width <= 0 or trim_box.height <= 0:
        raise InvalidInputError(f"bleed margin of {bleed_mm} mm leaves no trim area on the page")

    return PageBoxes(trim_box=trim_box, art_box=trim_box, bleed_box=media_box, crop_box=media_box)
