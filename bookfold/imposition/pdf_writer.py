from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.errors import PdfReadError
from pypdf.generic import DecodedStreamObject, RectangleObject

from bookfold.constants import CROP_MARK_LINE_WIDTH
from bookfold.imposition.core import LayoutVariant
from bookfold.imposition.errors import InvalidInputError
from bookfold.imposition.geometry import LineSegment, Placement, Rect
from bookfold.imposition.orchestrator import (
    SCALING_MODES,
    ImposedSide,
    LayoutContext,
    ScalingMode,
    layout,
)

_CROP_MARKS_TAG = "% bookfold-crop-marks"

_LOGGER = logging.getLogger("bookfold.imposition.pdf_writer")


def _log_event(level: int, event_name: str, **event_fields: Any) -> None:
    _LOGGER.log(
        level,
        event_name,
        extra={"event_name": event_name, "event_fields": event_fields},
    )


@dataclass(frozen=True)
class GeneratedArtifact:
    path: Path
    page_count: int
    sides: tuple[ImposedSide, ...]
    copied: bool = False


def _resolve_scales(
    *,
    source_width: float,
    source_height: float,
    slot_width: float,
    slot_height: float,
    scaling_mode: ScalingMode,
) -> tuple[float, float]:
    if scaling_mode == "proportional":
        scale = min(slot_width / source_width, slot_height / source_height)
        return scale, scale
    if scaling_mode == "stretch":
        return slot_width / source_width, slot_height / source_height
    if scaling_mode == "original":
        return 1.0, 1.0

    valid = ", ".join(SCALING_MODES)
    raise ValueError(f"unsupported scaling mode '{scaling_mode}', expected one of: {valid}")


def _page_rotation(source_page) -> int:
    rotation = int(source_page.rotation) % 360
    if rotation % 90:
        raise InvalidInputError(f"page /Rotate {source_page.rotation} is not a multiple of 90")
    return rotation


def displayed_size(source_page) -> tuple[float, float]:
    width = float(source_page.mediabox.width)
    height = float(source_page.mediabox.height)
    if _page_rotation(source_page) in (90, 270):
        return height, width
    return width, height


def _upright_transform(source_page) -> Transformation:
    # Maps the mediabox onto (0, 0, displayed width, displayed height); /Rotate turns clockwise.
    left = float(source_page.mediabox.left)
    bottom = float(source_page.mediabox.bottom)
    width = float(source_page.mediabox.width)
    height = float(source_page.mediabox.height)

    transform = Transformation().translate(-left, -bottom)
    rotation = _page_rotation(source_page)
    if rotation == 90:
        return transform.rotate(-90).translate(0, width)
    if rotation == 180:
        return transform.rotate(180).translate(width, height)
    if rotation == 270:
        return transform.rotate(90).translate(height, 0)
    return transform


def placement_transform(
    source_page,
    placement: Placement,
    scaling_mode: ScalingMode = "proportional",
) -> Transformation:
    source_width, source_height = displayed_size(source_page)
    target = placement.rect

    scale_x, scale_y = _resolve_scales(
        source_width=source_width,
        source_height=source_height,
        slot_width=target.width,
        slot_height=target.height,
        scaling_mode=scaling_mode,
    )
    rendered_width = source_width * scale_x
    rendered_height = source_height * scale_y
    x_offset = target.x + (target.width - rendered_width) / 2.0
    y_offset = target.y + (target.height - rendered_height) / 2.0

    transform = _upright_transform(source_page).scale(scale_x, scale_y)
    if placement.rotation == 180:
        return transform.rotate(180).translate(x_offset + rendered_width, y_offset + rendered_height)
    if placement.rotation != 0:
        raise ValueError(f"unsupported placement rotation {placement.rotation}, expected 0 or 180")
    return transform.translate(x_offset, y_offset)


def _rectangle(rect: Rect) -> RectangleObject:
    return RectangleObject(rect.as_bounds())


def _crop_mark_commands(segments: Sequence[LineSegment]) -> bytes:
    if not segments:
        return b""

    commands: list[str] = ["q", _CROP_MARKS_TAG, "0 0 0 RG", f"{CROP_MARK_LINE_WIDTH:.3f} w"]
    for segment in segments:
        commands.append(f"{segment.x1:.3f} {segment.y1:.3f} m {segment.x2:.3f} {segment.y2:.3f} l S")
    commands.append("Q")
    return ("\n".join(commands) + "\n").encode("ascii")


def _append_page_commands(page: PageObject, commands: bytes) -> None:
    if not commands:
        return

    stream = DecodedStreamObject()
    stream.set_data((page._get_contents_as_bytes() or b"") + commands)
    page.replace_contents(stream)


class PdfPageSource:
    def __init__(self, reader: PdfReader, scaling_mode: ScalingMode = "proportional") -> None:
        self._reader = reader
        self._scaling_mode = scaling_mode

    def _page(self, page_number: int) -> PageObject:
        if not 1 <= page_number <= len(self._reader.pages):
            raise InvalidInputError(f"page {page_number} is outside the document (1..{len(self._reader.pages)})")
        return self._reader.pages[page_number - 1]

    def page_count(self) -> int:
        return len(self._reader.pages)

    def point_dimensions(self, page_number: int) -> tuple[float, float]:
        return displayed_size(self._page(page_number))

    def pixel_dimensions(self, page_number: int) -> tuple[int, int]:
        width, height = self.point_dimensions(page_number)
        return round(width), round(height)

    def render_page(self, page_number: int, surface: PageObject, placement: Placement) -> None:
        source_page = self._page(page_number)
        surface.merge_transformed_page(
            source_page,
            placement_transform(source_page, placement, scaling_mode=self._scaling_mode),
        )


class PdfOutputSink:
    def __init__(self, writer: PdfWriter | None = None) -> None:
        self.writer = writer or PdfWriter()

    def new_page(self, width: float, height: float) -> PageObject:
        return self.writer.add_blank_page(width=width, height=height)

    def set_boxes(
        self,
        page: PageObject,
        *,
        trim_box: Rect | None = None,
        art_box: Rect | None = None,
        bleed_box: Rect | None = None,
        crop_box: Rect | None = None,
    ) -> None:
        if trim_box is not None:
            page.trimbox = _rectangle(trim_box)
        if art_box is not None:
            page.artbox = _rectangle(art_box)
        if bleed_box is not None:
            page.bleedbox = _rectangle(bleed_box)
        if crop_box is not None:
            page.cropbox = _rectangle(crop_box)

    def draw_lines(self, page: PageObject, segments: Sequence[LineSegment]) -> None:
        _append_page_commands(page, _crop_mark_commands(segments))

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            self.writer.write(handle)


def deterministic_output_filename(source_name: str, variant: LayoutVariant) -> str:
    stem = Path(source_name).stem.strip()
    if not stem:
        stem = "output"

    slug = re.sub(r"[^A-Za-z0-9]+", "_", stem).strip("_").lower()
    slug = slug or "output"
    variant_slug = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", variant.spec.id).lower()
    return f"{slug}_{variant_slug}.pdf"


def open_source(input_path: Path) -> PdfReader:
    try:
        reader = PdfReader(input_path)
    except PdfReadError as exc:
        _log_event(logging.WARNING, "impose.input.invalid_pdf", source=str(input_path), error=str(exc))
        raise InvalidInputError(f"'{input_path.name}' could not be parsed as a PDF: {exc}") from exc

    if reader.is_encrypted:
        _log_event(logging.WARNING, "impose.input.encrypted_pdf", source=str(input_path))
        raise InvalidInputError(f"'{input_path.name}' is encrypted; remove encryption and retry")
    if not reader.pages:
        raise InvalidInputError(f"'{input_path.name}' has no pages to impose")

    return reader


def impose_pdf(
    input_path: Path,
    output_path: Path,
    variant: LayoutVariant,
    context: LayoutContext,
) -> GeneratedArtifact:
    input_path = Path(input_path)
    output_path = Path(output_path)
    if output_path.is_dir():
        output_path = output_path / deterministic_output_filename(input_path.name, variant)

    reader = open_source(input_path)

    if variant is LayoutVariant.NULL and not context.show_crop_marks and not context.applies_bleed:
        # Nothing to add: deliver the original bytes.
        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(input_path, output_path)
        _log_event(
            logging.INFO,
            "impose.passthrough.copied",
            source=str(input_path),
            output=str(output_path),
            pages=len(reader.pages),
        )
        return GeneratedArtifact(path=output_path, page_count=len(reader.pages), sides=(), copied=True)

    sink = PdfOutputSink()
    result = layout(PdfPageSource(reader, scaling_mode=context.scaling_mode), sink, variant, context)
    sink.save(output_path)

    return GeneratedArtifact(path=output_path, page_count=len(sink.writer.pages), sides=result.sides)
