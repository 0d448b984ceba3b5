from __future__ import annotations

from typing import Final

PAPER_SIZES: Final[dict[str, tuple[float, float]]] = {
    "A3": (841.8898, 1190.551),
    "A4": (595.2756, 841.8898),
    "A5": (419.5276, 595.2756),
    "Legal": (612.0, 1008.0),
    "Letter": (612.0, 792.0),
    "Tabloid": (792.0, 1224.0),
}

POINTS_PER_MM: Final[float] = 72.0 / 25.4

# Distance between the trim box and the media box when crop marks are shown.
CROP_MARK_MARGIN_MM: Final[float] = 6.0
CROP_MARK_GAP_MM: Final[float] = 3.175
CROP_MARK_LINE_WIDTH: Final[float] = 0.25

BLEED_EPSILON_MM: Final[float] = 0.01


def mm_to_points(millimeters: float) -> float:
    return millimeters * POINTS_PER_MM
