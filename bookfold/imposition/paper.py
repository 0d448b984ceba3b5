from __future__ import annotations

from dataclasses import dataclass

from bookfold.constants import PAPER_SIZES
from bookfold.imposition.core import LayoutVariant, Orientation
from bookfold.imposition.errors import InvalidInputError


@dataclass(frozen=True)
class PaperTarget:
    name: str
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(f"paper target '{self.name}' must have positive dimensions")

    @classmethod
    def named(cls, name: str) -> PaperTarget:
        try:
            width, height = PAPER_SIZES[name]
        except KeyError as exc:
            valid = ", ".join(sorted(PAPER_SIZES))
            raise ValueError(f"unsupported paper size '{name}', expected one of: {valid}") from exc
        return cls(name=name, width=width, height=height)

    def dimensions_for(self, orientation: Orientation) -> tuple[float, float]:
        if orientation is Orientation.PORTRAIT:
            return self.height, self.width
        if orientation is Orientation.LANDSCAPE:
            return self.width, self.height
        if orientation is Orientation.SQUARE:
            # Square pages are laid out like landscape ones: the nominal sheet as printed.
            return self.width, self.height
        raise ValueError(f"unsupported orientation {orientation!r}")

    def dimensions(self, input_width: float, input_height: float) -> tuple[float, float]:
        return self.dimensions_for(Orientation.of(input_width, input_height))

    def __str__(self) -> str:
        return self.name


def sheet_dimensions(
    variant: LayoutVariant,
    paper_target: PaperTarget,
    input_width: float,
    input_height: float,
) -> tuple[float, float]:
    if variant.spec.paper_matches_input:
        return paper_target.dimensions(input_height, input_width)
    return paper_target.dimensions(input_width, input_height)
