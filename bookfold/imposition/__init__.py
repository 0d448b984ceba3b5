from bookfold.imposition.core import (
    VACANT,
    LayoutPlan,
    LayoutVariant,
    Orientation,
    PageAssignment,
    Quadrant,
    Side,
    VariantSpec,
    plan_layout,
    resolve_slot,
)
from bookfold.imposition.errors import (
    ImpositionError,
    InternalLayoutError,
    InvalidInputError,
    OrientationMismatchError,
)
from bookfold.imposition.geometry import (
    LineSegment,
    PageBoxes,
    Placement,
    Rect,
    SheetGeometry,
    bleed_boxes,
    compose_sheet,
    placement_targets,
)
from bookfold.imposition.orchestrator import (
    ImposedSide,
    LayoutContext,
    LayoutResult,
    SlotAssignment,
    impose_plan,
    layout,
)
from bookfold.imposition.paper import PaperTarget, sheet_dimensions

__all__ = [
    "VACANT",
    "ImposedSide",
    "ImpositionError",
    "InternalLayoutError",
    "InvalidInputError",
    "LayoutContext",
    "LayoutPlan",
    "LayoutResult",
    "LayoutVariant",
    "LineSegment",
    "Orientation",
    "OrientationMismatchError",
    "PageAssignment",
    "PageBoxes",
    "PaperTarget",
    "Placement",
    "Quadrant",
    "Rect",
    "SheetGeometry",
    "Side",
    "SlotAssignment",
    "VariantSpec",
    "bleed_boxes",
    "compose_sheet",
    "impose_plan",
    "layout",
    "placement_targets",
    "plan_layout",
    "resolve_slot",
    "sheet_dimensions",
]
