"""
Card layout template
====================

Named regions positioned as percentages of the 1920x1080 virtual canvas.
The Qt preview, the declarative PDF builder and the capture builder all read
rectangles through :func:`evaluate_region` / :func:`evaluate_slots`, so the
three outputs share the exact same geometry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from ..utils.geometry import Rect, Size

CANVAS = Size(1920, 1080)

FontTier = Literal["heading", "body"]
Direction = Literal["column", "row"]

FONT_FAMILIES: Dict[str, str] = {
    "heading": "Termina",
    "body": "Space Grotesk",
}


@dataclass(frozen=True, slots=True)
class RegionStyle:
    font_tier: Optional[FontTier] = None
    font_size: float = 0
    color: str = "#FFFFFF"
    weight: int = 400
    background: Optional[str] = None

    @property
    def font_family(self) -> Optional[str]:
        return FONT_FAMILIES.get(self.font_tier) if self.font_tier else None


@dataclass(frozen=True, slots=True)
class Region:
    """A percentage box on the canvas bound to record fields.

    ``item_extent``/``item_gap`` describe stacked slots (rows or columns)
    in canvas pixels for regions showing several items.
    """

    id: str
    box: Tuple[float, float, float, float]
    binding: Tuple[str, ...] = ()
    style: RegionStyle = field(default_factory=RegionStyle)
    item_extent: Optional[float] = None
    item_gap: float = 0
    direction: Direction = "column"


def evaluate_region(region: Region, canvas: Size = CANVAS) -> Rect:
    """Absolute pixel rectangle of ``region`` on ``canvas``."""
    x_pct, y_pct, w_pct, h_pct = region.box
    return Rect(
        x=x_pct / 100.0 * canvas.width,
        y=y_pct / 100.0 * canvas.height,
        width=w_pct / 100.0 * canvas.width,
        height=h_pct / 100.0 * canvas.height,
    )


def evaluate_slots(region: Region, count: int, canvas: Size = CANVAS) -> List[Rect]:
    """Rectangles of the first ``count`` stacked items of ``region``."""
    base = evaluate_region(region, canvas)
    if count <= 0:
        return []
    if region.item_extent is None:
        raise ValueError(f"Region {region.id!r} does not define stacked items")

    # Slot sizes are canvas pixels; follow the canvas scale if it differs.
    if region.direction == "column":
        factor = canvas.height / CANVAS.height
        extent, gap = region.item_extent * factor, region.item_gap * factor
        return [
            Rect(base.x, base.y + i * (extent + gap), base.width, extent)
            for i in range(count)
        ]
    factor = canvas.width / CANVAS.width
    extent, gap = region.item_extent * factor, region.item_gap * factor
    return [
        Rect(base.x + i * (extent + gap), base.y, extent, base.height)
        for i in range(count)
    ]


@dataclass(frozen=True)
class LayoutTemplate:
    """Ordered regions plus the presentational knobs shared by renderers.

    Link styling (color, underline) is configuration: the exported link
    regions are the same whatever the look.
    """

    version: str
    regions: Tuple[Region, ...]
    page_background: str = "#000000"
    link_color: str = "#2DD4BF"
    link_underline: bool = True
    link_label: str = "Visit Here"
    link_width: float = 180
    bullet: str = "•"
    bullet_color: str = "#2237F1"
    label_width: float = 300
    label_gap: float = 16
    contact_fields: Tuple[Tuple[str, str], ...] = (
        ("position", "Position:"),
        ("address", "Location:"),
        ("phone", "Phone Number:"),
        ("email", "Email:"),
        ("linkedin_url", "LinkedIn Profile:"),
    )
    action_fields: Tuple[Tuple[str, str], ...] = (
        ("resume_url", "button.resume"),
        ("portfolio_url", "button.portfolio"),
    )
    name_placeholder: str = "Candidate Name"
    skills_title: str = "Core Skills"
    highlights_title: str = "Key Highlights"
    empty_hint: str = "Start filling out the form to see the candidate template come to life!"

    def region(self, region_id: str) -> Region:
        for region in self.regions:
            if region.id == region_id:
                return region
        raise KeyError(region_id)

    def rect(self, region_id: str, canvas: Size = CANVAS) -> Rect:
        return evaluate_region(self.region(region_id), canvas)

    def slots(self, region_id: str, count: int, canvas: Size = CANVAS) -> List[Rect]:
        return evaluate_slots(self.region(region_id), count, canvas)

    def contact_cells(self, row: Rect, canvas: Size = CANVAS) -> Tuple[Rect, Rect]:
        """Split a contact row into its label and value cells."""
        factor = canvas.width / CANVAS.width
        label_w = self.label_width * factor
        offset = label_w + self.label_gap * factor
        return (
            Rect(row.x, row.y, label_w, row.height),
            Rect(row.x + offset, row.y, max(0.0, row.width - offset), row.height),
        )

    def link_rect(self, value_cell: Rect, canvas: Size = CANVAS) -> Rect:
        """Clickable area of a link label placed in ``value_cell``."""
        width = min(self.link_width * canvas.width / CANVAS.width, value_cell.width)
        return Rect(value_cell.x, value_cell.y, width, value_cell.height)


_WHITE = "#FFFFFF"
_BLACK = "#000000"

CARD_TEMPLATE = LayoutTemplate(
    version="card.v1",
    regions=(
        Region("profile_image", (0.0, 0.0, 31.6, 67.8),
               binding=("profile_image_payload",),
               style=RegionStyle(background="#1F2937")),
        Region("status_pill", (78.0, 7.87, 20.0, 4.44),
               binding=("placement_type",)),
        Region("logo", (36.03, 7.87, 15.3, 7.0)),
        Region("name", (36.03, 17.0, 61.97, 8.5),
               binding=("name",),
               style=RegionStyle(font_tier="heading", font_size=76, color=_WHITE)),
        Region("contact", (36.03, 27.5, 61.97, 25.5),
               binding=("position", "address", "phone", "email", "linkedin_url"),
               style=RegionStyle(font_tier="body", font_size=32, color=_WHITE),
               item_extent=41, item_gap=14),
        Region("actions", (36.03, 56.5, 40.0, 5.926),
               binding=("resume_url", "portfolio_url"),
               item_extent=160, item_gap=16, direction="row"),
        Region("core_skills_panel", (0.0, 67.8, 31.6, 32.2),
               style=RegionStyle(background="#e1e1e1")),
        Region("core_skills_title", (1.98, 71.3, 27.64, 4.5),
               style=RegionStyle(font_tier="heading", font_size=38, color=_BLACK)),
        Region("core_skills_list", (1.98, 77.0, 27.64, 19.5),
               binding=("core_skills",),
               style=RegionStyle(font_tier="body", font_size=32, color=_BLACK),
               item_extent=52, item_gap=20),
        Region("highlights_panel", (31.6, 67.8, 68.4, 32.2),
               binding=("highlights",),
               style=RegionStyle(background=_WHITE)),
        Region("highlights_title", (33.58, 71.3, 64.44, 4.5),
               style=RegionStyle(font_tier="heading", font_size=38, color="#2237F1")),
        Region("highlights_list", (33.58, 77.0, 64.44, 19.5),
               binding=("highlights",),
               style=RegionStyle(font_tier="body", font_size=24, color=_BLACK)),
    ),
)
