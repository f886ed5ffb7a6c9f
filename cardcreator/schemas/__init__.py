"""Pydantic profile record and the static card layout template."""

from .layout_schema import CANVAS, CARD_TEMPLATE, LayoutTemplate, Region, RegionStyle, evaluate_region, evaluate_slots
from .profile_schema import PlacementType, ProfilePatch, ProfileRecord, apply_patch, normalize_url

__all__ = [
    "CANVAS",
    "CARD_TEMPLATE",
    "LayoutTemplate",
    "PlacementType",
    "ProfilePatch",
    "ProfileRecord",
    "Region",
    "RegionStyle",
    "apply_patch",
    "evaluate_region",
    "evaluate_slots",
    "normalize_url",
]
