"""In-memory card document: positioned primitives plus non-fatal warnings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Literal, Optional, Tuple, Union

from loguru import logger

from ..common.errors import AssetResolutionError
from ..schemas.layout_schema import RegionStyle
from ..utils.geometry import Rect


@dataclass(slots=True)
class ExportWarning:
    """Something was left out of the card; the export still succeeded."""

    key: str
    message: str

    @classmethod
    def from_error(cls, error: AssetResolutionError) -> 'ExportWarning':
        return cls(key=error.key, message=str(error))


@dataclass(slots=True)
class BoxPrimitive:
    kind: ClassVar[str] = "box"

    region_id: str
    rect: Rect
    background: str
    link: Optional[str] = None


@dataclass(slots=True)
class TextPrimitive:
    kind: ClassVar[str] = "text"

    region_id: str
    rect: Rect
    text: str
    style: RegionStyle
    color: Optional[str] = None
    weight: Optional[int] = None
    underline: bool = False
    link: Optional[str] = None

    @property
    def effective_color(self) -> str:
        return self.color or self.style.color

    @property
    def effective_weight(self) -> int:
        return self.weight or self.style.weight


@dataclass(slots=True)
class ImagePrimitive:
    kind: ClassVar[str] = "image"

    region_id: str
    rect: Rect
    source: str
    fit: Literal["cover", "contain"] = "contain"
    align: Literal["left", "center", "right"] = "center"
    link: Optional[str] = None


@dataclass(slots=True)
class ListPrimitive:
    kind: ClassVar[str] = "list"

    region_id: str
    rect: Rect
    items: List[str]
    style: RegionStyle
    bullet: str = "•"
    bullet_color: str = "#2237F1"
    link: Optional[str] = None


Primitive = Union[BoxPrimitive, TextPrimitive, ImagePrimitive, ListPrimitive]


@dataclass
class CardDocument:
    """A fixed-size page described without any rendered pixels."""

    width: float
    height: float
    background: str
    template_version: str
    title: str = "Candidate card"
    primitives: List[Primitive] = field(default_factory=list)
    fonts: Dict[str, str] = field(default_factory=dict)
    warnings: List[ExportWarning] = field(default_factory=list)

    def add(self, primitive: Primitive) -> Primitive:
        self.primitives.append(primitive)
        return primitive

    def warn(self, error: AssetResolutionError) -> None:
        logger.warning(f"Card element omitted: {error}")
        self.warnings.append(ExportWarning.from_error(error))

    def links(self) -> List[Tuple[str, Rect]]:
        """(target, rect) for every clickable primitive, canvas coordinates."""
        return [(p.link, p.rect) for p in self.primitives if p.link]


@dataclass(slots=True)
class CardExport:
    """Bytes of an exported card and what was dropped along the way."""

    pdf: bytes
    backend: str
    warnings: List[ExportWarning] = field(default_factory=list)
