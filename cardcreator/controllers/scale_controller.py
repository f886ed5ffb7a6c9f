"""Scale factor for the on-screen card preview."""

from __future__ import annotations

import math
from typing import Optional

from loguru import logger

from ..config import CardCreatorConfig, DEFAULT_CONFIG


class ScaleController:
    """Fit the virtual canvas into a host container.

    The factor is purely visual: content coordinates stay in canvas space.
    Degenerate measurements (zero, negative, NaN) keep the previous factor.
    """

    __slots__ = ("_canvas_width", "_canvas_height", "_min_scale", "_max_scale", "_scale")

    def __init__(self, config: Optional[CardCreatorConfig] = None, *, initial: float = 1.0) -> None:
        cfg = config or DEFAULT_CONFIG
        self._canvas_width = float(cfg.canvas_width)
        self._canvas_height = float(cfg.canvas_height)
        self._min_scale = cfg.min_scale
        self._max_scale = cfg.max_scale
        self._scale = self.clamp(initial)

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def bounds(self) -> tuple[float, float]:
        return self._min_scale, self._max_scale

    def clamp(self, value: float) -> float:
        return min(self._max_scale, max(self._min_scale, value))

    def compute(self, width: float, height: float) -> Optional[float]:
        """Scale for a container, or None when it is not laid out yet."""
        if not (_is_measurable(width) and _is_measurable(height)):
            return None
        return self.clamp(min(width / self._canvas_width, height / self._canvas_height))

    def update(self, width: float, height: float) -> float:
        """Recompute from a container size and return the current factor."""
        scale = self.compute(width, height)
        if scale is None:
            logger.debug(f"Container not laid out ({width}x{height}), keeping scale {self._scale:.3f}")
            return self._scale
        self._scale = scale
        return self._scale


def _is_measurable(value: float) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False
