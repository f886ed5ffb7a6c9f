"""
Scaled Card Preview
===================

Hosts the 1:1 card widget in a graphics view and shrinks or grows it to fit
the available space. Only the view transform changes; the card keeps its
canvas coordinates.
"""

from typing import Optional

from PySide6.QtCore import QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QTransform
from PySide6.QtWidgets import QFrame, QGraphicsScene, QGraphicsView
from loguru import logger

from ..config import DEFAULT_CONFIG, CardCreatorConfig
from ..controllers.scale_controller import ScaleController
from ..views.card_widget import CardWidget


class ScaledCardPreview(QGraphicsView):
    """Graphics view applying the scale controller's factor from the top-left origin."""

    scale_changed = Signal(float)

    def __init__(self, card: Optional[CardWidget] = None,
                 config: Optional[CardCreatorConfig] = None, parent=None):
        super().__init__(parent)
        self.config = config or DEFAULT_CONFIG
        self.controller = ScaleController(self.config)
        self.card = card or CardWidget()

        self._scene = QGraphicsScene(self)
        self._proxy = self._scene.addWidget(self.card)
        self._scene.setSceneRect(QRectF(0, 0, self.config.canvas_width, self.config.canvas_height))
        self.setScene(self._scene)

        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setTransformationAnchor(QGraphicsView.NoAnchor)
        self.setResizeAnchor(QGraphicsView.NoAnchor)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setFrameShape(QFrame.NoFrame)
        self.setBackgroundBrush(QColor("#111827"))

        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.setInterval(self.config.resize_debounce_ms)
        self._resize_timer.timeout.connect(self.apply_scale)

        self._apply_transform(self.controller.scale)

    @property
    def scale_factor(self) -> float:
        return self.controller.scale

    def resizeEvent(self, event):
        super().resizeEvent(event)
        # Restarting the timer coalesces a burst of resizes into one update.
        self._resize_timer.start()

    def apply_scale(self) -> float:
        viewport = self.viewport().size()
        previous = self.controller.scale
        scale = self.controller.update(viewport.width(), viewport.height())
        self._apply_transform(scale)
        if scale != previous:
            logger.debug(f"Preview scale {previous:.3f} -> {scale:.3f}")
            self.scale_changed.emit(scale)
        return scale

    def _apply_transform(self, scale: float) -> None:
        self.setTransform(QTransform.fromScale(scale, scale))
        self.horizontalScrollBar().setValue(0)
        self.verticalScrollBar().setValue(0)

    # Transform state, used by the capture backend.
    def surface_state(self) -> QTransform:
        return QTransform(self.transform())

    def force_unscaled(self) -> None:
        self._resize_timer.stop()
        self.setTransform(QTransform())

    def restore_state(self, state: QTransform) -> None:
        self.setTransform(state)
