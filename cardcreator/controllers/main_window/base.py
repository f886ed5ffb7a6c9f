"""
Shared plumbing for the main window coordinators.

Coordinators never import PySide6. The window hands them a context whose
callbacks reach back into the UI, which keeps them testable as plain objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

from loguru import logger

StatusSink = Callable[[str], None]


@dataclass(slots=True)
class CoordinatorContext:
    """Callbacks a coordinator may use to reach the window."""

    status: Optional[StatusSink] = None


@runtime_checkable
class Coordinator(Protocol):
    """Lifecycle every coordinator exposes to the window."""

    def bind(self, context: CoordinatorContext) -> None:
        """Attach the window callbacks."""

    def teardown(self) -> None:
        """Drop references to the window before it closes."""


class SimpleCoordinator:
    """Default :class:`Coordinator` with status reporting."""

    def __init__(self) -> None:
        self._context: Optional[CoordinatorContext] = None

    def bind(self, context: CoordinatorContext) -> None:
        self._context = context

    def teardown(self) -> None:
        self._context = None

    @property
    def context(self) -> Optional[CoordinatorContext]:
        return self._context

    def report(self, message: str) -> None:
        """Log ``message`` and show it in the window status line when bound."""
        logger.info(message)
        if self._context is not None and self._context.status is not None:
            self._context.status(message)
