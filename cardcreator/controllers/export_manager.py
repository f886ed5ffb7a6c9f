"""
Export Manager
==============

Runs an export end to end: snapshot the record, build the PDF with the
selected backend, write ``<name>-card.pdf`` atomically, remember the card in
the recent history.

Every export gets a generation token. When the user triggers a new export
before the previous one resolves, the older result is dropped on arrival
instead of being written.
"""

from __future__ import annotations

import itertools
import os
import re
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, runtime_checkable

from loguru import logger

from ..common.errors import ExportError
from ..config import DEFAULT_CONFIG, EXPORT_BACKENDS, CardCreatorConfig
from ..schemas.profile_schema import ProfileRecord
from ..storage.recent_cards import RecentCardsStore
from ..utils.assets import AssetRegistry
from .capture_builder import CaptureAndMapDocumentBuilder, CaptureSurface
from .card_document import CardExport, ExportWarning
from .declarative_builder import DeclarativeDocumentBuilder

DEFAULT_CARD_NAME = "candidate"
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@runtime_checkable
class DocumentExporter(Protocol):
    """A way to turn a profile record into card PDF bytes."""

    backend_name: str

    def render(self, record: ProfileRecord, surface: Optional[CaptureSurface] = None) -> CardExport:
        ...


@dataclass(frozen=True, slots=True)
class ExportTicket:
    """Handed out by :meth:`ExportManager.begin`; identifies one export attempt."""

    generation: int
    record: ProfileRecord
    backend: str


@dataclass(slots=True)
class ExportResult:
    path: Path
    backend: str
    warnings: List[ExportWarning] = field(default_factory=list)


def output_filename(record: ProfileRecord) -> str:
    """``<name-or-default>-card.pdf`` with path-hostile characters replaced."""
    name = _UNSAFE_FILENAME_CHARS.sub("_", record.name).strip(" ._")
    return f"{name or DEFAULT_CARD_NAME}-card.pdf"


def write_atomically(path: Path, payload: bytes) -> Path:
    """Write ``payload`` next to ``path`` then rename; never leaves a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".export-", suffix=".part", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


class ExportManager:
    """Gestionnaire d'export des cartes candidat."""

    def __init__(
        self,
        config: Optional[CardCreatorConfig] = None,
        *,
        exporters: Optional[Dict[str, DocumentExporter]] = None,
        history: Optional[RecentCardsStore] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        if exporters is None:
            exporters = {
                "declarative": DeclarativeDocumentBuilder(AssetRegistry(self.config.assets_dir)),
                "capture": CaptureAndMapDocumentBuilder(),
            }
        self.exporters = exporters
        self.history = history if history is not None else RecentCardsStore.at(
            self.config.history_path, self.config.max_recent_cards
        )
        self._generations = itertools.count(1)
        self._current = 0
        self._lock = threading.Lock()

    @property
    def supported_backends(self) -> List[str]:
        return [name for name in EXPORT_BACKENDS if name in self.exporters]

    def exporter(self, backend: Optional[str] = None) -> DocumentExporter:
        name = backend or self.config.export_backend
        try:
            return self.exporters[name]
        except KeyError:
            available = ", ".join(self.supported_backends)
            raise ExportError(f"Backend {name} non supporté. Backends disponibles: {available}") from None

    # ------------------------------------------------------------------
    # Generations
    # ------------------------------------------------------------------
    def begin(self, record: ProfileRecord, backend: Optional[str] = None) -> ExportTicket:
        """Start a new export; any export still in flight becomes stale."""
        name = self.exporter(backend).backend_name
        with self._lock:
            self._current = next(self._generations)
            ticket = ExportTicket(self._current, record.snapshot(), name)
        logger.debug(f"Export #{ticket.generation} started ({name})")
        return ticket

    def is_current(self, ticket: ExportTicket) -> bool:
        with self._lock:
            return ticket.generation == self._current

    def finish(
        self,
        ticket: ExportTicket,
        export: CardExport,
        output_dir: Optional[Path] = None,
    ) -> Optional[ExportResult]:
        """Write the export if it still belongs to the latest trigger.

        Returns ``None`` when a newer export has started since ``ticket``.
        """
        if not self.is_current(ticket):
            logger.info(f"Discarding stale export #{ticket.generation}")
            return None

        target = Path(output_dir or self.config.output_dir) / output_filename(ticket.record)
        try:
            write_atomically(target, export.pdf)
        except OSError as exc:
            logger.error(f"Could not write {target.name}: {exc}")
            raise ExportError(str(exc), user_message=f"Could not save {target.name}.") from exc

        logger.info(f"Card exported to {target.name} ({export.backend}, {len(export.warnings)} warnings)")
        self.history.save(ticket.record)
        return ExportResult(path=target, backend=export.backend, warnings=list(export.warnings))

    # ------------------------------------------------------------------
    # One-shot export
    # ------------------------------------------------------------------
    def render(self, ticket: ExportTicket, surface: Optional[CaptureSurface] = None) -> CardExport:
        return self.exporter(ticket.backend).render(ticket.record, surface)

    def export(
        self,
        record: ProfileRecord,
        backend: Optional[str] = None,
        surface: Optional[CaptureSurface] = None,
        output_dir: Optional[Path] = None,
    ) -> Optional[ExportResult]:
        """Build and save the card synchronously."""
        ticket = self.begin(record, backend)
        export = self.render(ticket, surface)
        return self.finish(ticket, export, output_dir)
