"""Command-line entry point for cardcreator-cli."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from ..common.errors import CardCreatorError
from ..config import DEFAULT_CONFIG, EXPORT_BACKENDS
from ..controllers.export_manager import ExportManager
from ..logging import configure_logging
from ..schemas.profile_schema import ProfileRecord
from ..storage.recent_cards import RecentCardsStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardcreator-cli",
        description="Export candidate cards to PDF.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Export a profile JSON file to <name>-card.pdf.")
    export.add_argument("profile", type=Path, help="Profile JSON (camelCase or snake_case keys).")
    export.add_argument("--output-dir", "-o", type=Path, help="Target directory (default: CARD_OUTPUT_DIR or cwd).")
    export.add_argument("--backend", choices=EXPORT_BACKENDS, default=DEFAULT_CONFIG.export_backend)

    sub.add_parser("history", help="List recent cards, most recent first.")
    return parser


def load_profile(path: Path) -> ProfileRecord:
    data = json.loads(path.read_text(encoding="utf-8"))
    return ProfileRecord.from_form_data(data)


def _capture_surface(record: ProfileRecord):
    """Offscreen Qt preview showing ``record``, for the capture backend."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    from ..views.qt_surface import QtCardSurface
    from ..widgets.scaled_preview import ScaledCardPreview

    app = QApplication.instance() or QApplication([])
    preview = ScaledCardPreview()
    preview.card.set_record(record)
    preview.resize(960, 540)
    app.processEvents()
    return preview, QtCardSurface(preview)


def run_export(args) -> int:
    if not args.profile.exists():
        print(f"error: profile not found: {args.profile}", file=sys.stderr)
        return 1
    try:
        record = load_profile(args.profile)
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        print(f"error: invalid profile {args.profile.name}: {exc}", file=sys.stderr)
        return 1

    manager = ExportManager(DEFAULT_CONFIG)
    surface = preview = None
    try:
        if args.backend == "capture":
            preview, surface = _capture_surface(record)
        result = manager.export(record, args.backend, surface=surface, output_dir=args.output_dir)
    except CardCreatorError as exc:
        print(f"error: {exc.user_message}", file=sys.stderr)
        return 1
    finally:
        if preview is not None:
            preview.deleteLater()

    if result is None:
        print("error: export superseded", file=sys.stderr)
        return 1
    print(result.path)
    for warning in result.warnings:
        print(f"warning: {warning.key}: {warning.message}", file=sys.stderr)
    return 0


def run_history() -> int:
    store = RecentCardsStore.at(DEFAULT_CONFIG.history_path, DEFAULT_CONFIG.max_recent_cards)
    for card in store.list():
        name = card.data.name or "Unnamed Candidate"
        position = card.data.position or "No position"
        print(f"{card.id}\t{card.saved_at:%d/%m/%Y}\t{name}\t{position}")
    return 0


def cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(DEFAULT_CONFIG)

    if args.command == "export":
        return run_export(args)
    return run_history()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(cli())
