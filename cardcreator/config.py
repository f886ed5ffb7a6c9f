"""Runtime configuration for the card creator."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os

from loguru import logger

PACKAGE_DIR = Path(__file__).parent
DEFAULT_ASSETS_DIR = PACKAGE_DIR / "assets"
DEFAULT_HISTORY_PATH = Path.home() / ".cardcreator" / "recent_cards.json"

EXPORT_BACKENDS = ("declarative", "capture")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
        return default


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw).expanduser()


@dataclass
class CardCreatorConfig:
    """Settings shared by the preview, the exporters and the services."""

    # Virtual canvas, fixed
    canvas_width: int = 1920
    canvas_height: int = 1080

    # Preview scaling
    min_scale: float = 0.1
    max_scale: float = 1.2
    resize_debounce_ms: int = 100

    # Assets and storage
    assets_dir: Path = field(default_factory=lambda: DEFAULT_ASSETS_DIR)
    history_path: Path = field(default_factory=lambda: DEFAULT_HISTORY_PATH)
    max_recent_cards: int = 5

    # Export
    output_dir: Path = field(default_factory=Path.cwd)
    export_backend: str = "declarative"

    # Résumé autofill
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.0
    openai_max_tokens: int = 2000

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.min_scale <= 0 or self.min_scale > self.max_scale:
            raise ValueError(
                f"Invalid scale range [{self.min_scale}, {self.max_scale}]"
            )
        if self.export_backend not in EXPORT_BACKENDS:
            raise ValueError(
                f"Unknown export backend {self.export_backend!r}, "
                f"expected one of {', '.join(EXPORT_BACKENDS)}"
            )
        self.resize_debounce_ms = max(0, self.resize_debounce_ms)
        self.max_recent_cards = max(1, self.max_recent_cards)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.canvas_width, self.canvas_height

    @classmethod
    def from_env(cls) -> 'CardCreatorConfig':
        """Crée une configuration à partir des variables d'environnement."""
        backend = os.environ.get("CARD_EXPORT_BACKEND", "declarative").strip().lower()
        if backend not in EXPORT_BACKENDS:
            logger.warning(f"Unknown CARD_EXPORT_BACKEND {backend!r}, using 'declarative'")
            backend = "declarative"
        min_scale = _env_float("CARD_MIN_SCALE", 0.1)
        max_scale = _env_float("CARD_MAX_SCALE", 1.2)
        if min_scale <= 0 or min_scale > max_scale:
            logger.warning("Invalid CARD_MIN_SCALE/CARD_MAX_SCALE range, using defaults")
            min_scale, max_scale = 0.1, 1.2
        return cls(
            min_scale=min_scale,
            max_scale=max_scale,
            resize_debounce_ms=_env_int("CARD_RESIZE_DEBOUNCE_MS", 100),
            assets_dir=_env_path("CARD_ASSETS_DIR", DEFAULT_ASSETS_DIR),
            history_path=_env_path("CARD_HISTORY_PATH", DEFAULT_HISTORY_PATH),
            max_recent_cards=_env_int("CARD_MAX_RECENT", 5),
            output_dir=_env_path("CARD_OUTPUT_DIR", Path.cwd()),
            export_backend=backend,
            openai_model=os.environ.get("CARD_OPENAI_MODEL", "gpt-4o-mini"),
            openai_temperature=_env_float("CARD_OPENAI_TEMPERATURE", 0.0),
            openai_max_tokens=_env_int("CARD_OPENAI_MAX_TOKENS", 2000),
            log_level=os.environ.get("CARD_LOG_LEVEL", "INFO").upper(),
            log_file=_env_path("CARD_LOG_FILE", None),
        )


# Instance globale par défaut
DEFAULT_CONFIG = CardCreatorConfig.from_env()
