from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

VERTICAL_ALIGNS = {"top", "middle", "bottom"}
TEXT_ANCHORS = {"start", "middle", "end"}
MEASURE_BACKENDS = {"reportlab", "fitz"}


def _read_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip().strip("\"'")


def _read_int(name: str, default: int) -> int:
    raw = _read_env(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _read_float(name: str, default: float) -> float:
    raw = _read_env(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


def _read_bool(name: str, default: bool) -> bool:
    raw = _read_env(name, "").lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{name} must be a boolean, got {raw!r}")


def _read_choice(name: str, default: str, choices: set[str]) -> str:
    raw = _read_env(name, default).lower()
    if raw not in choices:
        raise RuntimeError(f"{name} must be one of {sorted(choices)}, got {raw!r}")
    return raw


@dataclass(frozen=True)
class Settings:
    font_family: str = "Helvetica"
    font_size: float = 10.0
    font_weight: str = "400"
    font_min: float = 8.0
    font_max: float = 50.0
    font_resize: bool = False
    font_color: str = "black"
    width: float = 200.0
    height: float = 200.0
    vertical_align: str = "top"
    text_anchor: str = "start"
    measure_backend: str = "reportlab"
    fallback_font: str = "Helvetica"
    font_dir: Optional[Path] = None
    layout_parallelism: int = 4
    log_level: str = "INFO"
    area_mod_base: float = 1.165
    area_mod_aspect: float = 0.1
    height_ceiling: float = 0.8
    line_height_ratio: float = 1.4
    baseline_shift: float = 0.1

    def font_files(self) -> dict[str, Path]:
        """TrueType files in ``font_dir`` keyed by file stem."""
        if self.font_dir is None or not self.font_dir.is_dir():
            return {}
        return {path.stem: path for path in sorted(self.font_dir.glob("*.ttf"))}


def load_settings() -> Settings:
    raw_font_dir = _read_env("BOXTEXT_FONT_DIR")
    font_dir = Path(raw_font_dir).expanduser().resolve() if raw_font_dir else None

    settings = Settings(
        font_family=_read_env("BOXTEXT_FONT_FAMILY", "Helvetica"),
        font_size=_read_float("BOXTEXT_FONT_SIZE", 10.0),
        font_weight=_read_env("BOXTEXT_FONT_WEIGHT", "400"),
        font_min=_read_float("BOXTEXT_FONT_MIN", 8.0),
        font_max=_read_float("BOXTEXT_FONT_MAX", 50.0),
        font_resize=_read_bool("BOXTEXT_FONT_RESIZE", False),
        font_color=_read_env("BOXTEXT_FONT_COLOR", "black"),
        width=_read_float("BOXTEXT_WIDTH", 200.0),
        height=_read_float("BOXTEXT_HEIGHT", 200.0),
        vertical_align=_read_choice("BOXTEXT_VERTICAL_ALIGN", "top", VERTICAL_ALIGNS),
        text_anchor=_read_choice("BOXTEXT_TEXT_ANCHOR", "start", TEXT_ANCHORS),
        measure_backend=_read_choice("BOXTEXT_MEASURE_BACKEND", "reportlab", MEASURE_BACKENDS),
        fallback_font=_read_env("BOXTEXT_FALLBACK_FONT", "Helvetica"),
        font_dir=font_dir,
        layout_parallelism=_read_int("BOXTEXT_LAYOUT_PARALLELISM", 4),
        log_level=_read_env("BOXTEXT_LOG_LEVEL", "INFO").upper(),
        area_mod_base=_read_float("BOXTEXT_AREA_MOD_BASE", 1.165),
        area_mod_aspect=_read_float("BOXTEXT_AREA_MOD_ASPECT", 0.1),
        height_ceiling=_read_float("BOXTEXT_HEIGHT_CEILING", 0.8),
        line_height_ratio=_read_float("BOXTEXT_LINE_HEIGHT_RATIO", 1.4),
        baseline_shift=_read_float("BOXTEXT_BASELINE_SHIFT", 0.1),
    )

    if settings.layout_parallelism < 1:
        raise RuntimeError("BOXTEXT_LAYOUT_PARALLELISM must be at least 1")
    if settings.font_dir is not None and not settings.font_dir.is_dir():
        raise RuntimeError(f"BOXTEXT_FONT_DIR is not a directory: {settings.font_dir}")

    return settings
