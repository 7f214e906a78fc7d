import logging
import threading
from pathlib import Path
from typing import Optional, Sequence

import fitz
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from boxtext.config import Settings
from boxtext.utils.style import Style
from boxtext.utils.text_wrap import Measurer

logger = logging.getLogger(__name__)

# family alias -> (regular, bold) core font names
REPORTLAB_FAMILIES = {
    "helvetica": ("Helvetica", "Helvetica-Bold"),
    "arial": ("Helvetica", "Helvetica-Bold"),
    "verdana": ("Helvetica", "Helvetica-Bold"),
    "sans-serif": ("Helvetica", "Helvetica-Bold"),
    "times": ("Times-Roman", "Times-Bold"),
    "times new roman": ("Times-Roman", "Times-Bold"),
    "times-roman": ("Times-Roman", "Times-Bold"),
    "serif": ("Times-Roman", "Times-Bold"),
    "courier": ("Courier", "Courier-Bold"),
    "courier new": ("Courier", "Courier-Bold"),
    "monospace": ("Courier", "Courier-Bold"),
}

FITZ_FAMILIES = {
    "helvetica": ("helv", "hebo"),
    "arial": ("helv", "hebo"),
    "verdana": ("helv", "hebo"),
    "sans-serif": ("helv", "hebo"),
    "times": ("tiro", "tibo"),
    "times new roman": ("tiro", "tibo"),
    "times-roman": ("tiro", "tibo"),
    "serif": ("tiro", "tibo"),
    "courier": ("cour", "cobo"),
    "courier new": ("cour", "cobo"),
    "monospace": ("cour", "cobo"),
}


def _primary_family(font_family: str) -> str:
    # CSS-style stacks: "Verdana, sans-serif" -> "verdana"
    return font_family.split(",")[0].strip().strip("\"'").lower()


class ReportlabMeasurer:
    """Text widths from reportlab's AFM metrics or registered TrueType fonts."""

    def __init__(
        self,
        font_files: Optional[dict[str, Path]] = None,
        fallback_font: str = "Helvetica",
    ) -> None:
        self.fallback_font = fallback_font
        self._warned: set[str] = set()
        self._registered_names: dict[str, str] = {}
        for name, path in (font_files or {}).items():
            pdfmetrics.registerFont(TTFont(name, str(path)))
            self._registered_names[name.lower()] = name
            logger.info("Registered font %s from %s", name, Path(path).name)

    def font_name(self, style: Style) -> str:
        family = _primary_family(style.font_family)
        if family in self._registered_names:
            return self._registered_names[family]
        if family in REPORTLAB_FAMILIES:
            regular, bold = REPORTLAB_FAMILIES[family]
            return bold if style.is_bold else regular
        if family not in self._warned:
            self._warned.add(family)
            logger.warning("Unknown font family %r, measuring with %s", style.font_family, self.fallback_font)
        return self.fallback_font

    def width(self, text: str, style: Style) -> float:
        return pdfmetrics.stringWidth(text, self.font_name(style), style.font_size)

    def measure(self, units: Sequence[str], style: Style) -> list[float]:
        font_name = self.font_name(style)
        return [pdfmetrics.stringWidth(unit, font_name, style.font_size) for unit in units]


class FitzMeasurer:
    """
    Text widths from PyMuPDF fonts.

    ``fitz.Font`` objects are not shared between threads: each thread loads
    its own copy on first use.
    """

    def __init__(
        self,
        font_files: Optional[dict[str, Path]] = None,
        fallback_font: str = "helv",
    ) -> None:
        self.font_files = {name.lower(): Path(path) for name, path in (font_files or {}).items()}
        self.fallback_font = fallback_font
        self._local = threading.local()
        self._warned: set[str] = set()

    def _font_key(self, style: Style) -> str:
        family = _primary_family(style.font_family)
        if family in self.font_files:
            return family
        if family in FITZ_FAMILIES:
            regular, bold = FITZ_FAMILIES[family]
            return bold if style.is_bold else regular
        if family not in self._warned:
            self._warned.add(family)
            logger.warning("Unknown font family %r, measuring with %s", style.font_family, self.fallback_font)
        return self.fallback_font

    def font(self, style: Style) -> fitz.Font:
        cache = getattr(self._local, "fonts", None)
        if cache is None:
            cache = self._local.fonts = {}
        key = self._font_key(style)
        font = cache.get(key)
        if font is None:
            if key in self.font_files:
                font = fitz.Font(fontfile=str(self.font_files[key]))
            else:
                font = fitz.Font(fontname=key)
            cache[key] = font
        return font

    def width(self, text: str, style: Style) -> float:
        return self.font(style).text_length(text, fontsize=style.font_size)

    def measure(self, units: Sequence[str], style: Style) -> list[float]:
        font = self.font(style)
        return [font.text_length(unit, fontsize=style.font_size) for unit in units]


def create_measurer(settings: Settings) -> Measurer:
    font_files = settings.font_files()
    if settings.measure_backend == "reportlab":
        return ReportlabMeasurer(font_files=font_files, fallback_font=settings.fallback_font)
    if settings.measure_backend == "fitz":
        fallback = FITZ_FAMILIES.get(_primary_family(settings.fallback_font), ("helv", "hebo"))[0]
        return FitzMeasurer(font_files=font_files, fallback_font=fallback)
    raise ValueError(f"Unknown measure backend: {settings.measure_backend}")
