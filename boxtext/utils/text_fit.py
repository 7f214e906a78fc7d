import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from boxtext.utils.style import Style
from boxtext.utils.text_split import split_words
from boxtext.utils.text_wrap import Measurer, TextWrapper, WrapResult

logger = logging.getLogger(__name__)

Wrap = Callable[[str, Style, float, float, bool], WrapResult]
EllipsisFn = Callable[[str], str]

_TRAILING_STOP = re.compile(r"[.,]$")


@dataclass(frozen=True)
class FitConstants:
    # Empirically tuned; layouts are compared against these exact values.
    area_mod_base: float = 1.165
    area_mod_aspect: float = 0.1
    height_ceiling: float = 0.8
    line_height_ratio: float = 1.4
    baseline_shift: float = 0.1


DEFAULT_CONSTANTS = FitConstants()


@dataclass(frozen=True)
class FitResult:
    font_size: float
    line_height: float
    lines: list[str]
    y_offset: float = 0.0
    truncated: bool = False
    accepted_lines: int = 0

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class _FitState:
    font_size: float
    line_height: float
    lines: list[str] = field(default_factory=list)
    accepted_lines: int = 0
    truncated: bool = False


def default_ellipsis(line: str) -> str:
    return _TRAILING_STOP.sub("", line) + "..."


def can_hold_line(
    width: float,
    height: float,
    line_height: float,
    font_min: float,
    resize: bool,
    constants: FitConstants = DEFAULT_CONSTANTS,
) -> bool:
    """Whether the box has room for at least one line of the smallest allowed text."""
    if width <= font_min:
        return False
    if height > line_height:
        return True
    return resize and height > font_min * constants.line_height_ratio


def estimate_font_size(
    widths: Sequence[float],
    width: float,
    height: float,
    font_size: float,
    line_height: float,
    constants: FitConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Propose a starting font size before the first wrap pass.

    Compares the area the measured words would cover at ``line_height`` with the
    box area, and the widest word with the box width. When either overflows the
    size is scaled by the tighter of the two ratios. The result is also capped
    at ``height_ceiling`` of the box height. This is only an estimate; the fit
    loop still verifies it by wrapping.
    """
    size = font_size
    if widths:
        area_mod = constants.area_mod_base + width / height * constants.area_mod_aspect
        box_area = width * height
        max_width = max(widths)
        text_area = sum(w * line_height for w in widths) * area_mod

        if max_width > width or text_area > box_area:
            area_ratio = math.sqrt(box_area / text_area)
            width_ratio = width / max_width
            size = math.floor(size * min(area_ratio, width_ratio))

    height_max = math.floor(height * constants.height_ceiling)
    return min(size, height_max)


def apply_ellipsis(lines: list[str], ellipsis: EllipsisFn = default_ellipsis) -> list[str]:
    if not lines:
        return [ellipsis("")]
    return [*lines[:-1], ellipsis(lines[-1])]


def vertical_offset(
    vertical_align: str,
    height: float,
    line_count: int,
    line_height: float,
    constants: FitConstants = DEFAULT_CONSTANTS,
) -> float:
    text_height = line_count * line_height
    if vertical_align == "middle":
        offset = height / 2 - text_height / 2
    elif vertical_align == "bottom":
        offset = height - text_height
    else:
        offset = 0.0
    return offset - line_height * constants.baseline_shift


def anchor_offset(text_anchor: str, width: float) -> float:
    if text_anchor == "middle":
        return width / 2
    if text_anchor == "end":
        return width
    return 0.0


def fit_text(
    text: str,
    style: Style,
    width: float,
    height: float,
    *,
    font_min: float,
    font_max: float,
    resize: bool = False,
    overflow: bool = False,
    vertical_align: str = "top",
    ellipsis: EllipsisFn = default_ellipsis,
    measurer: Optional[Measurer] = None,
    wrap: Optional[Wrap] = None,
    split: Callable[[str], list[str]] = split_words,
    constants: FitConstants = DEFAULT_CONSTANTS,
    ellipsis_at_min: bool = False,
) -> FitResult:
    """
    Choose the font size and wrapped lines for ``text`` inside a width x height box.

    Without ``resize`` the style's size and line height are used as given and a
    truncated wrap is finished by the ellipsis. With ``resize`` the search
    starts at ``font_max``, is narrowed by :func:`estimate_font_size` and then
    steps down one pixel per truncated wrap. A size below ``font_min``, given
    or reached, gives an empty result, which renderers skip; a resized search
    then reports ``font_min``. ``ellipsis_at_min`` instead keeps the last
    attempt and ellipsizes it.
    """
    if wrap is None:
        if measurer is None:
            raise TypeError("fit_text needs a measurer or a wrap function")
        wrap = TextWrapper(measurer, split)
    if resize and measurer is None:
        raise TypeError("fit_text needs a measurer to estimate a resized font")

    if resize:
        state = _FitState(font_size=font_max, line_height=font_max * constants.line_height_ratio)
    else:
        line_height = style.line_height or style.font_size * constants.line_height_ratio
        state = _FitState(font_size=style.font_size, line_height=line_height)

    if not can_hold_line(width, height, state.line_height, font_min, resize, constants):
        logger.debug("Box %sx%s cannot hold a line, skipping", width, height)
        state.truncated = True
        return _finish(state, vertical_align, height, constants)

    if resize:
        widths = measurer.measure(split(text), style.resized(state.font_size, state.line_height))
        state.font_size = estimate_font_size(
            widths, width, height, state.font_size, state.line_height, constants
        )
        logger.debug("Area estimate proposes %spx", state.font_size)
        if ellipsis_at_min and state.font_size < font_min:
            state.font_size = font_min

    last_attempt: Optional[tuple[float, float, list[str]]] = None
    while True:
        if state.font_size < font_min:
            if ellipsis_at_min and last_attempt is not None:
                state.font_size, state.line_height, lines = last_attempt
                state.accepted_lines = len(lines)
                state.lines = apply_ellipsis(lines, ellipsis)
                logger.debug("Floor reached, ellipsizing at %spx", state.font_size)
            else:
                if resize:
                    state.font_size = font_min
                    state.line_height = font_min * constants.line_height_ratio
                state.lines = []
                state.accepted_lines = 0
                logger.debug("Font size below floor %spx, no lines", font_min)
            state.truncated = True
            break
        if resize:
            if state.font_size > font_max:
                state.font_size = font_max
            state.line_height = state.font_size * constants.line_height_ratio

        result = wrap(text, style.resized(state.font_size, state.line_height), width, height, overflow)
        lines = [line for line in result.lines if line != ""]

        if not result.truncated:
            state.lines = lines
            state.accepted_lines = len(lines)
            break

        if resize:
            # Strictly decreasing, so the loop ends once font_min is passed.
            last_attempt = (state.font_size, state.line_height, lines)
            state.font_size -= 1
            continue

        state.accepted_lines = len(lines)
        state.lines = apply_ellipsis(lines, ellipsis)
        state.truncated = True
        break

    logger.debug(
        "Fitted %s lines at %spx (truncated=%s)",
        len(state.lines),
        state.font_size,
        state.truncated,
    )
    return _finish(state, vertical_align, height, constants)


def _finish(state: _FitState, vertical_align: str, height: float, constants: FitConstants) -> FitResult:
    return FitResult(
        font_size=state.font_size,
        line_height=state.line_height,
        lines=state.lines,
        y_offset=vertical_offset(vertical_align, height, state.accepted_lines, state.line_height, constants),
        truncated=state.truncated,
        accepted_lines=state.accepted_lines,
    )
