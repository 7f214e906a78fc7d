import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from boxtext.utils.style import Style
from boxtext.utils.text_split import split_words
from boxtext.utils.text_trim import trim_right

logger = logging.getLogger(__name__)

_GAP_PATTERN = re.compile(r"\s*")


class Measurer(Protocol):
    def measure(self, units: Sequence[str], style: Style) -> list[float]: ...

    def width(self, text: str, style: Style) -> float: ...


@dataclass(frozen=True)
class WrapResult:
    lines: list[str]
    truncated: bool
    widths: list[float] = field(default_factory=list)
    words: list[str] = field(default_factory=list)


class TextWrapper:
    """
    Greedy line packer.

    Units come from ``split`` and keep the whitespace that followed them in the
    source text, so the joined lines reproduce the original spacing. Only a
    completed line is right-trimmed; renderers trim the last one themselves.
    Unless ``overflow`` is set, a line taller than the box truncates even the
    first line.
    """

    def __init__(self, measurer: Measurer, split: Callable[[str], list[str]] = split_words) -> None:
        self.measurer = measurer
        self.split = split

    def __call__(
        self,
        text: str,
        style: Style,
        width: float,
        height: float,
        overflow: bool = False,
    ) -> WrapResult:
        words = self.split(text)
        if not words:
            return WrapResult(lines=[], truncated=False)

        sizes = self.measurer.measure(words, style)
        space = self.measurer.width(" ", style)

        lines: list[str] = []
        truncated = False
        width_prog = 0.0
        cursor = 0
        forced_break = False

        for i, (word, word_width) in enumerate(zip(words, sizes)):
            start = text.find(word, cursor)
            if start == -1:
                # Splitter rewrote the unit; fall back to single spaces.
                gap = " " if i < len(words) - 1 else ""
            else:
                end = start + len(word)
                gap = _GAP_PATTERN.match(text, end).group(0)
                cursor = end + len(gap)
            unit = word + gap

            if i == 0 and not overflow and style.line_height > height:
                truncated = True
                break
            if forced_break or width_prog + word_width > width:
                if i == 0 and not overflow:
                    truncated = True
                    break
                if lines:
                    lines[-1] = trim_right(lines[-1])
                if style.line_height * (len(lines) + 1) > height or (word_width > width and not overflow):
                    truncated = True
                    break
                lines.append(unit)
                width_prog = 0.0
            elif i == 0:
                lines.append(unit)
            else:
                lines[-1] += unit

            forced_break = "\n" in gap
            width_prog += word_width + gap.count(" ") * space

        lines = [line for line in lines if line != ""]
        logger.debug(
            "Wrapped %s units into %s lines at %.2fpx (truncated=%s)",
            len(words),
            len(lines),
            style.font_size,
            truncated,
        )
        return WrapResult(
            lines=lines,
            truncated=truncated,
            widths=self.measurer.measure(lines, style) if lines else [],
            words=words,
        )
