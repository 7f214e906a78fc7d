import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from boxtext.config import TEXT_ANCHORS, VERTICAL_ALIGNS, Settings
from boxtext.services.measure import create_measurer
from boxtext.utils.style import Style
from boxtext.utils.text_fit import (
    EllipsisFn,
    FitConstants,
    Wrap,
    anchor_offset,
    default_ellipsis,
    fit_text,
)
from boxtext.utils.text_split import split_words
from boxtext.utils.text_trim import trim_right
from boxtext.utils.text_wrap import Measurer

logger = logging.getLogger(__name__)

Accessor = Callable[[Any, int], Any]

ACCESSOR_OPTIONS = (
    "text",
    "id",
    "font_family",
    "font_size",
    "font_weight",
    "font_color",
    "font_min",
    "font_max",
    "font_resize",
    "line_height",
    "overflow",
    "vertical_align",
    "text_anchor",
    "width",
    "height",
    "x",
    "y",
    "rotate",
)


def constant(value: Any) -> Accessor:
    return lambda d, i: value


def constant_ellipsis(replacement: str) -> EllipsisFn:
    return lambda line: replacement


def key_accessor(key: str, default: Any = None) -> Accessor:
    """Read ``key`` from a mapping or an attribute of an object, else ``default``."""

    def read(d: Any, i: int) -> Any:
        if isinstance(d, Mapping):
            value = d.get(key)
        else:
            value = getattr(d, key, None)
        return default if value is None else value

    return read


def _default_id(d: Any, i: int) -> str:
    value = key_accessor("id")(d, i)
    return str(value) if value else str(i)


@dataclass(frozen=True)
class ItemOptions:
    text: str
    id: str
    font_family: str
    font_size: float
    font_weight: Any
    font_color: str
    font_min: float
    font_max: float
    font_resize: bool
    line_height: float
    overflow: bool
    vertical_align: str
    text_anchor: str
    width: float
    height: float
    x: float
    y: float
    rotate: float


@dataclass
class TextBoxLayout:
    id: str
    index: int
    data: Any
    lines: list[str]
    font_family: str
    font_size: float
    font_weight: Any
    font_color: str
    line_height: float
    width: float
    height: float
    x: float
    y: float
    text_anchor: str = "start"
    rotate: float = 0.0
    truncated: bool = False

    @property
    def visible(self) -> bool:
        return bool(self.lines)

    @property
    def display_lines(self) -> list[str]:
        return [trim_right(line) for line in self.lines]

    @property
    def anchor_dx(self) -> float:
        return anchor_offset(self.text_anchor, self.width)

    @property
    def rotate_origin(self) -> tuple[float, float]:
        return (
            self.x + self.width / 2,
            self.y + self.line_height / 4 + self.line_height * len(self.lines) / 2,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "index": self.index,
            "data": self.data,
            "lines": self.display_lines,
            "font_family": self.font_family,
            "font_size": self.font_size,
            "font_weight": self.font_weight,
            "font_color": self.font_color,
            "line_height": self.line_height,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "dx": self.anchor_dx,
            "text_anchor": self.text_anchor,
            "rotate": self.rotate,
            "rotate_origin": list(self.rotate_origin),
            "truncated": self.truncated,
        }


class TextBox:
    """
    Wrapped, optionally resized text for each datum of a list.

    Every option in ``ACCESSOR_OPTIONS`` is either a constant or a callable
    ``(d, i)``; they are resolved once per item before fitting. ``ellipsis``
    is a callable ``line -> line`` or a plain replacement string.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        measurer: Optional[Measurer] = None,
        split: Callable[[str], list[str]] = split_words,
        wrapper: Optional[Wrap] = None,
        constants: Optional[FitConstants] = None,
        ellipsis_at_min: bool = False,
        **options: Any,
    ) -> None:
        self.settings = settings or Settings()
        self.measurer = measurer or create_measurer(self.settings)
        self.split = split
        self.wrapper = wrapper
        self.constants = constants or FitConstants(
            area_mod_base=self.settings.area_mod_base,
            area_mod_aspect=self.settings.area_mod_aspect,
            height_ceiling=self.settings.height_ceiling,
            line_height_ratio=self.settings.line_height_ratio,
            baseline_shift=self.settings.baseline_shift,
        )
        self.ellipsis_at_min = ellipsis_at_min
        self.ellipsis: EllipsisFn = default_ellipsis
        self._accessors: dict[str, Accessor] = self._default_accessors()
        self.configure(**options)

    def _default_accessors(self) -> dict[str, Accessor]:
        s = self.settings
        return {
            "text": key_accessor("text"),
            "id": _default_id,
            "font_family": constant(s.font_family),
            "font_size": constant(s.font_size),
            "font_weight": constant(s.font_weight),
            "font_color": constant(s.font_color),
            "font_min": constant(s.font_min),
            "font_max": constant(s.font_max),
            "font_resize": constant(s.font_resize),
            "line_height": lambda d, i: self._accessors["font_size"](d, i) * self.constants.line_height_ratio,
            "overflow": constant(False),
            "vertical_align": constant(s.vertical_align),
            "text_anchor": constant(s.text_anchor),
            "width": key_accessor("width", s.width),
            "height": key_accessor("height", s.height),
            "x": key_accessor("x", 0),
            "y": key_accessor("y", 0),
            "rotate": constant(0),
        }

    def configure(self, **options: Any) -> "TextBox":
        for name, value in options.items():
            if name == "ellipsis":
                self.ellipsis = value if callable(value) else constant_ellipsis(str(value))
            elif name in ACCESSOR_OPTIONS:
                self._accessors[name] = value if callable(value) else constant(value)
            else:
                raise TypeError(f"Unknown TextBox option: {name}")
        return self

    def accessor(self, name: str) -> Accessor:
        return self._accessors[name]

    def resolve(self, d: Any, i: int) -> Optional[ItemOptions]:
        a = self._accessors
        text = a["text"](d, i)
        if text is None:
            return None

        vertical_align = str(a["vertical_align"](d, i)).lower()
        if vertical_align not in VERTICAL_ALIGNS:
            logger.warning("Unknown vertical align %r for item %s, using top", vertical_align, i)
            vertical_align = "top"
        text_anchor = str(a["text_anchor"](d, i)).lower()
        if text_anchor not in TEXT_ANCHORS:
            logger.warning("Unknown text anchor %r for item %s, using start", text_anchor, i)
            text_anchor = "start"

        options = ItemOptions(
            text=str(text),
            id=str(a["id"](d, i)),
            font_family=str(a["font_family"](d, i)),
            font_size=float(a["font_size"](d, i)),
            font_weight=a["font_weight"](d, i),
            font_color=str(a["font_color"](d, i)),
            font_min=float(a["font_min"](d, i)),
            font_max=float(a["font_max"](d, i)),
            font_resize=bool(a["font_resize"](d, i)),
            line_height=float(a["line_height"](d, i)),
            overflow=bool(a["overflow"](d, i)),
            vertical_align=vertical_align,
            text_anchor=text_anchor,
            width=float(a["width"](d, i)),
            height=float(a["height"](d, i)),
            x=float(a["x"](d, i)),
            y=float(a["y"](d, i)),
            rotate=float(a["rotate"](d, i)),
        )
        if options.font_resize and options.font_min > options.font_max:
            logger.warning(
                "Item %s has font_min %s above font_max %s; it will not be shown",
                options.id,
                options.font_min,
                options.font_max,
            )
        return options

    def fit_item(self, d: Any, i: int) -> Optional[TextBoxLayout]:
        options = self.resolve(d, i)
        if options is None:
            return None

        style = Style(
            font_family=options.font_family,
            font_size=options.font_size,
            font_weight=options.font_weight,
            line_height=options.line_height,
        )
        result = fit_text(
            options.text,
            style,
            options.width,
            options.height,
            font_min=options.font_min,
            font_max=options.font_max,
            resize=options.font_resize,
            overflow=options.overflow,
            vertical_align=options.vertical_align,
            ellipsis=self.ellipsis,
            measurer=self.measurer,
            wrap=self.wrapper,
            split=self.split,
            constants=self.constants,
            ellipsis_at_min=self.ellipsis_at_min,
        )
        return TextBoxLayout(
            id=options.id,
            index=i,
            data=d,
            lines=result.lines,
            font_family=options.font_family,
            font_size=result.font_size,
            font_weight=options.font_weight,
            font_color=options.font_color,
            line_height=result.line_height,
            width=options.width,
            height=options.height,
            x=options.x,
            y=options.y + result.y_offset,
            text_anchor=options.text_anchor,
            rotate=options.rotate,
            truncated=result.truncated,
        )

    def layout(self, data: Iterable[Any]) -> list[TextBoxLayout]:
        records: list[TextBoxLayout] = []
        total = 0
        for i, d in enumerate(data):
            total += 1
            record = self.fit_item(d, i)
            if record is not None:
                records.append(record)
        self._log_pass(records, total)
        return records

    async def layout_async(self, data: Iterable[Any]) -> list[TextBoxLayout]:
        items = list(enumerate(data))
        item_sem = asyncio.Semaphore(self.settings.layout_parallelism)

        async def layout_one(i: int, d: Any) -> tuple[int, Optional[TextBoxLayout]]:
            async with item_sem:
                record = await asyncio.to_thread(self.fit_item, d, i)
            return i, record

        by_index: dict[int, Optional[TextBoxLayout]] = {}
        tasks = [asyncio.create_task(layout_one(i, d)) for i, d in items]
        try:
            for task in asyncio.as_completed(tasks):
                i, record = await task
                by_index[i] = record
        finally:
            # A failed item leaves the rest pending.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        records = [by_index[i] for i in sorted(by_index) if by_index[i] is not None]
        self._log_pass(records, len(items))
        return records

    def layout_by_id(self, data: Iterable[Any]) -> dict[str, TextBoxLayout]:
        return {record.id: record for record in self.layout(data)}

    @staticmethod
    def _log_pass(records: list[TextBoxLayout], total: int) -> None:
        hidden = sum(1 for record in records if not record.visible)
        logger.info(
            "Laid out %s of %s items (%s without text, %s could not fit)",
            len(records),
            total,
            total - len(records),
            hidden,
        )
