import os
from typing import Sequence

import pytest

from boxtext.config import Settings
from boxtext.utils.style import Style


class FixedAdvanceMeasurer:
    """Every character, spaces included, is ``advance * font_size`` wide."""

    def __init__(self, advance: float = 0.6) -> None:
        self.advance = advance
        self.calls = 0

    def width(self, text: str, style: Style) -> float:
        return len(text) * self.advance * style.font_size

    def measure(self, units: Sequence[str], style: Style) -> list[float]:
        self.calls += 1
        return [self.width(unit, style) for unit in units]


@pytest.fixture
def measurer() -> FixedAdvanceMeasurer:
    return FixedAdvanceMeasurer()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def style() -> Style:
    return Style(font_family="Helvetica", font_size=10, font_weight=400, line_height=14)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in list(os.environ):
        if name.startswith("BOXTEXT_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
