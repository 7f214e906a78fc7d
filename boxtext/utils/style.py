from dataclasses import dataclass, replace
from typing import Union

BOLD_WEIGHTS = {"bold", "bolder"}


@dataclass(frozen=True)
class Style:
    font_family: str
    font_size: float
    font_weight: Union[str, int] = 400
    line_height: float = 0.0

    @property
    def is_bold(self) -> bool:
        weight = str(self.font_weight).strip().lower()
        if weight in BOLD_WEIGHTS:
            return True
        try:
            return float(weight) >= 600
        except ValueError:
            return False

    def resized(self, font_size: float, line_height: float) -> "Style":
        return replace(self, font_size=font_size, line_height=line_height)
