from boxtext.config import Settings, load_settings
from boxtext.services.measure import FitzMeasurer, ReportlabMeasurer, create_measurer
from boxtext.services.text_box import TextBox, TextBoxLayout
from boxtext.utils.style import Style
from boxtext.utils.text_fit import (
    FitConstants,
    FitResult,
    apply_ellipsis,
    default_ellipsis,
    estimate_font_size,
    fit_text,
    vertical_offset,
)
from boxtext.utils.text_split import split_words
from boxtext.utils.text_trim import trim, trim_left, trim_right
from boxtext.utils.text_wrap import TextWrapper, WrapResult

__version__ = "0.1.0"

__all__ = [
    "FitConstants",
    "FitResult",
    "FitzMeasurer",
    "ReportlabMeasurer",
    "Settings",
    "Style",
    "TextBox",
    "TextBoxLayout",
    "TextWrapper",
    "WrapResult",
    "apply_ellipsis",
    "create_measurer",
    "default_ellipsis",
    "estimate_font_size",
    "fit_text",
    "load_settings",
    "split_words",
    "trim",
    "trim_left",
    "trim_right",
    "vertical_offset",
]
