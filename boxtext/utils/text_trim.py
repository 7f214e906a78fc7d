import re

_LEADING_WS = re.compile(r"^\s+")
_TRAILING_WS = re.compile(r"\s+$")


def trim_left(text: str) -> str:
    return _LEADING_WS.sub("", text)


def trim_right(text: str) -> str:
    return _TRAILING_WS.sub("", text)


def trim(text: str) -> str:
    return trim_right(trim_left(text))
