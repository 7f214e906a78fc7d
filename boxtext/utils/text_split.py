import re

SPLIT_CHARS = "-/;:&"
PREFIX_CHARS = "([{<\u2018\u201c\u3008\u300a\u300c\u300e\u3010\u3014\uff08\uff3b\uff5b"
SUFFIX_CHARS = (
    ")]}>!%,.?\u2019\u201d"
    "\u3001\u3002\u3009\u300b\u300d\u300f\u3011\u3015"
    "\u30fc\uff01\uff09\uff0c\uff0e\uff1a\uff1b\uff1f\uff3d\uff5d"
)

# CJK ideographs, kana and fullwidth forms are written without spaces between words.
NO_SPACE_PATTERN = re.compile(
    "[\u2e80-\u2fdf\u3000-\u30ff\u3100-\u312f\u3190-\u31ff"
    "\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uff00-\uffef]"
)
_WORD_PATTERN = re.compile(r"[^\s\-/;:&]+[\-/;:&]*|[\-/;:&]+")


def split_words(text: str) -> list[str]:
    """
    Split text into wrappable units, preserving order.

    Whitespace separates units and is never part of one. A unit also ends after
    a run of split characters ("state-of-the-art" -> "state-", "of-", ...).
    Characters of no-space scripts become one unit each, with opening brackets
    pulled forward and closing punctuation kept on the preceding character.
    """
    if not text:
        return []

    units: list[str] = []
    for chunk in _WORD_PATTERN.findall(text):
        if NO_SPACE_PATTERN.search(chunk):
            units.extend(_split_no_space(chunk))
        else:
            units.append(chunk)
    return units


def _split_no_space(chunk: str) -> list[str]:
    units: list[str] = []
    pending = ""
    for ch in chunk:
        if ch in PREFIX_CHARS:
            pending += ch
            continue
        if ch in SUFFIX_CHARS or ch in SPLIT_CHARS:
            if pending or not units:
                pending += ch
            else:
                units[-1] += ch
            continue
        if NO_SPACE_PATTERN.match(ch):
            units.append(pending + ch)
            pending = ""
            continue
        # Latin runs embedded in CJK text stay together.
        if units and not pending and not NO_SPACE_PATTERN.match(units[-1][-1]):
            units[-1] += ch
        else:
            units.append(pending + ch)
            pending = ""

    if pending:
        if units:
            units[-1] += pending
        else:
            units.append(pending)
    return units
