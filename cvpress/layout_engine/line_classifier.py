# cvpress/layout_engine/line_classifier.py
"""
line_classifier.py
------------------
Labels one CV content line by its typographic shape:

- Bullet            "- Shipped feature X"                        -> marker stripped
- DatedEntryHeader  "Acme Corp | Engineer | Jan 2020 - Present"  -> (title, dates)
- Plain             anything else (summaries, skill lists)       -> rendered italic

First match wins. The classifier looks at a single line only and never raises.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Union

BULLET_MARKERS = ("•", "*", "-")

BULLET_RE = re.compile(r"^\s*[•*\-] ?")

DATE_CUE_RE = re.compile(
    r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec|Present|Full-time|\d{4})\b",
    flags=re.IGNORECASE,
)

# shorter date sides are stray years or truncation artifacts
MIN_DATE_PART_LENGTH = 5

TITLE_TRAILING_SEPARATORS = " \t|,;:/@-–—"


@dataclass(frozen=True)
class Bullet:
    text: str


@dataclass(frozen=True)
class DatedEntryHeader:
    title_part: str
    date_part: str


@dataclass(frozen=True)
class Plain:
    text: str


ClassifiedLine = Union[Bullet, DatedEntryHeader, Plain]


def split_dated_header(line: str):
    """
    Split a line at its first date cue into (title, dates).
    Returns None when there is no cue or the date side is too short to be a date range.
    """
    m = DATE_CUE_RE.search(line)
    if not m:
        return None
    date_side = line[m.start():]
    if len(date_side) < MIN_DATE_PART_LENGTH:
        return None
    title_part = line[:m.start()].rstrip(TITLE_TRAILING_SEPARATORS).strip()
    return title_part, date_side.strip()


def classify_line(line: str) -> ClassifiedLine:
    text = line.strip()

    if text.startswith(BULLET_MARKERS):
        return Bullet(BULLET_RE.sub("", text, count=1))

    parts = split_dated_header(text)
    if parts is not None:
        return DatedEntryHeader(*parts)

    return Plain(text)


def classify_lines(lines: Iterable[str]) -> List[ClassifiedLine]:
    """Classify every non-blank line, keeping order."""
    return [classify_line(ln) for ln in lines if ln.strip()]
