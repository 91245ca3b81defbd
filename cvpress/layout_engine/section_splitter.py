# cvpress/layout_engine/section_splitter.py
"""
Split generated CV text into titled sections.

A heading is a line of capital letters and spaces on its own, e.g. "WORK EXPERIENCE".
"""

import string
from dataclasses import dataclass
from typing import List, Tuple

_CAPITALS = frozenset(string.ascii_uppercase)


@dataclass(frozen=True)
class Section:
    title: str
    content_lines: Tuple[str, ...] = ()


def is_heading(line: str) -> bool:
    text = line.strip()
    if not text or text[0] not in _CAPITALS:
        return False
    # str.isupper() alone would accept "TOP 10 SKILLS"
    return all(ch in _CAPITALS or ch.isspace() for ch in text)


def _to_section(chunk: List[str]) -> Section:
    return Section(title=chunk[0].strip(), content_lines=tuple(chunk[1:]))


def split_sections(text: str) -> List[Section]:
    """
    Partition `text` into sections, breaking before every heading line.

    Text before the first heading forms an implicit section titled by its own
    first line. Blank chunks are dropped; order is kept.
    """
    if not text or not text.strip():
        return []

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    # leading blank lines belong to no chunk
    while lines and not lines[0].strip():
        lines.pop(0)

    chunks: List[List[str]] = []
    current: List[str] = []
    for i, line in enumerate(lines):
        if i > 0 and is_heading(line):
            chunks.append(current)
            current = []
        current.append(line)
    chunks.append(current)

    sections = []
    for chunk in chunks:
        if not any(ln.strip() for ln in chunk):
            continue
        sections.append(_to_section(chunk))
    return sections
