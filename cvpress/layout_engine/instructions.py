# cvpress/layout_engine/instructions.py
"""
Draw instructions emitted by the page layout engine.

Coordinates are engine-local: origin at the top-left corner of the page, y grows
downward. Translating to a backend's coordinate system is the surface's job.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Font:
    family: str = "Helvetica"
    weight: str = "normal"  # "normal" | "bold"
    style: str = "normal"   # "normal" | "italic"
    size: float = 11

    @property
    def is_bold(self) -> bool:
        return self.weight == "bold"

    @property
    def is_italic(self) -> bool:
        return self.style == "italic"


@dataclass(frozen=True)
class TextInstruction:
    content: str
    x: float
    y: float
    font: Font
    align: str = "left"  # "left" | "center" | "right"


@dataclass(frozen=True)
class RuleInstruction:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float


@dataclass(frozen=True)
class NewPageInstruction:
    pass


DrawInstruction = Union[TextInstruction, RuleInstruction, NewPageInstruction]
