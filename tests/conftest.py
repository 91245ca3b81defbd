# tests/conftest.py
import math

import pytest

from cvpress.models import PersonalDetails


class FakeSurface:
    """
    In-memory surface. Every character is `char_width` points wide, so wrapping is
    predictable: a line holds floor(max_width / char_width) characters.
    """

    def __init__(self, char_width: float = 6.0, line_factor: float = 1.15):
        self.char_width = char_width
        self.line_factor = line_factor
        self.calls = []
        self.saved = None

    def wrap_text(self, text, max_width, font):
        per_line = max(1, int(max_width // self.char_width))
        if not text:
            return []
        return [text[i:i + per_line] for i in range(0, len(text), per_line)]

    def measure_wrapped_height(self, text, max_width, font_size):
        per_line = max(1, int(max_width // self.char_width))
        n = sum(max(1, math.ceil(len(p) / per_line)) for p in text.split("\n"))
        return n * font_size * self.line_factor

    def draw_text(self, content, x, y, font, align="left"):
        self.calls.append(("text", content, x, y, font, align))

    def draw_line(self, x1, y1, x2, y2, width):
        self.calls.append(("line", x1, y1, x2, y2, width))

    def new_page(self):
        self.calls.append(("page",))

    def save(self, filename):
        self.saved = filename


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def jane():
    return PersonalDetails(full_name="Jane Doe", email="jane@example.com", phone="555-0100", address="Springfield")


SCENARIO_CV = (
    "PROFESSIONAL SUMMARY\n"
    "Experienced engineer.\n"
    "\n"
    "WORK EXPERIENCE\n"
    "Acme Corp | Senior Engineer | Jan 2020 - Present\n"
    "- Shipped feature X\n"
    "- Led team of 3"
)


@pytest.fixture
def scenario_cv():
    return SCENARIO_CV
