"""
cvpress/pdf_exporter.py
CV PDF Exporter
---------------
- Splits generated CV text into sections and classifies each line
- Lays everything out on letter pages with 1-inch margins
- Replays the layout onto a ReportLab surface and saves <Full_Name>_CV.pdf

The surface is injected: pass any object implementing the DrawingSurface
protocol (tests use an in-memory fake), or leave it out for a ReportLab canvas.
"""

import argparse
import logging
import os
import re
from dataclasses import replace
from typing import List, Optional

from .config import LayoutConfig, load_layout_config
from .layout_engine.instructions import DrawInstruction
from .layout_engine.page_layout import PageLayoutEngine
from .models import PersonalDetails
from .parser import read_cv_text
from .surface import DrawingSurface, make_surface, replay

logger = logging.getLogger(__name__)

FILENAME_SUFFIX = "_CV.pdf"


# -------------------------------
# File naming
# -------------------------------
def cv_filename(full_name: str) -> str:
    """'Jane Doe' -> 'Jane_Doe_CV.pdf'. Path separators and other symbols are dropped."""
    base = re.sub(r"\s", "_", full_name.strip())
    base = re.sub(r"[^A-Za-z0-9_.\-]", "", base).strip(".")
    return f"{base or 'Candidate'}{FILENAME_SUFFIX}"


def _check_details(details: PersonalDetails) -> None:
    if not details.full_name or not details.full_name.strip():
        raise ValueError("Personal details must include a full name.")


# -------------------------------
# Rendering
# -------------------------------
def build_instructions(cv_text: str, details: PersonalDetails, surface: DrawingSurface,
                       config: Optional[LayoutConfig] = None) -> List[DrawInstruction]:
    return PageLayoutEngine(surface, config).layout(cv_text, details)


def render(cv_text: str, details: PersonalDetails, surface: Optional[DrawingSurface] = None,
           config: Optional[LayoutConfig] = None, out_dir: str = ".") -> str:
    """
    Render `cv_text` for `details` and save it. Returns the written path.
    Surface errors propagate unchanged.
    """
    _check_details(details)
    config = config or LayoutConfig()
    if surface is None:
        surface = make_surface(config.page_dimensions, font_family=config.font_family)

    instructions = build_instructions(cv_text, details, surface, config)
    pages = replay(instructions, surface)

    path = os.path.join(out_dir, cv_filename(details.full_name))
    surface.save(path)
    logger.info("Saved %d-page CV to %s", pages, path)
    return path


def render_pdf_bytes(cv_text: str, details: PersonalDetails, config: Optional[LayoutConfig] = None) -> bytes:
    """Same layout as render(), returned as PDF bytes instead of a file (for downloads)."""
    _check_details(details)
    config = config or LayoutConfig()
    surface = make_surface(config.page_dimensions, font_family=config.font_family)
    replay(build_instructions(cv_text, details, surface, config), surface)
    return surface.getvalue()


# -------------------------------
# CLI
# -------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Render a plain-text CV to a paginated PDF.")
    ap.add_argument("cv", help="CV source: .txt, .pdf or .docx")
    ap.add_argument("--name", required=True, help="Candidate full name (header + file name)")
    ap.add_argument("--email", default="")
    ap.add_argument("--phone", default="")
    ap.add_argument("--address", default="")
    ap.add_argument("--out-dir", default=".", help="Directory for the generated PDF")
    ap.add_argument("--template", default=None, help="JSON layout template")
    ap.add_argument("--measured-breaks", action="store_true",
                    help="Break pages using measured line heights instead of the fixed requirement")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = load_layout_config(args.template)
    if args.measured_breaks:
        config = replace(config, measured_line_breaks=True)

    details = PersonalDetails(full_name=args.name, email=args.email, phone=args.phone, address=args.address)
    text = read_cv_text(args.cv)
    os.makedirs(args.out_dir, exist_ok=True)
    path = render(text, details, config=config, out_dir=args.out_dir)
    print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
