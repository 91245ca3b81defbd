# cvpress/config.py
"""
Layout configuration.

Defaults reproduce the fixed letter-size, 1-inch-margin layout. A JSON layout
template can override them through its "page" object, e.g.

    {"template_name": "classic", "page": {"size": "A4", "margin": 60, "body_font_size": 10.5}}

The environment variable CVPRESS_MEASURED_BREAKS ("1"/"true"/"yes") switches the
per-line page-break check from the fixed requirement to the measured wrapped height.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

from reportlab.lib.pagesizes import A4, letter

from .surface import is_known_family

logger = logging.getLogger(__name__)

PAGE_SIZES = {"letter": letter, "a4": A4}
ENV_MEASURED_BREAKS = "CVPRESS_MEASURED_BREAKS"


@dataclass(frozen=True)
class LayoutConfig:
    page_size: str = "letter"
    margin: float = 72.0  # 1 inch
    font_family: str = "Helvetica"

    # header block
    name_font_size: float = 24
    contact_font_size: float = 10
    name_advance: float = 28
    contact_advance: float = 30
    contact_separator: str = " | "

    # section title + rule
    title_font_size: float = 12
    title_block_height: float = 20
    title_rule_offset: float = 5
    title_rule_width: float = 1.5
    title_advance: float = 18

    # content lines
    body_font_size: float = 11
    line_height: float = 12
    header_row_height: float = 14
    plain_trailing_gap: float = 2
    bullet_marker: str = "•"
    bullet_marker_indent: float = 8
    bullet_text_indent: float = 20
    bullet_width_reduction: float = 15
    section_gap: float = 10

    # pagination
    line_space_requirement: float = 20
    measured_line_breaks: bool = False

    @property
    def page_dimensions(self) -> Tuple[float, float]:
        return PAGE_SIZES.get(self.page_size.lower(), letter)

    @property
    def page_width(self) -> float:
        return float(self.page_dimensions[0])

    @property
    def page_height(self) -> float:
        return float(self.page_dimensions[1])

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin


def _env_flag(value: Optional[str]) -> Optional[bool]:
    if value is None or not value.strip():
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def config_from_template(template: Dict[str, Any]) -> LayoutConfig:
    """Map a template's "page" object onto LayoutConfig. Unknown keys are ignored."""
    page_cfg = template.get("page", {}) or {}
    known = {f.name for f in fields(LayoutConfig)}
    # the template format names these differently
    aliases = {"size": "page_size", "font_size": "body_font_size"}
    overrides = {}
    for key, value in page_cfg.items():
        name = aliases.get(key, key)
        if name in known:
            overrides[name] = value
        else:
            logger.debug("Ignoring unknown layout key %r", key)
    if "page_size" in overrides and overrides["page_size"].lower() not in PAGE_SIZES:
        raise ValueError(f"Unsupported page size: {overrides['page_size']}")
    if "font_family" in overrides and not is_known_family(overrides["font_family"]):
        raise ValueError(f"Unsupported font family: {overrides['font_family']}")
    return replace(LayoutConfig(), **overrides)


def load_layout_config(template_path: Optional[str] = None) -> LayoutConfig:
    """Load layout config from an optional JSON template, then apply env overrides."""
    if template_path:
        if not os.path.exists(template_path):
            raise FileNotFoundError(f"Template not found: {template_path}")
        with open(template_path, "r", encoding="utf-8") as f:
            cfg = config_from_template(json.load(f))
    else:
        cfg = LayoutConfig()

    measured = _env_flag(os.getenv(ENV_MEASURED_BREAKS))
    if measured is not None:
        cfg = replace(cfg, measured_line_breaks=measured)
    return cfg
