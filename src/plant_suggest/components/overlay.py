"""Highlight and zoom overlays: normalized bounding boxes -> percentage-based CSS."""

from __future__ import annotations

import html
from typing import Dict, Optional, Tuple

from plant_suggest.utils.schema_utils import FloraDetail, NormalizedRect

ZOOM_LEVEL = 3
HIGHLIGHT_COLOR = "#16a34a"


def _pct(value: float) -> str:
    return f"{round(value * 100, 4):g}%"


def _css(style: Dict[str, str]) -> str:
    return "; ".join(f"{key}: {value}" for key, value in style.items())


def compact_html(markup: str) -> str:
    # Markdown treats indented lines as code blocks
    return " ".join(line.strip() for line in markup.splitlines() if line.strip())


def overlay_style(rect: NormalizedRect) -> Dict[str, str]:
    """Absolute position of the highlight box, as percentages of the image size."""
    return {
        "left": _pct(rect.x),
        "top": _pct(rect.y),
        "width": _pct(rect.width),
        "height": _pct(rect.height),
    }


def zoom_focus(rect: NormalizedRect) -> Tuple[float, float]:
    """Centroid of the box in percent (x, y)."""
    return (rect.x + rect.width / 2) * 100, (rect.y + rect.height / 2) * 100


def zoom_style(rect: Optional[NormalizedRect], zoom_level: int = ZOOM_LEVEL) -> Dict[str, str]:
    """
    Style for the zoomed image.

    Scaling around ``transform-origin`` keeps the focus point where it is, so the
    selected item stays under the same spot of the viewport while it grows.
    """
    style = {"image-rendering": "crisp-edges"}
    if rect is None:
        return style

    center_x, center_y = zoom_focus(rect)
    style["transform-origin"] = f"{round(center_x, 4):g}% {round(center_y, 4):g}%"
    style["transform"] = f"scale({zoom_level})"
    return style


def zoomed_point(point: Tuple[float, float], focus: Tuple[float, float],
                 zoom_level: float = ZOOM_LEVEL) -> Tuple[float, float]:
    """Where a point (in percent) lands after scaling by ``zoom_level`` around ``focus``."""
    return (
        focus[0] + zoom_level * (point[0] - focus[0]),
        focus[1] + zoom_level * (point[1] - focus[1]),
    )


def label_anchor_style(rect: NormalizedRect, zoom_level: float = 1) -> Dict[str, str]:
    """Position for the name label + arrow, just above the box and centred on it."""
    focus = zoom_focus(rect)
    top_centre = ((rect.x + rect.width / 2) * 100, rect.y * 100)
    left, top = zoomed_point(top_centre, focus, zoom_level)
    return {
        "top": f"calc({round(max(top, 0.0), 4):g}% - 8px)",
        "left": f"{round(left, 4):g}%",
        "transform": "translate(-50%, -100%)",
    }


def highlight_html(data_url: str, detail: Optional[FloraDetail]) -> str:
    """Edited image with the highlight box of ``detail`` drawn on top."""
    box = ""
    if detail is not None:
        box_style = {
            "position": "absolute",
            **overlay_style(detail.bounding_box),
            "border": f"4px solid {HIGHLIGHT_COLOR}",
            "background": "rgba(22, 163, 74, 0.2)",
            "border-radius": "6px",
            "pointer-events": "none",
        }
        box = f"""
        <div style="{_css(box_style)}">
            <span style="position: absolute; top: -28px; left: 0; background: {HIGHLIGHT_COLOR}; color: white;
                         font-size: 0.75em; font-weight: 600; padding: 2px 8px; border-radius: 999px;
                         white-space: nowrap;">{html.escape(detail.name)}</span>
        </div>"""

    return compact_html(f"""
    <div style="position: relative; width: 100%;">
        <img src="{data_url}" alt="Generated by AI" style="width: 100%; display: block; border-radius: 8px;"/>{box}
    </div>
    """)


def zoom_html(data_url: str, detail: Optional[FloraDetail], zoom_level: int = ZOOM_LEVEL) -> str:
    """Zoomed edited image, centred on ``detail`` when given, with a name label and arrow."""
    img_style = {"width": "100%", "display": "block", "transition": "transform 0.3s ease-in-out"}
    if detail is None:
        img_style.update(zoom_style(None))
        label = ""
    else:
        img_style.update(zoom_style(detail.bounding_box, zoom_level))
        anchor = {
            "position": "absolute",
            **label_anchor_style(detail.bounding_box, zoom_level),
            "pointer-events": "none",
            "text-align": "center",
        }
        label = f"""
        <div style="{_css(anchor)}">
            <span style="background: {HIGHLIGHT_COLOR}; color: white; font-weight: 600; padding: 6px 16px;
                         border-radius: 999px; white-space: nowrap;">{html.escape(detail.name)}</span>
            <div style="color: {HIGHLIGHT_COLOR}; font-size: 2em; line-height: 1;">&#9660;</div>
        </div>"""

    return compact_html(f"""
    <div style="position: relative; overflow: hidden; border-radius: 8px;">
        <img src="{data_url}" alt="Generated by AI - Zoomed" style="{_css(img_style)}"/>{label}
    </div>
    """)
