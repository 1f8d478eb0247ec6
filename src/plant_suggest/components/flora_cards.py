"""Detail cards for the flora the model added, with highlight and zoom buttons."""

from __future__ import annotations

import html
from typing import List, Optional

import streamlit as st

from plant_suggest.components.overlay import compact_html
from plant_suggest.utils.logger import get_app_logger
from plant_suggest.utils.processing import ProcessingController
from plant_suggest.utils.schema_utils import FloraDetail

logger = get_app_logger()


def _toggle_highlight(controller: ProcessingController, index: int) -> None:
    current = controller.session.highlighted
    controller.highlight(None if current == index else index)


def _open_zoom(controller: ProcessingController, index: Optional[int]) -> None:
    logger.info(f"Zoom requested on flora item {index}")
    controller.open_zoom(index)


def flora_cards(flora: List[FloraDetail], controller: ProcessingController) -> None:
    """Render one card per added plant/tree.

    Args:
        flora: Flora details returned by the extraction step
        controller: Controller that owns the highlight and zoom state
    """
    if not flora:
        st.info("AI added plants, but could not identify them with confidence.")
        return

    st.subheader("🌱 Added Flora Details")
    highlighted = controller.session.highlighted

    for i, plant in enumerate(flora):
        selected = highlighted == i
        border = "#16a34a" if selected else "#bbf7d0"
        background = "#f0fdf4" if selected else "white"

        st.markdown(compact_html(f"""
        <div style="border: 1px solid {border}; border-radius: 8px; padding: 15px; margin-bottom: 8px; background: {background};">
            <div style="font-size: 1.1em; font-weight: bold; color: #16a34a;">{html.escape(plant.name)}</div>
            <div style="color: #374151; margin-top: 4px;">{html.escape(plant.description)}</div>
            <div style="font-size: 0.9em; color: #6b7280; margin-top: 8px;">
                <strong style="color: #374151;">Care Tips:</strong> {html.escape(plant.care_tips)}
            </div>
        </div>
        """), unsafe_allow_html=True)

        cols = st.columns(2)
        with cols[0]:
            st.button(
                "Hide highlight" if selected else "Highlight",
                key=f"highlight_{i}",
                on_click=_toggle_highlight,
                args=(controller, i),
                use_container_width=True,
            )
        with cols[1]:
            st.button(
                "🔍 Zoom",
                key=f"zoom_{i}",
                on_click=_open_zoom,
                args=(controller, i),
                use_container_width=True,
            )
