"""Full-screen zoom of the edited image, optionally centred on one flora item."""

from __future__ import annotations

from typing import Optional

import streamlit as st

from plant_suggest.components.overlay import ZOOM_LEVEL, zoom_html
from plant_suggest.utils.schema_utils import FloraDetail


@st.dialog("Zoomed view", width="large")
def zoom_dialog(data_url: str, detail: Optional[FloraDetail]) -> None:
    if detail is not None:
        st.caption(f"{detail.name} at {ZOOM_LEVEL}x")
    st.markdown(zoom_html(data_url, detail), unsafe_allow_html=True)

    if st.button("Close", use_container_width=True):
        st.rerun()
