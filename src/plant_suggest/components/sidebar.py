"""Sidebar: image upload, reset button and model info."""

from __future__ import annotations

from typing import Optional

import streamlit as st
from streamlit.runtime.uploaded_file_manager import UploadedFile

from plant_suggest.utils.env_utils import GeminiConfig
from plant_suggest.utils.file_utils import SUPPORTED_IMAGE_TYPES
from plant_suggest.utils.logger import get_logger

# Get logger for this module
logger = get_logger("sidebar")


def upload_panel(config: GeminiConfig, on_reset) -> Optional[UploadedFile]:
    """Displays the uploader and reset button; returns the currently selected file."""

    # Changing the key is the only way to clear a file_uploader
    if "uploader_nonce" not in st.session_state:
        st.session_state.uploader_nonce = 0

    st.sidebar.header("Upload an Image")
    st.sidebar.caption("The AI will automatically add suitable plants or trees.")

    uploaded = st.sidebar.file_uploader(
        "Choose File",
        type=SUPPORTED_IMAGE_TYPES,
        key=f"uploader_{st.session_state.uploader_nonce}",
        help="PNG, JPEG or WEBP",
    )

    if st.sidebar.button("Upload New Image", use_container_width=True):
        logger.info("Reset requested from sidebar")
        st.session_state.uploader_nonce += 1
        on_reset()
        st.rerun()

    st.sidebar.markdown("---")

    if not config.api_key:
        st.sidebar.warning("GEMINI_API_KEY is not set. Generation requests will fail.")

    with st.sidebar.expander("ℹ️ Models"):
        st.markdown(f"""
         - Image editing: `{config.edit_model}`
         - Plant identification: `{config.vision_model}`
         """)

    return uploaded
