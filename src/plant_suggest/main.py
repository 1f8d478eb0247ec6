"""Streamlit UI entry-point: upload a photo, let Gemini add plants, explore what was added."""

from __future__ import annotations

from typing import Tuple

import streamlit as st

from plant_suggest.components.flora_cards import flora_cards
from plant_suggest.components.overlay import highlight_html
from plant_suggest.components.sidebar import upload_panel
from plant_suggest.components.zoom_view import zoom_dialog
from plant_suggest.constants.prompts import EDITING_MESSAGE
from plant_suggest.utils.ai_utils import FloraExtractor, FloraImageEditor
from plant_suggest.utils.env_utils import GeminiConfig, load_config
from plant_suggest.utils.errors import FormatError
from plant_suggest.utils.file_utils import data_url_to_bytes, image_size
from plant_suggest.utils.logger import get_app_logger
from plant_suggest.utils.processing import ProcessingController
from plant_suggest.utils.schema_utils import FloraSession

# Get logger for this module
logger = get_app_logger()

# --- Page Config ---
st.set_page_config(
    page_title="AI Plant Suggestion Tool",
    page_icon="🌿",
    layout="wide",
    initial_sidebar_state="expanded"
)


# --- Shared services (one set per server process) ---
@st.cache_resource
def get_services() -> Tuple[GeminiConfig, FloraImageEditor, FloraExtractor]:
    config = load_config()
    logger.info(f"Using models: edit={config.edit_model}, vision={config.vision_model}")
    return config, FloraImageEditor(config), FloraExtractor(config)


config, editor, extractor = get_services()

# --- Initialize Session State ---
default_keys = {
    "controller": None,  # ProcessingController owning the FloraSession
}

for key, default_value in default_keys.items():
    if key not in st.session_state:
        st.session_state[key] = default_value

if st.session_state.controller is None:
    st.session_state.controller = ProcessingController(editor, extractor)


# --- Helper Functions ---

def render_header():
    st.title("🌿 AI Plant Suggestion Tool")
    st.caption(
        "Upload a photo of any space, and our AI will automatically suggest and place suitable plants "
        "and trees to beautify it. See a preview of your enhanced space in seconds!"
    )
    st.markdown("---")


def handle_reset():
    controller: ProcessingController = st.session_state.controller
    controller.reset()


def start_processing(uploaded_file, edited_col) -> None:
    """Run the edit/identify flow for a new upload, showing progress in the edited-image column."""
    controller: ProcessingController = st.session_state.controller
    logger.info(f"New upload: {uploaded_file.name} ({uploaded_file.type}, {uploaded_file.size} bytes)")

    with edited_col:
        with st.status(EDITING_MESSAGE, expanded=False) as status:
            session = controller.upload(uploaded_file, on_stage=lambda message: status.update(label=message))
            if session.error:
                status.update(label="Generation failed", state="error")
            else:
                status.update(label="Done", state="complete")


def render_original(session: FloraSession) -> None:
    st.subheader("Original Image")
    if session.uploaded is None:
        st.info("Upload an image from the sidebar to get started.")
        return

    try:
        st.image(data_url_to_bytes(session.uploaded.data_url), use_container_width=True)
        width, height = image_size(session.uploaded.data_url)
        st.caption(f"{session.uploaded.file_name or 'upload'}: {width}×{height}")
    except FormatError as e:
        logger.warning(f"Could not display original image: {e}")


def render_edited(session: FloraSession) -> None:
    controller: ProcessingController = st.session_state.controller
    st.subheader("Edited Image")

    if session.edited is not None:
        detail = session.detail_at(session.highlighted)
        st.markdown(highlight_html(session.edited.data_url, detail), unsafe_allow_html=True)
        st.button("🔍 Zoom in on image", on_click=controller.open_zoom, key="zoom_whole")

    if session.details_unavailable:
        st.warning(f"Plant details unavailable. {session.error}")
    elif session.error:
        st.error(session.error)
    elif session.edited is None and not session.is_loading:
        st.info("Your edited image will appear here.")


# --- Main App ---
def main():
    logger.debug("Starting main application flow")
    render_header()

    controller: ProcessingController = st.session_state.controller
    uploaded_file = upload_panel(config, on_reset=handle_reset)

    original_col, edited_col = st.columns(2)

    # --- State transition: new upload starts a fresh run, cleared uploader resets ---
    file_id = uploaded_file.file_id if uploaded_file is not None else None
    if controller.sync_upload(file_id):
        start_processing(uploaded_file, edited_col)
        st.rerun()

    session = controller.session

    with original_col:
        render_original(session)
    with edited_col:
        render_edited(session)

    if session.flora is not None and session.edited is not None:
        st.markdown("---")
        flora_cards(session.flora, controller)

    if session.zoom.active and session.edited is not None:
        detail = session.detail_at(session.zoom.item)
        # The dialog keeps itself open across its own reruns
        controller.close_zoom()
        zoom_dialog(session.edited.data_url, detail)


main()
