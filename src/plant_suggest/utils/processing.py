"""Processing flow: upload -> edit image -> identify added flora, with per-run state tracking."""

from __future__ import annotations

from typing import Callable, Optional

from plant_suggest.constants.prompts import EDIT_PROMPT, EDITING_MESSAGE, IDENTIFYING_MESSAGE
from plant_suggest.utils.ai_utils import FloraExtractor, FloraImageEditor
from plant_suggest.utils.errors import ReadError
from plant_suggest.utils.file_utils import UploadSource, decode_data_url, encode_to_data_url
from plant_suggest.utils.logger import get_flow_logger
from plant_suggest.utils.schema_utils import (
    EditedImageResult,
    FailedState,
    FloraSession,
    LoadingState,
    SuccessState,
    UploadedImage,
    ZoomState,
)

logger = get_flow_logger()

StageCallback = Callable[[str], None]


class ProcessingController:
    """
    Single writer of the FloraSession shown by the UI.

    Each upload starts a new run with a larger ``run_id``. Results that come back
    for an older run (after a re-upload or a reset) are dropped.
    """

    def __init__(self, editor: FloraImageEditor, extractor: FloraExtractor):
        self.editor = editor
        self.extractor = extractor
        self.session = FloraSession()
        # file_id of the uploader selection that started the current session
        self.upload_id: Optional[str] = None

    # ── Run bookkeeping ──────────────────────────────────────────────────
    def _begin(self, uploaded: Optional[UploadedImage]) -> int:
        self.session = FloraSession(run_id=self.session.run_id + 1, uploaded=uploaded)
        logger.debug(f"Started run #{self.session.run_id}")
        return self.session.run_id

    def _update(self, run_id: int, **changes) -> bool:
        if run_id != self.session.run_id:
            logger.info(f"Discarding result of superseded run #{run_id} (current: #{self.session.run_id})")
            return False
        for field, value in changes.items():
            setattr(self.session, field, value)
        return True

    def _enter_stage(self, run_id: int, stage: str, message: str, on_stage: Optional[StageCallback]) -> bool:
        if not self._update(run_id, state=LoadingState(stage=stage)):
            return False
        logger.info(f"Run #{run_id}: {message}")
        if on_stage is not None:
            on_stage(message)
        return True

    # ── Transitions ──────────────────────────────────────────────────────
    def upload(self, file: UploadSource, on_stage: Optional[StageCallback] = None) -> FloraSession:
        """Encode a freshly uploaded file and process it. Discards the previous session."""
        file_name = getattr(file, "name", None)
        try:
            data_url = encode_to_data_url(file)
        except ReadError as err:
            logger.error(f"Upload rejected: {err}")
            run_id = self._begin(None)
            self._update(run_id, state=FailedState(stage="reading", message="Failed to read file."))
            return self.session

        mime_type = decode_data_url(data_url).mime_type
        uploaded = UploadedImage(data_url=data_url, mime_type=mime_type, file_name=file_name)
        return self.process(uploaded, on_stage=on_stage)

    def process(self, uploaded: UploadedImage, on_stage: Optional[StageCallback] = None) -> FloraSession:
        """Run the edit and identify steps for ``uploaded`` as a new run."""
        run_id = self._begin(uploaded)
        stage = "editing"
        try:
            original = decode_data_url(uploaded.data_url)
            if not self._enter_stage(run_id, "editing", EDITING_MESSAGE, on_stage):
                return self.session
            edited = self.editor.edit_image(original.data, original.mime_type, EDIT_PROMPT)
            if not self._update(run_id, edited=EditedImageResult(data_url=edited.to_data_url())):
                return self.session

            stage = "identifying"
            if not self._enter_stage(run_id, "identifying", IDENTIFYING_MESSAGE, on_stage):
                return self.session
            flora = self.extractor.extract_flora(original, edited)
            if self._update(run_id, flora=flora, state=SuccessState()):
                logger.info(f"Run #{run_id} finished with {len(flora)} flora item(s)")
        except Exception as err:
            logger.error(f"Run #{run_id} failed while {stage}: {err}", exc_info=True)
            self._update(run_id, state=FailedState(stage=stage, message=f"Generation failed: {err}"))
        finally:
            # Script reruns unwind through here as BaseException
            if run_id == self.session.run_id and self.session.is_loading:
                logger.warning(f"Run #{run_id} interrupted while {stage}")
                self.session.state = FailedState(stage=stage, message="Generation interrupted.")

        return self.session

    def sync_upload(self, file_id: Optional[str]) -> bool:
        """
        Follow the uploader widget across reruns.

        Returns True when ``file_id`` is a new selection that should be processed.
        A cleared uploader resets the session so the page matches the sidebar.
        """
        if file_id is None:
            if self.upload_id is not None:
                logger.info("Uploader cleared")
                self.reset()
            return False
        if file_id == self.upload_id:
            return False
        self.upload_id = file_id
        return True

    def reset(self) -> FloraSession:
        """Return to Idle, dropping the upload, results and any in-flight run."""
        self.upload_id = None
        self._begin(None)
        logger.info("Session reset")
        return self.session

    # ── Interaction state ────────────────────────────────────────────────
    def highlight(self, index: Optional[int]) -> None:
        if index is not None and self.session.detail_at(index) is None:
            logger.warning(f"Ignoring highlight of unknown flora item {index}")
            return
        self.session.highlighted = index

    def open_zoom(self, index: Optional[int] = None) -> None:
        """Zoom the edited image, centred on flora item ``index`` or whole when None."""
        if self.session.edited is None:
            logger.warning("Ignoring zoom request: no edited image yet")
            return
        if index is not None and self.session.detail_at(index) is None:
            logger.warning(f"Ignoring zoom on unknown flora item {index}")
            return
        self.session.zoom = ZoomState(active=True, item=index)

    def close_zoom(self) -> None:
        self.session.zoom = ZoomState()
