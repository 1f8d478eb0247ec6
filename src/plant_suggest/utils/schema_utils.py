"""Pydantic models (V2) for uploads, Gemini results and the per-session processing state."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

DEFAULT_EDITED_MIME_TYPE = "image/png"


# ── Image payloads ───────────────────────────────────────────────────────

class ImagePayload(BaseModel):
    """Base64 image data plus its media type, ready to be sent as inline data."""

    data: str
    mime_type: str

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class UploadedImage(BaseModel):
    data_url: str
    mime_type: str
    file_name: Optional[str] = None


class EditedImageResult(BaseModel):
    data_url: str


# ── Flora details ────────────────────────────────────────────────────────

class NormalizedRect(BaseModel):
    """Bounding box as fractions of the image size, (x, y) being the top-left corner."""

    x: FiniteFloat
    y: FiniteFloat
    width: FiniteFloat
    height: FiniteFloat

    def clamped(self) -> "NormalizedRect":
        """Return a copy that lies fully inside the unit square."""
        x = min(max(self.x, 0.0), 1.0)
        y = min(max(self.y, 0.0), 1.0)
        return NormalizedRect(
            x=x,
            y=y,
            width=min(max(self.width, 0.0), 1.0 - x),
            height=min(max(self.height, 0.0), 1.0 - y),
        )


class FloraDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    care_tips: str
    bounding_box: NormalizedRect = Field(..., alias="boundingBox")


class FloraResponse(BaseModel):
    """Top-level object returned by the structured-output model."""

    flora: List[FloraDetail]


# ── Processing state (tagged by ``kind``) ────────────────────────────────

class IdleState(BaseModel):
    kind: Literal["idle"] = "idle"


class LoadingState(BaseModel):
    kind: Literal["loading"] = "loading"
    stage: Literal["editing", "identifying"]


class SuccessState(BaseModel):
    kind: Literal["success"] = "success"


class FailedState(BaseModel):
    kind: Literal["failed"] = "failed"
    stage: Literal["reading", "editing", "identifying"]
    message: str


ProcessingState = Annotated[
    Union[IdleState, LoadingState, SuccessState, FailedState],
    Field(discriminator="kind"),
]


class ZoomState(BaseModel):
    # active with item=None means the whole edited image is zoomed
    active: bool = False
    item: Optional[int] = None


class FloraSession(BaseModel):
    """Everything the UI shows for one upload. Replaced wholesale on upload or reset."""

    run_id: int = 0
    uploaded: Optional[UploadedImage] = None
    edited: Optional[EditedImageResult] = None
    flora: Optional[List[FloraDetail]] = None
    state: ProcessingState = Field(default_factory=IdleState)
    highlighted: Optional[int] = None
    zoom: ZoomState = Field(default_factory=ZoomState)

    @property
    def is_loading(self) -> bool:
        return self.state.kind == "loading"

    @property
    def error(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, FailedState) else None

    @property
    def details_unavailable(self) -> bool:
        """Edited image was produced but identifying the added plants failed."""
        return isinstance(self.state, FailedState) and self.state.stage == "identifying" and self.edited is not None

    def detail_at(self, index: Optional[int]) -> Optional[FloraDetail]:
        if index is None or not self.flora or not 0 <= index < len(self.flora):
            return None
        return self.flora[index]
