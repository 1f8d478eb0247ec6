"""Shared fixtures: in-memory images and a stand-in for google.genai.Client."""

import base64
import io
import os
import tempfile
from pathlib import Path

# Keep test runs from writing log files into the working tree
os.environ.setdefault("PLANT_SUGGEST_LOG_DIR", str(Path(tempfile.gettempdir()) / "plant_suggest_test_logs"))

import pytest
from google.genai import types as gt
from PIL import Image

from plant_suggest.utils.env_utils import GeminiConfig
from plant_suggest.utils.schema_utils import ImagePayload


def make_image_bytes(fmt: str = "PNG", size=(8, 6), color=(34, 139, 34)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeUpload(io.BytesIO):
    """Mimics Streamlit's UploadedFile: a BytesIO with name and type."""

    def __init__(self, data: bytes, name: str = "garden.png", type: str = "image/png"):
        super().__init__(data)
        self.name = name
        self.type = type


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


class FakeGenaiClient:
    def __init__(self, response=None, error=None):
        self.models = FakeModels(response, error)


def text_response(text: str) -> gt.GenerateContentResponse:
    return gt.GenerateContentResponse(
        candidates=[gt.Candidate(content=gt.Content(role="model", parts=[gt.Part(text=text)]))]
    )


def parts_response(*parts: gt.Part) -> gt.GenerateContentResponse:
    return gt.GenerateContentResponse(
        candidates=[gt.Candidate(content=gt.Content(role="model", parts=list(parts)))]
    )


def image_part(data: bytes, mime_type: str = "image/png") -> gt.Part:
    return gt.Part(inline_data=gt.Blob(data=data, mime_type=mime_type))


@pytest.fixture
def config():
    return GeminiConfig(api_key="test-key", edit_model="edit-model", vision_model="vision-model")


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def png_payload(png_bytes):
    return ImagePayload(data=base64.b64encode(png_bytes).decode("ascii"), mime_type="image/png")


@pytest.fixture
def jpeg_payload():
    data = make_image_bytes("JPEG")
    return ImagePayload(data=base64.b64encode(data).decode("ascii"), mime_type="image/jpeg")
