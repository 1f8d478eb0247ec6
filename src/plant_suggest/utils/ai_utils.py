"""
ai_utils.py  - Google Gen AI helpers   (SDK ≥ 1.x)

* FloraImageEditor asks the image model to add plants/trees and returns the edited image.
* FloraExtractor compares original and edited images and returns the added flora as JSON.
* Both receive a GeminiConfig at construction; neither reads the environment.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, List, Optional

from google import genai
from google.genai import types as gt  # typed config helpers
from pydantic import ValidationError

from plant_suggest.constants.prompts import FLORA_PROMPT, flora_response_schema
from plant_suggest.utils.env_utils import GeminiConfig
from plant_suggest.utils.errors import (
    FormatError,
    MalformedResponseError,
    NoImageReturnedError,
    UpstreamError,
)
from plant_suggest.utils.logger import get_gemini_logger
from plant_suggest.utils.schema_utils import (
    DEFAULT_EDITED_MIME_TYPE,
    FloraDetail,
    FloraResponse,
    ImagePayload,
)

# Get logger for this module
logger = get_gemini_logger()


# ── Helpers ───────────────────────────────────────────────────────────────────
def _image_part(payload: ImagePayload) -> gt.Part:
    try:
        raw = base64.b64decode(payload.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Image payload is not valid base64: {e}") from e
    return gt.Part.from_bytes(data=raw, mime_type=payload.mime_type)


def _response_parts(response: Any) -> list:
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []
    return candidates[0].content.parts or []


def parse_flora_response(text: Optional[str]) -> List[FloraDetail]:
    """
    Parse the structured-output text into FloraDetail objects.

    An empty ``flora`` list is a valid answer. Anything that is not an object
    with a ``flora`` array of well-formed items raises MalformedResponseError.
    Bounding boxes are clamped to the unit square.
    """
    if text is None or not text.strip():
        raise MalformedResponseError("The model returned an empty response.")

    try:
        payload = json.loads(text.strip())
    except json.JSONDecodeError as err:
        raise MalformedResponseError(f"The model response is not valid JSON: {err}") from err

    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
    if "flora" not in payload:
        raise MalformedResponseError("The model response has no 'flora' field.")
    if not isinstance(payload["flora"], list):
        raise MalformedResponseError(
            f"Expected 'flora' to be a list, got {type(payload['flora']).__name__}"
        )

    try:
        parsed = FloraResponse.model_validate(payload)
    except ValidationError as err:
        raise MalformedResponseError(f"Invalid flora item in response: {err}") from err

    return [
        detail.model_copy(update={"bounding_box": detail.bounding_box.clamped()})
        for detail in parsed.flora
    ]


class _GeminiService:
    """Owns the lazily created genai.Client and wraps backend failures."""

    def __init__(self, config: GeminiConfig, client: Optional[genai.Client] = None):
        self.config = config
        self._client_instance = client

    def _client(self) -> genai.Client:
        if self._client_instance is None:
            if not self.config.api_key:
                raise UpstreamError("API Error: no Gemini API key configured (set GEMINI_API_KEY).")
            logger.debug("Initializing new Gemini client")
            try:
                self._client_instance = genai.Client(api_key=self.config.api_key)
            except Exception as err:
                raise UpstreamError(f"API Error: {err}") from err
        return self._client_instance

    def _generate(self, model: str, contents: list, cfg: gt.GenerateContentConfig, purpose: str):
        client = self._client()
        logger.info(f"Calling Gemini model: {model} ({purpose})")
        try:
            return client.models.generate_content(model=model, contents=contents, config=cfg)
        except Exception as err:
            logger.error(f"Error calling Gemini API for {purpose}: {err}", exc_info=True)
            raise UpstreamError(f"API Error: {err}") from err


# ── Public API ────────────────────────────────────────────────────────────────
class FloraImageEditor(_GeminiService):

    def edit_image(self, data: str, mime_type: str, instruction: str) -> ImagePayload:
        """
        Send an image and an instruction to the image model and return the edited image.

        Args:
            data: Base64 image payload
            mime_type: Media type of the payload
            instruction: Natural-language edit instruction

        Returns:
            ImagePayload with the first inline image found in the response

        Raises:
            NoImageReturnedError: the response holds no image part
            UpstreamError: the backend call failed
        """
        contents = [_image_part(ImagePayload(data=data, mime_type=mime_type)), instruction]
        cfg = gt.GenerateContentConfig(response_modalities=["IMAGE"])

        response = self._generate(self.config.edit_model, contents, cfg, "image editing")

        for part in _response_parts(response):
            inline = part.inline_data
            if inline is not None and inline.data:
                raw = inline.data
                encoded = base64.b64encode(raw).decode("ascii") if isinstance(raw, (bytes, bytearray)) else raw
                mime = inline.mime_type or DEFAULT_EDITED_MIME_TYPE
                logger.info(f"Received edited image ({mime})")
                return ImagePayload(data=encoded, mime_type=mime)
            if part.text:
                logger.warning(f"Model returned text instead of an image: {part.text[:200]}")

        raise NoImageReturnedError("No image was generated in the response.")


class FloraExtractor(_GeminiService):

    def extract_flora(self, original: ImagePayload, edited: ImagePayload) -> List[FloraDetail]:
        """Ask the vision model which plants/trees were added between the two images."""
        contents = [FLORA_PROMPT, _image_part(original), _image_part(edited)]
        cfg = gt.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=flora_response_schema(),
        )

        response = self._generate(self.config.vision_model, contents, cfg, "plant details")

        if self.config.debug:
            logger.debug(f"Raw Gemini response: {response.text}")

        try:
            flora = parse_flora_response(response.text)
        except MalformedResponseError as err:
            logger.error(f"Error processing Gemini response: {err}")
            raise

        logger.info(f"Received {len(flora)} flora item(s) from Gemini")
        return flora
