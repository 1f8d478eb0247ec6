import base64
import json

import pytest

from conftest import FakeGenaiClient, image_part, make_image_bytes, parts_response, text_response
from google.genai import types as gt
from plant_suggest.constants.prompts import FLORA_PROMPT
from plant_suggest.utils.ai_utils import FloraExtractor, FloraImageEditor, parse_flora_response
from plant_suggest.utils.env_utils import GeminiConfig
from plant_suggest.utils.errors import (
    FormatError,
    MalformedResponseError,
    NoImageReturnedError,
    UpstreamError,
)

FICUS = {
    "name": "Fiddle Leaf Fig",
    "description": "A tall indoor plant with broad leaves.",
    "care_tips": "Bright indirect light; water when the top soil is dry.",
    "boundingBox": {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.5},
}


# ── Image editing ────────────────────────────────────────────────────────

def test_edit_returns_first_inline_image(config, png_payload):
    edited = make_image_bytes("PNG", color=(0, 128, 0))
    client = FakeGenaiClient(parts_response(
        gt.Part(text="Here is your garden."),
        image_part(edited, "image/png"),
        image_part(b"second image", "image/jpeg"),
    ))
    editor = FloraImageEditor(config, client=client)

    result = editor.edit_image(png_payload.data, png_payload.mime_type, "add plants")

    assert result.mime_type == "image/png"
    assert base64.b64decode(result.data) == edited


def test_edit_sends_image_then_instruction_with_image_modality(config, png_payload, png_bytes):
    client = FakeGenaiClient(parts_response(image_part(b"img")))
    FloraImageEditor(config, client=client).edit_image(png_payload.data, "image/png", "add plants")

    call = client.models.calls[0]
    assert call["model"] == "edit-model"
    assert call["contents"][0].inline_data.data == png_bytes
    assert call["contents"][0].inline_data.mime_type == "image/png"
    assert call["contents"][1] == "add plants"
    assert [str(m) for m in call["config"].response_modalities] == ["IMAGE"]


def test_edit_falls_back_to_png_when_mime_type_missing(config, png_payload):
    client = FakeGenaiClient(parts_response(gt.Part(inline_data=gt.Blob(data=b"img"))))
    result = FloraImageEditor(config, client=client).edit_image(png_payload.data, "image/png", "add plants")
    assert result.mime_type == "image/png"


@pytest.mark.parametrize(
    "response",
    [
        parts_response(gt.Part(text="I can't edit this image.")),
        gt.GenerateContentResponse(candidates=[]),
        gt.GenerateContentResponse(),
    ],
)
def test_edit_without_image_part_raises(config, png_payload, response):
    editor = FloraImageEditor(config, client=FakeGenaiClient(response))
    with pytest.raises(NoImageReturnedError):
        editor.edit_image(png_payload.data, png_payload.mime_type, "add plants")


def test_edit_wraps_backend_failure(config, png_payload):
    editor = FloraImageEditor(config, client=FakeGenaiClient(error=RuntimeError("quota exceeded")))
    with pytest.raises(UpstreamError, match="API Error: quota exceeded"):
        editor.edit_image(png_payload.data, png_payload.mime_type, "add plants")


def test_edit_without_api_key_raises_upstream_error(png_payload):
    editor = FloraImageEditor(GeminiConfig(api_key=None))
    with pytest.raises(UpstreamError, match="GEMINI_API_KEY"):
        editor.edit_image(png_payload.data, png_payload.mime_type, "add plants")


def test_edit_rejects_invalid_base64(config):
    client = FakeGenaiClient(parts_response(image_part(b"img")))
    with pytest.raises(FormatError):
        FloraImageEditor(config, client=client).edit_image("***", "image/png", "add plants")
    assert client.models.calls == []


# ── Flora extraction ─────────────────────────────────────────────────────

def test_extract_returns_flora_details(config, png_payload, jpeg_payload):
    client = FakeGenaiClient(text_response(json.dumps({"flora": [FICUS]})))

    flora = FloraExtractor(config, client=client).extract_flora(jpeg_payload, png_payload)

    assert len(flora) == 1
    assert flora[0].name == "Fiddle Leaf Fig"
    assert flora[0].care_tips.startswith("Bright indirect light")
    assert flora[0].bounding_box.width == pytest.approx(0.3)


def test_extract_sends_prompt_original_then_edited(config, png_payload, jpeg_payload):
    client = FakeGenaiClient(text_response('{"flora": []}'))
    FloraExtractor(config, client=client).extract_flora(jpeg_payload, png_payload)

    call = client.models.calls[0]
    assert call["model"] == "vision-model"
    assert call["contents"][0] == FLORA_PROMPT
    assert call["contents"][1].inline_data.mime_type == "image/jpeg"
    assert call["contents"][2].inline_data.mime_type == "image/png"
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].response_schema is not None


def test_extract_empty_list_is_success(config, png_payload):
    client = FakeGenaiClient(text_response('{"flora": []}'))
    assert FloraExtractor(config, client=client).extract_flora(png_payload, png_payload) == []


@pytest.mark.parametrize(
    "text",
    [
        "Sorry, I cannot help with that.",
        "[]",
        '{"plants": []}',
        '{"flora": null}',
        '{"flora": {"name": "Fern"}}',
        '{"flora": [{"name": "Fern"}]}',
        '{"flora": [{"name": "Fern", "description": "d", "care_tips": "c", '
        '"boundingBox": {"x": "left", "y": 0, "width": 0.1, "height": 0.1}}]}',
    ],
)
def test_extract_malformed_response_is_not_an_empty_list(config, png_payload, text):
    client = FakeGenaiClient(text_response(text))
    with pytest.raises(MalformedResponseError):
        FloraExtractor(config, client=client).extract_flora(png_payload, png_payload)


def test_extract_response_without_text_is_malformed(config, png_payload):
    client = FakeGenaiClient(gt.GenerateContentResponse(candidates=[]))
    with pytest.raises(MalformedResponseError):
        FloraExtractor(config, client=client).extract_flora(png_payload, png_payload)


def test_extract_wraps_backend_failure(config, png_payload):
    client = FakeGenaiClient(error=ConnectionError("connection reset"))
    with pytest.raises(UpstreamError, match="connection reset"):
        FloraExtractor(config, client=client).extract_flora(png_payload, png_payload)


# ── Response parsing ─────────────────────────────────────────────────────

def test_parse_clamps_out_of_range_boxes():
    item = dict(FICUS, boundingBox={"x": 0.8, "y": -0.2, "width": 0.5, "height": 1.5})

    [detail] = parse_flora_response(json.dumps({"flora": [item]}))

    box = detail.bounding_box
    assert (box.x, box.y) == (pytest.approx(0.8), 0.0)
    assert box.width == pytest.approx(0.2)
    assert box.height == pytest.approx(1.0)


def test_parse_tolerates_surrounding_whitespace():
    assert parse_flora_response('\n  {"flora": []}  \n') == []


@pytest.mark.parametrize("text", [None, "", "   "])
def test_parse_empty_text_is_malformed(text):
    with pytest.raises(MalformedResponseError):
        parse_flora_response(text)
