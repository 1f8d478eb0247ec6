import base64

import pytest

from conftest import FakeUpload, make_image_bytes
from plant_suggest.utils.errors import FormatError, ReadError
from plant_suggest.utils.file_utils import (
    data_url_to_bytes,
    decode_data_url,
    encode_to_data_url,
    image_size,
)


@pytest.mark.parametrize(
    "fmt, mime_type",
    [("PNG", "image/png"), ("JPEG", "image/jpeg"), ("WEBP", "image/webp")],
)
def test_data_url_round_trip(fmt, mime_type):
    data = make_image_bytes(fmt)

    payload = decode_data_url(encode_to_data_url(data, mime_type))

    assert payload.mime_type == mime_type
    assert payload.data == base64.b64encode(data).decode("ascii")
    assert base64.b64decode(payload.data) == data


def test_encode_uses_declared_upload_type():
    upload = FakeUpload(make_image_bytes("JPEG"), name="patio", type="image/jpeg")
    assert encode_to_data_url(upload).startswith("data:image/jpeg;base64,")


def test_encode_guesses_type_from_file_name():
    upload = FakeUpload(make_image_bytes("PNG"), name="balcony.png", type="")
    assert encode_to_data_url(upload).startswith("data:image/png;base64,")


def test_encode_reads_whole_upload_regardless_of_position():
    data = make_image_bytes("PNG")
    upload = FakeUpload(data)
    upload.read()

    assert data_url_to_bytes(encode_to_data_url(upload)) == data


@pytest.mark.parametrize(
    "data, mime_type",
    [
        (b"", "image/png"),
        (b"definitely not an image", "image/png"),
        (make_image_bytes("GIF"), "image/gif"),
    ],
)
def test_encode_rejects_unreadable_uploads(data, mime_type):
    with pytest.raises(ReadError):
        encode_to_data_url(data, mime_type)


def test_encode_wraps_read_failures():
    class BrokenFile:
        name = "broken.png"
        type = "image/png"

        def read(self):
            raise OSError("disk gone")

    with pytest.raises(ReadError, match="disk gone"):
        encode_to_data_url(BrokenFile())


@pytest.mark.parametrize(
    "data_url",
    [
        "",
        "data:image/png;base64",
        "data:image/png;base64,abc,def",
        "data:image/png,abc",
        "image/png;base64,abc",
        "data:;base64,abc",
    ],
)
def test_decode_rejects_malformed_data_urls(data_url):
    with pytest.raises(FormatError):
        decode_data_url(data_url)


def test_decode_does_not_decode_payload():
    payload = decode_data_url("data:image/webp;base64,not-really-base64")
    assert payload.data == "not-really-base64"
    assert payload.mime_type == "image/webp"


def test_image_size():
    data_url = encode_to_data_url(make_image_bytes("PNG", size=(40, 30)), "image/png")
    assert image_size(data_url) == (40, 30)


def test_image_size_rejects_non_image_payload():
    with pytest.raises(FormatError):
        image_size("data:image/png;base64," + base64.b64encode(b"hello").decode("ascii"))
