import base64

import pytest

from collage.core.errors import ElementDecodeError
from collage.services.compositor.raster import decode_data_url, load_raster

from conftest import CORRUPT_SRC, bomb_png_src, make_data_url


def test_decode_takes_payload_after_first_comma():
    payload = base64.b64encode(b"a,b,c").decode()
    assert decode_data_url(f"data:text/plain;base64,{payload}") == b"a,b,c"


@pytest.mark.parametrize("src", ["", "no-comma-here", "data:image/png;base64,", "data:image/png;base64,@@@!"])
def test_decode_rejects_bad_data_urls(src):
    with pytest.raises(ElementDecodeError):
        decode_data_url(src)


def test_load_raster_reads_png_and_jpeg():
    png = load_raster(make_data_url(size=(12, 7)))
    assert png.size == (12, 7)
    assert png.format == "PNG"
    jpeg = load_raster(make_data_url(size=(8, 8), fmt="JPEG"))
    assert jpeg.format == "JPEG"
    assert jpeg.reader().getSize() == (8, 8)


def test_load_raster_rejects_non_image_bytes():
    with pytest.raises(ElementDecodeError):
        load_raster(CORRUPT_SRC)


def test_load_raster_rejects_decompression_bomb_header():
    with pytest.raises(ElementDecodeError, match="decompression bomb"):
        load_raster(bomb_png_src())
