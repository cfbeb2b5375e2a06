# collage/services/compositor/raster.py
import base64
import binascii
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

from collage.core.errors import ElementDecodeError


@dataclass
class DecodedRaster:
    data: bytes
    size: tuple[int, int]
    format: str | None

    def reader(self) -> ImageReader:
        return ImageReader(BytesIO(self.data))


def decode_data_url(src: str) -> bytes:
    """data:<mime>;base64,<payload> → payload 바이트 (첫 번째 콤마 뒤)"""
    if not isinstance(src, str) or "," not in src:
        raise ElementDecodeError("src is not a data URL")
    payload = src.split(",", 1)[1].strip()
    if not payload:
        raise ElementDecodeError("empty image payload")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ElementDecodeError(f"invalid base64 payload: {e}") from e


def load_raster(src: str) -> DecodedRaster:
    data = decode_data_url(src)
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            size, fmt = img.size, img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise ElementDecodeError(f"unreadable image: {e}") from e
    return DecodedRaster(data=data, size=size, format=fmt)
