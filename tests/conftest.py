# tests/conftest.py
import base64
import random
import struct
import zlib
from io import BytesIO

import fitz  # PyMuPDF
import pytest
from PIL import Image

CORRUPT_SRC = "data:image/png;base64," + base64.b64encode(b"definitely not a png").decode()


def make_data_url(size=(40, 30), color=(220, 40, 40), fmt="PNG") -> str:
    img = Image.new("RGB", size, color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    mime = "image/png" if fmt == "PNG" else "image/jpeg"
    return f"data:{mime};base64," + base64.b64encode(buf.getvalue()).decode()


def image(x=100, y=50, width=400, height=300, rotation=0, src=None) -> dict:
    return {
        "id": 1,
        "src": src or make_data_url(),
        "x": x,
        "y": y,
        "width": width,
        "height": height,
        "rotation": rotation,
    }


def text(content="Hello", x=100, y=100, font_size=24, color="#000000") -> dict:
    return {"id": 2, "content": content, "x": x, "y": y, "fontSize": font_size, "color": color}


def open_pdf(pdf_bytes: bytes) -> fitz.Document:
    return fitz.open(stream=pdf_bytes, filetype="pdf")


@pytest.fixture
def png_src() -> str:
    return make_data_url()


@pytest.fixture
def jpeg_src() -> str:
    return make_data_url(fmt="JPEG")


@pytest.fixture
def sample_payload(png_src) -> dict:
    return {
        "pages": [
            {
                "images": [image(src=png_src), image(x=300, y=600, width=200, height=200, rotation=90, src=png_src)],
                "texts": [text("Summer 2024", x=120, y=40)],
            },
            {"images": [], "texts": [text("Page two", x=50, y=1000, font_size=32, color="#336699")]},
        ]
    }


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def bomb_png_src(width=30000, height=30000) -> str:
    """IHDR 만 있는 PNG: 헤더가 거대한 크기를 선언"""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    data = b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b"")
    return "data:image/png;base64," + base64.b64encode(data).decode()


def truncated_jpeg_src(keep=400) -> str:
    """허프만 테이블 중간에서 잘린 JPEG"""
    rng = random.Random(7)
    noise = bytes(rng.getrandbits(8) for _ in range(64 * 64 * 3))
    img = Image.frombytes("RGB", (64, 64), noise)
    buf = BytesIO()
    img.save(buf, format="JPEG", quality=95)
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()[:keep]).decode()
