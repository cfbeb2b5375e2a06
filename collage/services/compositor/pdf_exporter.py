# collage/services/compositor/pdf_exporter.py

import logging
from io import BytesIO
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from collage.core.errors import ElementDecodeError
from collage.schemas.collage import Collage, ImageElement, Page, TextElement
from collage.services.compositor.raster import load_raster
from collage.services.compositor.transform import A4, PageGeometry, place_image, place_text

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
_CUSTOM_FONT = "CollageText"

# TTF 경로 → 등록된 폰트 이름 (pdfmetrics 레지스트리는 프로세스 전역)
_font_cache: dict[str, str] = {}


def resolve_font(font_path: Path | None = None) -> str:
    """TTF 가 있으면 한 번만 등록해서 사용, 없으면 Helvetica"""
    if not font_path or not Path(font_path).exists():
        return DEFAULT_FONT

    key = str(Path(font_path).resolve())
    if key in _font_cache:
        return _font_cache[key]

    name = f"{_CUSTOM_FONT}{len(_font_cache)}"
    try:
        pdfmetrics.registerFont(TTFont(name, key))
    except TTFError as e:
        logger.warning("font %s could not be registered: %s", font_path, e)
        name = DEFAULT_FONT
    _font_cache[key] = name
    return name


def _draw_image(c: canvas.Canvas, element: ImageElement, geometry: PageGeometry) -> None:
    raster = load_raster(element.src)
    p = place_image(element, geometry)
    H = geometry.page_height

    c.saveState()
    try:
        if p.rotation:
            # reportlab 은 y 위쪽 좌표계 → 화면 기준 시계 방향 = 음수 각도
            cx, cy = p.center
            c.translate(cx, H - cy)
            c.rotate(-p.rotation)
            x, y = -p.width / 2, -p.height / 2
        else:
            x, y = p.x, H - p.y - p.height
        # 비율 보정 없이 저장된 width/height 그대로
        c.drawImage(raster.reader(), x, y, width=p.width, height=p.height, mask="auto")
    except (OSError, ValueError) as e:
        raise ElementDecodeError(f"image draw failed: {e}") from e
    finally:
        c.restoreState()


def _draw_text(c: canvas.Canvas, element: TextElement, geometry: PageGeometry, font: str) -> None:
    p = place_text(element, geometry)
    # 좌상단 기준 → 기준선 = top + ascent
    baseline = geometry.page_height - p.y - pdfmetrics.getAscent(font, p.font_size)

    c.saveState()
    try:
        c.setFillColorRGB(*p.rgb)
        c.setFont(font, p.font_size)
        # 줄바꿈 없이 한 줄
        c.drawString(p.x, baseline, element.content.replace("\n", " "))
    except (KeyError, ValueError, UnicodeError) as e:
        raise ElementDecodeError(f"text draw failed: {e}") from e
    finally:
        c.restoreState()


def _draw_page(c: canvas.Canvas, page: Page, page_no: int, geometry: PageGeometry, font: str) -> int:
    drawn = 0
    for idx, img in enumerate(page.images):
        try:
            _draw_image(c, img, geometry)
            drawn += 1
        except ElementDecodeError as e:
            logger.warning("page %d: image[%d] skipped: %s", page_no, idx, e)

    for idx, txt in enumerate(page.texts):
        try:
            _draw_text(c, txt, geometry, font)
            drawn += 1
        except ElementDecodeError as e:
            logger.warning("page %d: text[%d] skipped: %s", page_no, idx, e)
    return drawn


def export_pdf(
    collage: Collage,
    *,
    geometry: PageGeometry = A4,
    font_path: Path | None = None,
    title: str | None = None,
) -> bytes:
    """
    Collage 를 reportlab 캔버스에 직접 그려 PDF 바이트로 반환한다.
    입력 페이지 1개 = 출력 페이지 1개 (요소 실패와 무관).
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=geometry.page_size)
    if title:
        c.setTitle(title)
    font = resolve_font(font_path)

    for page_no, page in enumerate(collage.pages, start=1):
        drawn = _draw_page(c, page, page_no, geometry, font)
        logger.debug("page %d: %d elements drawn", page_no, drawn)
        c.showPage()

    c.save()
    return buf.getvalue()
