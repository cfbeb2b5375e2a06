# collage/services/compositor/html_exporter.py
"""
HTML/CSS 렌더러: 콜라주를 HTML 로 만들고 headless Chromium 으로 PDF 인쇄.
모든 위치/크기는 transform 결과(pt)를 그대로 CSS 에 쓴다.
"""
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from collage.core.errors import ElementDecodeError, RenderFatalError
from collage.schemas.collage import Collage
from collage.services.compositor.raster import load_raster
from collage.services.compositor.transform import A4, PageGeometry, place_image, place_text

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "collage.html.j2"
FONT_FAMILY = "Helvetica, Arial, sans-serif"
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# 이미지별 로드 대기 (timeoutMs) → 실패/시간초과 이미지 수 반환, 해당 이미지는 숨김
_WAIT_FOR_IMAGES_JS = """
(timeoutMs) => Promise.all(
  Array.from(document.images).map(img => {
    const skip = () => { img.style.visibility = 'hidden'; return 1; };
    if (img.complete) return Promise.resolve(img.naturalWidth > 0 ? 0 : skip());
    return new Promise(resolve => {
      const timer = setTimeout(() => resolve(skip()), timeoutMs);
      img.addEventListener('load', () => { clearTimeout(timer); resolve(0); });
      img.addEventListener('error', () => { clearTimeout(timer); resolve(skip()); });
    });
  })
).then(r => r.reduce((a, b) => a + b, 0))
"""


def _pt(value: float) -> str:
    return f"{value:.3f}pt"


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["pt"] = _pt


def layout_pages(collage: Collage, geometry: PageGeometry = A4) -> list[dict]:
    """템플릿 컨텍스트: 페이지별 요소와 배치(pt). 디코드 실패 요소는 제외"""
    pages = []
    for page_no, page in enumerate(collage.pages, start=1):
        images, texts = [], []
        for idx, img in enumerate(page.images):
            try:
                load_raster(img.src)
            except ElementDecodeError as e:
                logger.warning("page %d: image[%d] skipped: %s", page_no, idx, e)
                continue
            images.append({"src": img.src, "placement": place_image(img, geometry)})
        for idx, txt in enumerate(page.texts):
            try:
                placement = place_text(txt, geometry)
            except ElementDecodeError as e:
                logger.warning("page %d: text[%d] skipped: %s", page_no, idx, e)
                continue
            texts.append({"content": txt.content.replace("\n", " "), "placement": placement})
        pages.append({"images": images, "texts": texts})
    return pages


def build_html(collage: Collage, *, geometry: PageGeometry = A4, title: str | None = None) -> str:
    template = _env.get_template(TEMPLATE_NAME)
    return template.render(
        pages=layout_pages(collage, geometry),
        page_width=geometry.page_width,
        page_height=geometry.page_height,
        font_family=FONT_FAMILY,
        title=title,
    )


def export_pdf_html(
    collage: Collage,
    *,
    geometry: PageGeometry = A4,
    image_timeout: float = 5.0,
    settle_delay: float = 0.5,
    title: str | None = None,
) -> bytes:
    """
    HTML 을 Chromium 으로 인쇄해서 PDF 바이트 반환.
    브라우저는 호출마다 새로 띄우고 어떤 경로로 끝나든 반드시 닫는다.
    """
    html = build_html(collage, geometry=geometry, title=title)

    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=True, args=BROWSER_ARGS)
            try:
                page = browser.new_page(
                    viewport={"width": int(geometry.canvas_width), "height": int(geometry.canvas_height)}
                )
                page.set_content(html, wait_until="domcontentloaded")

                failed = page.evaluate(_WAIT_FOR_IMAGES_JS, int(image_timeout * 1000))
                if failed:
                    logger.warning("%d image(s) failed to load in browser, skipped", failed)

                # 레이아웃 안정화
                page.wait_for_timeout(settle_delay * 1000)

                pdf = page.pdf(
                    print_background=True,
                    prefer_css_page_size=True,
                    margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
                )
            finally:
                browser.close()
    except PlaywrightError as e:
        raise RenderFatalError(f"browser rendering failed: {e}") from e

    logger.info("HTML renderer: %d pages, %d bytes", len(collage.pages), len(pdf))
    return pdf
