# collage/services/compositor/renderers.py
import logging
from typing import Callable

from collage.core.config import PAGE_HEIGHT_PT, PAGE_WIDTH_PT, Settings
from collage.core.errors import ValidationError
from collage.schemas.collage import Collage
from collage.services.compositor.html_exporter import export_pdf_html
from collage.services.compositor.pdf_exporter import export_pdf
from collage.services.compositor.transform import PageGeometry

logger = logging.getLogger(__name__)

Renderer = Callable[[Collage, Settings], bytes]


def geometry_from_settings(settings: Settings) -> PageGeometry:
    return PageGeometry(settings.canvas_width, settings.canvas_height, PAGE_WIDTH_PT, PAGE_HEIGHT_PT)


def _render_direct(collage: Collage, settings: Settings) -> bytes:
    return export_pdf(
        collage,
        geometry=geometry_from_settings(settings),
        font_path=settings.text_font_path,
        title="Collage",
    )


def _render_html(collage: Collage, settings: Settings) -> bytes:
    return export_pdf_html(
        collage,
        geometry=geometry_from_settings(settings),
        image_timeout=settings.html_image_timeout,
        settle_delay=settings.html_settle_delay,
        title="Collage",
    )


RENDERERS: dict[str, Renderer] = {
    "direct": _render_direct,
    "html": _render_html,
}


def render_collage(collage: Collage, name: str, settings: Settings) -> bytes:
    renderer = RENDERERS.get((name or "").lower())
    if renderer is None:
        raise ValidationError(f"Unknown renderer: {name!r} (choose from {', '.join(RENDERERS)})")

    if not collage.pages:
        # 빈 콜라주 → 0 페이지 PDF (브라우저는 빈 페이지 1장을 찍으므로 direct 로 통일)
        logger.info("empty collage, emitting zero-page document")
        return _render_direct(collage, settings)

    logger.info(
        "Generating PDF with %d pages (renderer=%s, skipped elements=%d)",
        len(collage.pages), name, collage.skipped,
    )
    return renderer(collage, settings)
