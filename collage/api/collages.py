# collage/api/collages.py
import json
import logging
import time

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, Response
from starlette.concurrency import run_in_threadpool

from collage.core.config import Settings, get_settings
from collage.core.errors import RenderFatalError, ValidationError
from collage.schemas.collage import parse_collage
from collage.services.compositor.renderers import render_collage
from collage.services.storage import OutputStore, build_output_store, persist_quietly

logger = logging.getLogger(__name__)

router = APIRouter()

PDF_PATHS = ("/generate-pdf", "/api/generate-pdf")


def get_output_store(settings: Settings = Depends(get_settings)) -> OutputStore:
    return build_output_store(settings)


def collage_filename() -> str:
    return f"collage-{int(time.time() * 1000)}.pdf"


@router.options(PDF_PATHS[0])
@router.options(PDF_PATHS[1])
def generate_pdf_preflight():
    return Response(status_code=200)


@router.post(PDF_PATHS[0], response_class=Response)
@router.post(PDF_PATHS[1], response_class=Response)
async def generate_pdf(
    request: Request,
    background: BackgroundTasks,
    renderer: str | None = Query(None, description="direct | html"),
    settings: Settings = Depends(get_settings),
    store: OutputStore = Depends(get_output_store),
):
    try:
        try:
            payload = json.loads(await request.body() or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Request body is not valid JSON") from None

        collage = parse_collage(payload)
        pdf_bytes = await run_in_threadpool(
            render_collage, collage, renderer or settings.renderer, settings
        )
    except ValidationError as e:
        logger.error("Rejected request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except RenderFatalError as e:
        logger.exception("Error generating PDF")
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {e}")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error generating PDF")
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {e}")

    filename = collage_filename()
    logger.info("PDF generated successfully, size: %d bytes", len(pdf_bytes))

    # 사본 저장은 응답 이후 (실패해도 응답에 영향 없음)
    background.add_task(persist_quietly, store, filename, pdf_bytes)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
