# collage/schemas/collage.py
from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from collage.core.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TEXT_COLOR = "#000000"


class ImageElement(BaseModel):
    """캔버스 px 좌표 기준 이미지 요소 (x, y = 좌상단)"""

    model_config = ConfigDict(extra="ignore")

    src: str
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    rotation: float = 0.0

    @field_validator("rotation", mode="before")
    @classmethod
    def _rotation_default(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("rotation")
    @classmethod
    def _rotation_normalize(cls, v: float) -> float:
        # 왼쪽 회전은 -90 으로 들어옴 → [0, 360)
        return v % 360.0


class TextElement(BaseModel):
    # 숫자 content (예: 42) 도 문자열로 그린다
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    content: str
    x: float
    y: float
    font_size: float = Field(alias="fontSize", gt=0)
    color: str = DEFAULT_TEXT_COLOR

    @field_validator("color", mode="before")
    @classmethod
    def _color_default(cls, v: Any) -> Any:
        return v or DEFAULT_TEXT_COLOR


class Page(BaseModel):
    images: list[ImageElement] = Field(default_factory=list)
    texts: list[TextElement] = Field(default_factory=list)
    # 검증 실패로 빠진 요소 수
    skipped: int = 0


class Collage(BaseModel):
    pages: list[Page] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return sum(p.skipped for p in self.pages)


def _parse_elements(raw: Any, model: type[BaseModel], page_no: int) -> tuple[list, int]:
    if not isinstance(raw, list):
        return [], 0
    items, skipped = [], 0
    for idx, entry in enumerate(raw):
        try:
            items.append(model.model_validate(entry))
        except PydanticValidationError as e:
            skipped += 1
            logger.warning(
                "page %d: %s[%d] skipped (%d validation errors)",
                page_no, model.__name__, idx, e.error_count(),
            )
    return items, skipped


def parse_collage(payload: Any) -> Collage:
    """
    요청 JSON → Collage.
    - pages 가 없거나 리스트가 아니면 ValidationError
    - 요소 단위 검증 실패는 해당 요소만 건너뜀 (페이지 수는 유지)
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid pages data: body must be a JSON object")
    raw_pages = payload.get("pages")
    if raw_pages is None or not isinstance(raw_pages, list):
        raise ValidationError("Invalid pages data")

    pages: list[Page] = []
    for page_no, raw in enumerate(raw_pages, start=1):
        if not isinstance(raw, dict):
            logger.warning("page %d: not an object, rendering empty page", page_no)
            pages.append(Page())
            continue
        images, skipped_images = _parse_elements(raw.get("images"), ImageElement, page_no)
        texts, skipped_texts = _parse_elements(raw.get("texts"), TextElement, page_no)
        pages.append(Page(images=images, texts=texts, skipped=skipped_images + skipped_texts))

    return Collage(pages=pages)
