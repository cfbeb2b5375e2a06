# collage/services/compositor/transform.py
"""
캔버스 px 좌표 → PDF pt 좌표 변환.
direct / html 두 렌더러 모두 이 모듈의 결과만 사용한다 (스케일 재계산 금지).
좌표계는 둘 다 좌상단 원점, y 아래 방향, 회전은 시계 방향이 양수 (CSS 와 동일).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace

from reportlab.lib import colors

from collage.core.config import CANVAS_HEIGHT_PX, CANVAS_WIDTH_PX, PAGE_HEIGHT_PT, PAGE_WIDTH_PT
from collage.core.errors import ElementDecodeError
from collage.schemas.collage import DEFAULT_TEXT_COLOR, ImageElement, TextElement

Point = tuple[float, float]


@dataclass(frozen=True)
class PageGeometry:
    canvas_width: float
    canvas_height: float
    page_width: float
    page_height: float

    @property
    def scale_x(self) -> float:
        return self.page_width / self.canvas_width

    @property
    def scale_y(self) -> float:
        return self.page_height / self.canvas_height

    @property
    def font_scale(self) -> float:
        # 축 비율이 다를 때 글자가 커지지 않도록 작은 쪽 사용
        return min(self.scale_x, self.scale_y)

    @property
    def page_size(self) -> Point:
        return (self.page_width, self.page_height)


A4 = PageGeometry(CANVAS_WIDTH_PX, CANVAS_HEIGHT_PX, PAGE_WIDTH_PT, PAGE_HEIGHT_PT)


def rotate_point(point: Point, center: Point, degrees: float) -> Point:
    """y 아래 방향 좌표계에서 center 기준 시계 방향 회전"""
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    dx, dy = point[0] - center[0], point[1] - center[1]
    return (center[0] + dx * cos - dy * sin, center[1] + dx * sin + dy * cos)


@dataclass(frozen=True)
class ImagePlacement:
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def corners(self) -> list[Point]:
        """회전 적용 후 꼭짓점 (좌상, 우상, 우하, 좌하)"""
        x0, y0 = self.x, self.y
        x1, y1 = self.x + self.width, self.y + self.height
        pts = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
        if not self.rotation:
            return pts
        c = self.center
        return [rotate_point(p, c, self.rotation) for p in pts]

    def rotated(self, delta: float) -> "ImagePlacement":
        return replace(self, rotation=(self.rotation + delta) % 360.0)


@dataclass(frozen=True)
class TextPlacement:
    x: float
    y: float
    font_size: float
    rgb: tuple[float, float, float]

    @property
    def css_color(self) -> str:
        return "#%02x%02x%02x" % tuple(round(c * 255) for c in self.rgb)


def place_image(element: ImageElement, geometry: PageGeometry = A4) -> ImagePlacement:
    return ImagePlacement(
        x=element.x * geometry.scale_x,
        y=element.y * geometry.scale_y,
        width=element.width * geometry.scale_x,
        height=element.height * geometry.scale_y,
        rotation=element.rotation % 360.0,
    )


def resolve_color(value: str | None) -> tuple[float, float, float]:
    try:
        c = colors.toColor(value or DEFAULT_TEXT_COLOR)
    except ValueError as e:
        raise ElementDecodeError(f"invalid color {value!r}") from e
    return (c.red, c.green, c.blue)


def place_text(element: TextElement, geometry: PageGeometry = A4) -> TextPlacement:
    return TextPlacement(
        x=element.x * geometry.scale_x,
        y=element.y * geometry.scale_y,
        font_size=element.font_size * geometry.font_scale,
        rgb=resolve_color(element.color),
    )
