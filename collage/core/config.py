# collage/core/config.py
from pathlib import Path
from pydantic_settings import BaseSettings

# A4 캔버스(96 DPI, px) → PDF(72 DPI, pt)
CANVAS_WIDTH_PX = 794
CANVAS_HEIGHT_PX = 1123
PAGE_WIDTH_PT = 595.28
PAGE_HEIGHT_PT = 841.89


class Settings(BaseSettings):
    # 기본 렌더러: "direct"(reportlab) 또는 "html"(Playwright)
    renderer: str = "direct"

    # 캔버스 크기 (프론트엔드와 동일해야 함)
    canvas_width: int = CANVAS_WIDTH_PX
    canvas_height: int = CANVAS_HEIGHT_PX

    # HTML 렌더러 대기 시간 (초)
    html_image_timeout: float = 5.0
    html_settle_delay: float = 0.5

    # 생성된 PDF 사본 저장 위치 (없으면 저장 안 함)
    output_dir: Path | None = None

    # CORS
    allowed_origins: str = "*"

    # 텍스트용 TTF (없으면 Helvetica)
    text_font_path: Path | None = None

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

    def get_origins_list(self) -> list[str]:
        if not self.allowed_origins:
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    return settings
