# collage/services/storage.py
"""
생성된 PDF 의 사본 저장 (선택).
응답과 무관하게 백그라운드에서 실행되며 실패해도 로그만 남긴다.
"""
import logging
from pathlib import Path
from typing import Protocol

from collage.core.config import Settings
from collage.core.errors import SecondaryUploadError

logger = logging.getLogger(__name__)


class OutputStore(Protocol):
    def save(self, filename: str, data: bytes) -> str | None:
        ...


class NullOutputStore:
    """저장소 미설정 시 사용"""

    def save(self, filename: str, data: bytes) -> str | None:
        return None


class LocalDirectoryStore:
    def __init__(self, root: Path):
        self.root = Path(root)

    def save(self, filename: str, data: bytes) -> str | None:
        # 경로 조작 방지: 파일명만 사용
        out_path = self.root / Path(filename).name
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(data)
        except OSError as e:
            raise SecondaryUploadError(f"could not write {out_path}: {e}") from e
        return str(out_path)


def build_output_store(settings: Settings) -> OutputStore:
    if settings.output_dir:
        return LocalDirectoryStore(settings.output_dir)
    return NullOutputStore()


def persist_quietly(store: OutputStore, filename: str, data: bytes) -> str | None:
    """백그라운드 태스크용: 예외를 밖으로 내보내지 않는다"""
    try:
        location = store.save(filename, data)
    except SecondaryUploadError as e:
        logger.error("secondary upload failed for %s: %s", filename, e)
        return None
    except Exception as e:
        logger.exception("secondary upload failed for %s: %s", filename, e)
        return None
    if location:
        logger.info("stored copy of %s at %s", filename, location)
    return location
