# collage/core/errors.py


class CollageError(Exception):
    """콜라주 처리 중 발생하는 모든 예외의 베이스"""


class ValidationError(CollageError):
    """요청 최상위 구조가 잘못됨 (pages 누락 / 리스트 아님) → 400"""


class ElementDecodeError(CollageError):
    """이미지/텍스트 요소 하나를 해석하거나 그릴 수 없음 → 해당 요소만 건너뜀"""


class RenderFatalError(CollageError):
    """렌더링 엔진 자체 실패 (브라우저 실행 불가 등) → 500"""


class SecondaryUploadError(CollageError):
    """PDF 사본 저장 실패 → 로그만 남김"""
