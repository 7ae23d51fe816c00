# memegen/core/errors.py


class MemeGenError(Exception):
    """memegen 공통 예외"""


# --- 렌더링 / 내보내기 ---

class ImageLoadError(MemeGenError):
    """소스 이미지를 불러오거나 디코딩하지 못함 (재시도 없음)"""


class SurfaceUnavailableError(MemeGenError):
    """드로잉 캔버스를 만들 수 없음"""


class EncodingError(MemeGenError):
    """캔버스를 요청한 포맷으로 직렬화하지 못함"""


# --- 카탈로그 / 피드 / 추천 ---

class TemplateNotFoundError(MemeGenError):
    pass


class StoreUnavailableError(MemeGenError):
    """원격 피드 저장소 연결 실패"""


class MemeNotFoundError(MemeGenError):
    pass


class SuggestionError(MemeGenError):
    pass
