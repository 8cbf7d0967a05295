"""
이미지 URL 유틸리티

관광 API의 이미지 필드는 빈 문자열, "null", 상대 경로 등이 섞여 오므로 정규화가 필요합니다.
"""

from typing import Optional

DEFAULT_PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=400&h=300&fit=crop"
)

VISITKOREA_IMAGE_DOMAIN = "tong.visitkorea.or.kr"

_EMPTY_VALUES = {"", "null", "undefined"}


def normalize_image_url(
    url: Optional[str], fallback: Optional[str] = DEFAULT_PLACEHOLDER_IMAGE
) -> Optional[str]:
    """이미지 URL 정규화 (유효하지 않으면 fallback)"""
    if url is None:
        return fallback

    trimmed = url.strip()
    if trimmed in _EMPTY_VALUES:
        return fallback

    if trimmed.startswith(("http://", "https://")):
        return trimmed

    # 프로토콜 생략 URL
    if trimmed.startswith("//"):
        return f"https:{trimmed}"

    # 상대 경로는 visitkorea 이미지 서버 기준
    if trimmed.startswith("/"):
        return f"https://{VISITKOREA_IMAGE_DOMAIN}{trimmed}"

    return fallback


def is_http_image(url: Optional[str]) -> bool:
    """암호화되지 않은 http 이미지 여부"""
    return bool(url) and url.startswith("http://")
