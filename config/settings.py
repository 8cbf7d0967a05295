"""
애플리케이션 설정 관리 모듈

환경 변수와 설정 값들을 중앙에서 관리합니다.
서비스 키는 호출 시점마다 CredentialSource가 읽으므로 여기에 포함하지 않습니다.
"""

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv()

DEFAULT_TOUR_API_BASE_URL = "https://apis.data.go.kr/B551011/KorService2"


@dataclass(frozen=True)
class TourAPIConfig:
    """한국관광공사 API 설정"""

    base_url: str = DEFAULT_TOUR_API_BASE_URL
    mobile_os: str = "ETC"
    mobile_app: str = "MyTrip"
    response_type: str = "json"
    timeout: float = 30.0
    retry_delays: Tuple[float, ...] = (1.0, 2.0, 4.0)
    default_page_size: int = 10
    default_page_number: int = 1
    stats_area_page_size: int = 100

    @property
    def max_attempts(self) -> int:
        """최초 시도 + 재시도 횟수"""
        return len(self.retry_delays) + 1


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_prefix: str = "tour_api"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class AppSettings:
    """전체 애플리케이션 설정"""

    debug: bool
    environment: str
    tour_api: TourAPIConfig
    logging: LoggingConfig


def _parse_delays(raw: str) -> Tuple[float, ...]:
    """'1,2,4' 형식의 재시도 지연 목록 파싱"""
    return tuple(float(part) for part in raw.split(",") if part.strip())


def get_tour_api_config() -> TourAPIConfig:
    """관광 API 설정 조회"""
    return TourAPIConfig(
        base_url=os.getenv("TOUR_API_BASE_URL", DEFAULT_TOUR_API_BASE_URL).rstrip("/"),
        mobile_os=os.getenv("TOUR_API_MOBILE_OS", "ETC"),
        mobile_app=os.getenv("TOUR_API_MOBILE_APP", "MyTrip"),
        timeout=float(os.getenv("TOUR_API_TIMEOUT", "30")),
        retry_delays=_parse_delays(os.getenv("TOUR_API_RETRY_DELAYS", "1,2,4")),
        default_page_size=int(os.getenv("TOUR_API_PAGE_SIZE", "10")),
        stats_area_page_size=int(os.getenv("TOUR_API_STATS_AREA_PAGE_SIZE", "100")),
    )


def get_logging_config() -> LoggingConfig:
    """로깅 설정 조회"""
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        file_prefix=os.getenv("LOG_FILE_PREFIX", "tour_api"),
        max_bytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
        backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
    )


def get_app_settings() -> AppSettings:
    """전체 애플리케이션 설정 조회"""
    return AppSettings(
        debug=os.getenv("DEBUG", "False").lower() == "true",
        environment=os.getenv("ENVIRONMENT", "development"),
        tour_api=get_tour_api_config(),
        logging=get_logging_config(),
    )
