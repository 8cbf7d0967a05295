"""
서비스 키 공급자

서비스 키는 모듈 로드 시점이 아닌 호출 시점마다 조회합니다.
키가 없으면 네트워크 호출 전에 API_KEY_MISSING 오류가 발생합니다.
"""

import os
from typing import Optional, Protocol, Sequence

from app.core.error_handling import ErrorKind, TourAPIError

SERVICE_KEY_ENV_VARS = ("TOUR_API_KEY", "KTO_API_KEY")


class CredentialSource(Protocol):
    """서비스 키 공급 인터페이스"""

    def get_service_key(self) -> str: ...


def _missing_key_error(names: Sequence[str]) -> TourAPIError:
    return TourAPIError(
        f"API 키가 설정되지 않았습니다. {' 또는 '.join(names)} 환경변수를 설정해주세요.",
        kind=ErrorKind.API_KEY_MISSING,
    )


class EnvCredentialSource:
    """환경 변수 기반 서비스 키 공급자 (앞선 이름 우선)"""

    def __init__(self, env_vars: Sequence[str] = SERVICE_KEY_ENV_VARS):
        self.env_vars = tuple(env_vars)

    def get_service_key(self) -> str:
        for name in self.env_vars:
            value = os.getenv(name)
            if value and value.strip():
                return value.strip()
        raise _missing_key_error(self.env_vars)


class StaticCredentialSource:
    """고정 값 서비스 키 공급자"""

    def __init__(self, service_key: Optional[str]):
        self._service_key = service_key

    def get_service_key(self) -> str:
        if not self._service_key or not self._service_key.strip():
            raise _missing_key_error(["service_key"])
        return self._service_key.strip()
