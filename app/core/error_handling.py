"""
통합 오류 처리 프레임워크

관광 API 계층의 모든 오류는 TourAPIError 하나로 표현하고,
오류 종류는 ErrorKind 값으로 구분합니다. 호출자는 kind로 분기합니다.
"""

import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from config.constants import SENSITIVE_PARAM_KEYS


class ErrorKind(Enum):
    """오류 종류"""

    API_KEY_MISSING = "api_key_missing"  # 서비스 키 미설정
    API_KEY_INVALID = "api_key_invalid"  # 서비스 키 거부
    NETWORK_ERROR = "network_error"  # 연결/DNS 실패
    TIMEOUT_ERROR = "timeout_error"  # 요청 시간 초과
    HTTP_ERROR = "http_error"  # 2xx 이외 응답
    API_ERROR = "api_error"  # 응답 헤더 오류 또는 결과 없음
    VALIDATION_ERROR = "validation_error"  # 필수 인자 누락


# 재시도로 회복될 수 있는 오류 종류
RETRYABLE_KINDS = frozenset(
    {ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT_ERROR, ErrorKind.HTTP_ERROR}
)

USER_MESSAGES = {
    ErrorKind.API_KEY_MISSING: "서비스 설정이 완료되지 않았습니다. 관리자에게 문의해주세요.",
    ErrorKind.API_KEY_INVALID: "관광 정보 서비스 인증에 실패했습니다. 관리자에게 문의해주세요.",
    ErrorKind.NETWORK_ERROR: "네트워크 연결을 확인한 후 다시 시도해주세요.",
    ErrorKind.TIMEOUT_ERROR: "응답이 지연되고 있습니다. 잠시 후 다시 시도해주세요.",
    ErrorKind.HTTP_ERROR: "관광 정보 서비스를 일시적으로 사용할 수 없습니다. 잠시 후 다시 시도해주세요.",
    ErrorKind.API_ERROR: "관광 정보를 불러오지 못했습니다. 잠시 후 다시 시도해주세요.",
}

NOT_FOUND_USER_MESSAGE = "요청하신 관광지 정보를 찾을 수 없습니다."


@dataclass
class ErrorContext:
    """오류 컨텍스트 정보"""

    operation: str = ""
    endpoint: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (JSON 직렬화용)"""
        return {
            "operation": self.operation,
            "endpoint": self.endpoint,
            "parameters": sanitize_parameters(self.parameters),
            "attempts": self.attempts,
            "timestamp": self.timestamp.isoformat(),
        }


def sanitize_parameters(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """민감 정보 제거"""
    sanitized = {}
    for key, value in (params or {}).items():
        if key.lower() in SENSITIVE_PARAM_KEYS:
            if isinstance(value, str) and len(value) > 6:
                sanitized[key] = f"{value[:3]}***{value[-3:]}"
            else:
                sanitized[key] = "***"
        else:
            sanitized[key] = value
    return sanitized


class TourAPIError(Exception):
    """관광 API 계층 예외"""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.API_ERROR,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        result_code: Optional[str] = None,
        result_msg: Optional[str] = None,
        not_found: bool = False,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.cause = cause
        self.result_code = result_code
        self.result_msg = result_msg
        self.not_found = not_found
        self.context = context or ErrorContext()

    @property
    def is_retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def with_operation(self, operation: str, endpoint: str = "") -> "TourAPIError":
        """종류는 유지한 채 작업 컨텍스트만 보강"""
        if not self.context.operation:
            self.context.operation = operation
        if endpoint and not self.context.endpoint:
            self.context.endpoint = endpoint
        return self

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "message": self.message,
            "kind": self.kind.value,
            "status_code": self.status_code,
            "result_code": self.result_code,
            "result_msg": self.result_msg,
            "not_found": self.not_found,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "traceback": self.format_traceback(),
        }

    def format_traceback(self) -> Optional[str]:
        """이 예외가 발생한 위치의 트레이스백 (발생하지 않았으면 None)"""
        if self.__traceback__ is None:
            return None
        return "".join(
            traceback.format_exception(type(self), self, self.__traceback__)
        )

    def __repr__(self) -> str:
        return (
            f"TourAPIError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


# ========== 편의 함수들 ==========


def create_validation_error(message: str, field_name: str = "") -> TourAPIError:
    """검증 오류 생성 편의 함수"""
    error = TourAPIError(message, kind=ErrorKind.VALIDATION_ERROR)
    if field_name:
        error.context.parameters[field_name] = None
    return error


def create_not_found_error(message: str, operation: str = "") -> TourAPIError:
    """단건 조회 결과 없음 오류 생성 편의 함수"""
    return TourAPIError(
        message,
        kind=ErrorKind.API_ERROR,
        not_found=True,
        context=ErrorContext(operation=operation),
    )


def require_identifier(value: Optional[str], message: str, field_name: str) -> str:
    """필수 식별자 검증 후 앞뒤 공백 제거 값 반환"""
    if value is None or not isinstance(value, str) or not value.strip():
        raise create_validation_error(message, field_name=field_name)
    return value.strip()


def handle_exception(e: BaseException, operation: str = "") -> TourAPIError:
    """일반 예외를 TourAPIError로 변환"""
    if isinstance(e, TourAPIError):
        return e.with_operation(operation)

    return TourAPIError(
        f"{operation or '요청'} 처리 중 예상치 못한 오류 발생: {e}",
        kind=ErrorKind.API_ERROR,
        cause=e,
        context=ErrorContext(operation=operation),
    )


def get_user_message(error: BaseException) -> str:
    """오류 종류별 사용자 안내 메시지"""
    if not isinstance(error, TourAPIError):
        return USER_MESSAGES[ErrorKind.API_ERROR]
    if error.kind is ErrorKind.VALIDATION_ERROR:
        return error.message
    if error.not_found:
        return NOT_FOUND_USER_MESSAGE
    return USER_MESSAGES[error.kind]
