"""
한국관광공사 API 응답 봉투(envelope) 파서

모든 응답은 {"response": {"header": {...}, "body": {...}}} 형태로 감싸져 옵니다.
헤더 결과 코드가 "0000"이 아니면 오류로 처리하고, body.items.item은
단건/다건 여부와 관계없이 항상 리스트로 정규화합니다.
"""

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.core.error_handling import ErrorKind, TourAPIError
from config.constants import (
    API_KEY_ERROR_CODES,
    API_KEY_ERROR_MESSAGES,
    RESULT_CODE_SUCCESS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvelopeBody:
    """봉투를 벗긴 응답 본문"""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    num_of_rows: Optional[int] = None
    page_no: Optional[int] = None


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_api_key_error(result_code: Optional[str], result_msg: Optional[str]) -> bool:
    """서비스 키 관련 오류 코드/메시지 여부"""
    if result_code and result_code in API_KEY_ERROR_CODES:
        return True
    if result_msg:
        return any(name in result_msg for name in API_KEY_ERROR_MESSAGES)
    return False


def _result_error(result_code: Optional[str], result_msg: Optional[str]) -> TourAPIError:
    kind = (
        ErrorKind.API_KEY_INVALID
        if is_api_key_error(result_code, result_msg)
        else ErrorKind.API_ERROR
    )
    return TourAPIError(
        f"API 에러: {result_msg or '알 수 없는 오류'} (코드: {result_code})",
        kind=kind,
        result_code=result_code,
        result_msg=result_msg,
    )


def _normalize_items(items: Any) -> List[Dict[str, Any]]:
    """items.item 단건/다건 정규화 (결과 없음은 빈 리스트)"""
    if not items or not isinstance(items, dict):
        return []

    item = items.get("item")
    if item is None or item == "":
        return []
    if isinstance(item, list):
        return item
    return [item]


def parse_envelope_body(raw: Any) -> EnvelopeBody:
    """
    응답 봉투 검증 후 본문 반환

    Raises:
        TourAPIError: 결과 코드 오류 (API_ERROR 또는 API_KEY_INVALID)
    """
    if not isinstance(raw, dict):
        raise TourAPIError(f"알 수 없는 응답 형태: {type(raw).__name__}")

    if "response" in raw:
        response = raw.get("response") or {}
        header = response.get("header") or {}
        result_code = header.get("resultCode")
        result_msg = header.get("resultMsg")

        if result_code is None or str(result_code) != RESULT_CODE_SUCCESS:
            raise _result_error(
                str(result_code) if result_code is not None else None, result_msg
            )

        body = response.get("body") or {}
        if not isinstance(body, dict):
            body = {}

        return EnvelopeBody(
            items=_normalize_items(body.get("items")),
            total_count=_to_int(body.get("totalCount")) or 0,
            num_of_rows=_to_int(body.get("numOfRows")),
            page_no=_to_int(body.get("pageNo")),
        )

    if "resultCode" in raw:
        # 봉투 없이 헤더 필드만 오는 오류 응답
        result_code = str(raw.get("resultCode"))
        result_msg = raw.get("resultMsg")
        if result_code != RESULT_CODE_SUCCESS:
            raise _result_error(result_code, result_msg)
        return EnvelopeBody()

    raise TourAPIError(f"알 수 없는 응답 형태: {list(raw.keys())}")


def parse_envelope(raw: Any) -> List[Dict[str, Any]]:
    """응답 봉투에서 결과 항목 리스트만 추출"""
    return parse_envelope_body(raw).items


def parse_xml_error(xml_text: str) -> TourAPIError:
    """XML 오류 응답(OpenAPI_ServiceResponse 등)을 TourAPIError로 변환"""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        return TourAPIError(
            f"XML 파싱 오류: {xml_text[:200]}", kind=ErrorKind.API_ERROR, cause=e
        )

    def find_text(*tags: str) -> Optional[str]:
        for tag in tags:
            node = root.find(f".//{tag}")
            if node is not None and node.text:
                return node.text.strip()
        return None

    reason_code = find_text("returnReasonCode", "resultCode")
    auth_msg = find_text("returnAuthMsg", "resultMsg")
    err_msg = find_text("errMsg")

    if reason_code == RESULT_CODE_SUCCESS:
        return TourAPIError(
            "JSON 대신 XML 응답을 받았습니다.", kind=ErrorKind.API_ERROR
        )

    error = _result_error(reason_code, auth_msg or err_msg)
    logger.debug(f"XML 오류 응답: {err_msg}, {auth_msg} (코드: {reason_code})")
    return error


def parse_response_text(text: str) -> Dict[str, Any]:
    """
    응답 본문 텍스트를 JSON으로 파싱

    data.go.kr 게이트웨이는 JSON을 요청해도 인증/한도 오류를 XML로 반환합니다.
    """
    stripped = (text or "").strip()
    if not stripped:
        raise TourAPIError("API 응답이 비어있습니다.")

    if stripped.startswith("<"):
        raise parse_xml_error(stripped)

    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        raise TourAPIError(
            f"JSON 파싱 실패: {stripped[:200]}", kind=ErrorKind.API_ERROR, cause=e
        ) from e
