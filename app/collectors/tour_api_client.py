"""
한국관광공사 공공 API (KorService2) 클라이언트

지역코드, 지역 기반 목록, 키워드 검색, 공통/소개/이미지/반려동물 정보 조회를 제공합니다.
모든 호출은 공통 파라미터(serviceKey, MobileOS, MobileApp, _type)를 자동으로 붙이고,
RetryTransport의 타임아웃/재시도와 봉투 파서의 오류 변환을 거칩니다.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import urlencode

from pydantic import ValidationError as ModelValidationError

from app.core.credentials import CredentialSource, EnvCredentialSource
from app.core.envelope import EnvelopeBody, parse_envelope_body, parse_response_text
from app.core.error_handling import (
    TourAPIError,
    create_not_found_error,
    handle_exception,
    require_identifier,
)
from app.core.http_transport import RetryTransport
from app.core.logger import log_api_call
from app.models import (
    AreaCode,
    PetTourInfo,
    TourDetail,
    TourImage,
    TourImageResult,
    TourIntro,
    TourListItem,
    TourListResult,
    TourRecord,
)
from config.constants import TourEndpoint
from config.settings import TourAPIConfig, get_tour_api_config

RecordT = TypeVar("RecordT", bound=TourRecord)


def build_query_string(params: Dict[str, Any]) -> str:
    """쿼리 문자열 생성 (None 값은 제외)"""
    return urlencode({key: str(value) for key, value in params.items() if value is not None})


def _optional_code(value: Optional[str]) -> Optional[str]:
    """선택 코드 파라미터 정리 (빈 문자열은 미지정으로 취급)"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class TourAPIClient:
    """한국관광공사 API 클라이언트"""

    def __init__(
        self,
        credentials: Optional[CredentialSource] = None,
        transport: Optional[RetryTransport] = None,
        config: Optional[TourAPIConfig] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.config = config or get_tour_api_config()
        self.credentials = credentials or EnvCredentialSource()
        self.transport = transport or RetryTransport(
            timeout=self.config.timeout, retry_delays=self.config.retry_delays
        )
        self.base_url = self.config.base_url.rstrip("/")

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입 (전송 세션 공유)"""
        await self.transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    # ========== 공통 처리 ==========

    def _get_common_params(self) -> Dict[str, str]:
        """공통 파라미터 생성 (서비스 키는 호출 시점에 조회)"""
        return {
            "serviceKey": self.credentials.get_service_key(),
            "MobileOS": self.config.mobile_os,
            "MobileApp": self.config.mobile_app,
            "_type": self.config.response_type,
        }

    def build_url(self, endpoint: TourEndpoint, params: Dict[str, Any]) -> str:
        """요청 URL 빌드"""
        query = build_query_string({**self._get_common_params(), **params})
        return f"{self.base_url}/{endpoint.value}?{query}"

    async def _request(
        self, endpoint: TourEndpoint, params: Dict[str, Any], operation: str
    ) -> EnvelopeBody:
        """API 호출 후 봉투를 벗긴 본문 반환"""
        start_time = time.time()
        try:
            url = self.build_url(endpoint, params)
            response = await self.transport.send(url)
            body = parse_envelope_body(parse_response_text(response.text))
        except TourAPIError as e:
            e.with_operation(operation, endpoint.value)
            self.logger.error(
                f"{operation} 실패: {endpoint.value} - {e.kind.value}: {e.message}"
            )
            raise

        log_api_call(
            self.logger,
            endpoint.value,
            params=params,
            status_code=response.status,
            duration=time.time() - start_time,
        )
        return body

    def _to_records(
        self, model: Type[RecordT], items: List[Dict[str, Any]], operation: str
    ) -> List[RecordT]:
        """응답 항목을 모델로 변환"""
        try:
            return [model.model_validate(item) for item in items]
        except ModelValidationError as e:
            error = handle_exception(e, operation)
            self.logger.error(f"{operation} 응답 변환 실패: {e}")
            raise error from e

    def _single_record(
        self,
        model: Type[RecordT],
        body: EnvelopeBody,
        operation: str,
        not_found_message: str,
    ) -> RecordT:
        """단건 조회 결과 추출 (결과 없음은 API_ERROR)"""
        if not body.items:
            raise create_not_found_error(not_found_message, operation)
        return self._to_records(model, body.items[:1], operation)[0]

    def _list_result(
        self, body: EnvelopeBody, page_size: int, page_number: int, operation: str
    ) -> TourListResult:
        items = self._to_records(TourListItem, body.items, operation)
        return TourListResult(
            items=items[:page_size],
            total_count=body.total_count,
            page_size=body.num_of_rows or page_size,
            page_number=body.page_no or page_number,
        )

    # ========== API 함수 ==========

    async def lookup_area_codes(
        self, page_size: Optional[int] = None, page_number: Optional[int] = None
    ) -> List[AreaCode]:
        """지역코드 조회"""
        params = {
            "numOfRows": page_size or self.config.default_page_size,
            "pageNo": page_number or self.config.default_page_number,
        }
        body = await self._request(TourEndpoint.AREA_CODE, params, "지역코드 조회")
        return self._to_records(AreaCode, body.items, "지역코드 조회")

    async def list_by_area(
        self,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page_size: Optional[int] = None,
        page_number: Optional[int] = None,
    ) -> TourListResult:
        """지역 기반 목록 조회"""
        page_size = page_size or self.config.default_page_size
        page_number = page_number or self.config.default_page_number
        params = {
            "areaCode": _optional_code(area_code),
            "contentTypeId": _optional_code(content_type_id),
            "numOfRows": page_size,
            "pageNo": page_number,
        }
        body = await self._request(
            TourEndpoint.AREA_BASED_LIST, params, "지역 기반 목록 조회"
        )
        return self._list_result(body, page_size, page_number, "지역 기반 목록 조회")

    async def search_by_keyword(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page_size: Optional[int] = None,
        page_number: Optional[int] = None,
    ) -> TourListResult:
        """키워드 검색 (빈 키워드는 호출 전에 거부)"""
        keyword = require_identifier(keyword, "검색 키워드는 필수입니다.", "keyword")
        page_size = page_size or self.config.default_page_size
        page_number = page_number or self.config.default_page_number
        params = {
            "keyword": keyword,
            "areaCode": _optional_code(area_code),
            "contentTypeId": _optional_code(content_type_id),
            "numOfRows": page_size,
            "pageNo": page_number,
        }
        body = await self._request(TourEndpoint.SEARCH_KEYWORD, params, "키워드 검색")
        return self._list_result(body, page_size, page_number, "키워드 검색")

    async def get_detail(self, content_id: str) -> TourDetail:
        """공통 정보 조회"""
        content_id = require_identifier(content_id, "콘텐츠 ID는 필수입니다.", "content_id")
        body = await self._request(
            TourEndpoint.DETAIL_COMMON, {"contentId": content_id}, "공통 정보 조회"
        )
        return self._single_record(
            TourDetail, body, "공통 정보 조회", "상세 정보를 찾을 수 없습니다."
        )

    async def get_intro(self, content_id: str, content_type_id: str) -> TourIntro:
        """소개 정보 조회"""
        content_id = require_identifier(content_id, "콘텐츠 ID는 필수입니다.", "content_id")
        content_type_id = require_identifier(
            content_type_id, "콘텐츠 타입 ID는 필수입니다.", "content_type_id"
        )
        body = await self._request(
            TourEndpoint.DETAIL_INTRO,
            {"contentId": content_id, "contentTypeId": content_type_id},
            "소개 정보 조회",
        )
        return self._single_record(
            TourIntro, body, "소개 정보 조회", "소개 정보를 찾을 수 없습니다."
        )

    async def get_images(
        self,
        content_id: str,
        page_size: Optional[int] = None,
        page_number: Optional[int] = None,
    ) -> TourImageResult:
        """이미지 목록 조회 (이미지가 없으면 빈 목록)"""
        content_id = require_identifier(content_id, "콘텐츠 ID는 필수입니다.", "content_id")
        params = {
            "contentId": content_id,
            "numOfRows": page_size or self.config.default_page_size,
            "pageNo": page_number or self.config.default_page_number,
        }
        body = await self._request(TourEndpoint.DETAIL_IMAGE, params, "이미지 목록 조회")
        return TourImageResult(
            items=self._to_records(TourImage, body.items, "이미지 목록 조회"),
            total_count=body.total_count,
        )

    async def get_pet_info(self, content_id: str) -> PetTourInfo:
        """반려동물 정보 조회"""
        content_id = require_identifier(content_id, "콘텐츠 ID는 필수입니다.", "content_id")
        body = await self._request(
            TourEndpoint.DETAIL_PET_TOUR, {"contentId": content_id}, "반려동물 정보 조회"
        )
        return self._single_record(
            PetTourInfo, body, "반려동물 정보 조회", "반려동물 정보를 찾을 수 없습니다."
        )
