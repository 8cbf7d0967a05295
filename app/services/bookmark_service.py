"""
북마크 관광지 정보 복원 서비스

저장된 콘텐츠 ID 목록을 공통 정보 조회(detailCommon2)로 목록 항목 형태로 되살립니다.
일부 콘텐츠 조회가 실패하면 해당 항목만 제외합니다.
"""

import asyncio
import logging
from datetime import datetime
from typing import Iterable, List

from app.collectors.tour_api_client import TourAPIClient
from app.models import TourDetail, TourListItem
from config.constants import AREA_CODES, AREA_FULL_NAMES


def extract_area_code_from_address(address: str) -> str:
    """주소의 시/도 이름으로 지역 코드 추출 (예: "서울특별시 강남구..." -> "1")"""
    tokens = (address or "").split()
    if not tokens:
        return ""

    # 시/도는 주소의 첫 단어에만 있음 (예: "부산광역시 해운대구"의 "대구"는 무시)
    province = tokens[0]
    for name, code in {**AREA_FULL_NAMES, **AREA_CODES}.items():
        if province.startswith(name):
            return code
    return ""


def detail_to_list_item(detail: TourDetail) -> TourListItem:
    """공통 정보를 목록 항목으로 변환 (분류 코드와 수정일은 공통 정보에 없음)"""
    return TourListItem(
        content_id=detail.content_id,
        content_type_id=detail.content_type_id,
        title=detail.title or "",
        addr1=detail.addr1 or "",
        addr2=detail.addr2,
        area_code=extract_area_code_from_address(detail.addr1 or ""),
        map_x=detail.map_x or "0",
        map_y=detail.map_y or "0",
        first_image=detail.first_image,
        first_image2=detail.first_image2,
        tel=detail.tel,
        modified_time=datetime.now().isoformat(),
    )


class BookmarkService:
    """북마크 콘텐츠 복원"""

    def __init__(self, client: TourAPIClient):
        self.logger = logging.getLogger(__name__)
        self.client = client

    async def rehydrate(self, content_ids: Iterable[str]) -> List[TourListItem]:
        """콘텐츠 ID 목록을 입력 순서대로 목록 항목으로 변환"""
        content_ids = list(content_ids)
        if not content_ids:
            return []

        results = await asyncio.gather(
            *(self.client.get_detail(content_id) for content_id in content_ids),
            return_exceptions=True,
        )

        tours = []
        for content_id, result in zip(content_ids, results):
            if isinstance(result, BaseException):
                self.logger.error(
                    f"관광지 정보 조회 실패 (contentId: {content_id}): {result}"
                )
                continue
            tours.append(detail_to_list_item(result))

        return tours
