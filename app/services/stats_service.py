"""
관광지 통계 집계 서비스

지역별/타입별 관광지 수를 areaBasedList2의 totalCount로 병렬 수집합니다.
개별 지역/타입 호출이 실패하면 로그만 남기고 결과에서 제외하며, 전체 집계는 계속됩니다.
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from app.collectors.tour_api_client import TourAPIClient
from app.models import AreaCode, RegionStat, StatsSummary, TypeStat
from config.constants import CONTENT_TYPE_NAMES, ContentType

TOP_N = 3


def _describe(error: BaseException) -> str:
    return getattr(error, "message", None) or str(error) or type(error).__name__


class StatsAggregator:
    """관광지 통계 집계기"""

    def __init__(self, client: TourAPIClient, area_page_size: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.client = client
        self.area_page_size = area_page_size or client.config.stats_area_page_size

    async def _count_region(self, area: AreaCode) -> RegionStat:
        result = await self.client.list_by_area(
            area_code=area.code, page_size=1, page_number=1
        )
        return RegionStat(area_code=area.code, name=area.name, count=result.total_count)

    async def _count_type(self, content_type_id: str) -> TypeStat:
        result = await self.client.list_by_area(
            content_type_id=content_type_id, page_size=1, page_number=1
        )
        return TypeStat(
            content_type_id=content_type_id,
            name=CONTENT_TYPE_NAMES.get(content_type_id, f"타입 {content_type_id}"),
            count=result.total_count,
        )

    async def get_region_stats(self) -> List[RegionStat]:
        """
        지역별 관광지 통계 수집

        Raises:
            TourAPIError: 지역코드 조회 자체가 실패한 경우
        """
        area_codes = await self.client.lookup_area_codes(
            page_size=self.area_page_size, page_number=1
        )
        if not area_codes:
            self.logger.warning("[get_region_stats] 지역 코드를 조회할 수 없습니다.")
            return []

        results = await asyncio.gather(
            *(self._count_region(area) for area in area_codes),
            return_exceptions=True,
        )

        region_stats = []
        for area, result in zip(area_codes, results):
            if isinstance(result, BaseException):
                self.logger.error(
                    f"[get_region_stats] 지역 {area.name} ({area.code}) 통계 수집 실패: "
                    f"{_describe(result)}"
                )
                continue
            region_stats.append(result)

        self.logger.info(
            f"지역별 통계 수집 완료: {len(region_stats)}/{len(area_codes)}개 지역"
        )
        return region_stats

    async def get_type_stats(self) -> List[TypeStat]:
        """타입별 관광지 통계 수집 (비율은 성공한 타입들의 합계 기준)"""
        content_type_ids = [content_type.value for content_type in ContentType]

        results = await asyncio.gather(
            *(self._count_type(type_id) for type_id in content_type_ids),
            return_exceptions=True,
        )

        type_stats = []
        for type_id, result in zip(content_type_ids, results):
            if isinstance(result, BaseException):
                self.logger.error(
                    f"[get_type_stats] 타입 {type_id} 통계 수집 실패: {_describe(result)}"
                )
                continue
            type_stats.append(result)

        total_count = sum(stat.count for stat in type_stats)
        if total_count == 0:
            self.logger.warning("[get_type_stats] 전체 관광지 수가 0입니다.")
            return type_stats

        # 각 비율을 독립적으로 반올림하므로 합계가 정확히 100이 아닐 수 있음
        return [
            stat.model_copy(
                update={"percentage": round(stat.count / total_count * 100, 2)}
            )
            for stat in type_stats
        ]

    async def get_stats_summary(self) -> StatsSummary:
        """통계 요약 정보 생성 (전체 개수, Top 3 지역/타입, 집계 시각)"""
        region_stats, type_stats = await asyncio.gather(
            self.get_region_stats(), self.get_type_stats()
        )

        # 전체 개수는 타입별 합계 기준 (지역별 합계와 맞추지 않음)
        total_count = sum(stat.count for stat in type_stats)
        region_total = sum(stat.count for stat in region_stats)
        if region_stats and region_total != total_count:
            self.logger.debug(
                f"지역별 합계({region_total})와 타입별 합계({total_count})가 다릅니다."
            )

        top_regions = sorted(region_stats, key=lambda stat: stat.count, reverse=True)[:TOP_N]
        top_types = sorted(type_stats, key=lambda stat: stat.count, reverse=True)[:TOP_N]

        return StatsSummary(
            total_count=total_count,
            top_regions=top_regions,
            top_types=top_types,
            last_updated=datetime.now(),
        )
