"""
추천 관광지 서비스

같은 지역+타입 -> 같은 지역 -> 같은 타입 순으로 조회하여 추천 목록을 채웁니다.
"""

import logging
from typing import List, Optional

from app.collectors.tour_api_client import TourAPIClient
from app.core.error_handling import TourAPIError
from app.models import TourListItem

DEFAULT_LIMIT = 6
MIN_BEFORE_FALLBACK = 3
CANDIDATE_PAGE_SIZE = 10


class RecommendationService:
    """추천 관광지 조회"""

    def __init__(self, client: TourAPIClient):
        self.logger = logging.getLogger(__name__)
        self.client = client

    async def recommend(
        self,
        content_id: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[TourListItem]:
        recommendations: List[TourListItem] = []

        tiers = [
            ("같은 지역+타입", area_code, content_type_id),
            ("같은 지역", area_code, None),
            ("같은 타입", None, content_type_id),
        ]

        tried = set()
        for index, (label, tier_area, tier_type) in enumerate(tiers):
            if index > 0 and len(recommendations) >= MIN_BEFORE_FALLBACK:
                break
            if not tier_area and not tier_type:
                continue
            if (tier_area, tier_type) in tried:
                continue
            tried.add((tier_area, tier_type))

            try:
                result = await self.client.list_by_area(
                    area_code=tier_area,
                    content_type_id=tier_type,
                    page_size=CANDIDATE_PAGE_SIZE,
                    page_number=1,
                )
            except TourAPIError as e:
                self.logger.warning(f"{label} 조회 실패: {e.kind.value} - {e.message}")
                continue

            seen = {item.content_id for item in recommendations}
            for item in result.items:
                if len(recommendations) >= limit:
                    break
                if item.content_id == content_id or item.content_id in seen:
                    continue
                recommendations.append(item)
                seen.add(item.content_id)

        return recommendations[:limit]
