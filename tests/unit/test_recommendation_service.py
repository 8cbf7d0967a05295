"""
RecommendationService 단위 테스트
"""

import pytest

from app.core.error_handling import ErrorKind, TourAPIError
from app.services.recommendation_service import RecommendationService


def list_rows(*content_ids):
    return [
        {"contentid": content_id, "contenttypeid": "12", "title": f"관광지 {content_id}"}
        for content_id in content_ids
    ]


def tiered_handler(envelope, same_both, same_area, same_type):
    """조회 조건(지역/타입 지정 여부)별 응답 생성기"""

    def handler(endpoint, query):
        has_area = "areaCode" in query
        has_type = "contentTypeId" in query
        if has_area and has_type:
            rows = same_both
        elif has_area:
            rows = same_area
        else:
            rows = same_type
        if isinstance(rows, BaseException):
            return rows
        return envelope(list_rows(*rows), total_count=len(rows))

    return handler


class TestRecommendationService:
    """추천 관광지 테스트"""

    @pytest.mark.asyncio
    async def test_first_tier_is_enough(self, make_client, envelope):
        client, transport = make_client(
            tiered_handler(envelope, ["100", "1", "2", "3", "4", "5", "6", "7"], [], [])
        )

        result = await RecommendationService(client).recommend("100", "1", "12")

        assert [item.content_id for item in result] == ["1", "2", "3", "4", "5", "6"]
        assert len(transport.calls) == 1
        assert transport.calls[0][1]["numOfRows"] == "10"

    @pytest.mark.asyncio
    async def test_fallback_tiers_fill_results(self, make_client, envelope):
        client, transport = make_client(
            tiered_handler(envelope, ["100", "1"], ["1", "2"], ["3", "4", "5", "6"])
        )

        result = await RecommendationService(client).recommend("100", "1", "12")

        assert [item.content_id for item in result] == ["1", "2", "3", "4", "5", "6"]
        assert len(transport.calls) == 3

    @pytest.mark.asyncio
    async def test_fallback_stops_once_three_found(self, make_client, envelope):
        client, transport = make_client(
            tiered_handler(envelope, ["1"], ["2", "3", "4"], ["5", "6"])
        )

        result = await RecommendationService(client).recommend("100", "1", "12")

        assert [item.content_id for item in result] == ["1", "2", "3", "4"]
        assert len(transport.calls) == 2

    @pytest.mark.asyncio
    async def test_failed_tier_is_skipped(self, make_client, envelope, caplog):
        client, _ = make_client(
            tiered_handler(
                envelope,
                TourAPIError("시간 초과", kind=ErrorKind.TIMEOUT_ERROR),
                ["1"],
                ["2"],
            )
        )

        result = await RecommendationService(client).recommend("100", "1", "12")

        assert [item.content_id for item in result] == ["1", "2"]
        assert "같은 지역+타입 조회 실패" in caplog.text

    @pytest.mark.asyncio
    async def test_without_area_and_type_makes_no_calls(self, make_client):
        client, transport = make_client(lambda endpoint, query: None)

        assert await RecommendationService(client).recommend("100") == []
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_limit_is_respected(self, make_client, envelope):
        client, _ = make_client(tiered_handler(envelope, ["1", "2", "3", "4"], [], []))

        result = await RecommendationService(client).recommend("100", "1", "12", limit=2)

        assert [item.content_id for item in result] == ["1", "2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "area_code,content_type_id",
        [("1", None), (None, "12")],
    )
    async def test_identical_tiers_are_requested_once(
        self, make_client, envelope, area_code, content_type_id
    ):
        client, transport = make_client(
            lambda endpoint, query: envelope(list_rows("1"), total_count=1)
        )

        result = await RecommendationService(client).recommend(
            "100", area_code, content_type_id
        )

        assert [item.content_id for item in result] == ["1"]
        assert len(transport.calls) == 1
