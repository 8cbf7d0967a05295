"""
TourAPIClient 단위 테스트

FakeTransport로 상류 API를 대체하여 파라미터 구성, 검증, 오류 전파를 확인합니다.
"""

import pytest

from app.core.credentials import EnvCredentialSource, StaticCredentialSource
from app.core.error_handling import ErrorKind, TourAPIError
from app.models import PetTourInfo, TourDetail, TourIntro, TourListResult
from config.constants import TourEndpoint


class TestCommonParameters:
    """공통 파라미터 처리 테스트"""

    @pytest.mark.asyncio
    async def test_common_params_are_injected(self, make_client, envelope):
        client, transport = make_client(lambda endpoint, query: envelope(None, total_count=0))

        await client.list_by_area(area_code="1")

        endpoint, query = transport.calls[0]
        assert endpoint == "areaBasedList2"
        assert query["serviceKey"] == "test-service-key-1234"
        assert query["MobileOS"] == "ETC"
        assert query["MobileApp"] == "MyTrip"
        assert query["_type"] == "json"
        assert query["areaCode"] == "1"
        assert query["numOfRows"] == "10"
        assert query["pageNo"] == "1"

    @pytest.mark.asyncio
    async def test_undefined_params_are_omitted(self, make_client, envelope):
        client, transport = make_client(lambda endpoint, query: envelope(None, total_count=0))

        await client.list_by_area(content_type_id="39", area_code="  ")

        _, query = transport.calls[0]
        assert "areaCode" not in query
        assert query["contentTypeId"] == "39"

    def test_build_url_uses_configured_base_url(self, make_client):
        client, _ = make_client(lambda endpoint, query: None)
        url = client.build_url(TourEndpoint.AREA_CODE, {"numOfRows": 1, "pageNo": None})
        assert url.startswith("http://tour.test/B551011/KorService2/areaCode2?")
        assert "pageNo" not in url

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_network(self, make_client):
        client, transport = make_client(
            lambda endpoint, query: None, credential_source=StaticCredentialSource(None)
        )

        with pytest.raises(TourAPIError) as exc_info:
            await client.lookup_area_codes()

        assert exc_info.value.kind is ErrorKind.API_KEY_MISSING
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_env_key_is_read_at_call_time(self, make_client, envelope, monkeypatch):
        monkeypatch.delenv("TOUR_API_KEY", raising=False)
        monkeypatch.delenv("KTO_API_KEY", raising=False)
        client, transport = make_client(
            lambda endpoint, query: envelope([{"code": "1", "name": "서울"}]),
            credential_source=EnvCredentialSource(),
        )

        with pytest.raises(TourAPIError) as exc_info:
            await client.lookup_area_codes()
        assert exc_info.value.kind is ErrorKind.API_KEY_MISSING

        monkeypatch.setenv("KTO_API_KEY", "fallback-key")
        await client.lookup_area_codes()
        assert transport.calls[-1][1]["serviceKey"] == "fallback-key"

        monkeypatch.setenv("TOUR_API_KEY", "primary-key")
        await client.lookup_area_codes()
        assert transport.calls[-1][1]["serviceKey"] == "primary-key"


class TestValidation:
    """필수 인자 검증 테스트 (네트워크 호출 전 실패)"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keyword", ["", "   ", None])
    async def test_search_rejects_blank_keyword(self, make_client, keyword):
        client, transport = make_client(lambda endpoint, query: None)

        with pytest.raises(TourAPIError) as exc_info:
            await client.search_by_keyword(keyword)

        assert exc_info.value.kind is ErrorKind.VALIDATION_ERROR
        assert exc_info.value.message == "검색 키워드는 필수입니다."
        assert transport.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda client: client.get_detail(""),
            lambda client: client.get_detail("  "),
            lambda client: client.get_intro("", "12"),
            lambda client: client.get_intro("126508", " "),
            lambda client: client.get_images(""),
            lambda client: client.get_pet_info("\t"),
        ],
    )
    async def test_detail_lookups_reject_blank_ids(self, make_client, call):
        client, transport = make_client(lambda endpoint, query: None)

        with pytest.raises(TourAPIError) as exc_info:
            await call(client)

        assert exc_info.value.kind is ErrorKind.VALIDATION_ERROR
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_keyword_and_ids_are_trimmed(self, make_client, envelope, sample_tour_item):
        client, transport = make_client(lambda endpoint, query: envelope([sample_tour_item]))

        await client.search_by_keyword("  경복궁 ")
        await client.get_detail(" 126508 ")

        assert transport.calls[0][1]["keyword"] == "경복궁"
        assert transport.calls[1][1]["contentId"] == "126508"


class TestListOperations:
    """목록 조회 테스트"""

    @pytest.mark.asyncio
    async def test_lookup_area_codes(self, make_client, envelope):
        areas = [{"rnum": "1", "code": "1", "name": "서울"}, {"rnum": "2", "code": "2", "name": "인천"}]
        client, transport = make_client(lambda endpoint, query: envelope(areas))

        result = await client.lookup_area_codes(page_size=100)

        assert [area.code for area in result] == ["1", "2"]
        assert result[0].name == "서울"
        assert transport.calls[0][0] == "areaCode2"
        assert transport.calls[0][1]["numOfRows"] == "100"

    @pytest.mark.asyncio
    async def test_list_by_area_maps_result(self, make_client, envelope, sample_tour_item):
        client, _ = make_client(
            lambda endpoint, query: envelope(
                [sample_tour_item], total_count=2567, num_of_rows=1, page_no=1
            )
        )

        result = await client.list_by_area(area_code="1", page_size=1)

        assert isinstance(result, TourListResult)
        assert result.total_count == 2567
        assert result.page_size == 1
        assert result.page_number == 1
        assert result.total_pages == 2567

        item = result.items[0]
        assert item.content_id == "126508"
        assert item.content_type_id == "12"
        assert item.area_code == "1"
        assert item.images == [
            "http://tong.visitkorea.or.kr/cms/resource/33/2678633_image2_1.jpg"
        ]
        assert item.categories == ["A02", "A0201", "A02010100"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [1, 3, 10])
    async def test_items_never_exceed_page_size(
        self, make_client, envelope, sample_tour_item, page_size
    ):
        rows = [dict(sample_tour_item, contentid=str(i)) for i in range(12)]
        client, _ = make_client(lambda endpoint, query: envelope(rows, total_count=500))

        result = await client.list_by_area(content_type_id="12", page_size=page_size)

        assert len(result.items) <= page_size
        assert result.total_count == 500

    @pytest.mark.asyncio
    async def test_search_without_results(self, make_client, envelope):
        client, transport = make_client(lambda endpoint, query: envelope(None, total_count=0))

        result = await client.search_by_keyword("없는관광지", area_code="39", page_number=2)

        assert result.items == []
        assert result.total_count == 0
        assert result.total_pages == 0
        assert transport.calls[0][0] == "searchKeyword2"
        assert transport.calls[0][1]["pageNo"] == "2"

    @pytest.mark.asyncio
    async def test_numeric_fields_are_accepted(self, make_client, envelope, sample_tour_item):
        row = dict(sample_tour_item, contentid=126508, mapx=126.97, areacode=1)
        client, _ = make_client(lambda endpoint, query: envelope([row]))

        result = await client.list_by_area()

        assert result.items[0].content_id == "126508"
        assert result.items[0].area_code == "1"

    @pytest.mark.asyncio
    async def test_malformed_record_is_wrapped_as_api_error(self, make_client, envelope):
        client, _ = make_client(lambda endpoint, query: envelope([{"title": "제목만"}]))

        with pytest.raises(TourAPIError) as exc_info:
            await client.list_by_area()

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.cause is not None


class TestDetailOperations:
    """단건 조회 테스트"""

    @pytest.mark.asyncio
    async def test_get_detail(self, make_client, envelope):
        detail = {
            "contentid": "126508",
            "contenttypeid": "12",
            "title": "경복궁",
            "addr1": "서울특별시 종로구 사직로 161",
            "overview": "조선 왕조의 정궁",
            "mapx": "126.97",
            "mapy": "37.57",
        }
        client, transport = make_client(lambda endpoint, query: envelope(detail))

        result = await client.get_detail("126508")

        assert isinstance(result, TourDetail)
        assert result.title == "경복궁"
        assert result.overview == "조선 왕조의 정궁"
        assert transport.calls[0][0] == "detailCommon2"

    @pytest.mark.asyncio
    async def test_get_detail_is_idempotent(self, make_client, envelope):
        detail = {"contentid": "126508", "contenttypeid": "12", "title": "경복궁"}
        client, _ = make_client(lambda endpoint, query: envelope(detail))

        first = await client.get_detail("126508")
        second = await client.get_detail("126508")

        assert first == second
        assert first.model_dump() == second.model_dump()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda client: client.get_detail("0"),
            lambda client: client.get_intro("0", "12"),
            lambda client: client.get_pet_info("0"),
        ],
    )
    async def test_single_lookup_without_records_is_not_found(self, make_client, envelope, call):
        client, _ = make_client(lambda endpoint, query: envelope(None, total_count=0))

        with pytest.raises(TourAPIError) as exc_info:
            await call(client)

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.not_found is True

    @pytest.mark.asyncio
    async def test_get_intro_keeps_type_specific_fields(self, make_client, envelope):
        intro = {
            "contentid": "142785",
            "contenttypeid": "32",
            "checkintime": "15:00",
            "checkouttime": "11:00",
            "chkcooking": "불가",
        }
        client, transport = make_client(lambda endpoint, query: envelope([intro]))

        result = await client.get_intro("142785", "32")

        assert isinstance(result, TourIntro)
        assert result.checkintime == "15:00"
        assert result.model_extra["chkcooking"] == "불가"
        assert transport.calls[0][1]["contentTypeId"] == "32"

    @pytest.mark.asyncio
    async def test_get_images(self, make_client, envelope):
        image = {
            "contentid": "126508",
            "originimgurl": "http://tong.visitkorea.or.kr/cms/resource/1.jpg",
            "smallimageurl": "http://tong.visitkorea.or.kr/cms/resource/1_s.jpg",
            "serialnum": "1",
        }
        client, _ = make_client(lambda endpoint, query: envelope(image, total_count=1))

        result = await client.get_images("126508")

        assert result.total_count == 1
        assert result.items[0].origin_img_url.endswith("1.jpg")

    @pytest.mark.asyncio
    async def test_get_images_without_results(self, make_client, envelope):
        client, _ = make_client(lambda endpoint, query: envelope(None, total_count=0))

        result = await client.get_images("126508")

        assert result.items == []
        assert result.total_count == 0

    @pytest.mark.asyncio
    async def test_get_pet_info(self, make_client, envelope):
        pet = {"contentid": "126508", "chkpetleash": "목줄 착용", "petinfo": "소형견 가능"}
        client, transport = make_client(lambda endpoint, query: envelope(pet))

        result = await client.get_pet_info("126508")

        assert isinstance(result, PetTourInfo)
        assert result.chkpetleash == "목줄 착용"
        assert transport.calls[0][0] == "detailPetTour2"


class TestErrorPropagation:
    """하위 계층 오류 전파 테스트"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind",
        [ErrorKind.TIMEOUT_ERROR, ErrorKind.NETWORK_ERROR, ErrorKind.HTTP_ERROR],
    )
    async def test_transport_errors_keep_kind(self, make_client, kind):
        client, _ = make_client(lambda endpoint, query: TourAPIError("실패", kind=kind))

        with pytest.raises(TourAPIError) as exc_info:
            await client.get_detail("126508")

        error = exc_info.value
        assert error.kind is kind
        assert error.context.operation == "공통 정보 조회"
        assert error.context.endpoint == "detailCommon2"

    @pytest.mark.asyncio
    async def test_envelope_key_error_propagates(self, make_client, envelope):
        client, _ = make_client(
            lambda endpoint, query: envelope(
                None, result_code="30", result_msg="SERVICE_KEY_IS_NOT_REGISTERED_ERROR"
            )
        )

        with pytest.raises(TourAPIError) as exc_info:
            await client.list_by_area()

        assert exc_info.value.kind is ErrorKind.API_KEY_INVALID

    @pytest.mark.asyncio
    async def test_errors_are_logged_without_service_key(self, make_client, caplog):
        client, _ = make_client(
            lambda endpoint, query: TourAPIError("시간 초과", kind=ErrorKind.TIMEOUT_ERROR)
        )

        with pytest.raises(TourAPIError):
            await client.lookup_area_codes()

        assert "지역코드 조회 실패" in caplog.text
        assert "test-service-key-1234" not in caplog.text
