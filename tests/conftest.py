"""
pytest 설정 파일

전체 테스트에서 공통으로 사용하는 대역(fake) 객체와 픽스처를 정의합니다.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlparse

import pytest

from app.collectors.tour_api_client import TourAPIClient
from app.core.credentials import StaticCredentialSource
from app.core.http_transport import TransportResponse
from config.settings import TourAPIConfig

TEST_SERVICE_KEY = "test-service-key-1234"
TEST_BASE_URL = "http://tour.test/B551011/KorService2"


def build_envelope(
    items: Any = None,
    total_count: Optional[int] = None,
    num_of_rows: int = 10,
    page_no: int = 1,
    result_code: str = "0000",
    result_msg: str = "OK",
) -> Dict[str, Any]:
    """KorService2 응답 봉투 생성 (items가 None이면 body.items 생략)"""
    body: Dict[str, Any] = {"numOfRows": num_of_rows, "pageNo": page_no}
    if items is not None:
        body["items"] = {"item": items}
    if total_count is None:
        total_count = len(items) if isinstance(items, list) else (1 if items else 0)
    body["totalCount"] = total_count
    return {
        "response": {
            "header": {"resultCode": result_code, "resultMsg": result_msg},
            "body": body,
        }
    }


class FakeTransport:
    """RetryTransport 대역 - 엔드포인트와 쿼리 파라미터로 응답 결정"""

    def __init__(self, handler: Callable[[str, Dict[str, str]], Any]):
        self.handler = handler
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def send(self, url: str, params: Optional[Dict[str, Any]] = None) -> TransportResponse:
        parsed = urlparse(url)
        endpoint = parsed.path.rsplit("/", 1)[-1]
        query = dict(parse_qsl(parsed.query))
        self.calls.append((endpoint, query))

        result = self.handler(endpoint, query)
        if isinstance(result, BaseException):
            raise result
        text = result if isinstance(result, str) else json.dumps(result, ensure_ascii=False)
        return TransportResponse(status=200, url=url, text=text)


class SleepRecorder:
    """asyncio.sleep 대역 - 대기 시간만 기록"""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def envelope():
    """응답 봉투 생성 함수"""
    return build_envelope


@pytest.fixture
def tour_config() -> TourAPIConfig:
    return TourAPIConfig(base_url=TEST_BASE_URL)


@pytest.fixture
def credentials() -> StaticCredentialSource:
    return StaticCredentialSource(TEST_SERVICE_KEY)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(credentials, tour_config):
    """핸들러를 받아 FakeTransport 기반 클라이언트 생성"""

    def factory(handler, credential_source=None):
        transport = FakeTransport(handler)
        client = TourAPIClient(
            credentials=credential_source or credentials,
            transport=transport,
            config=tour_config,
        )
        return client, transport

    return factory


@pytest.fixture
def sample_tour_item() -> Dict[str, str]:
    return {
        "contentid": "126508",
        "contenttypeid": "12",
        "title": "경복궁",
        "addr1": "서울특별시 종로구 사직로 161",
        "areacode": "1",
        "mapx": "126.9769930325",
        "mapy": "37.5788222356",
        "firstimage": "http://tong.visitkorea.or.kr/cms/resource/33/2678633_image2_1.jpg",
        "firstimage2": "",
        "tel": "02-3700-3900",
        "cat1": "A02",
        "cat2": "A0201",
        "cat3": "A02010100",
        "modifiedtime": "20240101120000",
    }
