"""
재시도 HTTP 전송 계층

요청마다 타임아웃(기본 30초)을 적용하고, 실패 시 고정 지수 백오프(1초, 2초, 4초)로
최대 3회 재시도합니다. 호출 간 공유되는 가변 상태가 없으므로 동시에 호출해도 안전합니다.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

import aiohttp

from app.core.error_handling import ErrorKind, TourAPIError
from config.constants import AUTH_FAILURE_STATUSES

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAYS = (1.0, 2.0, 4.0)
DEFAULT_HEADERS = {"User-Agent": "MyTrip-TourAPI/1.0 (Tourism Information Service)"}

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class TransportResponse:
    """HTTP 응답 (본문은 이미 읽힌 상태)"""

    status: int
    url: str
    text: str

    def json(self) -> Any:
        return json.loads(self.text)


def _strip_query(url: str) -> str:
    """로그용 URL (쿼리 문자열에 서비스 키가 있으므로 제거)"""
    return url.split("?", 1)[0]


class RetryTransport:
    """타임아웃과 재시도가 적용된 HTTP 전송기"""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        retry_delays: Sequence[float] = DEFAULT_RETRY_DELAYS,
        sleep: SleepFunc = asyncio.sleep,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.retry_delays = tuple(retry_delays)
        self.headers = headers or dict(DEFAULT_HEADERS)
        self._sleep = sleep
        self._session = session
        self._owns_session = False

    @property
    def max_attempts(self) -> int:
        return len(self.retry_delays) + 1

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입 (세션 재사용)"""
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers)
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def send(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> TransportResponse:
        """
        GET 요청 전송

        Args:
            url: 요청 URL (쿼리 문자열 포함 가능)
            params: 추가 쿼리 파라미터

        Returns:
            TransportResponse: 2xx 응답

        Raises:
            TourAPIError: 재시도 소진 후 마지막 실패
        """
        last_error: Optional[TourAPIError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(url, params, attempt)
            except TourAPIError as e:
                last_error = e
                e.context.attempts = attempt

                if attempt == self.max_attempts:
                    break

                delay = self.retry_delays[attempt - 1]
                self.logger.warning(
                    f"요청 실패 ({attempt}/{self.max_attempts}회): {_strip_query(url)} - "
                    f"{e.kind.value}: {e.message}, {delay}초 후 재시도"
                )
                await self._sleep(delay)

        self.logger.error(
            f"요청 최종 실패 ({self.max_attempts}회 시도): {_strip_query(url)} - "
            f"{last_error.kind.value}: {last_error.message}"
        )
        raise last_error

    async def _attempt(
        self, url: str, params: Optional[Dict[str, Any]], attempt: int
    ) -> TransportResponse:
        """단일 요청 시도 (실패는 TourAPIError로 변환)"""
        session = self._session
        owns_session = session is None
        if owns_session:
            session = aiohttp.ClientSession(headers=self.headers)

        start_time = time.time()
        try:
            async with session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                duration = time.time() - start_time
                self.logger.debug(
                    f"HTTP 응답: {_strip_query(url)}, 상태코드: {response.status}, "
                    f"응답시간: {duration:.3f}초, 시도: {attempt}"
                )

                if not 200 <= response.status < 300:
                    kind = (
                        ErrorKind.API_KEY_INVALID
                        if response.status in AUTH_FAILURE_STATUSES
                        else ErrorKind.HTTP_ERROR
                    )
                    raise TourAPIError(
                        f"HTTP {response.status}: {response.reason or ''}".strip(),
                        kind=kind,
                        status_code=response.status,
                    )

                try:
                    text = await response.text()
                except UnicodeDecodeError as e:
                    raise TourAPIError(
                        f"응답 본문 디코딩 실패: {e}",
                        kind=ErrorKind.API_ERROR,
                        status_code=response.status,
                        cause=e,
                    ) from e

                return TransportResponse(
                    status=response.status, url=str(response.url), text=text
                )

        except asyncio.TimeoutError as e:
            raise TourAPIError(
                f"요청 시간이 초과되었습니다. ({self.timeout}초)",
                kind=ErrorKind.TIMEOUT_ERROR,
                status_code=408,
                cause=e,
            ) from e
        except aiohttp.ClientError as e:
            raise TourAPIError(
                f"네트워크 오류: {e}",
                kind=ErrorKind.NETWORK_ERROR,
                cause=e,
            ) from e
        finally:
            if owns_session:
                await session.close()
