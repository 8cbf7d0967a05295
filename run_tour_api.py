#!/usr/bin/env python3
"""
관광 정보 조회 도구

프로젝트 루트에서 실행하여 한국관광공사 API를 직접 조회하거나 통계를 집계합니다.
결과는 JSON으로 출력합니다.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from app.collectors.tour_api_client import TourAPIClient
from app.core.error_handling import TourAPIError, get_user_message
from app.core.logger import get_logger, setup_logging
from app.services.stats_service import StatsAggregator


def build_parser() -> argparse.ArgumentParser:
    """명령행 파서 생성"""
    parser = argparse.ArgumentParser(
        description="MyTrip 관광 정보 조회 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
  python run_tour_api.py areas                         # 지역코드 목록
  python run_tour_api.py list --area 1 --type 12       # 서울 관광지 목록
  python run_tour_api.py search 경복궁                  # 키워드 검색
  python run_tour_api.py detail 126508                 # 공통 정보 조회
  python run_tour_api.py stats                         # 통계 요약
        """,
    )
    parser.add_argument("--log-dir", default=None, help="로그 파일 디렉토리 (미지정 시 콘솔만)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    areas = subparsers.add_parser("areas", help="지역코드 조회")
    areas.add_argument("--rows", type=int, default=100)

    listing = subparsers.add_parser("list", help="지역 기반 목록 조회")
    listing.add_argument("--area", dest="area_code")
    listing.add_argument("--type", dest="content_type_id")
    listing.add_argument("--rows", type=int, default=10)
    listing.add_argument("--page", type=int, default=1)

    search = subparsers.add_parser("search", help="키워드 검색")
    search.add_argument("keyword")
    search.add_argument("--area", dest="area_code")
    search.add_argument("--type", dest="content_type_id")
    search.add_argument("--rows", type=int, default=10)
    search.add_argument("--page", type=int, default=1)

    detail = subparsers.add_parser("detail", help="공통 정보 조회")
    detail.add_argument("content_id")

    subparsers.add_parser("stats", help="통계 요약")

    return parser


def _dump(result: Any) -> Any:
    if isinstance(result, list):
        return [_dump(item) for item in result]
    return result.model_dump(mode="json")


async def run_command(args: argparse.Namespace, client: TourAPIClient) -> Any:
    """명령 실행 후 JSON 직렬화 가능한 결과 반환"""
    async with client:
        if args.command == "areas":
            result = await client.lookup_area_codes(page_size=args.rows)
        elif args.command == "list":
            result = await client.list_by_area(
                area_code=args.area_code,
                content_type_id=args.content_type_id,
                page_size=args.rows,
                page_number=args.page,
            )
        elif args.command == "search":
            result = await client.search_by_keyword(
                args.keyword,
                area_code=args.area_code,
                content_type_id=args.content_type_id,
                page_size=args.rows,
                page_number=args.page,
            )
        elif args.command == "detail":
            result = await client.get_detail(args.content_id)
        else:
            result = await StatsAggregator(client).get_stats_summary()
    return _dump(result)


def main(argv: Optional[List[str]] = None, client: Optional[TourAPIClient] = None) -> int:
    """메인 함수"""
    args = build_parser().parse_args(argv)

    setup_logging(log_dir=args.log_dir)
    logger = get_logger(__name__)

    try:
        output = asyncio.run(run_command(args, client or TourAPIClient()))
    except TourAPIError as e:
        logger.error(f"관광 정보 조회 실패: {e.kind.value} - {e.message}")
        print(f"❌ {get_user_message(e)}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n⚠️  사용자 중단으로 종료합니다.", file=sys.stderr)
        return 1

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
