"""
상수 정의 모듈

관광 API 클라이언트에서 사용하는 상수들을 정의합니다.
"""

from enum import Enum


class ContentType(Enum):
    """관광 콘텐츠 타입"""

    TOURIST_SPOT = "12"  # 관광지
    CULTURAL_FACILITY = "14"  # 문화시설
    FESTIVAL = "15"  # 축제/행사
    TOUR_COURSE = "25"  # 여행코스
    LEISURE_SPORTS = "28"  # 레포츠
    ACCOMMODATION = "32"  # 숙박
    SHOPPING = "38"  # 쇼핑
    RESTAURANT = "39"  # 음식점


CONTENT_TYPE_NAMES = {
    ContentType.TOURIST_SPOT.value: "관광지",
    ContentType.CULTURAL_FACILITY.value: "문화시설",
    ContentType.FESTIVAL.value: "축제/행사",
    ContentType.TOUR_COURSE.value: "여행코스",
    ContentType.LEISURE_SPORTS.value: "레포츠",
    ContentType.ACCOMMODATION.value: "숙박",
    ContentType.SHOPPING.value: "쇼핑",
    ContentType.RESTAURANT.value: "음식점",
}


class TourEndpoint(Enum):
    """KorService2 엔드포인트"""

    AREA_CODE = "areaCode2"
    AREA_BASED_LIST = "areaBasedList2"
    SEARCH_KEYWORD = "searchKeyword2"
    DETAIL_COMMON = "detailCommon2"
    DETAIL_INTRO = "detailIntro2"
    DETAIL_IMAGE = "detailImage2"
    DETAIL_PET_TOUR = "detailPetTour2"


# 지역 코드 매핑 (시/도)
AREA_CODES = {
    "서울": "1",
    "인천": "2",
    "대전": "3",
    "대구": "4",
    "광주": "5",
    "부산": "6",
    "울산": "7",
    "세종": "8",
    "경기": "31",
    "강원": "32",
    "충북": "33",
    "충남": "34",
    "경북": "35",
    "경남": "36",
    "전북": "37",
    "전남": "38",
    "제주": "39",
}

# 줄임말이 접두어가 되지 않는 도 단위 정식 명칭
AREA_FULL_NAMES = {
    "충청북도": "33",
    "충청남도": "34",
    "경상북도": "35",
    "경상남도": "36",
    "전라북도": "37",
    "전라남도": "38",
}

# 응답 헤더 결과 코드
RESULT_CODE_SUCCESS = "0000"

# 서비스 키 문제를 뜻하는 data.go.kr 오류 코드
API_KEY_ERROR_CODES = {
    "20": "SERVICE_ACCESS_DENIED_ERROR",
    "30": "SERVICE_KEY_IS_NOT_REGISTERED_ERROR",
    "31": "DEADLINE_HAS_EXPIRED_ERROR",
    "32": "UNREGISTERED_IP_ERROR",
}

API_KEY_ERROR_MESSAGES = frozenset(
    list(API_KEY_ERROR_CODES.values())
    + ["TEMPORARILY_DISABLE_THE_SERVICEKEY_ERROR"]
)

# 인증 실패로 간주하는 HTTP 상태 코드
AUTH_FAILURE_STATUSES = frozenset({401, 403})

# 로그에 값을 남기지 않을 파라미터
SENSITIVE_PARAM_KEYS = frozenset({"servicekey", "api_key", "apikey", "token", "secret"})
