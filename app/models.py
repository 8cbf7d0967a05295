"""
관광 정보 응답 모델

한국관광공사 API(KorService2)의 응답 항목과 통계 결과를 불변 값 객체로 정의합니다.
API의 소문자 키(contentid, mapx 등)는 별칭으로 받고, 속성명은 snake_case를 사용합니다.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.utils.image_utils import normalize_image_url


class TourRecord(BaseModel):
    """API 레코드 공통 설정"""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class PassThroughRecord(TourRecord):
    """콘텐츠 타입에 따라 필드가 달라지는 레코드 (정의되지 않은 필드도 보존)"""

    model_config = ConfigDict(extra="allow")


# ========== 목록/코드 ==========


class AreaCode(TourRecord):
    """지역코드 (areaCode2)"""

    code: str
    name: str
    rnum: Optional[str] = None


class TourListItem(TourRecord):
    """관광지 목록 항목 (areaBasedList2, searchKeyword2)"""

    content_id: str = Field(alias="contentid")
    content_type_id: str = Field(alias="contenttypeid")
    title: str
    addr1: str = ""
    addr2: Optional[str] = None
    area_code: str = Field(default="", alias="areacode")
    map_x: str = Field(default="", alias="mapx")  # 경도
    map_y: str = Field(default="", alias="mapy")  # 위도
    first_image: Optional[str] = Field(default=None, alias="firstimage")
    first_image2: Optional[str] = Field(default=None, alias="firstimage2")
    tel: Optional[str] = None
    cat1: Optional[str] = None
    cat2: Optional[str] = None
    cat3: Optional[str] = None
    modified_time: str = Field(default="", alias="modifiedtime")

    @property
    def images(self) -> List[str]:
        """정규화된 대표 이미지 URL (유효하지 않은 값은 제외)"""
        urls = (
            normalize_image_url(url, fallback=None)
            for url in (self.first_image, self.first_image2)
        )
        return [url for url in urls if url]

    @property
    def categories(self) -> List[str]:
        return [cat for cat in (self.cat1, self.cat2, self.cat3) if cat]


class TourListResult(TourRecord):
    """관광지 목록 페이지 (total_count가 페이지 계산의 기준)"""

    items: List[TourListItem] = Field(default_factory=list)
    total_count: int = 0
    page_size: int
    page_number: int

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0 or self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)


# ========== 상세 정보 ==========


class TourDetail(PassThroughRecord):
    """공통 정보 (detailCommon2)"""

    content_id: str = Field(alias="contentid")
    content_type_id: str = Field(alias="contenttypeid")
    title: str = ""
    addr1: str = ""
    addr2: Optional[str] = None
    zipcode: Optional[str] = None
    tel: Optional[str] = None
    homepage: Optional[str] = None
    overview: Optional[str] = None
    first_image: Optional[str] = Field(default=None, alias="firstimage")
    first_image2: Optional[str] = Field(default=None, alias="firstimage2")
    map_x: str = Field(default="", alias="mapx")
    map_y: str = Field(default="", alias="mapy")


class TourIntro(PassThroughRecord):
    """소개 정보 (detailIntro2) - 콘텐츠 타입별로 필드가 다름"""

    content_id: str = Field(alias="contentid")
    content_type_id: str = Field(alias="contenttypeid")
    # 공통
    usetime: Optional[str] = None
    restdate: Optional[str] = None
    infocenter: Optional[str] = None
    parking: Optional[str] = None
    chkpet: Optional[str] = None
    # 관광지(12)
    expguide: Optional[str] = None
    expagerange: Optional[str] = None
    # 문화시설(14)
    usefee: Optional[str] = None
    usetimeculture: Optional[str] = None
    restdateculture: Optional[str] = None
    # 축제/행사(15)
    playtime: Optional[str] = None
    eventplace: Optional[str] = None
    eventhomepage: Optional[str] = None
    # 레포츠(28)
    openperiod: Optional[str] = None
    reservation: Optional[str] = None
    # 숙박(32)
    checkintime: Optional[str] = None
    checkouttime: Optional[str] = None
    roomcount: Optional[str] = None
    # 음식점(39)
    firstmenu: Optional[str] = None
    treatmenu: Optional[str] = None
    opentimefood: Optional[str] = None


class TourImage(PassThroughRecord):
    """이미지 정보 (detailImage2)"""

    content_id: str = Field(alias="contentid")
    origin_img_url: str = Field(default="", alias="originimgurl")
    small_image_url: str = Field(default="", alias="smallimageurl")
    img_name: Optional[str] = Field(default=None, alias="imgname")
    serial_num: Optional[str] = Field(default=None, alias="serialnum")


class TourImageResult(TourRecord):
    """이미지 목록"""

    items: List[TourImage] = Field(default_factory=list)
    total_count: int = 0


class PetTourInfo(PassThroughRecord):
    """반려동물 동반 정보 (detailPetTour2)"""

    content_id: str = Field(alias="contentid")
    content_type_id: Optional[str] = Field(default=None, alias="contenttypeid")
    chkpetleash: Optional[str] = None
    chkpetsize: Optional[str] = None
    chkpetplace: Optional[str] = None
    chkpetfee: Optional[str] = None
    petinfo: Optional[str] = None
    parking: Optional[str] = None


# ========== 통계 ==========


class RegionStat(TourRecord):
    """지역별 관광지 수"""

    area_code: str
    name: str
    count: int


class TypeStat(TourRecord):
    """타입별 관광지 수와 비율(%)"""

    content_type_id: str
    name: str
    count: int
    percentage: float = 0.0


class StatsSummary(TourRecord):
    """통계 요약 (last_updated는 집계 시각)"""

    total_count: int
    top_regions: List[RegionStat]
    top_types: List[TypeStat]
    last_updated: datetime
