from dataclasses import dataclass


@dataclass(frozen=True)
class ShortsCategory:
    id: str
    label: str
    yt_name: str


@dataclass(frozen=True)
class Region:
    code: str
    label: str


# YouTube videoCategoryId 와 한글 카테고리명 매핑 (선언 순서대로 배치가 처리한다)
# 19 (여행/이벤트), 27 (교육), 29 (비영리)는 한국 mostPopular 차트가 지원하지 않아 제외
SHORTS_CATEGORIES: tuple[ShortsCategory, ...] = (
    ShortsCategory("15", "애완동물/동물", "Pets & Animals"),
    ShortsCategory("20", "게임", "Gaming"),
    ShortsCategory("25", "뉴스/정치", "News & Politics"),
    ShortsCategory("22", "인물/블로그", "People & Blogs"),
    ShortsCategory("24", "엔터테인먼트", "Entertainment"),
    ShortsCategory("23", "코미디", "Comedy"),
    ShortsCategory("28", "과학기술", "Science & Technology"),
    ShortsCategory("26", "노하우/스타일", "Howto & Style"),
    ShortsCategory("17", "스포츠", "Sports"),
    ShortsCategory("1", "영화/애니메이션", "Film & Animation"),
    ShortsCategory("2", "자동차/교통", "Autos & Vehicles"),
)

REGIONS: tuple[Region, ...] = (
    Region("KR", "한국"),
    Region("US", "미국"),
    Region("GB", "영국"),
    Region("JP", "일본"),
)

PERIODS = ("daily", "weekly", "monthly")
SORT_TYPES = ("views", "likes", "comments")
VIDEO_TYPES = ("shorts", "long", "all")

UNKNOWN_LABEL = "알 수 없음"

_PERIOD_LABELS = {"daily": "일간", "weekly": "주간", "monthly": "월간"}
_SORT_LABELS = {"views": "조회수", "likes": "좋아요", "comments": "댓글"}


def get_category_label(category_id: str) -> str:
    for category in SHORTS_CATEGORIES:
        if category.id == category_id:
            return category.label
    return UNKNOWN_LABEL


def get_region_label(region_code: str) -> str:
    for region in REGIONS:
        if region.code == region_code:
            return region.label
    return UNKNOWN_LABEL


def get_period_label(period: str) -> str:
    return _PERIOD_LABELS.get(period, UNKNOWN_LABEL)


def get_sort_label(sort_type: str) -> str:
    return _SORT_LABELS.get(sort_type, UNKNOWN_LABEL)


def shorts_filter(video_type: str) -> bool | None:
    """video_type 을 is_shorts 조건으로 바꾼다. all 이면 None(필터 없음)."""
    if video_type == "shorts":
        return True
    if video_type == "long":
        return False
    if video_type == "all":
        return None
    raise ValueError(f"unknown video_type: {video_type}")
