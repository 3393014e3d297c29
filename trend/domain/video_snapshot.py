from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class CollectedVideo:
    """
    업스트림(YouTube 인기 차트)에서 받아 정규화한 영상 한 건.
    스냅샷 키(일자/카테고리/국가)가 붙기 전 상태입니다.
    """
    video_id: str
    title: str
    channel_id: Optional[str] = None
    channel_title: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    # 업스트림 원본 ISO-8601 길이 문자열 (예: PT1M23S). duration_sec/is_shorts 는 Collector 가 채운다.
    duration: Optional[str] = None
    duration_sec: int = 0
    is_shorts: bool = False
    published_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None


@dataclass
class VideoSnapshot:
    """
    (video_id, snapshot_date, category_id, region_code) 당 한 행.
    동일 키로 다시 수집하면 덮어쓴다.
    """
    video_id: str
    category_id: str
    region_code: str
    snapshot_date: date
    title: str
    channel_id: Optional[str] = None
    channel_title: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    duration_sec: int = 0
    is_shorts: bool = False
    published_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_collected(
        cls, video: CollectedVideo, snapshot_date: date, category_id: str, region_code: str
    ) -> "VideoSnapshot":
        return cls(
            video_id=video.video_id,
            category_id=category_id,
            region_code=region_code,
            snapshot_date=snapshot_date,
            title=video.title,
            channel_id=video.channel_id,
            channel_title=video.channel_title,
            view_count=video.view_count,
            like_count=video.like_count,
            comment_count=video.comment_count,
            duration_sec=video.duration_sec,
            is_shorts=video.is_shorts,
            published_at=video.published_at,
            thumbnail_url=video.thumbnail_url,
        )

    def metric(self, sort_type: str) -> int:
        if sort_type == "views":
            return self.view_count
        if sort_type == "likes":
            return self.like_count
        if sort_type == "comments":
            return self.comment_count
        raise ValueError(f"unknown sort_type: {sort_type}")


@dataclass
class CollectionResult:
    # error 가 있으면 일부 페이지만 수집된 상태(또는 아무것도 수집되지 못한 상태)
    videos: list[CollectedVideo]
    pages_fetched: int = 0
    error: Optional[str] = None

    @property
    def partial(self) -> bool:
        return self.error is not None and bool(self.videos)
