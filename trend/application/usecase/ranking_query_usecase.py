from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.domain.category import SORT_TYPES, shorts_filter
from trend.domain.keyword_trend import window_days
from trend.domain.video_snapshot import VideoSnapshot


@dataclass
class RankingItem:
    rank: int
    snapshot: VideoSnapshot
    view_increase: Optional[int] = None
    like_increase: Optional[int] = None
    comment_increase: Optional[int] = None

    def increase(self, sort_type: str) -> Optional[int]:
        return {
            "views": self.view_increase,
            "likes": self.like_increase,
            "comments": self.comment_increase,
        }[sort_type]


@dataclass
class RankingResult:
    snapshot_date: date
    category_id: str
    region_code: str
    sort_type: str
    video_type: str
    period: str = "daily"
    items: list[RankingItem] = field(default_factory=list)


class RankingQueryUseCase:
    def __init__(self, repository: TrendRepositoryPort):
        # 스냅샷 테이블 위의 조회 전용 경로. 데이터를 변경하지 않는다.
        self.repository = repository

    def get_ranking(
        self,
        category_id: str,
        region_code: str,
        sort_type: str = "views",
        video_type: str = "shorts",
        snapshot_date: date | None = None,
        period: str = "daily",
        limit: int = 100,
    ) -> RankingResult | None:
        """
        누적 지표(조회/좋아요/댓글) 내림차순 랭킹. 동점은 video_id 순서를 유지한다.
        각 항목에는 비교 기준일(기본 전일) 동일 키 대비 증가량을 붙이고, 그 행이 없으면 None 으로 둔다.
        """
        resolved = self._resolve(category_id, region_code, sort_type, video_type, snapshot_date, period)
        if resolved is None:
            return None
        snapshot_date, current, previous = resolved

        ordered = sorted(current, key=lambda s: s.metric(sort_type), reverse=True)
        items = [
            self._build_item(idx, snap, previous.get(snap.video_id))
            for idx, snap in enumerate(ordered[:limit], start=1)
        ]
        return RankingResult(snapshot_date, category_id, region_code, sort_type, video_type, period, items)

    def get_increase_ranking(
        self,
        category_id: str,
        region_code: str,
        sort_type: str = "views",
        video_type: str = "shorts",
        snapshot_date: date | None = None,
        period: str = "daily",
        limit: int = 100,
    ) -> RankingResult | None:
        """비교 기준일(기본 전일) 대비 증가량 랭킹. 기준일 스냅샷이 없는 영상은 제외한다."""
        resolved = self._resolve(category_id, region_code, sort_type, video_type, snapshot_date, period)
        if resolved is None:
            return None
        snapshot_date, current, previous = resolved

        candidates = [
            self._build_item(0, snap, previous[snap.video_id])
            for snap in current
            if snap.video_id in previous
        ]
        candidates.sort(key=lambda item: item.increase(sort_type), reverse=True)
        items = []
        for idx, item in enumerate(candidates[:limit], start=1):
            item.rank = idx
            items.append(item)
        return RankingResult(snapshot_date, category_id, region_code, sort_type, video_type, period, items)

    def _resolve(
        self,
        category_id: str,
        region_code: str,
        sort_type: str,
        video_type: str,
        snapshot_date: date | None,
        period: str,
    ):
        if sort_type not in SORT_TYPES:
            raise ValueError(f"unknown sort_type: {sort_type}")
        is_shorts = shorts_filter(video_type)
        # period 는 증가량 비교 기준일만 바꾼다 (daily=전일, weekly=7일 전, monthly=30일 전)
        compare_days = window_days(period)

        if snapshot_date is None:
            snapshot_date = self.repository.fetch_latest_snapshot_date(category_id, region_code, is_shorts)
            if snapshot_date is None:
                return None

        current = self.repository.fetch_snapshots(category_id, region_code, snapshot_date, is_shorts)
        if not current:
            return None

        previous_rows = self.repository.fetch_snapshots(
            category_id, region_code, snapshot_date - timedelta(days=compare_days), is_shorts
        )
        previous = {snap.video_id: snap for snap in previous_rows}
        return snapshot_date, current, previous

    @staticmethod
    def _build_item(rank: int, snap: VideoSnapshot, prev: VideoSnapshot | None) -> RankingItem:
        if prev is None:
            return RankingItem(rank=rank, snapshot=snap)
        return RankingItem(
            rank=rank,
            snapshot=snap,
            view_increase=snap.view_count - prev.view_count,
            like_increase=snap.like_count - prev.like_count,
            comment_increase=snap.comment_count - prev.comment_count,
        )
