from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable

from trend.domain.batch_run_log import BatchRunLog
from trend.domain.keyword_trend import CategoryKeywordTrend
from trend.domain.video_snapshot import VideoSnapshot


class TrendRepositoryPort(ABC):
    # 스냅샷 (Collector 전용 쓰기)
    @abstractmethod
    def upsert_snapshots(self, snapshots: Iterable[VideoSnapshot]) -> int:
        raise NotImplementedError

    # 키워드 트렌드 (Engine 전용 쓰기)
    @abstractmethod
    def replace_keyword_trends(
        self,
        snapshot_date: date,
        category_id: str,
        period: str,
        region_code: str,
        trends: Iterable[CategoryKeywordTrend],
    ) -> int:
        raise NotImplementedError

    # 배치 로그 (Orchestrator 전용 쓰기)
    @abstractmethod
    def create_batch_run(self, log: BatchRunLog) -> BatchRunLog:
        raise NotImplementedError

    @abstractmethod
    def finish_batch_run(self, log: BatchRunLog) -> BatchRunLog:
        raise NotImplementedError

    # 조회 전용 메서드들
    @abstractmethod
    def fetch_snapshots(
        self,
        category_id: str,
        region_code: str,
        snapshot_date: date,
        is_shorts: bool | None = None,
    ) -> list[VideoSnapshot]:
        raise NotImplementedError

    @abstractmethod
    def fetch_snapshots_between(
        self, category_id: str, region_code: str, from_date: date, to_date: date
    ) -> list[VideoSnapshot]:
        raise NotImplementedError

    @abstractmethod
    def fetch_latest_snapshot_date(
        self, category_id: str, region_code: str, is_shorts: bool | None = None
    ) -> date | None:
        raise NotImplementedError

    @abstractmethod
    def fetch_snapshot_dates(self, region_code: str) -> list[date]:
        raise NotImplementedError

    @abstractmethod
    def fetch_keyword_trends(
        self,
        snapshot_date: date,
        category_id: str,
        period: str,
        region_code: str,
        sort_by: str = "raw_score",
        limit: int | None = None,
    ) -> list[CategoryKeywordTrend]:
        raise NotImplementedError

    @abstractmethod
    def fetch_keyword_history(
        self,
        category_id: str,
        period: str,
        region_code: str,
        from_date: date,
        to_date: date,
    ) -> dict[date, dict[str, float]]:
        """[from_date, to_date) 구간의 실행 일자별 {keyword: raw_score}."""
        raise NotImplementedError

    @abstractmethod
    def fetch_latest_keyword_date(self, category_id: str, period: str, region_code: str) -> date | None:
        raise NotImplementedError

    @abstractmethod
    def fetch_batch_run(self, run_id: int) -> BatchRunLog | None:
        raise NotImplementedError
