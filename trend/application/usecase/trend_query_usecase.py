from dataclasses import dataclass, field
from datetime import date

from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.domain.category import PERIODS
from trend.domain.keyword_trend import CategoryKeywordTrend

_SORT_COLUMNS = {"raw": "raw_score", "trend": "trend_score"}


@dataclass
class HotKeywordsResult:
    snapshot_date: date
    category_id: str
    period: str
    region_code: str
    sort_by: str
    keywords: list[CategoryKeywordTrend] = field(default_factory=list)


class TrendQueryUseCase:
    def __init__(self, repository: TrendRepositoryPort):
        # 키워드 탭에서 필요한 조회(핫 키워드, 스냅샷 일자)를 담당한다.
        self.repository = repository

    def get_hot_keywords(
        self,
        category_id: str,
        region_code: str = "KR",
        period: str = "daily",
        snapshot_date: date | None = None,
        sort_by: str = "raw",
        limit: int = 50,
    ) -> HotKeywordsResult | None:
        if period not in PERIODS:
            raise ValueError(f"unknown period: {period}")
        if sort_by not in _SORT_COLUMNS:
            raise ValueError(f"unknown sort_by: {sort_by}")

        if snapshot_date is None:
            snapshot_date = self.repository.fetch_latest_keyword_date(category_id, period, region_code)
            if snapshot_date is None:
                return None

        keywords = self.repository.fetch_keyword_trends(
            snapshot_date,
            category_id,
            period,
            region_code,
            sort_by=_SORT_COLUMNS[sort_by],
            limit=limit,
        )
        if not keywords:
            return None
        return HotKeywordsResult(snapshot_date, category_id, period, region_code, sort_by, keywords)

    def get_snapshot_dates(self, region_code: str = "KR") -> list[date]:
        return self.repository.fetch_snapshot_dates(region_code)
