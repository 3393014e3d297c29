from dataclasses import dataclass, field
from datetime import date

PERIOD_WINDOW_DAYS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
}


def window_days(period: str) -> int:
    try:
        return PERIOD_WINDOW_DAYS[period]
    except KeyError:
        raise ValueError(f"unknown period: {period}") from None


@dataclass
class CategoryKeywordTrend:
    snapshot_date: date
    category_id: str
    period: str
    region_code: str
    keyword: str
    raw_score: float
    trend_score: float
    video_count: int
    sample_titles: list[str] = field(default_factory=list)
    sample_video_ids: list[str] = field(default_factory=list)
