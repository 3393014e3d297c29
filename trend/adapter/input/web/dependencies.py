from datetime import date

from fastapi import HTTPException

from config.database.session import SessionLocal
from trend.application.usecase.ranking_query_usecase import RankingQueryUseCase
from trend.application.usecase.trend_query_usecase import TrendQueryUseCase
from trend.infrastructure.repository.trend_repository_impl import TrendRepositoryImpl


def get_trend_repository() -> TrendRepositoryImpl:
    return TrendRepositoryImpl(SessionLocal)


def get_ranking_usecase() -> RankingQueryUseCase:
    return RankingQueryUseCase(get_trend_repository())


def get_trend_query_usecase() -> TrendQueryUseCase:
    return TrendQueryUseCase(get_trend_repository())


def parse_date_param(value: str | None) -> date | None:
    """'latest' 또는 빈 값이면 None(최신 일자 자동 선택), 아니면 YYYY-MM-DD."""
    if value is None or value == "latest":
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="date 는 latest 또는 YYYY-MM-DD 형식이어야 합니다.") from None
