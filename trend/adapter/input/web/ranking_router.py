from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from trend.adapter.input.web.dependencies import get_ranking_usecase, get_trend_query_usecase, parse_date_param
from trend.application.usecase.ranking_query_usecase import RankingItem, RankingQueryUseCase
from trend.application.usecase.trend_query_usecase import TrendQueryUseCase
from trend.domain.category import get_category_label, get_period_label, get_region_label, get_sort_label

ranking_router = APIRouter(tags=["shorts"])


def _youtube_url(video_id: str, is_shorts: bool) -> str:
    if is_shorts:
        return f"https://youtube.com/shorts/{video_id}"
    return f"https://www.youtube.com/watch?v={video_id}"


def _serialize_item(item: RankingItem) -> dict:
    snap = item.snapshot
    return {
        "rank": item.rank,
        "video_id": snap.video_id,
        "title": snap.title,
        "channel_id": snap.channel_id,
        "channel_title": snap.channel_title,
        "view_count": snap.view_count,
        "like_count": snap.like_count,
        "comment_count": snap.comment_count,
        "view_increase": item.view_increase,
        "like_increase": item.like_increase,
        "comment_increase": item.comment_increase,
        "published_at": snap.published_at,
        "duration_sec": snap.duration_sec,
        "is_shorts": snap.is_shorts,
        "thumbnail_url": snap.thumbnail_url,
        "youtube_url": _youtube_url(snap.video_id, snap.is_shorts),
    }


@ranking_router.get("/ranking")
async def get_ranking(
    category_id: str = Query(..., description="YouTube videoCategoryId (예: 15)"),
    period: Literal["daily", "weekly", "monthly"] = Query(default="daily", description="증가량 비교 기준 (daily=전일)"),
    sort_type: Literal["views", "likes", "comments"] = Query(default="views"),
    video_type: Literal["shorts", "long", "all"] = Query(default="shorts"),
    region_code: str = Query(default="KR"),
    date: str = Query(default="latest", description="latest 또는 YYYY-MM-DD"),
    increase: bool = Query(default=False, description="true 이면 period 기준일 대비 증가량 랭킹"),
    limit: int = Query(default=100, ge=1, le=200),
    usecase: RankingQueryUseCase = Depends(get_ranking_usecase),
):
    """
    카테고리별 영상 랭킹을 조회한다. date=latest 이면 해당 조건의 최신 스냅샷 일자를 사용한다.
    """
    snapshot_date = parse_date_param(date)
    query = usecase.get_increase_ranking if increase else usecase.get_ranking
    result = query(
        category_id,
        region_code,
        sort_type=sort_type,
        video_type=video_type,
        snapshot_date=snapshot_date,
        period=period,
        limit=limit,
    )
    if result is None:
        raise HTTPException(status_code=404, detail="No data available for this category")

    items = [_serialize_item(item) for item in result.items]
    return JSONResponse(
        jsonable_encoder(
            {
                "metadata": {
                    "snapshot_date": result.snapshot_date,
                    "category_id": category_id,
                    "category_label": get_category_label(category_id),
                    "period": period,
                    "period_label": get_period_label(period),
                    "sort_type": sort_type,
                    "sort_label": get_sort_label(sort_type),
                    "video_type": video_type,
                    "region_code": region_code,
                    "region_label": get_region_label(region_code),
                    "ranked_by": f"{period}_increase" if increase else "cumulative",
                    "total_count": len(items),
                },
                "items": items,
            }
        )
    )


@ranking_router.get("/dates")
async def get_snapshot_dates(
    region_code: str = Query(default="KR"),
    usecase: TrendQueryUseCase = Depends(get_trend_query_usecase),
):
    """
    사용 가능한 스냅샷 날짜 목록(최신순)을 조회한다.
    """
    dates = usecase.get_snapshot_dates(region_code)
    return JSONResponse(
        jsonable_encoder({"region_code": region_code, "dates": dates, "total_count": len(dates)})
    )
