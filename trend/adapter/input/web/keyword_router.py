from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from trend.adapter.input.web.dependencies import get_trend_query_usecase, parse_date_param
from trend.application.usecase.trend_query_usecase import TrendQueryUseCase
from trend.domain.category import get_category_label, get_period_label, get_region_label

keyword_router = APIRouter(tags=["keywords"])


@keyword_router.get("/hot")
async def get_hot_keywords(
    category_id: str = Query(...),
    period: Literal["daily", "weekly", "monthly"] = Query(default="daily"),
    region_code: str = Query(default="KR"),
    date: str = Query(default="latest", description="latest 또는 YYYY-MM-DD"),
    sort_by: Literal["raw", "trend"] = Query(default="raw", description="raw: 꾸준히 강한 키워드, trend: 급상승 키워드"),
    limit: int = Query(default=50, ge=1, le=200),
    usecase: TrendQueryUseCase = Depends(get_trend_query_usecase),
):
    """
    카테고리/기간별 핫 키워드를 조회한다.
    """
    result = usecase.get_hot_keywords(
        category_id,
        region_code=region_code,
        period=period,
        snapshot_date=parse_date_param(date),
        sort_by=sort_by,
        limit=limit,
    )
    if result is None:
        raise HTTPException(status_code=404, detail="No keyword data available for this category")

    keywords = [
        {
            "rank": idx,
            "keyword": kw.keyword,
            "raw_score": round(kw.raw_score, 2),
            "trend_score": round(kw.trend_score, 2),
            "video_count": kw.video_count,
            "sample_titles": kw.sample_titles,
            "sample_video_ids": kw.sample_video_ids,
        }
        for idx, kw in enumerate(result.keywords, start=1)
    ]
    return JSONResponse(
        jsonable_encoder(
            {
                "metadata": {
                    "snapshot_date": result.snapshot_date,
                    "category_id": category_id,
                    "category_label": get_category_label(category_id),
                    "period": period,
                    "period_label": get_period_label(period),
                    "region_code": region_code,
                    "region_label": get_region_label(region_code),
                    "sort_by": sort_by,
                    "total_count": len(keywords),
                },
                "keywords": keywords,
            }
        )
    )
