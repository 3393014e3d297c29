from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


class CollectRequest(BaseModel):
    snapshot_date: Optional[date] = Field(default=None, description="기본값: 운영 시간대 기준 오늘")
    region_code: str = Field(default="KR", min_length=2, max_length=2)
    test_mode: bool = Field(default=False, description="첫 번째 카테고리만 처리")
    category_id: Optional[str] = Field(default=None, description="특정 카테고리만 수집")


class CollectAllRequest(BaseModel):
    snapshot_date: Optional[date] = None
    region_codes: Optional[list[str]] = Field(default=None, description="기본값: 지원 국가 전체")
    test_mode: bool = False


class AnalyzeRequest(BaseModel):
    snapshot_date: Optional[date] = Field(default=None, description="기본값: 운영 시간대 기준 어제")
    region_code: str = Field(default="KR", min_length=2, max_length=2)
    periods: Optional[list[Literal["daily", "weekly", "monthly"]]] = None
    test_mode: bool = False
    category_id: Optional[str] = None
