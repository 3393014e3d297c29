from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from trend.domain.video_snapshot import CollectedVideo


@dataclass
class PopularVideoPage:
    items: list[CollectedVideo]
    next_page_token: Optional[str] = None


class PlatformClientPort(ABC):
    platform: str

    @abstractmethod
    def fetch_popular_page(
        self,
        category_id: str,
        region_code: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PopularVideoPage:
        """카테고리/국가별 인기 영상 한 페이지. 실패 시 RuntimeError."""
        raise NotImplementedError
