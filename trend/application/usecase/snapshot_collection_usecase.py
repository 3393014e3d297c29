import logging
import re
from datetime import date
from typing import Iterable

from config.settings import CollectorSettings
from trend.application.port.platform_client_port import PlatformClientPort
from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.domain.video_snapshot import CollectedVideo, CollectionResult, VideoSnapshot

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_duration(iso_duration: str | None) -> int:
    """YouTube duration 포맷을 초로 바꾼다 (PT1M23S -> 83). 해석할 수 없으면 0."""
    if not iso_duration:
        return 0
    match = _DURATION_RE.match(iso_duration.strip())
    if not match:
        return 0
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def is_shorts_duration(duration_sec: int, threshold_sec: int) -> bool:
    # 길이 0(라이브 P0D, 길이 없는 프리미어)은 쇼츠가 아니다.
    return 0 < duration_sec <= threshold_sec


class SnapshotCollectionUseCase:
    def __init__(
        self,
        client: PlatformClientPort,
        repository: TrendRepositoryPort,
        settings: CollectorSettings | None = None,
    ):
        self.client = client
        self.repository = repository
        self.settings = settings or CollectorSettings()

    def collect(self, category_id: str, region_code: str) -> CollectionResult:
        """
        카테고리/국가별 인기 영상을 페이지 상한까지 모은다.
        - 쇼츠/롱폼 모두 보존하고 is_shorts 로 구분한다.
        - 중간 페이지가 실패하면 그때까지 모은 영상과 error 를 함께 돌려준다.
        """
        collected: dict[str, CollectedVideo] = {}
        page_token: str | None = None
        pages = 0
        error: str | None = None

        while pages < self.settings.max_pages:
            try:
                page = self.client.fetch_popular_page(
                    category_id,
                    region_code,
                    page_token=page_token,
                    max_results=self.settings.page_size,
                )
            except Exception as exc:  # pylint: disable=broad-except
                error = str(exc)
                logger.warning(
                    "[SHORTS-COLLECT] page fetch failed | category=%s region=%s page=%d collected=%d error=%s",
                    category_id,
                    region_code,
                    pages + 1,
                    len(collected),
                    exc,
                )
                break

            pages += 1
            for video in page.items:
                collected[video.video_id] = self._normalize(video)

            page_token = page.next_page_token
            if not page_token:
                break

        videos = list(collected.values())
        shorts_count = sum(1 for v in videos if v.is_shorts)
        logger.info(
            "[SHORTS-COLLECT] category=%s region=%s | pages=%d videos=%d (shorts %d, long %d)",
            category_id,
            region_code,
            pages,
            len(videos),
            shorts_count,
            len(videos) - shorts_count,
        )
        return CollectionResult(videos=videos, pages_fetched=pages, error=error)

    def persist(
        self,
        videos: Iterable[CollectedVideo],
        snapshot_date: date,
        category_id: str,
        region_code: str,
    ) -> int:
        snapshots = [
            VideoSnapshot.from_collected(video, snapshot_date, category_id, region_code)
            for video in videos
        ]
        if not snapshots:
            return 0
        written = self.repository.upsert_snapshots(snapshots)
        logger.info(
            "[SHORTS-COLLECT] saved %d snapshot rows | date=%s category=%s region=%s",
            written,
            snapshot_date,
            category_id,
            region_code,
        )
        return written

    def _normalize(self, video: CollectedVideo) -> CollectedVideo:
        duration_sec = parse_duration(video.duration) if video.duration else video.duration_sec
        video.duration_sec = duration_sec
        video.is_shorts = is_shorts_duration(duration_sec, self.settings.shorts_max_duration_sec)
        video.view_count = max(int(video.view_count or 0), 0)
        video.like_count = max(int(video.like_count or 0), 0)
        video.comment_count = max(int(video.comment_count or 0), 0)
        return video
