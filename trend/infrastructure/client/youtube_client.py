from datetime import datetime

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import YouTubeSettings
from trend.application.port.platform_client_port import PlatformClientPort, PopularVideoPage
from trend.domain.video_snapshot import CollectedVideo


class YouTubeClient(PlatformClientPort):
    platform = "youtube"

    def __init__(self, settings: YouTubeSettings, service=None):
        # YouTube Data API v3 의 videos.list(chart=mostPopular) 로 카테고리별 인기 영상을 조회한다.
        self.settings = settings
        self.service = service or build(
            "youtube",
            "v3",
            developerKey=settings.api_key,
            cache_discovery=False,
        )

    def fetch_popular_page(
        self,
        category_id: str,
        region_code: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PopularVideoPage:
        params = {
            "part": "snippet,contentDetails,statistics",
            "chart": "mostPopular",
            "videoCategoryId": category_id,
            "regionCode": region_code,
            "maxResults": min(max_results, 50),
        }
        if page_token:
            params["pageToken"] = page_token
        if self.settings.quota_user:
            params["quotaUser"] = self.settings.quota_user
        try:
            response = self.service.videos().list(**params).execute()
        except HttpError as exc:
            raise RuntimeError(f"YouTube popular videos fetch failed: {exc}") from exc

        items = [self._to_video(item) for item in response.get("items", [])]
        return PopularVideoPage(items=items, next_page_token=response.get("nextPageToken"))

    def _to_video(self, item: dict) -> CollectedVideo:
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        content = item.get("contentDetails", {})
        thumbnails = snippet.get("thumbnails", {})
        return CollectedVideo(
            video_id=item["id"],
            title=snippet.get("title", ""),
            channel_id=snippet.get("channelId"),
            channel_title=snippet.get("channelTitle"),
            view_count=int(stats.get("viewCount", 0)),
            like_count=int(stats.get("likeCount", 0)) if stats.get("likeCount") else 0,
            comment_count=int(stats.get("commentCount", 0)) if stats.get("commentCount") else 0,
            duration=content.get("duration"),
            published_at=self._parse_datetime(snippet.get("publishedAt")),
            thumbnail_url=(thumbnails.get("high") or thumbnails.get("default") or {}).get("url"),
        )

    @staticmethod
    def _parse_datetime(value: str | None):
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
