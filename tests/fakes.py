from datetime import date, datetime, timezone

from trend.application.port.platform_client_port import PlatformClientPort, PopularVideoPage
from trend.domain.video_snapshot import CollectedVideo, VideoSnapshot


class FakeYouTubeClient(PlatformClientPort):
    """
    업스트림 대역. pages[(category_id, region_code)] 에 페이지 목록을 넣어 두면 순서대로 돌려준다.
    failing 에 든 카테고리는 항상 실패하고, fail_on_page 는 해당 페이지 번호(1부터)에서 실패시킨다.
    """

    platform = "youtube"

    def __init__(self, pages=None, failing=(), fail_on_page=None):
        self.pages = pages or {}
        self.failing = set(failing)
        self.fail_on_page = fail_on_page or {}
        self.calls: list[tuple[str, str, str | None]] = []

    def fetch_popular_page(self, category_id, region_code, page_token=None, max_results=50):
        self.calls.append((category_id, region_code, page_token))
        if category_id in self.failing:
            raise RuntimeError(f"YouTube popular videos fetch failed: quota exceeded ({category_id})")

        pages = self.pages.get((category_id, region_code), [])
        index = int(page_token) if page_token else 0
        if self.fail_on_page.get((category_id, region_code)) == index + 1:
            raise RuntimeError("YouTube popular videos fetch failed: backend error")
        if index >= len(pages):
            return PopularVideoPage(items=[])

        next_token = str(index + 1) if index + 1 < len(pages) else None
        items = [CollectedVideo(**vars(v)) for v in pages[index]]
        return PopularVideoPage(items=items, next_page_token=next_token)


def make_video(video_id: str, title: str = "고양이 먹방", duration: str = "PT45S", views: int = 1000, **kwargs) -> CollectedVideo:
    return CollectedVideo(
        video_id=video_id,
        title=title,
        channel_id=kwargs.pop("channel_id", "UC_test"),
        channel_title=kwargs.pop("channel_title", "테스트 채널"),
        view_count=views,
        like_count=kwargs.pop("likes", 10),
        comment_count=kwargs.pop("comments", 1),
        duration=duration,
        published_at=kwargs.pop("published_at", datetime(2025, 11, 30, 12, 0, tzinfo=timezone.utc)),
        thumbnail_url=kwargs.pop("thumbnail_url", f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"),
    )


def make_snapshot(
    video_id: str,
    snapshot_date: date,
    title: str = "고양이 먹방",
    views: int = 1000,
    likes: int = 10,
    comments: int = 1,
    category_id: str = "15",
    region_code: str = "KR",
    is_shorts: bool = True,
    published_at: datetime | None = None,
) -> VideoSnapshot:
    return VideoSnapshot(
        video_id=video_id,
        category_id=category_id,
        region_code=region_code,
        snapshot_date=snapshot_date,
        title=title,
        channel_id="UC_test",
        channel_title="테스트 채널",
        view_count=views,
        like_count=likes,
        comment_count=comments,
        duration_sec=30 if is_shorts else 600,
        is_shorts=is_shorts,
        published_at=published_at,
        thumbnail_url=None,
    )
