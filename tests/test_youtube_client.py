import httplib2
import pytest
from googleapiclient.errors import HttpError

from config.settings import YouTubeSettings
from trend.infrastructure.client.youtube_client import YouTubeClient


class _Request:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error

    def execute(self):
        if self.error:
            raise self.error
        return self.response


class FakeService:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.params = None

    def videos(self):
        return self

    def list(self, **params):
        self.params = params
        return _Request(self.response, self.error)


ITEM = {
    "id": "abc123",
    "snippet": {
        "title": "귀여운 강아지",
        "channelId": "UC1",
        "channelTitle": "멍멍",
        "publishedAt": "2025-11-30T12:00:00Z",
        "thumbnails": {"high": {"url": "https://i.ytimg.com/vi/abc123/hq.jpg"}},
    },
    "statistics": {"viewCount": "1500", "likeCount": "30"},
    "contentDetails": {"duration": "PT58S"},
}


def test_fetch_popular_page_maps_items_and_params():
    service = FakeService({"items": [ITEM], "nextPageToken": "NEXT"})
    client = YouTubeClient(YouTubeSettings(api_key="key", quota_user="shorts-batch"), service=service)

    page = client.fetch_popular_page("15", "KR", page_token="TOKEN", max_results=80)

    assert service.params == {
        "part": "snippet,contentDetails,statistics",
        "chart": "mostPopular",
        "videoCategoryId": "15",
        "regionCode": "KR",
        "maxResults": 50,
        "pageToken": "TOKEN",
        "quotaUser": "shorts-batch",
    }
    assert page.next_page_token == "NEXT"
    video = page.items[0]
    assert video.video_id == "abc123"
    assert video.view_count == 1500
    assert video.like_count == 30
    assert video.comment_count == 0
    assert video.duration == "PT58S"
    assert video.published_at.year == 2025
    assert video.thumbnail_url.endswith("hq.jpg")


def test_fetch_popular_page_wraps_http_errors():
    error = HttpError(httplib2.Response({"status": 403}), b"quotaExceeded")
    client = YouTubeClient(YouTubeSettings(api_key="key", quota_user=None), service=FakeService(error=error))

    with pytest.raises(RuntimeError, match="YouTube popular videos fetch failed"):
        client.fetch_popular_page("15", "KR")
