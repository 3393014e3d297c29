from datetime import date

import pytest

from config.settings import CollectorSettings
from trend.application.usecase.snapshot_collection_usecase import (
    SnapshotCollectionUseCase,
    is_shorts_duration,
    parse_duration,
)
from tests.fakes import FakeYouTubeClient, make_video

SNAPSHOT_DATE = date(2025, 12, 2)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("PT45S", 45),
        ("PT1M", 60),
        ("PT1M1S", 61),
        ("PT1M23S", 83),
        ("PT1H2M3S", 3723),
        ("P1DT1S", 86401),
        ("P0D", 0),
        ("", 0),
        (None, 0),
        ("garbage", 0),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_shorts_threshold_is_inclusive():
    assert is_shorts_duration(61, 61)
    assert is_shorts_duration(1, 61)
    assert not is_shorts_duration(62, 61)
    assert not is_shorts_duration(0, 61)


def test_collect_never_marks_zero_length_videos_as_shorts(repository, collector_settings):
    client = FakeYouTubeClient(
        pages={
            ("15", "KR"): [
                [
                    make_video("live", duration="P0D"),
                    make_video("premiere", duration=None),
                    make_video("odd", duration="garbage"),
                    make_video("short", duration="PT30S"),
                ]
            ]
        }
    )
    result = SnapshotCollectionUseCase(client, repository, collector_settings).collect("15", "KR")

    classified = sorted((v.video_id, v.duration_sec, v.is_shorts) for v in result.videos)
    assert classified == [
        ("live", 0, False),
        ("odd", 0, False),
        ("premiere", 0, False),
        ("short", 30, True),
    ]


def test_collect_classifies_and_keeps_long_form(repository, collector_settings):
    client = FakeYouTubeClient(
        pages={("15", "KR"): [[make_video("s1", duration="PT1M1S"), make_video("l1", duration="PT1M2S")]]}
    )
    result = SnapshotCollectionUseCase(client, repository, collector_settings).collect("15", "KR")

    by_id = {v.video_id: v for v in result.videos}
    assert by_id["s1"].is_shorts is True
    assert by_id["s1"].duration_sec == 61
    assert by_id["l1"].is_shorts is False
    assert result.error is None


def test_collect_follows_page_tokens_and_dedupes(repository, collector_settings):
    client = FakeYouTubeClient(
        pages={
            ("15", "KR"): [
                [make_video("a"), make_video("b")],
                [make_video("b", views=5000), make_video("c")],
            ]
        }
    )
    result = SnapshotCollectionUseCase(client, repository, collector_settings).collect("15", "KR")

    assert result.pages_fetched == 2
    assert sorted(v.video_id for v in result.videos) == ["a", "b", "c"]
    assert [c[2] for c in client.calls] == [None, "1"]


def test_collect_stops_at_page_cap(repository):
    pages = [[make_video(f"v{i}")] for i in range(6)]
    client = FakeYouTubeClient(pages={("15", "KR"): pages})
    settings = CollectorSettings(shorts_max_duration_sec=61, max_pages=4, page_size=50)

    result = SnapshotCollectionUseCase(client, repository, settings).collect("15", "KR")

    assert result.pages_fetched == 4
    assert len(client.calls) == 4
    assert len(result.videos) == 4


def test_collect_returns_partial_result_when_later_page_fails(repository, collector_settings):
    client = FakeYouTubeClient(
        pages={("15", "KR"): [[make_video("a")], [make_video("b")], [make_video("c")]]},
        fail_on_page={("15", "KR"): 2},
    )
    result = SnapshotCollectionUseCase(client, repository, collector_settings).collect("15", "KR")

    assert [v.video_id for v in result.videos] == ["a"]
    assert result.partial
    assert "backend error" in result.error


def test_collect_returns_empty_result_when_first_page_fails(repository, collector_settings):
    client = FakeYouTubeClient(failing={"15"})
    result = SnapshotCollectionUseCase(client, repository, collector_settings).collect("15", "KR")

    assert result.videos == []
    assert result.pages_fetched == 0
    assert result.error
    assert not result.partial


def test_persist_is_idempotent(repository, collector_settings):
    client = FakeYouTubeClient(pages={("15", "KR"): [[make_video("a"), make_video("b", duration="PT5M")]]})
    collector = SnapshotCollectionUseCase(client, repository, collector_settings)

    videos = collector.collect("15", "KR").videos
    assert collector.persist(videos, SNAPSHOT_DATE, "15", "KR") == 2
    first = repository.fetch_snapshots("15", "KR", SNAPSHOT_DATE)
    assert collector.persist(videos, SNAPSHOT_DATE, "15", "KR") == 2
    second = repository.fetch_snapshots("15", "KR", SNAPSHOT_DATE)

    assert first == second
    assert len(second) == 2


def test_recollect_overwrites_metrics(repository, collector_settings):
    client = FakeYouTubeClient(pages={("15", "KR"): [[make_video("a", views=100)]]})
    collector = SnapshotCollectionUseCase(client, repository, collector_settings)
    collector.persist(collector.collect("15", "KR").videos, SNAPSHOT_DATE, "15", "KR")

    client.pages[("15", "KR")] = [[make_video("a", title="새 제목", views=900)]]
    collector.persist(collector.collect("15", "KR").videos, SNAPSHOT_DATE, "15", "KR")

    rows = repository.fetch_snapshots("15", "KR", SNAPSHOT_DATE)
    assert len(rows) == 1
    assert rows[0].view_count == 900
    assert rows[0].title == "새 제목"


def test_persist_without_videos_writes_nothing(repository, collector_settings):
    collector = SnapshotCollectionUseCase(FakeYouTubeClient(), repository, collector_settings)
    assert collector.persist([], SNAPSHOT_DATE, "15", "KR") == 0
    assert repository.fetch_snapshots("15", "KR", SNAPSHOT_DATE) == []
