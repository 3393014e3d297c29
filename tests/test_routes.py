from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import app
from config.settings import BatchSettings, CollectorSettings
from trend.adapter.input.web.batch_router import get_batch_orchestrator, get_batch_settings
from trend.adapter.input.web.dependencies import get_ranking_usecase, get_trend_query_usecase
from trend.application.pacer import Pacer
from trend.application.usecase.batch_orchestration_usecase import BatchOrchestrationUseCase
from trend.application.usecase.keyword_extraction_usecase import KeywordExtractionUseCase
from trend.application.usecase.ranking_query_usecase import RankingQueryUseCase
from trend.application.usecase.snapshot_collection_usecase import SnapshotCollectionUseCase
from trend.application.usecase.trend_query_usecase import TrendQueryUseCase
from trend.domain.keyword_trend import CategoryKeywordTrend
from tests.fakes import FakeYouTubeClient, make_snapshot, make_video

DAY1 = date(2025, 12, 1)
DAY2 = date(2025, 12, 2)


@pytest.fixture
def batch_settings():
    return BatchSettings(cron_secret=None)


@pytest.fixture
def client(repository, batch_settings):
    youtube = FakeYouTubeClient(
        pages={("15", "KR"): [[make_video("a"), make_video("b", duration="PT3M")]]},
    )
    orchestrator = BatchOrchestrationUseCase(
        repository=repository,
        collector=SnapshotCollectionUseCase(youtube, repository, CollectorSettings()),
        extractor=KeywordExtractionUseCase(repository),
        category_pacer=Pacer(0),
        region_pacer=Pacer(0),
        category_ids=["15", "20"],
        region_codes=["KR"],
    )
    app.dependency_overrides[get_ranking_usecase] = lambda: RankingQueryUseCase(repository)
    app.dependency_overrides[get_trend_query_usecase] = lambda: TrendQueryUseCase(repository)
    app.dependency_overrides[get_batch_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_batch_settings] = lambda: batch_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ranking_returns_404_without_data(client):
    response = client.get("/shorts/ranking", params={"category_id": "15"})
    assert response.status_code == 404


def test_ranking_latest(client, repository):
    repository.upsert_snapshots(
        [
            make_snapshot("a", DAY1, views=100),
            make_snapshot("a", DAY2, views=400),
            make_snapshot("b", DAY2, views=900),
        ]
    )
    response = client.get("/shorts/ranking", params={"category_id": "15", "sort_type": "views"})

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["snapshot_date"] == "2025-12-02"
    assert body["metadata"]["category_label"] == "애완동물/동물"
    assert body["metadata"]["total_count"] == 2
    first, second = body["items"]
    assert (first["rank"], first["video_id"], first["view_increase"]) == (1, "b", None)
    assert (second["rank"], second["video_id"], second["view_increase"]) == (2, "a", 300)
    assert first["youtube_url"] == "https://youtube.com/shorts/b"


def test_ranking_increase_mode(client, repository):
    repository.upsert_snapshots(
        [
            make_snapshot("a", DAY1, views=100),
            make_snapshot("a", DAY2, views=400),
            make_snapshot("b", DAY2, views=900),
        ]
    )
    response = client.get(
        "/shorts/ranking", params={"category_id": "15", "date": "2025-12-02", "increase": "true"}
    )

    body = response.json()
    assert body["metadata"]["ranked_by"] == "daily_increase"
    assert [i["video_id"] for i in body["items"]] == ["a"]


def test_ranking_rejects_bad_params(client):
    assert client.get("/shorts/ranking", params={"category_id": "15", "date": "12/02"}).status_code == 400
    assert client.get("/shorts/ranking", params={"category_id": "15", "sort_type": "shares"}).status_code == 422


def test_snapshot_dates(client, repository):
    repository.upsert_snapshots([make_snapshot("a", DAY1), make_snapshot("a", DAY2), make_snapshot("b", DAY2)])

    body = client.get("/shorts/dates").json()
    assert body == {"region_code": "KR", "dates": ["2025-12-02", "2025-12-01"], "total_count": 2}


def test_hot_keywords_404_without_data(client):
    assert client.get("/keywords/hot", params={"category_id": "15"}).status_code == 404


def test_hot_keywords_rounds_scores_and_ranks(client, repository):
    repository.replace_keyword_trends(
        DAY2,
        "15",
        "daily",
        "KR",
        [
            CategoryKeywordTrend(DAY2, "15", "daily", "KR", "강아지", 12.3456, 1.004, 10, ["t1"], ["v1"]),
            CategoryKeywordTrend(DAY2, "15", "daily", "KR", "산책", 8.0, 3.5, 4, ["t2"], ["v2"]),
        ],
    )

    body = client.get("/keywords/hot", params={"category_id": "15"}).json()
    assert body["metadata"]["snapshot_date"] == "2025-12-02"
    assert body["metadata"]["period_label"] == "일간"
    assert [(k["rank"], k["keyword"], k["raw_score"], k["trend_score"]) for k in body["keywords"]] == [
        (1, "강아지", 12.35, 1.0),
        (2, "산책", 8.0, 3.5),
    ]

    by_trend = client.get("/keywords/hot", params={"category_id": "15", "sort_by": "trend"}).json()
    assert [k["keyword"] for k in by_trend["keywords"]] == ["산책", "강아지"]


def test_batch_collect(client, repository):
    response = client.post("/batch/collect", json={"snapshot_date": "2025-12-02", "test_mode": True})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "success"
    assert body["summary"]["total_categories"] == 1
    assert body["summary"]["total_videos"] == 2
    assert len(repository.fetch_snapshots("15", "KR", DAY2, is_shorts=True)) == 1


def test_batch_collect_unknown_category_is_400(client):
    response = client.post("/batch/collect", json={"category_id": "999"})
    assert response.status_code == 400


def test_batch_analyze_defaults(client):
    response = client.post("/batch/analyze", json={"snapshot_date": "2025-12-02", "periods": ["daily"]})

    body = response.json()
    assert response.status_code == 200
    assert body["batch_type"] == "analyze"
    assert body["summary"]["total_keywords"] == 0
    assert len(body["results"]) == 2


def test_batch_requires_cron_secret_when_configured(client, batch_settings):
    batch_settings.cron_secret = "s3cret"

    assert client.get("/batch/collect-all").status_code == 401
    assert client.get("/batch/collect-all", headers={"Authorization": "Bearer wrong"}).status_code == 401

    response = client.get("/batch/collect-all", headers={"Authorization": "Bearer s3cret"})
    assert response.status_code == 200
    body = response.json()
    assert body["batch_type"] == "collect-all"
    # 20 번 카테고리는 페이지가 비어 있어 0건 성공으로 기록된다.
    assert body["status"] == "success"
    assert [r["region_code"] for r in body["region_results"]] == ["KR"]
