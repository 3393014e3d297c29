import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from config.settings import KeywordSettings
from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.domain.keyword_trend import CategoryKeywordTrend, window_days
from trend.domain.scoring import BaselineRatioTrendScorer, TrendScorer, engagement_weight
from trend.domain.tokenizer import has_korean, tokenize
from trend.domain.video_snapshot import VideoSnapshot

logger = logging.getLogger(__name__)


@dataclass
class KeywordScore:
    keyword: str
    raw_score: float = 0.0
    videos: list[VideoSnapshot] = field(default_factory=list)

    @property
    def video_count(self) -> int:
        return len(self.videos)


def _sample_order(video: VideoSnapshot):
    published = video.published_at.timestamp() if video.published_at else 0.0
    return (-video.view_count, -published, video.video_id)


def calculate_keyword_scores(videos: Iterable[VideoSnapshot]) -> dict[str, KeywordScore]:
    """
    영상 목록에서 키워드별 raw_score 를 계산한다.
    영상 한 건은 제목에 담긴 키워드마다 한 번씩만 기여한다.
    """
    scores: dict[str, KeywordScore] = {}
    for video in videos:
        weight = engagement_weight(video.view_count, video.like_count, video.comment_count)
        for keyword in dict.fromkeys(tokenize(video.title)):
            entry = scores.get(keyword)
            if entry is None:
                entry = scores[keyword] = KeywordScore(keyword=keyword)
            entry.raw_score += weight
            entry.videos.append(video)
    return scores


class KeywordExtractionUseCase:
    def __init__(
        self,
        repository: TrendRepositoryPort,
        settings: KeywordSettings | None = None,
        trend_scorer: TrendScorer | None = None,
    ):
        self.repository = repository
        self.settings = settings or KeywordSettings()
        self.trend_scorer = trend_scorer or BaselineRatioTrendScorer()

    def extract(self, snapshot_date: date, category_id: str, period: str, region_code: str) -> int:
        """
        (snapshot_date, category_id, period, region_code) 키의 핫 키워드를 계산해 통째로 교체 저장한다.
        저장한 키워드 수를 돌려준다. 표본이 부족하면 0.
        """
        pool = self.load_pool(snapshot_date, category_id, period, region_code)
        logger.info(
            "[KEYWORD-ENGINE] start | date=%s category=%s period=%s region=%s pool=%d",
            snapshot_date,
            category_id,
            period,
            region_code,
            len(pool),
        )

        if len(pool) < self.settings.min_pool_videos:
            logger.info(
                "[KEYWORD-ENGINE] skipped: pool %d < minimum %d | category=%s period=%s",
                len(pool),
                self.settings.min_pool_videos,
                category_id,
                period,
            )
            self.repository.replace_keyword_trends(snapshot_date, category_id, period, region_code, [])
            return 0

        scores = calculate_keyword_scores(pool)
        selected = sorted(
            (s for s in scores.values() if s.video_count >= self.settings.min_video_count),
            key=lambda s: (-s.raw_score, s.keyword),
        )[: self.settings.max_results]

        runs = self._load_history(snapshot_date, category_id, period, region_code)
        trends = [self._to_trend(score, runs, snapshot_date, category_id, period, region_code) for score in selected]

        saved = self.repository.replace_keyword_trends(snapshot_date, category_id, period, region_code, trends)
        logger.info(
            "[KEYWORD-ENGINE] saved %d keywords (of %d candidates) | category=%s period=%s",
            saved,
            len(scores),
            category_id,
            period,
        )
        return saved

    def load_pool(self, snapshot_date: date, category_id: str, period: str, region_code: str) -> list[VideoSnapshot]:
        """윈도우(마지막 N일, snapshot_date 포함) 안의 고유 영상. 같은 영상은 가장 최근 스냅샷을 쓴다."""
        from_date = snapshot_date - timedelta(days=window_days(period) - 1)
        rows = self.repository.fetch_snapshots_between(category_id, region_code, from_date, snapshot_date)

        latest: dict[str, VideoSnapshot] = {}
        for row in rows:
            current = latest.get(row.video_id)
            if current is None or row.snapshot_date >= current.snapshot_date:
                latest[row.video_id] = row

        pool = list(latest.values())
        if region_code == "KR" and self.settings.korean_only_for_kr:
            pool = [v for v in pool if has_korean(v.title)]
        return pool

    def _load_history(
        self, snapshot_date: date, category_id: str, period: str, region_code: str
    ) -> list[dict[str, float]]:
        from_date = snapshot_date - timedelta(days=self.settings.trend_lookback_days)
        history = self.repository.fetch_keyword_history(category_id, period, region_code, from_date, snapshot_date)
        return [history[d] for d in sorted(history)]

    def _to_trend(
        self,
        score: KeywordScore,
        runs: list[dict[str, float]],
        snapshot_date: date,
        category_id: str,
        period: str,
        region_code: str,
    ) -> CategoryKeywordTrend:
        history = [run.get(score.keyword, 0.0) for run in runs]
        samples = sorted(score.videos, key=_sample_order)[: self.settings.sample_size]
        return CategoryKeywordTrend(
            snapshot_date=snapshot_date,
            category_id=category_id,
            period=period,
            region_code=region_code,
            keyword=score.keyword,
            raw_score=score.raw_score,
            trend_score=self.trend_scorer.score(score.raw_score, history),
            video_count=score.video_count,
            sample_titles=[v.title for v in samples],
            sample_video_ids=[v.video_id for v in samples],
        )
