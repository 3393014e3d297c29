from collections import defaultdict
from datetime import date
from typing import Iterable

from sqlalchemy import delete, func, select

from config.database.session import SessionLocal
from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.domain.batch_run_log import STATUS_RUNNING, BatchRunLog, BatchRunMetadata
from trend.domain.keyword_trend import CategoryKeywordTrend
from trend.domain.video_snapshot import VideoSnapshot
from trend.infrastructure.orm.models import (
    CategoryKeywordsTrendORM,
    CategoryShortsSnapshotORM,
    ShortsBatchLogORM,
)

_SNAPSHOT_FIELDS = (
    "title",
    "channel_id",
    "channel_title",
    "view_count",
    "like_count",
    "comment_count",
    "duration_sec",
    "is_shorts",
    "published_at",
    "thumbnail_url",
)

_KEYWORD_SORT_COLUMNS = {
    "raw_score": CategoryKeywordsTrendORM.raw_score,
    "trend_score": CategoryKeywordsTrendORM.trend_score,
}


class TrendRepositoryImpl(TrendRepositoryPort):
    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def upsert_snapshots(self, snapshots: Iterable[VideoSnapshot]) -> int:
        # 같은 키가 입력에 두 번 있으면 마지막 값이 이긴다.
        grouped: dict[tuple, dict[str, VideoSnapshot]] = defaultdict(dict)
        for snap in snapshots:
            grouped[(snap.snapshot_date, snap.category_id, snap.region_code)][snap.video_id] = snap

        written = 0
        with self.session_factory() as db:
            for (snapshot_date, category_id, region_code), by_video in grouped.items():
                existing = {
                    orm.video_id: orm
                    for orm in db.scalars(
                        select(CategoryShortsSnapshotORM).where(
                            CategoryShortsSnapshotORM.snapshot_date == snapshot_date,
                            CategoryShortsSnapshotORM.category_id == category_id,
                            CategoryShortsSnapshotORM.region_code == region_code,
                            CategoryShortsSnapshotORM.video_id.in_(list(by_video)),
                        )
                    )
                }
                for video_id, snap in by_video.items():
                    orm = existing.get(video_id)
                    if orm is None:
                        orm = CategoryShortsSnapshotORM(
                            video_id=video_id,
                            snapshot_date=snapshot_date,
                            category_id=category_id,
                            region_code=region_code,
                        )
                        db.add(orm)
                    # 재수집 시 전 필드를 덮어써 멱등성을 보장한다.
                    for name in _SNAPSHOT_FIELDS:
                        setattr(orm, name, getattr(snap, name))
                    written += 1
            db.commit()
        return written

    def replace_keyword_trends(
        self,
        snapshot_date: date,
        category_id: str,
        period: str,
        region_code: str,
        trends: Iterable[CategoryKeywordTrend],
    ) -> int:
        rows = list(trends)
        with self.session_factory() as db:
            # 동일 키의 기존 결과는 지우고 새로 넣는다 (부분 갱신 없음).
            db.execute(
                delete(CategoryKeywordsTrendORM).where(
                    CategoryKeywordsTrendORM.snapshot_date == snapshot_date,
                    CategoryKeywordsTrendORM.category_id == category_id,
                    CategoryKeywordsTrendORM.period == period,
                    CategoryKeywordsTrendORM.region_code == region_code,
                )
            )
            for trend in rows:
                db.add(
                    CategoryKeywordsTrendORM(
                        snapshot_date=snapshot_date,
                        category_id=category_id,
                        period=period,
                        region_code=region_code,
                        keyword=trend.keyword,
                        raw_score=trend.raw_score,
                        trend_score=trend.trend_score,
                        video_count=trend.video_count,
                        sample_titles=list(trend.sample_titles),
                        sample_video_ids=list(trend.sample_video_ids),
                    )
                )
            db.commit()
        return len(rows)

    def create_batch_run(self, log: BatchRunLog) -> BatchRunLog:
        with self.session_factory() as db:
            orm = ShortsBatchLogORM(
                batch_type=log.batch_type,
                snapshot_date=log.snapshot_date,
                status=log.status,
                started_at=log.started_at,
                metadata_json=log.metadata.to_dict(),
            )
            db.add(orm)
            db.commit()
            log.id = orm.id
        return log

    def finish_batch_run(self, log: BatchRunLog) -> BatchRunLog:
        with self.session_factory() as db:
            orm = db.get(ShortsBatchLogORM, log.id)
            if orm is None:
                raise ValueError(f"batch run {log.id} not found")
            if orm.status != STATUS_RUNNING or orm.completed_at is not None:
                raise ValueError(f"batch run {log.id} already finished with status={orm.status}")
            orm.status = log.status
            orm.completed_at = log.completed_at
            orm.metadata_json = log.metadata.to_dict()
            db.commit()
        return log

    def fetch_snapshots(
        self,
        category_id: str,
        region_code: str,
        snapshot_date: date,
        is_shorts: bool | None = None,
    ) -> list[VideoSnapshot]:
        stmt = select(CategoryShortsSnapshotORM).where(
            CategoryShortsSnapshotORM.category_id == category_id,
            CategoryShortsSnapshotORM.region_code == region_code,
            CategoryShortsSnapshotORM.snapshot_date == snapshot_date,
        )
        if is_shorts is not None:
            stmt = stmt.where(CategoryShortsSnapshotORM.is_shorts == is_shorts)
        stmt = stmt.order_by(CategoryShortsSnapshotORM.video_id)
        with self.session_factory() as db:
            return [self._to_snapshot(orm) for orm in db.scalars(stmt)]

    def fetch_snapshots_between(
        self, category_id: str, region_code: str, from_date: date, to_date: date
    ) -> list[VideoSnapshot]:
        stmt = (
            select(CategoryShortsSnapshotORM)
            .where(
                CategoryShortsSnapshotORM.category_id == category_id,
                CategoryShortsSnapshotORM.region_code == region_code,
                CategoryShortsSnapshotORM.snapshot_date >= from_date,
                CategoryShortsSnapshotORM.snapshot_date <= to_date,
            )
            .order_by(CategoryShortsSnapshotORM.snapshot_date, CategoryShortsSnapshotORM.video_id)
        )
        with self.session_factory() as db:
            return [self._to_snapshot(orm) for orm in db.scalars(stmt)]

    def fetch_latest_snapshot_date(
        self, category_id: str, region_code: str, is_shorts: bool | None = None
    ) -> date | None:
        stmt = select(func.max(CategoryShortsSnapshotORM.snapshot_date)).where(
            CategoryShortsSnapshotORM.category_id == category_id,
            CategoryShortsSnapshotORM.region_code == region_code,
        )
        if is_shorts is not None:
            stmt = stmt.where(CategoryShortsSnapshotORM.is_shorts == is_shorts)
        with self.session_factory() as db:
            return db.scalar(stmt)

    def fetch_snapshot_dates(self, region_code: str) -> list[date]:
        stmt = (
            select(CategoryShortsSnapshotORM.snapshot_date)
            .where(CategoryShortsSnapshotORM.region_code == region_code)
            .distinct()
            .order_by(CategoryShortsSnapshotORM.snapshot_date.desc())
        )
        with self.session_factory() as db:
            return list(db.scalars(stmt))

    def fetch_keyword_trends(
        self,
        snapshot_date: date,
        category_id: str,
        period: str,
        region_code: str,
        sort_by: str = "raw_score",
        limit: int | None = None,
    ) -> list[CategoryKeywordTrend]:
        try:
            sort_column = _KEYWORD_SORT_COLUMNS[sort_by]
        except KeyError:
            raise ValueError(f"unknown sort column: {sort_by}") from None
        stmt = (
            select(CategoryKeywordsTrendORM)
            .where(
                CategoryKeywordsTrendORM.snapshot_date == snapshot_date,
                CategoryKeywordsTrendORM.category_id == category_id,
                CategoryKeywordsTrendORM.period == period,
                CategoryKeywordsTrendORM.region_code == region_code,
            )
            .order_by(sort_column.desc(), CategoryKeywordsTrendORM.keyword)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.session_factory() as db:
            return [self._to_keyword_trend(orm) for orm in db.scalars(stmt)]

    def fetch_keyword_history(
        self,
        category_id: str,
        period: str,
        region_code: str,
        from_date: date,
        to_date: date,
    ) -> dict[date, dict[str, float]]:
        stmt = select(
            CategoryKeywordsTrendORM.snapshot_date,
            CategoryKeywordsTrendORM.keyword,
            CategoryKeywordsTrendORM.raw_score,
        ).where(
            CategoryKeywordsTrendORM.category_id == category_id,
            CategoryKeywordsTrendORM.period == period,
            CategoryKeywordsTrendORM.region_code == region_code,
            CategoryKeywordsTrendORM.snapshot_date >= from_date,
            CategoryKeywordsTrendORM.snapshot_date < to_date,
        )
        history: dict[date, dict[str, float]] = defaultdict(dict)
        with self.session_factory() as db:
            for row in db.execute(stmt):
                history[row.snapshot_date][row.keyword] = float(row.raw_score or 0)
        return dict(history)

    def fetch_latest_keyword_date(self, category_id: str, period: str, region_code: str) -> date | None:
        stmt = select(func.max(CategoryKeywordsTrendORM.snapshot_date)).where(
            CategoryKeywordsTrendORM.category_id == category_id,
            CategoryKeywordsTrendORM.period == period,
            CategoryKeywordsTrendORM.region_code == region_code,
        )
        with self.session_factory() as db:
            return db.scalar(stmt)

    def fetch_batch_run(self, run_id: int) -> BatchRunLog | None:
        with self.session_factory() as db:
            orm = db.get(ShortsBatchLogORM, run_id)
            if orm is None:
                return None
            return BatchRunLog(
                id=orm.id,
                batch_type=orm.batch_type,
                snapshot_date=orm.snapshot_date,
                status=orm.status,
                started_at=orm.started_at,
                completed_at=orm.completed_at,
                metadata=BatchRunMetadata.from_dict(orm.metadata_json),
            )

    @staticmethod
    def _to_snapshot(orm: CategoryShortsSnapshotORM) -> VideoSnapshot:
        return VideoSnapshot(
            video_id=orm.video_id,
            category_id=orm.category_id,
            region_code=orm.region_code,
            snapshot_date=orm.snapshot_date,
            title=orm.title or "",
            channel_id=orm.channel_id,
            channel_title=orm.channel_title,
            view_count=int(orm.view_count or 0),
            like_count=int(orm.like_count or 0),
            comment_count=int(orm.comment_count or 0),
            duration_sec=int(orm.duration_sec or 0),
            is_shorts=bool(orm.is_shorts),
            published_at=orm.published_at,
            thumbnail_url=orm.thumbnail_url,
        )

    @staticmethod
    def _to_keyword_trend(orm: CategoryKeywordsTrendORM) -> CategoryKeywordTrend:
        return CategoryKeywordTrend(
            snapshot_date=orm.snapshot_date,
            category_id=orm.category_id,
            period=orm.period,
            region_code=orm.region_code,
            keyword=orm.keyword,
            raw_score=float(orm.raw_score or 0),
            trend_score=float(orm.trend_score or 0),
            video_count=int(orm.video_count or 0),
            sample_titles=list(orm.sample_titles or []),
            sample_video_ids=list(orm.sample_video_ids or []),
        )
