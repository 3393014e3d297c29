from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, Column, Date, DateTime, Float, Index, Integer, String

from config.database.session import Base


class CategoryShortsSnapshotORM(Base):
    __tablename__ = "category_shorts_snapshot"
    __table_args__ = (
        Index("ix_snapshot_category_region_date", "category_id", "region_code", "snapshot_date"),
    )

    video_id = Column(String(100), primary_key=True)
    snapshot_date = Column(Date, primary_key=True)
    category_id = Column(String(20), primary_key=True)
    region_code = Column(String(10), primary_key=True)
    title = Column(String(500))
    channel_id = Column(String(100))
    channel_title = Column(String(255))
    view_count = Column(BigInteger, default=0)
    like_count = Column(BigInteger, default=0)
    comment_count = Column(BigInteger, default=0)
    duration_sec = Column(Integer, default=0)
    is_shorts = Column(Boolean, default=False)
    published_at = Column(DateTime(timezone=True))
    thumbnail_url = Column(String(500))
    collected_at = Column(DateTime, default=datetime.utcnow)


class CategoryKeywordsTrendORM(Base):
    __tablename__ = "category_keywords_trend"

    snapshot_date = Column(Date, primary_key=True)
    category_id = Column(String(20), primary_key=True)
    period = Column(String(20), primary_key=True)
    region_code = Column(String(10), primary_key=True)
    keyword = Column(String(100), primary_key=True)
    raw_score = Column(Float, nullable=False, default=0.0)
    trend_score = Column(Float, nullable=False, default=1.0)
    video_count = Column(Integer, nullable=False, default=1)
    sample_titles = Column(JSON)
    sample_video_ids = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow)


class ShortsBatchLogORM(Base):
    __tablename__ = "shorts_batch_logs"

    # SQLite 는 INTEGER PRIMARY KEY 만 자동 증가하므로 variant 로 맞춘다.
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    batch_type = Column(String(50), nullable=False)
    snapshot_date = Column(Date, nullable=False)
    status = Column(String(30), nullable=False, default="running")
    started_at = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))
    metadata_json = Column("metadata", JSON)
