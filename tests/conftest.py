import os

# 테스트는 PostgreSQL 없이 in-memory SQLite 로 돈다. config 모듈 import 전에 설정해야 한다.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("INIT_DB_SCHEMA", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database.session import init_db_schema
from config.settings import CollectorSettings, KeywordSettings
from trend.infrastructure.repository.trend_repository_impl import TrendRepositoryImpl


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db_schema(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def repository(session_factory):
    return TrendRepositoryImpl(session_factory)


@pytest.fixture
def collector_settings():
    return CollectorSettings(shorts_max_duration_sec=61, max_pages=4, page_size=50)


@pytest.fixture
def keyword_settings():
    return KeywordSettings(
        min_pool_videos=10,
        min_video_count=2,
        max_results=200,
        sample_size=3,
        trend_lookback_days=7,
        korean_only_for_kr=False,
    )
