import os
import urllib.parse

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


def build_database_url() -> str:
    """
    DATABASE_URL 이 있으면 그대로 쓰고, 없으면 SQL_* 환경변수(Supabase 등)로 PostgreSQL 접속 URL을 조립한다.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    password = urllib.parse.quote_plus(os.getenv("SQL_PASSWORD", ""))
    return (
        f"postgresql+psycopg2://{os.getenv('SQL_USER','postgres')}:{password}"
        f"@{os.getenv('SQL_HOST','localhost')}:{os.getenv('SQL_PORT','5432')}/{os.getenv('SQL_DATABASE','shorts_trend')}"
    )


DATABASE_URL = build_database_url()

engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("SQL_ECHO", "false").lower() == "true",
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db_session():
    return SessionLocal()


def init_db_schema(bind=None):
    """
    애플리케이션 기동 시 테이블이 없을 경우를 대비해 스키마를 생성합니다.
    """
    # ORM 모델이 Base.metadata 에 등록되도록 import 한다.
    import trend.infrastructure.orm.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
