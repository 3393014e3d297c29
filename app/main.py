import asyncio
import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.batch.shorts_batch import start_shorts_scheduler
from config.database.session import init_db_schema
from trend.adapter.input.web.batch_router import batch_router
from trend.adapter.input.web.keyword_router import keyword_router
from trend.adapter.input.web.ranking_router import ranking_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan 훅을 활용해 배치 태스크와 리소스를 관리합니다.
    """
    # DB 스키마 미존재 시 자동 생성하여 UndefinedTable 오류를 예방합니다.
    if os.getenv("INIT_DB_SCHEMA", "true").lower() == "true":
        init_db_schema()
    app.state.shorts_batch_task = asyncio.create_task(start_shorts_scheduler())
    try:
        yield
    finally:
        task = getattr(app.state, "shorts_batch_task", None)
        if task:
            task.cancel()


app = FastAPI(title="Shorts Trend Server", version="0.1.0", lifespan=lifespan)

origins_env = os.getenv("CORS_ORIGINS")
origins = [origin for origin in origins_env.split(",") if origin] if origins_env else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ranking_router, prefix="/shorts")
app.include_router(keyword_router, prefix="/keywords")
app.include_router(batch_router, prefix="/batch")


@app.get("/health")
def health_check() -> dict[str, str]:
    """
    헬스체크 엔드포인트입니다.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
