import argparse
import asyncio
import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from config.database.session import SessionLocal
from config.settings import BatchSettings, CollectorSettings, KeywordSettings, YouTubeSettings
from trend.application.pacer import Pacer
from trend.application.usecase.batch_orchestration_usecase import BatchOrchestrationUseCase
from trend.application.usecase.keyword_extraction_usecase import KeywordExtractionUseCase
from trend.application.usecase.snapshot_collection_usecase import SnapshotCollectionUseCase
from trend.domain.batch_run_log import BatchRunLog
from trend.infrastructure.client.youtube_client import YouTubeClient
from trend.infrastructure.repository.trend_repository_impl import TrendRepositoryImpl

logger = logging.getLogger(__name__)


def today_in(tz_name: str, now: datetime | None = None) -> date:
    """파이프라인 운영 시간대(기본 KST) 기준 오늘 날짜."""
    now = now or datetime.now(ZoneInfo("UTC"))
    return now.astimezone(ZoneInfo(tz_name)).date()


def yesterday_in(tz_name: str, now: datetime | None = None) -> date:
    return today_in(tz_name, now) - timedelta(days=1)


def build_orchestrator(
    session_factory=SessionLocal,
    client=None,
    batch_settings: BatchSettings | None = None,
) -> BatchOrchestrationUseCase:
    batch_settings = batch_settings or BatchSettings()
    repository = TrendRepositoryImpl(session_factory)
    collector = SnapshotCollectionUseCase(
        client=client or YouTubeClient(YouTubeSettings()),
        repository=repository,
        settings=CollectorSettings(),
    )
    extractor = KeywordExtractionUseCase(repository, settings=KeywordSettings())
    return BatchOrchestrationUseCase(
        repository=repository,
        collector=collector,
        extractor=extractor,
        category_pacer=Pacer(batch_settings.category_delay_sec),
        region_pacer=Pacer(batch_settings.region_delay_sec),
    )


def run_collect_once(
    snapshot_date: date | None = None,
    region_code: str = "KR",
    test_mode: bool = False,
    category_id: str | None = None,
) -> BatchRunLog:
    settings = BatchSettings()
    orchestrator = build_orchestrator(batch_settings=settings)
    return orchestrator.run_collection(
        snapshot_date or today_in(settings.timezone),
        region_code=region_code,
        test_mode=test_mode,
        category_id=category_id,
    )


def run_collect_all_once(snapshot_date: date | None = None, test_mode: bool = False) -> BatchRunLog:
    settings = BatchSettings()
    orchestrator = build_orchestrator(batch_settings=settings)
    return orchestrator.run_multi_region_collection(
        snapshot_date or today_in(settings.timezone), test_mode=test_mode
    )


def run_analyze_once(
    snapshot_date: date | None = None,
    region_code: str = "KR",
    test_mode: bool = False,
    category_id: str | None = None,
) -> BatchRunLog:
    """
    키워드 분석은 하루치 데이터가 다 쌓인 뒤에 돌아야 하므로 기본 기준일은 어제다.
    """
    settings = BatchSettings()
    orchestrator = build_orchestrator(batch_settings=settings)
    return orchestrator.run_keyword_analysis(
        snapshot_date or yesterday_in(settings.timezone),
        region_code=region_code,
        test_mode=test_mode,
        category_id=category_id,
    )


def seconds_until_next_run(now: datetime, run_hour: int) -> float:
    next_run = now.replace(hour=run_hour, minute=0, second=0, microsecond=0)
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


async def start_shorts_scheduler():
    """
    간단한 asyncio 기반 일일 배치 스케줄러.

    - ENABLE_SHORTS_BATCH=true 인 경우에만 동작
    - 매일 SHORTS_BATCH_RUN_HOUR 시(운영 시간대)에 전 국가 수집 후 어제 기준 키워드 분석을 실행
    - 배치는 블로킹 I/O 이므로 별도 스레드에서 돌려 이벤트 루프를 막지 않는다.
    """
    settings = BatchSettings()
    if not settings.enabled:
        return

    tz = ZoneInfo(settings.timezone)
    logger.info("[SHORTS-BATCH] scheduler started | run_hour=%02d tz=%s", settings.run_hour, settings.timezone)
    try:
        while True:
            await asyncio.sleep(seconds_until_next_run(datetime.now(tz), settings.run_hour))
            try:
                collect_log = await asyncio.to_thread(run_collect_all_once)
                logger.info("[SHORTS-BATCH] collect-all finished: %s", collect_log.status)
                analyze_log = await asyncio.to_thread(run_analyze_once)
                logger.info("[SHORTS-BATCH] analyze finished: %s", analyze_log.status)
            except Exception as exc:  # pylint: disable=broad-except
                # 한 번 실패해도 다음 날에는 다시 시도할 수 있도록 예외를 삼킨다.
                logger.exception("[SHORTS-BATCH] run failed: %s", exc)
    except asyncio.CancelledError:
        logger.info("[SHORTS-BATCH] scheduler stopped")
        raise


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Shorts snapshot / keyword batch (one-shot)")
    parser.add_argument("command", choices=["collect", "collect-all", "analyze"])
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    parser.add_argument("--region", default="KR")
    parser.add_argument("--category", default=None)
    parser.add_argument("--test-mode", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    if args.command == "collect":
        log = run_collect_once(args.date, args.region, args.test_mode, args.category)
    elif args.command == "collect-all":
        log = run_collect_all_once(args.date, args.test_mode)
    else:
        log = run_analyze_once(args.date, args.region, args.test_mode, args.category)
    print(f"[SHORTS-BATCH] {log.batch_type} run {log.id}: {log.status}")
    return 0 if log.status != "failed" else 1


if __name__ == "__main__":
    # 수동 실행: python -m app.batch.shorts_batch analyze --date 2025-12-02
    raise SystemExit(main())
