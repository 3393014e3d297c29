import logging
import time
from datetime import date, datetime, timezone
from typing import Callable, Sequence

from trend.application.pacer import Pacer
from trend.application.port.trend_repository_port import TrendRepositoryPort
from trend.application.usecase.keyword_extraction_usecase import KeywordExtractionUseCase
from trend.application.usecase.snapshot_collection_usecase import SnapshotCollectionUseCase
from trend.domain.batch_run_log import (
    BATCH_ANALYZE,
    BATCH_COLLECT,
    BATCH_COLLECT_ALL,
    STATUS_FAILED,
    STATUS_PARTIAL_SUCCESS,
    STATUS_SUCCESS,
    BatchKeyResult,
    BatchRunLog,
    BatchRunMetadata,
    RegionResult,
)
from trend.domain.category import PERIODS, REGIONS, SHORTS_CATEGORIES

logger = logging.getLogger(__name__)


class BatchOrchestrationUseCase:
    """
    카테고리 × 국가(수집) 또는 카테고리 × 기간(키워드 분석)을 순차로 돌리는 배치.
    - 조합 하나가 실패해도 기록만 남기고 다음 조합으로 넘어간다.
    - 실패가 0건이면 success, 아니면 partial_success. 루프 바깥에서 깨지면 failed 후 예외 전파.
    """

    def __init__(
        self,
        repository: TrendRepositoryPort,
        collector: SnapshotCollectionUseCase,
        extractor: KeywordExtractionUseCase,
        category_pacer: Pacer | None = None,
        region_pacer: Pacer | None = None,
        category_ids: Sequence[str] | None = None,
        region_codes: Sequence[str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.repository = repository
        self.collector = collector
        self.extractor = extractor
        self.category_pacer = category_pacer or Pacer(1.0)
        self.region_pacer = region_pacer or Pacer(1.0)
        self.category_ids = list(category_ids or [c.id for c in SHORTS_CATEGORIES])
        self.region_codes = list(region_codes or [r.code for r in REGIONS])
        self._clock = clock

    def run_collection(
        self,
        snapshot_date: date,
        region_code: str = "KR",
        test_mode: bool = False,
        category_id: str | None = None,
    ) -> BatchRunLog:
        categories = self._select_categories(test_mode, category_id)
        metadata = BatchRunMetadata(region_codes=[region_code], category_ids=categories, test_mode=test_mode)
        log, started = self._start(BATCH_COLLECT, snapshot_date, metadata)
        try:
            self._collect_region(snapshot_date, region_code, categories, metadata)
        except Exception:
            self._finish_failed(log, started)
            raise
        return self._finish(log, started)

    def run_multi_region_collection(
        self,
        snapshot_date: date,
        region_codes: Sequence[str] | None = None,
        test_mode: bool = False,
    ) -> BatchRunLog:
        regions = list(region_codes or self.region_codes)
        categories = self._select_categories(test_mode, None)
        metadata = BatchRunMetadata(region_codes=regions, category_ids=categories, test_mode=test_mode)
        log, started = self._start(BATCH_COLLECT_ALL, snapshot_date, metadata)
        try:
            self.region_pacer.reset()
            for region_code in regions:
                self.region_pacer.wait()
                logger.info("[SHORTS-BATCH] region %s collection started", region_code)
                region_result = self._collect_region(snapshot_date, region_code, categories, metadata)
                metadata.region_results.append(region_result)
                logger.info(
                    "[SHORTS-BATCH] region %s done | videos=%d success=%d failed=%d",
                    region_code,
                    region_result.total_videos,
                    region_result.success_count,
                    region_result.failure_count,
                )
        except Exception:
            self._finish_failed(log, started)
            raise
        return self._finish(log, started)

    def run_keyword_analysis(
        self,
        snapshot_date: date,
        region_code: str = "KR",
        periods: Sequence[str] | None = None,
        test_mode: bool = False,
        category_id: str | None = None,
    ) -> BatchRunLog:
        periods = list(periods or PERIODS)
        unknown = [p for p in periods if p not in PERIODS]
        if unknown:
            raise ValueError(f"unknown period(s): {', '.join(unknown)}")
        categories = self._select_categories(test_mode, category_id)
        metadata = BatchRunMetadata(
            region_codes=[region_code], category_ids=categories, periods=periods, test_mode=test_mode
        )
        log, started = self._start(BATCH_ANALYZE, snapshot_date, metadata)
        try:
            self.category_pacer.reset()
            for cat_id in categories:
                self.category_pacer.wait()
                for period in periods:
                    try:
                        count = self.extractor.extract(snapshot_date, cat_id, period, region_code)
                    except Exception as exc:  # pylint: disable=broad-except
                        logger.error(
                            "[SHORTS-BATCH] keyword analysis failed | category=%s period=%s error=%s",
                            cat_id,
                            period,
                            exc,
                        )
                        metadata.record(
                            BatchKeyResult(cat_id, region_code, period=period, success=False, error=str(exc))
                        )
                        continue
                    metadata.total_keywords += count
                    metadata.record(BatchKeyResult(cat_id, region_code, period=period, count=count))
        except Exception:
            self._finish_failed(log, started)
            raise
        return self._finish(log, started)

    def _collect_region(
        self,
        snapshot_date: date,
        region_code: str,
        categories: list[str],
        metadata: BatchRunMetadata,
    ) -> RegionResult:
        region_result = RegionResult(region_code=region_code)
        self.category_pacer.reset()
        for cat_id in categories:
            self.category_pacer.wait()
            try:
                result = self.collector.collect(cat_id, region_code)
                if result.error and not result.videos:
                    raise RuntimeError(result.error)
                count = self.collector.persist(result.videos, snapshot_date, cat_id, region_code)
            except Exception as exc:  # pylint: disable=broad-except
                # 에러가 나도 다음 카테고리는 계속 진행한다.
                logger.error(
                    "[SHORTS-BATCH] collection failed | category=%s region=%s error=%s",
                    cat_id,
                    region_code,
                    exc,
                )
                metadata.record(BatchKeyResult(cat_id, region_code, success=False, error=str(exc)))
                region_result.failure_count += 1
                continue

            metadata.total_videos += count
            metadata.record(
                BatchKeyResult(cat_id, region_code, count=count, error=result.error, partial=result.partial)
            )
            region_result.total_videos += count
            region_result.success_count += 1
        return region_result

    def _select_categories(self, test_mode: bool, category_id: str | None) -> list[str]:
        if category_id is not None:
            if category_id not in self.category_ids:
                raise ValueError(f"unknown category_id: {category_id}")
            return [category_id]
        if test_mode:
            # 테스트 모드: 첫 번째 카테고리만
            return self.category_ids[:1]
        return list(self.category_ids)

    def _start(self, batch_type: str, snapshot_date: date, metadata: BatchRunMetadata) -> tuple[BatchRunLog, float]:
        log = BatchRunLog(
            id=None,
            batch_type=batch_type,
            snapshot_date=snapshot_date,
            started_at=datetime.now(timezone.utc),
            metadata=metadata,
        )
        # 실행 로그를 만들 수 없으면 배치를 시작할 수 없으므로 그대로 예외를 올린다.
        log = self.repository.create_batch_run(log)
        logger.info(
            "[SHORTS-BATCH] %s run %s started | date=%s regions=%s categories=%d test_mode=%s",
            batch_type,
            log.id,
            snapshot_date,
            ",".join(metadata.region_codes),
            len(metadata.category_ids),
            metadata.test_mode,
        )
        return log, self._clock()

    def _finish(self, log: BatchRunLog, started: float, status: str | None = None) -> BatchRunLog:
        metadata = log.metadata
        metadata.duration_sec = round(self._clock() - started, 3)
        if status is None:
            status = STATUS_SUCCESS if metadata.failure_count == 0 else STATUS_PARTIAL_SUCCESS
        log.complete(status)
        self.repository.finish_batch_run(log)
        logger.info(
            "[SHORTS-BATCH] %s run %s finished | status=%s success=%d failed=%d videos=%d keywords=%d duration=%.1fs",
            log.batch_type,
            log.id,
            log.status,
            metadata.success_count,
            metadata.failure_count,
            metadata.total_videos,
            metadata.total_keywords,
            metadata.duration_sec,
        )
        return log

    def _finish_failed(self, log: BatchRunLog, started: float) -> None:
        # 호출부가 원래 예외를 다시 올리므로, 실행 로그 기록 실패는 로그만 남긴다.
        try:
            self._finish(log, started, status=STATUS_FAILED)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error(
                "[SHORTS-BATCH] could not mark %s run %s as failed: %s",
                log.batch_type,
                log.id,
                exc,
            )
