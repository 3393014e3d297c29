from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.batch.shorts_batch import build_orchestrator, today_in, yesterday_in
from config.settings import BatchSettings
from trend.adapter.input.web.request.batch_requests import AnalyzeRequest, CollectAllRequest, CollectRequest
from trend.application.usecase.batch_orchestration_usecase import BatchOrchestrationUseCase
from trend.domain.batch_run_log import STATUS_SUCCESS, BatchRunLog

batch_router = APIRouter(tags=["batch"])


def get_batch_settings() -> BatchSettings:
    return BatchSettings()


def get_batch_orchestrator() -> BatchOrchestrationUseCase:
    return build_orchestrator()


def verify_cron_secret(
    authorization: str | None = Header(default=None),
    settings: BatchSettings = Depends(get_batch_settings),
) -> None:
    """CRON_SECRET 이 설정된 경우에만 Bearer 토큰을 검사한다."""
    if settings.cron_secret and authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def _summary(log: BatchRunLog) -> JSONResponse:
    meta = log.metadata
    return JSONResponse(
        jsonable_encoder(
            {
                "success": log.status == STATUS_SUCCESS,
                "run_id": log.id,
                "batch_type": log.batch_type,
                "status": log.status,
                "snapshot_date": log.snapshot_date,
                "summary": {
                    "total_categories": len(meta.category_ids),
                    "success_count": meta.success_count,
                    "failed_count": meta.failure_count,
                    "total_videos": meta.total_videos,
                    "total_keywords": meta.total_keywords,
                    "duration_sec": meta.duration_sec,
                },
                "results": meta.results,
                "region_results": meta.region_results,
            }
        )
    )


# 배치는 블로킹 I/O 라 동기 핸들러(스레드풀)로 둔다.
@batch_router.post("/collect", dependencies=[Depends(verify_cron_secret)])
def trigger_collect(
    request: CollectRequest | None = None,
    orchestrator: BatchOrchestrationUseCase = Depends(get_batch_orchestrator),
    settings: BatchSettings = Depends(get_batch_settings),
):
    """
    단일 국가의 카테고리별 인기 영상 스냅샷을 수집한다.
    """
    request = request or CollectRequest()
    try:
        log = orchestrator.run_collection(
            request.snapshot_date or today_in(settings.timezone),
            region_code=request.region_code,
            test_mode=request.test_mode,
            category_id=request.category_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _summary(log)


@batch_router.api_route("/collect-all", methods=["GET", "POST"], dependencies=[Depends(verify_cron_secret)])
def trigger_collect_all(
    request: CollectAllRequest | None = None,
    orchestrator: BatchOrchestrationUseCase = Depends(get_batch_orchestrator),
    settings: BatchSettings = Depends(get_batch_settings),
):
    """
    지원 국가 전체를 순차 수집한다 (cron 은 GET 으로 호출).
    """
    request = request or CollectAllRequest()
    log = orchestrator.run_multi_region_collection(
        request.snapshot_date or today_in(settings.timezone),
        region_codes=request.region_codes,
        test_mode=request.test_mode,
    )
    return _summary(log)


@batch_router.post("/analyze", dependencies=[Depends(verify_cron_secret)])
def trigger_analyze(
    request: AnalyzeRequest | None = None,
    orchestrator: BatchOrchestrationUseCase = Depends(get_batch_orchestrator),
    settings: BatchSettings = Depends(get_batch_settings),
):
    """
    카테고리 × 기간별 키워드 분석을 실행한다.
    """
    request = request or AnalyzeRequest()
    try:
        log = orchestrator.run_keyword_analysis(
            request.snapshot_date or yesterday_in(settings.timezone),
            region_code=request.region_code,
            periods=request.periods,
            test_mode=request.test_mode,
            category_id=request.category_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _summary(log)

# 호출 예시:
# 1) 단일 국가 수집: POST /batch/collect  {"test_mode": true}
# 2) 전체 국가 수집: GET  /batch/collect-all  (Authorization: Bearer $CRON_SECRET)
# 3) 키워드 분석:   POST /batch/analyze  {"snapshot_date": "2025-12-02"}
