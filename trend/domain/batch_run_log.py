from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

STATUS_RUNNING = "running"
STATUS_SUCCESS = "success"
STATUS_PARTIAL_SUCCESS = "partial_success"
STATUS_FAILED = "failed"

TERMINAL_STATUSES = (STATUS_SUCCESS, STATUS_PARTIAL_SUCCESS, STATUS_FAILED)

BATCH_COLLECT = "collect"
BATCH_COLLECT_ALL = "collect-all"
BATCH_ANALYZE = "analyze"


@dataclass
class BatchKeyResult:
    # 카테고리(×국가/기간) 단위 처리 결과
    category_id: str
    region_code: str
    period: Optional[str] = None
    success: bool = True
    count: int = 0
    error: Optional[str] = None
    partial: bool = False


@dataclass
class RegionResult:
    region_code: str
    total_videos: int = 0
    success_count: int = 0
    failure_count: int = 0


@dataclass
class BatchRunMetadata:
    region_codes: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    periods: list[str] = field(default_factory=list)
    test_mode: bool = False
    total_videos: int = 0
    total_keywords: int = 0
    success_count: int = 0
    failure_count: int = 0
    duration_sec: Optional[float] = None
    results: list[BatchKeyResult] = field(default_factory=list)
    region_results: list[RegionResult] = field(default_factory=list)

    def record(self, result: BatchKeyResult) -> None:
        self.results.append(result)
        if result.success:
            self.success_count += 1
        else:
            self.failure_count += 1

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict | None) -> "BatchRunMetadata":
        payload = dict(payload or {})
        results = [BatchKeyResult(**r) for r in payload.pop("results", [])]
        region_results = [RegionResult(**r) for r in payload.pop("region_results", [])]
        return cls(results=results, region_results=region_results, **payload)


@dataclass
class BatchRunLog:
    """
    배치 1회 실행 기록. running -> success | partial_success | failed 로만 전이한다.
    """
    id: Optional[int]
    batch_type: str
    snapshot_date: date
    status: str = STATUS_RUNNING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    metadata: BatchRunMetadata = field(default_factory=BatchRunMetadata)

    def complete(self, status: str, completed_at: Optional[datetime] = None) -> None:
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"not a terminal status: {status}")
        if self.status != STATUS_RUNNING or self.completed_at is not None:
            raise ValueError(f"batch run {self.id} already finished with status={self.status}")
        self.status = status
        self.completed_at = completed_at or datetime.now(timezone.utc)
