"""
키워드 점수 계산.

- engagement_weight: 영상 한 건이 키워드에 기여하는 가중치. log10 스케일로 큰 값 차이를 완화한다.
- TrendScorer: 현재 raw_score 를 과거 기준선과 비교한 급상승 점수. 구현을 갈아끼울 수 있도록 프로토콜로 둔다.
"""
import math
from typing import Protocol, Sequence

LIKE_WEIGHT = 0.5
COMMENT_WEIGHT = 0.5


def engagement_weight(view_count: int | None, like_count: int | None = 0, comment_count: int | None = 0) -> float:
    views = max(int(view_count or 0), 0)
    likes = max(int(like_count or 0), 0)
    comments = max(int(comment_count or 0), 0)
    return (
        math.log10(views + 1)
        + LIKE_WEIGHT * math.log10(likes + 1)
        + COMMENT_WEIGHT * math.log10(comments + 1)
    )


class TrendScorer(Protocol):
    def score(self, raw_score: float, history: Sequence[float]) -> float:
        ...


class BaselineRatioTrendScorer:
    """
    trend_score = (raw_score + smoothing) / (baseline + smoothing)

    baseline 은 이전 실행들의 raw_score 평균(그 실행에서 키워드가 없었으면 0).
    변화가 없으면 정확히 1.0, 이력이 없는 신규 키워드는 raw_score + 1 만큼 크게 나온다.
    """

    def __init__(self, smoothing: float = 1.0):
        if smoothing <= 0:
            raise ValueError("smoothing must be positive")
        self.smoothing = smoothing

    def score(self, raw_score: float, history: Sequence[float]) -> float:
        baseline = sum(history) / len(history) if history else 0.0
        ratio = (max(raw_score, 0.0) + self.smoothing) / (max(baseline, 0.0) + self.smoothing)
        return max(ratio, 0.0)
