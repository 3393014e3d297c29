import time
from typing import Callable


class Pacer:
    """
    단일 스레드 순차 실행에서 호출 사이 최소 간격을 보장한다 (업스트림 쿼터 보호).
    clock/sleep 은 테스트에서 갈아끼울 수 있다.
    """

    def __init__(
        self,
        min_interval_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval_sec < 0:
            raise ValueError("min_interval_sec must be >= 0")
        self.min_interval_sec = min_interval_sec
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def wait(self) -> float:
        """다음 호출이 가능할 때까지 기다리고, 실제로 기다린 시간을 돌려준다."""
        waited = 0.0
        if self._last is not None:
            remaining = self.min_interval_sec - (self._clock() - self._last)
            if remaining > 0:
                self._sleep(remaining)
                waited = remaining
        self._last = self._clock()
        return waited

    def reset(self) -> None:
        self._last = None
