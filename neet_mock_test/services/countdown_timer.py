"""
services/countdown_timer.py

시험 제한 시간 카운트다운.

상태: idle → running → {expired, cancelled}
  - start(duration): idle → running, 1초마다 tick 예약
  - tick():          남은 시간 1 감소, 0이 되면 expired + 제출 콜백 1회 호출
  - cancel():        running → cancelled (사용자 직접 제출). 종료 상태에서는 무시

tick 예약은 scheduler에 맡긴다. 기본값은 데몬 스레드(ThreadTicker)이고,
테스트에서는 가짜 scheduler로 tick을 직접 호출한다.
"""

import enum
import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class TimerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ThreadTicker:
    """interval초마다 callback을 호출하는 데몬 스레드. cancel() 후에는 더 이상 호출하지 않는다."""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self._interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("타이머 콜백 오류")

    def cancel(self) -> None:
        self._stop.set()


def thread_scheduler(interval: float, callback: Callable[[], None]) -> ThreadTicker:
    return ThreadTicker(interval, callback)


class CountdownTimer:
    def __init__(
        self,
        on_expire: Callable[[], None],
        scheduler: Callable = thread_scheduler,
        clock: Callable[[], float] = time.time,
    ):
        self._on_expire = on_expire
        self._scheduler = scheduler
        self._clock = clock
        self._lock = threading.Lock()
        self._handle = None
        self.state = TimerState.IDLE
        self.duration = 0
        self.remaining = 0
        self.started_at: Optional[float] = None

    def start(self, duration_seconds: int) -> None:
        with self._lock:
            if self.state is not TimerState.IDLE:
                raise RuntimeError(f"이미 시작된 타이머입니다 (상태: {self.state.value}).")
            if duration_seconds <= 0:
                raise ValueError("시험 시간은 1초 이상이어야 합니다.")
            self.duration = int(duration_seconds)
            self.remaining = self.duration
            self.started_at = self._clock()
            self.state = TimerState.RUNNING
            self._handle = self._scheduler(TICK_SECONDS, self.tick)
        logger.info(f"타이머 시작: {self.duration}초")

    def tick(self) -> None:
        with self._lock:
            if self.state is not TimerState.RUNNING:
                return
            self.remaining -= 1
            if self.remaining > 0:
                return
            self.remaining = 0
            self.state = TimerState.EXPIRED
            self._stop_ticking()

        # 콜백은 잠금 밖에서 호출 (콜백 안에서 cancel() 가능)
        logger.info("시험 시간 종료, 자동 제출")
        self._on_expire()

    def cancel(self) -> None:
        with self._lock:
            if self.state is not TimerState.RUNNING:
                return
            self.state = TimerState.CANCELLED
            self._stop_ticking()
        logger.info(f"타이머 취소 (남은 시간 {self.remaining}초)")

    def _stop_ticking(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (TimerState.EXPIRED, TimerState.CANCELLED)
