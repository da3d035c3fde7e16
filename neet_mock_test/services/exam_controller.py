"""
services/exam_controller.py

시험 세션 컨트롤러 (문제 이동, 답안 선택, 타이머, 제출).

UI와 무관한 명령 인터페이스:
  - go_to(index) / step(direction)   : 문제 이동 → NavigationResult
  - select(option) / clear()         : 현재 문제 답안 선택/해제
  - palette()                        : 문제 번호 팔레트 상태
  - snapshot()                       : 화면 갱신용 상태 묶음
  - submit()                         : 채점 + 다운로드 파일 생성 (세션당 1회)

상태 변경 후에는 subscribe()로 등록한 리스너에 (이벤트명, 데이터)를 알린다.
타이머 tick이 별도 스레드에서 오므로 모든 명령은 하나의 잠금으로 직렬화한다.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from config import TEST_DURATION_SECONDS, VIEW_SCALE
from neet_mock_test.models.exam_data import CoordinateTable
from neet_mock_test.models.result_model import ResultSummary
from neet_mock_test.models.session_state import ExamState
from neet_mock_test.services.coordinate_resolver import CoordinateResolver
from neet_mock_test.services.countdown_timer import CountdownTimer, thread_scheduler
from neet_mock_test.services.exam_service import format_time, score
from neet_mock_test.services.page_renderer import PageRenderer, open_paper
from neet_mock_test.services.report_service import ReportEmitter

logger = logging.getLogger(__name__)

Listener = Callable[[str, object], None]


class ExamClosedError(RuntimeError):
    """제출이 끝난 시험에 이동/답안 변경을 시도함."""


class NavigationResult(BaseModel):
    index: int
    page_number: int
    scroll_top: Optional[float] = None   # 좌표가 없으면 None (스크롤 유지)
    selected_option: Optional[str] = None


class PaletteItem(BaseModel):
    index: int
    number: int
    status: str          # answered | visited | not_visited
    is_current: bool = False


class ExamController:
    def __init__(
        self,
        state: ExamState,
        resolver: CoordinateResolver,
        renderer: PageRenderer,
        answer_key: Dict[int, str],
        emitter: Optional[ReportEmitter] = None,
        view_zoom: float = VIEW_SCALE,
        scheduler: Callable = thread_scheduler,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.resolver = resolver
        self.renderer = renderer
        self.answer_key = answer_key
        self.emitter = emitter
        self.view_zoom = view_zoom
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        self.timer = CountdownTimer(self._on_timer_expired, scheduler=scheduler, clock=clock)
        self.result: Optional[ResultSummary] = None
        self.downloads: Dict[str, bytes] = {}

    @classmethod
    def from_paper(
        cls,
        paper: bytes,
        table: CoordinateTable,
        answer_key: Dict[int, str],
        state: Optional[ExamState] = None,
        output_dir: Optional[str] = None,
        **kwargs,
    ) -> "ExamController":
        """시험지 바이트로 컨트롤러를 만든다. 시험지를 열 수 없으면 PaperOpenError."""
        view_zoom = kwargs.get("view_zoom", VIEW_SCALE)
        return cls(
            state=state or ExamState(),
            resolver=CoordinateResolver(table, view_zoom=view_zoom),
            renderer=PageRenderer(open_paper(paper)),
            answer_key=answer_key,
            emitter=ReportEmitter(paper, output_dir=output_dir),
            **kwargs,
        )

    # ── 리스너 ──────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: str, payload: object) -> None:
        for listener in self._listeners:
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"리스너 오류 ({event})")

    # ── 시작 ────────────────────────────────────────────────────────────────

    def start(self, duration_seconds: int = TEST_DURATION_SECONDS) -> NavigationResult:
        """타이머를 시작하고 첫 문제를 연다."""
        with self._lock:
            self.state.start_time = self._clock()
            self.timer.start(duration_seconds)
            return self.go_to(0)

    # ── 이동 ────────────────────────────────────────────────────────────────

    def go_to(self, index: int) -> Optional[NavigationResult]:
        """
        index 문제로 이동한다. 범위를 벗어나면 아무것도 하지 않고 None.

        Raises:
            RenderError: 페이지 렌더링 실패 (현재 문제는 바뀌지 않는다).
            ExamClosedError: 이미 제출된 시험.
        """
        with self._lock:
            self._check_open()
            if not 0 <= index < self.state.total:
                return None

            self.state.mark_visited(index)

            target = self.resolver.resolve(index)
            if target is None:
                logger.warning(f"문제 {index + 1}번 좌표를 찾을 수 없습니다.")
                page_number = self.renderer.current_page or 1
            else:
                page_number = target.page

            self.renderer.ensure_rendered(page_number, self.view_zoom)

            self.state.current_index = index
            result = NavigationResult(
                index=index,
                page_number=page_number,
                scroll_top=target.offset if target else None,
                selected_option=self.state.responses[index],
            )
            self._notify("navigate", result)
            return result

    def step(self, direction: int) -> Optional[NavigationResult]:
        with self._lock:
            return self.go_to(self.state.current_index + direction)

    # ── 답안 ────────────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self.result is not None:
            raise ExamClosedError("이미 제출된 시험입니다.")

    def select(self, option: str) -> int:
        with self._lock:
            return self.select_at(self.state.current_index, option)

    def clear(self) -> int:
        with self._lock:
            return self.clear_at(self.state.current_index)

    def select_at(self, index: int, option: str) -> int:
        with self._lock:
            self._check_open()
            self.state.select(index, option)
            self._notify("answer", {"index": index, "option": option})
            return index

    def clear_at(self, index: int) -> int:
        with self._lock:
            self._check_open()
            self.state.clear(index)
            self._notify("answer", {"index": index, "option": None})
            return index

    def palette(self) -> List[PaletteItem]:
        """답함 > 방문함 > 미방문 순으로 상태를 정한다."""
        with self._lock:
            items = []
            for i in range(self.state.total):
                if self.state.responses[i] is not None:
                    status = "answered"
                elif self.state.visited[i]:
                    status = "visited"
                else:
                    status = "not_visited"
                items.append(PaletteItem(
                    index=i,
                    number=i + 1,
                    status=status,
                    is_current=i == self.state.current_index,
                ))
            return items

    @property
    def remaining(self) -> int:
        return self.timer.remaining

    def snapshot(self) -> dict:
        """현재 진행 상태를 한 번에 읽는다 (화면 갱신용)."""
        with self._lock:
            state = self.state
            return {
                "current_index": state.current_index,
                "responses": list(state.responses),
                "visited": list(state.visited),
                "is_submitted": state.is_submitted,
                "start_time": state.start_time,
                "total": state.total,
                "answered_count": state.answered_count,
                "remaining": self.remaining,
                "remaining_display": format_time(self.remaining),
                "timer_state": self.timer.state.value,
                "palette": [item.model_dump() for item in self.palette()],
            }

    # ── 제출 ────────────────────────────────────────────────────────────────

    def _on_timer_expired(self) -> None:
        self.submit(reason="timeout")

    def submit(self, reason: str = "user") -> ResultSummary:
        """
        채점하고 다운로드 파일을 만든다. 두 번째 호출부터는 처음 결과를 그대로 반환.
        """
        with self._lock:
            if self.result is not None:
                return self.result

            self.timer.cancel()
            elapsed = max(0.0, self._clock() - self.state.start_time)
            self.result = score(self.state.responses, self.answer_key, elapsed_seconds=elapsed)
            self.state.is_submitted = True
            logger.info(
                f"시험 제출 ({reason}): 점수 {self.result.score}/{self.result.max_score}, "
                f"정답 {self.result.correct}, 오답 {self.result.wrong}, 미응답 {self.result.unattempted}"
            )

            if self.emitter is not None:
                self.downloads = self.emitter.emit(self.result)

            self._notify("submitted", self.result)
            return self.result

    def close(self) -> None:
        """세션 종료 시 타이머와 문서를 정리한다."""
        with self._lock:
            self.timer.cancel()
            self.renderer.close()
