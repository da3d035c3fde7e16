"""
models/session_state.py

시험 진행 상태를 담는 OMR 카드 모델.
Pydantic BaseModel 기반 — 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음.
"""

import time
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from config import OPTION_LABELS, TOTAL_QUESTIONS


class ExamState(BaseModel):
    """
    사용자의 시험 세션 전체 상태를 표현하는 모델.

    Attributes:
        total:          전체 문제 수 (세션 중 고정).
        option_labels:  선택 가능한 보기 라벨.
        current_index:  현재 보고 있는 문제의 인덱스 (0-based).
        responses:      사용자 답안지. responses[i]는 보기 라벨 또는 None(미응답).
        visited:        방문 여부. 한 번 True가 되면 세션 동안 다시 False가 되지 않는다.
        is_submitted:   최종 제출 여부.
        start_time:     시험 시작 시각 (time.time() 기준 Unix timestamp).
    """

    total: int = Field(default=TOTAL_QUESTIONS, ge=1)
    option_labels: Tuple[str, ...] = Field(default=OPTION_LABELS)
    current_index: int = Field(
        default=0,
        ge=0,
        description="현재 문제 인덱스 (0-based)"
    )
    responses: List[Optional[str]] = Field(default_factory=list)
    visited: List[bool] = Field(default_factory=list)
    is_submitted: bool = Field(
        default=False,
        description="최종 제출 완료 여부"
    )
    start_time: float = Field(
        default_factory=time.time,
        description="시험 시작 시각 (Unix timestamp, time.time() 기준)"
    )

    @model_validator(mode='after')
    def fill_sheets(self) -> 'ExamState':
        """답안지/방문 배열을 total 길이로 맞춘다. 이후에는 크기가 바뀌지 않는다."""
        if not self.responses:
            self.responses = [None] * self.total
        if not self.visited:
            self.visited = [False] * self.total
        if len(self.responses) != self.total or len(self.visited) != self.total:
            raise ValueError("답안지 길이가 전체 문제 수와 다릅니다.")
        return self

    # ── 답안 ──────────────────────────────────────────────────────────────

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.total:
            raise ValueError(f"문제 인덱스 범위를 벗어났습니다: {index}")

    def select(self, index: int, option: str) -> None:
        """보기를 선택한다. 두 번 선택하면 덮어쓴다."""
        self._check_index(index)
        if option not in self.option_labels:
            raise ValueError(f"잘못된 보기입니다: {option!r}")
        self.responses[index] = option

    def clear(self, index: int) -> None:
        self._check_index(index)
        self.responses[index] = None

    def get(self, index: int) -> Optional[str]:
        self._check_index(index)
        return self.responses[index]

    # ── 방문 ──────────────────────────────────────────────────────────────

    def mark_visited(self, index: int) -> None:
        self._check_index(index)
        self.visited[index] = True

    @property
    def answered_count(self) -> int:
        return sum(1 for r in self.responses if r is not None)

    @property
    def visited_count(self) -> int:
        return sum(self.visited)
