"""
models/result_model.py

채점 결과 모델. 제출 시 한 번 만들어지고 이후 변경되지 않는다 (frozen).
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class WrongAnswer(BaseModel):
    """오답 노트 한 줄."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="문제 인덱스 (0-based)")
    user_answer: str
    correct_answer: str = Field(..., description="정답. 정답표에 없으면 'N/A'")

    @property
    def number(self) -> int:
        return self.index + 1


class ResultSummary(BaseModel):
    """
    시험 결과 요약.

    Attributes:
        correct / wrong / unattempted: 정답, 오답, 미응답 수.
        score:           가중 점수 (정답 +4, 오답 -1).
        max_score:       만점 (전체 문제 수 × 4).
        accuracy:        정답률(%) = 정답 / (정답 + 오답), 소수점 첫째 자리 반올림.
        elapsed_seconds: 소요 시간 (초).
        time_taken:      소요 시간 HH:MM:SS.
        wrong_log:       오답 목록 (문제 순서 유지).
    """
    model_config = ConfigDict(frozen=True)

    correct: int = 0
    wrong: int = 0
    unattempted: int = 0
    score: int = 0
    max_score: int = 0
    accuracy: float = 0.0
    elapsed_seconds: int = 0
    time_taken: str = "00:00:00"
    wrong_log: List[WrongAnswer] = Field(default_factory=list)
