"""
models/exam_data.py

시험지에 딸린 정적 데이터 모델 (좌표 테이블, 정답표).
Pydantic v2 적용, JSON 데이터 파일을 그대로 검증한다.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class CoordinateEntry(BaseModel):
    """
    태깅 도구가 만든 문제 위치 한 건.
    필드명은 태깅 도구 출력(s_no, page, y)을 그대로 따른다.
    """
    s_no: int = Field(
        ...,
        ge=1,
        description="문제 번호 (1-based)"
    )
    page: int = Field(
        ...,
        ge=1,
        description="원본 PDF 페이지 번호 (1-based)"
    )
    y: float = Field(
        ...,
        ge=0,
        description="태깅 배율 기준 세로 좌표 (px)"
    )


class CoordinateTable(BaseModel):
    """
    문제 번호 → (페이지, 세로 좌표) 테이블.

    reference_zoom이 None이면 설정값(TAGGER_SCALE)을 사용한다.
    """
    reference_zoom: Optional[float] = Field(
        None,
        gt=0,
        description="좌표를 태깅할 때 사용한 배율 (메타데이터가 있을 때만)"
    )
    entries: List[CoordinateEntry] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_numbers(self) -> 'CoordinateTable':
        """같은 문제 번호가 두 번 나오면 어느 좌표가 맞는지 알 수 없다."""
        seen = set()
        for entry in self.entries:
            if entry.s_no in seen:
                raise ValueError(f"문제 {entry.s_no}번 좌표가 중복되었습니다.")
            seen.add(entry.s_no)
        return self

    def by_number(self) -> Dict[int, CoordinateEntry]:
        return {e.s_no: e for e in self.entries}


class AnswerKeyEntry(BaseModel):
    """정답표 한 건. 필드명은 정답 데이터 파일(q, ans)을 그대로 따른다."""
    q: int = Field(..., ge=1, description="문제 번호 (1-based)")
    ans: str = Field(..., min_length=1, description="정답 보기 라벨")

    @field_validator('ans')
    @classmethod
    def normalize_label(cls, v: str) -> str:
        return v.strip().upper()


def answer_key_by_index(entries: List[AnswerKeyEntry]) -> Dict[int, str]:
    """정답표를 {문제 인덱스(0-based): 정답} 딕셔너리로 변환."""
    return {e.q - 1: e.ans for e in entries}
