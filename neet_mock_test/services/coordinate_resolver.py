"""
services/coordinate_resolver.py

문제 인덱스 → (페이지, 스크롤 위치) 변환.

좌표 테이블은 태깅 도구 배율(reference zoom)로 기록되어 있으므로
화면 배율(view zoom)과의 비율로 세로 좌표를 다시 계산한 뒤 여백을 뺀다.
"""

from typing import Optional

from pydantic import BaseModel

from config import SCROLL_PADDING, TAGGER_SCALE, VIEW_SCALE
from neet_mock_test.models.exam_data import CoordinateTable


class ScrollTarget(BaseModel):
    page: int
    offset: float


class CoordinateResolver:
    def __init__(
        self,
        table: CoordinateTable,
        view_zoom: float = VIEW_SCALE,
        reference_zoom: float = TAGGER_SCALE,
        padding: float = SCROLL_PADDING,
    ):
        # 테이블 메타데이터에 태깅 배율이 있으면 그 값을 우선한다
        self.reference_zoom = table.reference_zoom or reference_zoom
        self.view_zoom = view_zoom
        self.padding = padding
        self._entries = table.by_number()

    @property
    def ratio(self) -> float:
        return self.view_zoom / self.reference_zoom

    def resolve(self, index: int) -> Optional[ScrollTarget]:
        """좌표가 없으면 None (호출 측에서 경고 후 스크롤 생략)."""
        entry = self._entries.get(index + 1)
        if entry is None:
            return None
        adjusted_y = entry.y * self.ratio
        return ScrollTarget(page=entry.page, offset=adjusted_y - self.padding)

    def __len__(self) -> int:
        return len(self._entries)
