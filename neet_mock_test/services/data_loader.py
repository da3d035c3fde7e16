"""
services/data_loader.py

정적 데이터 로딩.
Public API:
  - load_coordinate_table(path) -> CoordinateTable   : 문제 위치 좌표 (JSON)
  - load_answer_key(path) -> Dict[int, str]          : 정답표 (JSON), 없으면 빈 dict
  - load_paper(path) -> bytes                        : 시험지 PDF (열 수 없으면 PaperOpenError)
  - load_resources(...) -> ExamResources              : 위 세 가지를 한 번에
"""

import json
import logging
import os
from typing import Dict

from pydantic import BaseModel, ValidationError

from neet_mock_test.models.exam_data import (
    AnswerKeyEntry, CoordinateTable, answer_key_by_index,
)
from neet_mock_test.services.page_renderer import PaperOpenError, open_paper

logger = logging.getLogger(__name__)


def _read_json(path: str):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_coordinate_table(path: str) -> CoordinateTable:
    """
    좌표 파일 형식:
      - [{"s_no": 1, "page": 1, "y": 120.5}, ...]
      - {"reference_zoom": 1.5, "entries": [...]}  (태깅 배율 메타데이터 포함)

    파일이 없으면 빈 테이블 (모든 문제가 스크롤 없이 표시된다).
    형식이 잘못된 파일은 ValueError.
    """
    if not os.path.exists(path):
        logger.warning(f"좌표 파일이 없습니다: {path}")
        return CoordinateTable()

    raw = _read_json(path)
    if isinstance(raw, list):
        raw = {"entries": raw}
    try:
        table = CoordinateTable.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"좌표 파일 형식이 올바르지 않습니다: {path}\n{e}") from e

    logger.info(f"좌표 {len(table.entries)}개 로드 (태깅 배율: {table.reference_zoom or '기본값'})")
    return table


def load_answer_key(path: str) -> Dict[int, str]:
    """
    정답표 파일 형식: [{"q": 1, "ans": "A"}, ...]

    파일이 없어도 채점은 진행된다 (모든 응답이 'N/A' 오답 처리).
    """
    if not path or not os.path.exists(path):
        logger.warning(f"정답표 파일이 없습니다: {path}")
        return {}

    raw = _read_json(path)
    try:
        entries = [AnswerKeyEntry.model_validate(item) for item in raw]
    except (ValidationError, TypeError) as e:
        raise ValueError(f"정답표 형식이 올바르지 않습니다: {path}\n{e}") from e

    logger.info(f"정답 {len(entries)}개 로드")
    return answer_key_by_index(entries)


def load_paper(path: str) -> bytes:
    """시험지를 읽고 PDF로 열리는지 확인한 뒤 바이트를 반환한다."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error(f"시험지 파일 읽기 실패: {path} - {e}")
        raise PaperOpenError(f"시험지 파일을 찾을 수 없습니다: {path}") from e

    doc = open_paper(data)
    logger.info(f"시험지 로드: {path} ({doc.page_count}페이지)")
    doc.close()
    return data


class ExamResources(BaseModel):
    """앱 시작 시 한 번 읽어 두는 시험 데이터 묶음."""
    paper: bytes
    table: CoordinateTable
    answer_key: Dict[int, str]


def load_resources(paper_path: str, coordinates_path: str, answer_key_path: str) -> ExamResources:
    """시험지 → 좌표 → 정답표 순으로 읽는다. 시험지를 열 수 없으면 PaperOpenError."""
    return ExamResources(
        paper=load_paper(paper_path),
        table=load_coordinate_table(coordinates_path),
        answer_key=load_answer_key(answer_key_path),
    )
