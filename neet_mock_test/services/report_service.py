"""
services/report_service.py

제출 후 다운로드 파일 생성.
  - 결과 리포트 PDF (PyMuPDF로 직접 작성, 오답이 많으면 여러 페이지)
  - 원본 시험지 사본 (파일명만 바꿔서 제공)

두 파일은 서로 독립적이다. 한쪽이 실패해도 로그만 남기고 나머지는 그대로 제공한다.
"""

import logging
import os
from typing import Dict, Optional, Union

import fitz  # PyMuPDF

from config import PAPER_DOWNLOAD_NAME, REPORT_FILENAME
from neet_mock_test.models.result_model import ResultSummary

logger = logging.getLogger(__name__)

# ── 레이아웃 (mm 단위, A4) ───────────────────────────────────────────────────
_MM = 72 / 25.4
_PAGE_WIDTH_MM = 210
_PAGE_HEIGHT_MM = 297
_MARGIN_X = 20
_PAGE_BREAK_Y = 270     # 이 위치를 넘으면 새 페이지
_TOP_Y = 20             # 새 페이지 시작 위치
_LINE_GAP = 7

_FONT = "helv"
_GREEN = (40 / 255, 167 / 255, 69 / 255)
_RED = (220 / 255, 53 / 255, 69 / 255)
_BLACK = (0, 0, 0)
_GRAY = (200 / 255, 200 / 255, 200 / 255)


def _pt(x_mm: float, y_mm: float) -> fitz.Point:
    return fitz.Point(x_mm * _MM, y_mm * _MM)


def _new_page(doc: fitz.Document) -> fitz.Page:
    return doc.new_page(width=_PAGE_WIDTH_MM * _MM, height=_PAGE_HEIGHT_MM * _MM)


def _text(page, x_mm, y_mm, text, size, color=_BLACK) -> None:
    page.insert_text(_pt(x_mm, y_mm), text, fontsize=size, fontname=_FONT, color=color)


def _centered_text(page, y_mm, text, size, color=_BLACK) -> None:
    width_mm = fitz.get_text_length(text, fontname=_FONT, fontsize=size) / _MM
    _text(page, (_PAGE_WIDTH_MM - width_mm) / 2, y_mm, text, size, color)


def build_report(summary: ResultSummary, title: str = "NEET Mock Test Result") -> bytes:
    """결과 요약 → 리포트 PDF 바이트."""
    doc = fitz.open()
    try:
        page = _new_page(doc)

        _centered_text(page, 20, title, 22, _GREEN)

        _text(page, _MARGIN_X, 40, f"Total Score: {summary.score} / {summary.max_score}", 12)
        _text(page, _MARGIN_X, 50, f"Time Taken: {summary.time_taken}", 12)
        _text(page, _MARGIN_X, 60, f"Correct: {summary.correct}", 12)
        _text(page, _MARGIN_X, 70, f"Incorrect: {summary.wrong}", 12)

        page.draw_line(_pt(_MARGIN_X, 75), _pt(190, 75), color=_GRAY)

        _text(page, _MARGIN_X, 85, "Incorrect Answer Key", 14, _RED)

        y = 95
        for item in summary.wrong_log:
            if y > _PAGE_BREAK_Y:
                page = _new_page(doc)
                y = _TOP_Y
            _text(
                page, _MARGIN_X, y,
                f"Q{item.number}: You marked {item.user_answer} (Correct: {item.correct_answer})",
                10,
            )
            y += _LINE_GAP

        return doc.tobytes()
    finally:
        doc.close()


class ReportEmitter:
    """
    제출 결과를 다운로드 파일 묶음으로 만든다.

    Args:
        paper:      원본 시험지 (경로 또는 PDF 바이트).
        output_dir: 지정하면 생성된 파일을 해당 폴더에도 저장한다.
    """

    def __init__(
        self,
        paper: Union[str, bytes],
        output_dir: Optional[str] = None,
        report_filename: str = REPORT_FILENAME,
        paper_filename: str = PAPER_DOWNLOAD_NAME,
    ):
        self.paper = paper
        self.output_dir = output_dir or None
        self.report_filename = report_filename
        self.paper_filename = paper_filename

    def _paper_bytes(self) -> bytes:
        if isinstance(self.paper, (bytes, bytearray)):
            return bytes(self.paper)
        with open(self.paper, "rb") as f:
            return f.read()

    def emit(self, summary: ResultSummary) -> Dict[str, bytes]:
        """
        리포트와 시험지 사본을 만든다.

        Returns:
            {파일명: 내용}. 실패한 파일은 빠진다.
        """
        builders = [
            (self.report_filename, lambda: build_report(summary)),
            (self.paper_filename, self._paper_bytes),
        ]

        downloads: Dict[str, bytes] = {}
        for filename, build in builders:
            try:
                content = build()
                if self.output_dir:
                    self._save(filename, content)
            except Exception:
                logger.exception(f"다운로드 파일 생성 실패: {filename}")
                continue
            downloads[filename] = content
            logger.info(f"다운로드 준비 완료: {filename} ({len(content)//1024}KB)")

        return downloads

    def _save(self, filename: str, content: bytes) -> None:
        os.makedirs(self.output_dir, exist_ok=True)
        with open(os.path.join(self.output_dir, filename), "wb") as f:
            f.write(content)
