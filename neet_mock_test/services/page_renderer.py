"""
services/page_renderer.py

시험지 PDF 열기 + 페이지 렌더링 (PyMuPDF).
Public API:
  - open_paper(source) -> fitz.Document      : 시험지 열기 (실패 시 PaperOpenError)
  - PageRenderer.ensure_rendered(page, zoom)  : 페이지를 PNG로 렌더링 (직전 페이지 캐시)

설계 원칙:
- 마지막으로 렌더링한 페이지 번호 하나만 캐시한다 (배율은 세션 동안 고정)
- 렌더링 실패는 삼키지 않고 RenderError로 호출 측에 전달
"""

import logging
import threading
from typing import Optional, Union

import fitz  # PyMuPDF
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class PaperOpenError(RuntimeError):
    """시험지를 열 수 없음. 세션 진행 불가."""


class RenderError(RuntimeError):
    """특정 페이지 렌더링 실패. 세션은 유지된다."""


class RenderedPage(BaseModel):
    page_number: int
    zoom: float
    width: int
    height: int
    png: bytes


def open_paper(source: Union[str, bytes]) -> fitz.Document:
    """
    경로 또는 PDF 바이트로 시험지를 연다.

    Raises:
        PaperOpenError: 파일이 없거나, PDF가 아니거나, 페이지가 없는 경우.
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            doc = fitz.open(stream=bytes(source), filetype="pdf")
        else:
            doc = fitz.open(source)
    except Exception as e:
        logger.error(f"open_paper: PDF 열기 실패 - {e}")
        raise PaperOpenError(f"시험지 PDF를 열 수 없습니다: {e}") from e

    if not doc.is_pdf or doc.page_count == 0:
        doc.close()
        raise PaperOpenError("시험지 PDF에 페이지가 없습니다.")
    return doc


class PageRenderer:
    """
    페이지 렌더링 어댑터.

    document는 load_page(0-based)를 제공하는 객체 (fitz.Document).
    """

    def __init__(self, document):
        self._doc = document
        self._lock = threading.Lock()
        self._current: Optional[RenderedPage] = None

    @property
    def current(self) -> Optional[RenderedPage]:
        """마지막으로 렌더링된 페이지 (아직 없으면 None)."""
        return self._current

    @property
    def current_page(self) -> int:
        return self._current.page_number if self._current else 0

    @property
    def page_count(self) -> int:
        return len(self._doc)

    def ensure_rendered(self, page_number: int, zoom: float) -> RenderedPage:
        """
        page_number(1-based)를 zoom 배율로 렌더링한다.
        직전에 렌더링한 페이지와 같으면 다시 그리지 않는다.

        Raises:
            RenderError: 페이지 번호가 잘못되었거나 디코딩에 실패한 경우.
        """
        with self._lock:
            if self._current is not None and self._current.page_number == page_number:
                return self._current

            if not 1 <= page_number <= self.page_count:
                raise RenderError(
                    f"페이지 번호가 범위를 벗어났습니다: {page_number} (전체 {self.page_count}페이지)"
                )

            try:
                page = self._doc.load_page(page_number - 1)
                pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
                png_bytes = pix.tobytes("png")
            except Exception as e:
                logger.error(f"페이지 {page_number} 렌더링 실패: {e}")
                raise RenderError(f"페이지 {page_number} 렌더링에 실패했습니다.") from e

            self._current = RenderedPage(
                page_number=page_number,
                zoom=zoom,
                width=pix.width,
                height=pix.height,
                png=png_bytes,
            )
            logger.info(f"페이지 {page_number} 렌더링 완료 ({len(png_bytes)//1024}KB, x{zoom})")
            return self._current

    def close(self) -> None:
        close = getattr(self._doc, "close", None)
        if close is not None:
            close()
