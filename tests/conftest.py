import threading

import fitz
import pytest

from neet_mock_test.models.exam_data import CoordinateTable


def make_pdf(pages: int = 3) -> bytes:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1}", fontsize=14)
    data = doc.tobytes()
    doc.close()
    return data


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """tick 예약을 기록만 한다. 테스트에서 fire()로 tick을 직접 발생시킨다."""

    def __init__(self):
        self.callback = None
        self.interval = None
        self.handle = None

    def __call__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.handle = FakeHandle()
        return self.handle

    def fire(self, times: int = 1):
        for _ in range(times):
            self.callback()


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakePixmap:
    width = 100
    height = 140

    def tobytes(self, fmt):
        return b"\x89PNG-fake"


class FakePage:
    def __init__(self, doc, index):
        self.doc = doc
        self.index = index

    def get_pixmap(self, matrix=None):
        self.doc.render_calls.append(self.index + 1)
        if self.doc.gate is not None:
            # 렌더링 도중 상태를 테스트에서 관찰할 수 있도록 멈춘다
            self.doc.rendering.set()
            self.doc.gate.wait(5)
        if self.index in self.doc.broken:
            raise RuntimeError("decode error")
        return FakePixmap()


class FakeDocument:
    def __init__(self, pages: int = 3, broken=()):
        self.pages = pages
        self.broken = set(broken)
        self.render_calls = []
        self.closed = False
        self.gate = None
        self.rendering = threading.Event()

    def __len__(self):
        return self.pages

    def load_page(self, index):
        return FakePage(self, index)

    def close(self):
        self.closed = True


@pytest.fixture
def pdf_bytes():
    return make_pdf(3)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def table():
    return CoordinateTable.model_validate({
        "entries": [
            {"s_no": 1, "page": 1, "y": 300},
            {"s_no": 2, "page": 1, "y": 600},
            {"s_no": 3, "page": 2, "y": 120},
        ]
    })
