import pytest

from conftest import FakeDocument, make_pdf
from neet_mock_test.services.page_renderer import (
    PageRenderer, PaperOpenError, RenderError, open_paper,
)


def test_same_page_renders_once():
    doc = FakeDocument(pages=3)
    renderer = PageRenderer(doc)
    first = renderer.ensure_rendered(2, 2.5)
    second = renderer.ensure_rendered(2, 2.5)
    assert doc.render_calls == [2]
    assert first is second
    assert renderer.current_page == 2


def test_cache_holds_only_last_page():
    doc = FakeDocument(pages=3)
    renderer = PageRenderer(doc)
    renderer.ensure_rendered(1, 2.5)
    renderer.ensure_rendered(2, 2.5)
    renderer.ensure_rendered(1, 2.5)
    assert doc.render_calls == [1, 2, 1]


@pytest.mark.parametrize("page_number", [0, 4, -1])
def test_invalid_page_raises(page_number):
    renderer = PageRenderer(FakeDocument(pages=3))
    with pytest.raises(RenderError):
        renderer.ensure_rendered(page_number, 2.5)
    assert renderer.current is None


def test_decode_failure_raises_and_keeps_previous():
    doc = FakeDocument(pages=3, broken={1})
    renderer = PageRenderer(doc)
    renderer.ensure_rendered(1, 2.5)
    with pytest.raises(RenderError):
        renderer.ensure_rendered(2, 2.5)
    assert renderer.current_page == 1


def test_renders_real_pdf_page():
    renderer = PageRenderer(open_paper(make_pdf(2)))
    rendered = renderer.ensure_rendered(2, 2.0)
    assert rendered.png.startswith(b"\x89PNG")
    assert rendered.page_number == 2
    # A4 기본 페이지 595pt × 2배
    assert rendered.width == pytest.approx(595 * 2, abs=2)
    assert renderer.page_count == 2
    renderer.close()


def test_open_paper_rejects_garbage():
    with pytest.raises(PaperOpenError):
        open_paper(b"definitely not a pdf")


def test_open_paper_missing_file(tmp_path):
    with pytest.raises(PaperOpenError):
        open_paper(str(tmp_path / "missing.pdf"))
