import logging

import pytest

import main
from neet_mock_test.services.page_renderer import PaperOpenError


@pytest.mark.parametrize("error, message", [
    (PermissionError("denied"), "시험 데이터 오류"),
    (ValueError("bad json"), "시험 데이터 오류"),
    (PaperOpenError("broken"), "시험지를 열 수 없습니다"),
])
def test_startup_failure_exits_with_logged_message(monkeypatch, caplog, error, message):
    def failing_load(*args):
        raise error

    monkeypatch.setattr(main, "load_resources", failing_load)
    with caplog.at_level(logging.ERROR):
        with pytest.raises(SystemExit) as exc:
            main._load_resources_or_exit()
    assert exc.value.code == 1
    assert message in caplog.text


def test_startup_returns_resources(monkeypatch):
    sentinel = object()
    monkeypatch.setattr(main, "load_resources", lambda *args: sentinel)
    assert main._load_resources_or_exit() is sentinel
