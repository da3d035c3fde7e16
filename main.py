"""
main.py — NEET 모의고사 데스크톱 앱 진입점
"""

import os
import socket
import sys
import time
import threading
import logging
import webbrowser

# ── 패키지 경로 설정 (반드시 최상단) ──────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import (
    ANSWER_KEY_PATH, BASE_DIR, COORDINATES_PATH, DEFAULT_HOST, DEFAULT_PORT,
    LOG_FILE, PAPER_PATH,
)
from neet_mock_test.services.data_loader import ExamResources, load_resources
from neet_mock_test.services.page_renderer import PaperOpenError

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s [%(levelname)s] %(message)s',
            handlers=[
                logging.FileHandler(LOG_FILE, encoding='utf-8'),
                logging.StreamHandler(sys.stdout)
            ]
        )
    except PermissionError:
        # 로그 파일 점유 시 콘솔 출력만 사용
        logging.basicConfig(level=logging.INFO)


def _load_resources_or_exit() -> ExamResources:
    """시험지와 데이터 파일을 읽는다. 실패하면 로그를 남기고 종료 코드 1로 끝낸다."""
    try:
        return load_resources(PAPER_PATH, COORDINATES_PATH, ANSWER_KEY_PATH)
    except PaperOpenError as e:
        logger.error(f"시험지를 열 수 없습니다. '{PAPER_PATH}' 파일을 확인하세요. ({e})")
    except (OSError, ValueError) as e:
        logger.error(f"시험 데이터 오류: {e}")
    sys.exit(1)


def _pick_port() -> int:
    """기본 포트가 사용 중이면 빈 포트를 받는다."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, DEFAULT_PORT))
            return DEFAULT_PORT
        except OSError:
            s.bind((DEFAULT_HOST, 0))
            return s.getsockname()[1]


def _wait_for_server(port: int, timeout: float = 15.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


def main() -> None:
    _setup_logging()
    logger.info("=== NEET Mock Test Application Started ===")
    os.chdir(BASE_DIR)

    # 시험지 없이는 시험을 진행할 수 없으므로 서버를 띄우기 전에 확인
    resources = _load_resources_or_exit()

    import uvicorn
    from api.app import create_app

    app = create_app(resources)
    port = _pick_port()
    server_thread = threading.Thread(
        target=uvicorn.run,
        args=(app,),
        kwargs={"host": DEFAULT_HOST, "port": port, "log_level": "error"},
        daemon=True,
    )
    server_thread.start()

    if not _wait_for_server(port):
        logger.error("서버 시작 제한 시간을 초과했습니다. 이미 실행 중인 프로세스를 종료해 보세요.")
        sys.exit(1)

    logger.info("서버 준비 완료. 브라우저를 엽니다.")
    webbrowser.open(f"http://{DEFAULT_HOST}:{port}")

    # 메인 스레드 유지
    try:
        while server_thread.is_alive():
            time.sleep(10)
    except KeyboardInterrupt:
        logger.info("사용자에 의해 종료되었습니다.")


if __name__ == "__main__":
    main()
