"""
api/session.py — 멀티유저 인메모리 세션 (쿠키 기반)

각 사용자에게 UUID 세션 ID를 발급하고, 세션별로 독립된 시험 컨트롤러를 유지.
TTL(기본 4시간) 경과 시 자동 만료되며, 만료/초기화 시 진행 중인 타이머도 정리한다.
"""

import threading
import time
import uuid
from typing import Any

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}

SESSION_TTL = 4 * 3600  # 시험 시간(3시간)보다 길게


def _new_state() -> dict[str, Any]:
    return {
        "exam": None,   # ExamController
    }


def _close(state: dict[str, Any]) -> None:
    exam = state.get("exam")
    if exam is not None:
        exam.close()


def create_session() -> str:
    """새 세션을 생성하고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """세션 ID로 세션 데이터를 가져옴. 만료되었거나 없으면 None."""
    expired = None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            expired = _sessions.pop(sid)
            del _timestamps[sid]
        else:
            _timestamps[sid] = time.time()  # 접근 시 갱신
            return _sessions[sid]
    _close(expired)
    return None


def get(sid: str, key: str, default=None):
    """세션에서 값 읽기."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """세션에 값 쓰기. 기존 시험이 있으면 정리한다."""
    previous = None
    with _lock:
        if sid in _sessions:
            previous = _sessions[sid].get(key)
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()
    if key == "exam" and previous is not None and previous is not value:
        previous.close()


def reset(sid: str) -> None:
    """세션 초기화."""
    old = None
    with _lock:
        if sid in _sessions:
            old = _sessions[sid]
            _sessions[sid] = _new_state()
            _timestamps[sid] = time.time()
    if old is not None:
        _close(old)


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    removed = []
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            removed.append(_sessions.pop(sid))
            del _timestamps[sid]
    for state in removed:
        _close(state)
    return len(removed)
