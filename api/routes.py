"""
api/routes.py — FastAPI 엔드포인트
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

import config
import api.session as session

from neet_mock_test.services.exam_controller import ExamClosedError, ExamController
from neet_mock_test.services.page_renderer import PaperOpenError, RenderError

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class NavigateBody(BaseModel):
    index: int = 0

class StepBody(BaseModel):
    direction: int = 1

class SaveAnswerBody(BaseModel):
    index: Optional[int] = None   # 없으면 현재 문제
    answer: str = ""              # 빈 문자열이면 선택 해제

class SubmitBody(BaseModel):
    confirm: bool = False


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _exam(request: Request) -> ExamController:
    exam: Optional[ExamController] = session.get(_sid(request), "exam")
    if exam is None:
        raise HTTPException(status_code=404, detail="시험 세션이 없습니다.")
    return exam


def _open_exam(request: Request) -> ExamController:
    exam = _exam(request)
    if exam.state.is_submitted:
        raise HTTPException(status_code=400, detail="이미 제출된 시험입니다.")
    return exam


async def _navigate(exam: ExamController, fn, *args) -> dict:
    try:
        result = await asyncio.to_thread(fn, *args)
    except ExamClosedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RenderError as e:
        logger.error(f"페이지 렌더링 실패: {e}")
        raise HTTPException(status_code=502, detail="시험지 페이지를 표시하지 못했습니다. 다시 시도해 주세요.")
    if result is None:
        return {"ok": False, "index": exam.state.current_index}
    return {"ok": True, **result.model_dump()}


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.post("/api/start-exam")
async def start_exam(request: Request):
    resources = request.app.state.resources
    try:
        exam = await asyncio.to_thread(
            ExamController.from_paper,
            resources.paper,
            resources.table,
            resources.answer_key,
            output_dir=config.REPORT_OUTPUT_DIR,
            scheduler=request.app.state.scheduler,
        )
    except PaperOpenError as e:
        logger.error(f"시험 시작 실패: {e}")
        raise HTTPException(status_code=503, detail="시험지 PDF를 열 수 없습니다. paper.pdf 파일을 확인해 주세요.")

    session.put(_sid(request), "exam", exam)
    nav = await _navigate(exam, exam.start, config.TEST_DURATION_SECONDS)
    nav.update({"total": exam.state.total, "duration": exam.timer.duration})
    return nav


@router.get("/api/exam-state")
async def get_exam_state(request: Request):
    exam = _exam(request)
    return await asyncio.to_thread(exam.snapshot)


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    exam = _open_exam(request)
    return await _navigate(exam, exam.go_to, body.index)


@router.post("/api/step")
async def step(body: StepBody, request: Request):
    exam = _open_exam(request)
    return await _navigate(exam, exam.step, body.direction)


@router.get("/api/page-image")
async def page_image(request: Request):
    exam = _exam(request)
    rendered = exam.renderer.current
    if rendered is None:
        raise HTTPException(status_code=404, detail="렌더링된 페이지가 없습니다.")
    return Response(
        content=rendered.png,
        media_type="image/png",
        headers={"X-Page-Number": str(rendered.page_number)},
    )


@router.post("/api/save-answer")
async def save_answer(body: SaveAnswerBody, request: Request):
    exam = _open_exam(request)
    answer = body.answer.strip().upper()
    if body.index is None:
        fn, args = (exam.select, (answer,)) if answer else (exam.clear, ())
    else:
        fn, args = (exam.select_at, (body.index, answer)) if answer else (exam.clear_at, (body.index,))
    try:
        index = await asyncio.to_thread(fn, *args)
    except (ExamClosedError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "index": index, "answered_count": exam.state.answered_count}


@router.post("/api/submit-exam")
async def submit_exam(body: SubmitBody, request: Request):
    exam = _exam(request)
    if not body.confirm and not exam.state.is_submitted:
        raise HTTPException(status_code=400, detail="제출 확인이 필요합니다.")

    result = await asyncio.to_thread(exam.submit)
    return {"score": result.score, "max_score": result.max_score, "ok": True}


@router.get("/api/results")
async def get_results(request: Request):
    exam = _exam(request)
    if exam.result is None:
        raise HTTPException(status_code=400, detail="시험이 아직 제출되지 않았습니다.")

    data = exam.result.model_dump()
    data["wrong_log"] = [
        {**item.model_dump(), "number": item.number} for item in exam.result.wrong_log
    ]
    data["downloads"] = sorted(exam.downloads)
    return data


@router.get("/api/download/{filename}")
async def download(filename: str, request: Request):
    exam = _exam(request)
    content = exam.downloads.get(filename)
    if content is None:
        raise HTTPException(status_code=404, detail="다운로드할 파일이 없습니다.")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(_sid(request))
    return {"ok": True}
