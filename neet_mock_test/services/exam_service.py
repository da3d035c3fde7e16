"""
services/exam_service.py

시험 채점 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 전역 상태 변경 없음.
"""

from typing import Dict, List, Optional, Sequence

from config import MARKS_CORRECT, MARKS_WRONG
from neet_mock_test.models.result_model import ResultSummary, WrongAnswer

NOT_AVAILABLE = "N/A"


def format_time(seconds: int) -> str:
    """초 → HH:MM:SS."""
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def calculate_accuracy(correct: int, wrong: int) -> float:
    """정답률(%). 응답한 문제가 없으면 0.0."""
    attempted = correct + wrong
    if attempted == 0:
        return 0.0
    return round(correct / attempted * 100, 1)


def score(
    answers: Sequence[Optional[str]],
    key: Dict[int, str],
    elapsed_seconds: float = 0,
    marks_correct: int = MARKS_CORRECT,
    marks_wrong: int = MARKS_WRONG,
) -> ResultSummary:
    """
    사용자 답안을 채점하여 ResultSummary를 반환한다.

    판정 기준 (문제 인덱스 i마다):
    - answers[i]가 None → 미응답
    - answers[i] == key[i] → 정답
    - 그 외 → 오답. 정답표에 없는 문제는 정답을 'N/A'로 기록하고 오답 처리.

    Args:
        answers:         답안지. 길이가 곧 전체 문제 수.
        key:             정답표. {문제 인덱스: 정답}. 일부 또는 전체가 비어 있어도 된다.
        elapsed_seconds: 소요 시간 (호출 측에서 측정).

    Returns:
        같은 입력에 대해 항상 같은 ResultSummary.
    """
    correct = wrong = unattempted = 0
    wrong_log: List[WrongAnswer] = []

    for i, user_ans in enumerate(answers):
        correct_ans = key.get(i)
        if user_ans is None:
            unattempted += 1
        elif user_ans == correct_ans:
            correct += 1
        else:
            wrong += 1
            wrong_log.append(WrongAnswer(
                index=i,
                user_answer=user_ans,
                correct_answer=correct_ans or NOT_AVAILABLE,
            ))

    elapsed = int(elapsed_seconds)
    return ResultSummary(
        correct=correct,
        wrong=wrong,
        unattempted=unattempted,
        score=correct * marks_correct - wrong * marks_wrong,
        max_score=len(answers) * marks_correct,
        accuracy=calculate_accuracy(correct, wrong),
        elapsed_seconds=elapsed,
        time_taken=format_time(elapsed),
        wrong_log=wrong_log,
    )
