from neet_mock_test.services.exam_service import calculate_accuracy, format_time, score


def test_score_example():
    result = score(["A", "C", None], {0: "A", 1: "B", 2: "C"}, elapsed_seconds=65)
    assert result.correct == 1
    assert result.wrong == 1
    assert result.unattempted == 1
    assert result.score == 3
    assert result.max_score == 12
    assert result.accuracy == 50.0
    assert result.time_taken == "00:01:05"
    assert len(result.wrong_log) == 1
    wrong = result.wrong_log[0]
    assert (wrong.index, wrong.number, wrong.user_answer, wrong.correct_answer) == (1, 2, "C", "B")


def test_unkeyed_answer_counts_wrong_with_na():
    result = score(["A", "B"], {0: "A"})
    assert result.correct == 1
    assert result.wrong == 1
    assert result.wrong_log[0].correct_answer == "N/A"


def test_missing_answer_key_degrades():
    result = score(["A", None, "D"], {})
    assert (result.correct, result.wrong, result.unattempted) == (0, 2, 1)
    assert all(w.correct_answer == "N/A" for w in result.wrong_log)
    assert result.score == -2


def test_accuracy_zero_without_attempts():
    result = score([None] * 4, {0: "A"})
    assert result.accuracy == 0.0
    assert result.unattempted == 4
    assert calculate_accuracy(0, 0) == 0.0


def test_accuracy_rounded_to_one_decimal():
    assert calculate_accuracy(2, 1) == 66.7


def test_score_is_idempotent():
    answers = ["A", "B", None, "D", "C"]
    key = {0: "A", 1: "C", 3: "D"}
    assert score(answers, key, 100) == score(answers, key, 100)


def test_format_time():
    assert format_time(0) == "00:00:00"
    assert format_time(3 * 60 * 60) == "03:00:00"
    assert format_time(3725) == "01:02:05"
    assert format_time(-5) == "00:00:00"
