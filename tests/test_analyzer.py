from gradechart.analyzer import summarize
from gradechart.eligibility import NOT_DUE_YET
from gradechart.models import NotApplicable, ScoreRecord
from gradechart.service import compute_histogram


def test_summarize_not_applicable() -> None:
    text = summarize(NotApplicable(NOT_DUE_YET), "Essay")
    assert text == "Essay: The grades chart is shown once the due date has passed."


def test_summarize_unknown_reason() -> None:
    text = summarize(NotApplicable("assignment not found"), "Assignment 9")
    assert "assignment not found" in text


def test_summarize_histogram() -> None:
    records = [
        ScoreRecord(entity_id=1, attempt_number=0, score=5),
        ScoreRecord(entity_id=2, attempt_number=0, score=20),
        ScoreRecord(entity_id=3, attempt_number=0, score=20),
    ]
    histogram = compute_histogram(20, records)
    lines = summarize(histogram, "Quiz 1").splitlines()

    assert lines[0] == "=== Grades chart: Quiz 1 ==="
    assert "Maximum grade: 20.00" in lines
    assert "Graded students: 3" in lines
    assert lines[4] == "[0.00; 2.00)   : 0"
    assert lines[6] == "[4.00; 6.00)   : 1"
    assert lines[-1] == "[20.00; 20.00] : 2"


def test_summarize_empty_histogram() -> None:
    text = summarize(compute_histogram(10, []), "Quiz 2")
    assert "Graded students: 0" in text
    assert "No graded submissions yet." in text
