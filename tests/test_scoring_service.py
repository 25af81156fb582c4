from types import SimpleNamespace

from placement_coach.services.scoring_service import (
    NOT_ANSWERED,
    UNKNOWN_ANSWER,
    evaluate_answers,
    exact_percentage,
    percentage_of,
    round_half_up,
)


def make_question(qid, text, correct, others=("x", "y"), category=None):
    options = [SimpleNamespace(text=correct, is_correct=correct is not None)] if correct is not None else []
    options += [SimpleNamespace(text=o, is_correct=False) for o in others]
    return SimpleNamespace(id=qid, text=text, category=category, options=options)


class TestPercentage:

    def test_rounds_half_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(2.5) == 3
        assert round_half_up(64.4) == 64

    def test_percentage_of(self):
        assert percentage_of(13, 20) == 65
        assert percentage_of(2, 3) == 67
        assert percentage_of(1, 3) == 33

    def test_zero_total_is_zero(self):
        assert percentage_of(0, 0) == 0
        assert percentage_of(5, 0) == 0


class TestEvaluateAnswers:

    def test_exact_text_match_is_correct(self):
        questions = [
            make_question("q1", "2 + 2?", "4", category="Quantitative Aptitude"),
            make_question("q2", "Synonym of big?", "Large", category="Verbal & Reading"),
        ]
        report = evaluate_answers({"q1": "4", "q2": "large"}, questions)

        assert report.total_correct == 1
        assert report.total_questions == 2
        assert report.category_breakdown["Quantitative Aptitude"].percentage == 100
        assert report.category_breakdown["Verbal & Reading"].percentage == 0
        assert [q.id for q in report.wrong_questions] == ["q2"]
        assert report.wrong_questions[0].user_answer == "large"
        assert report.wrong_questions[0].correct_answer == "Large"

    def test_missing_answer_recorded_as_not_answered(self):
        report = evaluate_answers({}, [make_question("q1", "2 + 2?", "4")])

        assert report.total_correct == 0
        assert report.wrong_questions[0].user_answer == NOT_ANSWERED

    def test_none_answers_treated_as_empty(self):
        report = evaluate_answers(None, [make_question("q1", "2 + 2?", "4")])

        assert report.total_correct == 0
        assert report.wrong_questions[0].user_answer == NOT_ANSWERED

    def test_question_without_correct_option_is_always_wrong(self):
        question = make_question("q1", "Broken question", None, others=("a", "b"))
        report = evaluate_answers({"q1": "a"}, [question])

        assert report.total_correct == 0
        assert report.wrong_questions[0].correct_answer == UNKNOWN_ANSWER

    def test_category_defaults_to_general(self):
        report = evaluate_answers({"q1": "4"}, [make_question("q1", "2 + 2?", "4")])

        assert list(report.category_breakdown) == ["General"]
        assert report.category_breakdown["General"].correct == 1

    def test_category_totals_sum_to_question_count(self):
        questions = [
            make_question(f"q{i}", f"Question {i}", "ok", category=("A" if i % 3 else "B"))
            for i in range(10)
        ]
        answers = {f"q{i}": "ok" for i in range(0, 10, 2)}
        report = evaluate_answers(answers, questions)

        assert sum(s.total for s in report.category_breakdown.values()) == 10
        assert report.total_correct == 5
        for stats in report.category_breakdown.values():
            assert 0 <= stats.percentage <= 100
            assert stats.percentage == percentage_of(stats.correct, stats.total)

    def test_no_questions(self):
        report = evaluate_answers({"q1": "4"}, [])

        assert report.total_correct == 0
        assert report.total_questions == 0
        assert report.category_breakdown == {}
        assert percentage_of(report.total_correct, report.total_questions) == 0


def test_exact_percentage_is_unrounded():
    assert exact_percentage(33, 40) == 82.5
    assert exact_percentage(3, 0) == 0.0
