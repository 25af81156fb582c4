import asyncio

from placement_coach.exceptions import AICollaboratorError
from placement_coach.models.feedback import FieldAnalysisInput, TestStats, TopicStats
from placement_coach.models.scoring import WrongQuestion
from placement_coach.services.feedback_service import (
    FeedbackSummaryBuilder,
    build_mock_comprehensive_summary,
    estimate_category_stats,
    render_basic_report,
    render_field_analysis,
)
from tests.conftest import FakeAI

QUANT_TEXT = "Find the profit percentage if cost is 200 and sell is 250"
CODE_TEXT = "What is the output of this python program?"


def wrong(qid, text):
    return WrongQuestion(id=qid, text=text, category="General", user_answer="A", correct_answer="B")


def analysis_input(wrong_questions, total=6, score=50):
    return FieldAnalysisInput(
        score=score,
        total_questions=total,
        correct=total - len(wrong_questions),
        wrong=len(wrong_questions),
        wrong_questions=wrong_questions,
    )


def comprehensive_stats(score=85):
    return TestStats(
        score=score,
        accuracy=score,
        total_questions=20,
        topics={
            "Quant": TopicStats(correct=9, total=10),
            "Verbal": TopicStats(correct=4, total=10),
        },
    )


class TestDeterministicFieldAnalysis:

    def test_estimates_totals_from_distinct_categories(self):
        ranked, grouped = estimate_category_stats(
            [wrong("1", QUANT_TEXT), wrong("2", CODE_TEXT), wrong("3", CODE_TEXT)], 6
        )

        assert [name for name, _ in ranked] == ["Programming/Coding", "Quantitative Aptitude"]
        coding = dict(ranked)["Programming/Coding"]
        assert (coding.total, coding.correct, coding.wrong, coding.percentage) == (3, 1, 2, 33)
        quant = dict(ranked)["Quantitative Aptitude"]
        assert (quant.total, quant.correct, quant.wrong, quant.percentage) == (3, 2, 1, 67)
        assert len(grouped["Programming/Coding"]) == 2

    def test_correct_never_negative(self):
        ranked, _ = estimate_category_stats([wrong(str(i), CODE_TEXT) for i in range(5)], 2)
        stats = dict(ranked)["Programming/Coding"]
        assert stats.correct == 0
        assert stats.percentage == 0

    def test_report_ranks_weakest_first(self):
        report = render_field_analysis(
            analysis_input([wrong("1", QUANT_TEXT), wrong("2", CODE_TEXT), wrong("3", CODE_TEXT)]),
            "TCS Foundation",
        )

        assert report.startswith("QUESTION-BY-QUESTION ANALYSIS\nTCS Foundation\n" + "=" * 70)
        assert "SUMMARY BY CATEGORY" in report
        assert "OVERALL PERFORMANCE SUMMARY" in report
        assert "1. CRITICAL FOCUS: Programming/Coding" in report
        assert "3. MAINTAIN STRENGTH: Quantitative Aptitude" in report
        assert "- Dedicate 60 minutes daily to Programming/Coding" in report
        assert "Programming/Coding: 2 wrong" in report

    def test_no_wrong_questions_gives_basic_report(self):
        data = analysis_input([], total=10, score=80)
        report = render_field_analysis(data, "Practice Set")

        assert report == render_basic_report(data, "Practice Set")
        assert report.startswith("TEST ANALYSIS REPORT\nPractice Set\n" + "=" * 50)
        assert "Score: 80% (10/10)" in report
        assert "Excellent performance!" in report

    def test_basic_report_bands(self):
        assert "Good performance!" in render_basic_report(analysis_input([], score=60), "T")
        assert "need for more focused study" in render_basic_report(analysis_input([], score=59), "T")


class TestFieldAnalysisBuilder:

    def test_without_ai_uses_fallback(self):
        data = analysis_input([wrong("1", QUANT_TEXT)])
        result = asyncio.run(FeedbackSummaryBuilder(None).generate_field_analysis(data, "Mock"))
        assert result == render_field_analysis(data, "Mock")

    def test_ai_reply_is_trimmed(self):
        ai = FakeAI(reply="  Category analysis from the model  \n")
        data = analysis_input([wrong("1", QUANT_TEXT)])

        result = asyncio.run(FeedbackSummaryBuilder(ai).generate_field_analysis(data, "Mock"))

        assert result == "Category analysis from the model"
        assert QUANT_TEXT in ai.prompts[0]
        assert "Test Name: Mock" in ai.prompts[0]

    def test_ai_failure_falls_back(self):
        ai = FakeAI(error=AICollaboratorError("timeout"))
        data = analysis_input([wrong("1", QUANT_TEXT)])

        result = asyncio.run(FeedbackSummaryBuilder(ai).generate_field_analysis(data, "Mock"))

        assert result == render_field_analysis(data, "Mock")

    def test_empty_ai_reply_falls_back(self):
        data = analysis_input([wrong("1", QUANT_TEXT)])
        result = asyncio.run(FeedbackSummaryBuilder(FakeAI(reply="   ")).generate_field_analysis(data, "Mock"))
        assert result == render_field_analysis(data, "Mock")


class TestComprehensiveSummary:

    def test_mock_summary_for_strong_score(self):
        summary = build_mock_comprehensive_summary(comprehensive_stats(85), "TCS Foundation")

        assert summary.performance_overview.startswith(
            "You scored 85% on the TCS Foundation test, answering 17 out of 20 questions correctly."
        )
        assert summary.strengths_analysis.startswith("You performed exceptionally well in Quant (90%).")
        assert summary.weakness_analysis.startswith("You need significant improvement in Verbal (40%).")
        assert summary.topic_breakdown["Quant"].startswith("Excellent performance: 9/10 correct (90%).")
        assert summary.topic_breakdown["Verbal"].startswith("Weak area: 4/10 correct (40%).")
        assert summary.study_recommendations[0].startswith("Focus on Verbal:")
        assert len(summary.study_recommendations) == 5
        assert summary.motivational_message.startswith("🌟 Outstanding work!")

    def test_mock_motivation_bands(self):
        assert build_mock_comprehensive_summary(comprehensive_stats(72), "T").motivational_message.startswith("💪")
        assert build_mock_comprehensive_summary(comprehensive_stats(65), "T").motivational_message.startswith("🎯")
        assert build_mock_comprehensive_summary(comprehensive_stats(30), "T").motivational_message.startswith("💡")

    def test_ai_json_in_code_fence(self):
        reply = (
            "Here you go:\n```json\n"
            '{"performanceOverview": " Solid run ", "studyRecommendations": "Practice daily", '
            '"topicBreakdown": {"Quant": "Strong"},}\n```'
        )
        summary = asyncio.run(
            FeedbackSummaryBuilder(FakeAI(reply=reply)).generate_comprehensive_summary(comprehensive_stats(), "Mock")
        )

        assert summary.performance_overview == "Solid run"
        assert summary.study_recommendations == ["Practice daily"]
        assert summary.topic_breakdown == {"Quant": "Strong"}
        assert summary.strengths_analysis == "Good effort on the test."
        assert summary.motivational_message == "Keep up the hard work!"

    def test_unparseable_ai_reply_falls_back(self):
        stats = comprehensive_stats()
        summary = asyncio.run(
            FeedbackSummaryBuilder(FakeAI(reply="I cannot produce JSON today")).generate_comprehensive_summary(stats, "Mock")
        )
        assert summary == build_mock_comprehensive_summary(stats, "Mock")

    def test_ai_error_falls_back(self):
        stats = comprehensive_stats(40)
        ai = FakeAI(error=RuntimeError("quota exceeded"))

        summary = asyncio.run(FeedbackSummaryBuilder(ai).generate_comprehensive_summary(stats, "Mock"))

        assert summary == build_mock_comprehensive_summary(stats, "Mock")
        assert "Strong Topics: Quant" in ai.prompts[0]
        assert "Weak Topics: Verbal" in ai.prompts[0]


def test_builder_without_api_key_has_no_ai():
    from placement_coach.services.feedback_service import get_feedback_builder

    assert get_feedback_builder().ai is None
