"""
Coaching feedback for a finished test or stage.

Gemini writes the report when it is configured and answers with usable
content. Otherwise the report is rendered from fixed templates, so callers
always get a report and never see an AI failure.
"""
import logging
import math
from typing import Dict, List, Optional, Tuple

from placement_coach.exceptions import AICollaboratorError
from placement_coach.models.feedback import ComprehensiveSummary, FieldAnalysisInput, TestStats
from placement_coach.models.scoring import CategoryStats, WrongQuestion
from placement_coach.prompts import comprehensive_summary, field_analysis
from placement_coach.services.categorizer import categorize_question
from placement_coach.services.gemini_service import GeminiServices, get_gemini_service
from placement_coach.services.scoring_service import percentage_of, round_half_up
from placement_coach.utils.validator import extract_json_object

RULE = "=" * 70
BASIC_RULE = "=" * 50
PREVIEW_LENGTH = 100


class EstimatedCategory:
    """Category stats rebuilt from wrong answers only"""

    def __init__(self, wrong: int = 0):
        self.wrong = wrong
        self.total = 0
        self.correct = 0
        self.percentage = 0


def _preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text


def estimate_category_stats(
    wrong_questions: List[WrongQuestion],
    total_questions: int
) -> Tuple[List[Tuple[str, EstimatedCategory]], Dict[str, List[WrongQuestion]]]:
    """
    Re-categorize wrong answers and estimate per-category totals.

    True per-category totals are not known here, so every category is assumed
    to hold ceil(total_questions / categories seen) questions. This is a lossy
    estimate. Categories come back weakest first; equal accuracies keep the
    order in which they were first seen.
    """
    grouped: Dict[str, List[WrongQuestion]] = {}
    for question in wrong_questions:
        grouped.setdefault(categorize_question(question.text), []).append(question)

    if not grouped:
        return [], grouped

    per_category = math.ceil(total_questions / len(grouped))
    stats: Dict[str, EstimatedCategory] = {}
    for category, questions in grouped.items():
        estimate = EstimatedCategory(wrong=len(questions))
        estimate.total = per_category
        estimate.correct = max(0, per_category - estimate.wrong)
        estimate.percentage = percentage_of(estimate.correct, estimate.total)
        stats[category] = estimate

    ranked = sorted(stats.items(), key=lambda item: item[1].percentage)
    return ranked, grouped


def _category_summary_line(category: str, stats: EstimatedCategory) -> str:
    if stats.percentage >= 80:
        verdict = "Excellent performance!"
    elif stats.percentage >= 60:
        verdict = "Good effort, but needs improvement."
    elif stats.percentage >= 40:
        verdict = "Requires focused practice."
    else:
        verdict = "Critical area needing immediate attention."
    return f"Summary: You solved {stats.correct} questions correctly in {category}. {verdict}\n"


def render_basic_report(data: FieldAnalysisInput, test_title: str) -> str:
    """Report for attempts without per-question detail"""
    if data.score >= 80:
        recommendation = "Excellent performance! You have a strong grasp of the concepts. Continue practicing to maintain and improve further."
    elif data.score >= 60:
        recommendation = "Good performance! You have a solid foundation. Focus on areas where you made mistakes and practice similar questions."
    else:
        recommendation = "Your performance indicates need for more focused study. Review fundamental concepts and practice consistently."

    return (
        f"TEST ANALYSIS REPORT\n"
        f"{test_title}\n"
        f"{BASIC_RULE}\n"
        f"\n"
        f"OVERALL PERFORMANCE\n"
        f"Score: {data.score}% ({data.correct}/{data.total_questions})\n"
        f"Correct Answers: {data.correct}\n"
        f"Wrong Answers: {data.wrong}\n"
        f"\n"
        f"RECOMMENDATION\n"
        f"{recommendation}\n"
        f"\n"
        f"NEXT STEPS\n"
        f"1. Review questions you got wrong and understand the concepts\n"
        f"2. Practice similar questions to build confidence\n"
        f"3. Take another test in 3-4 days to measure improvement\n"
        f"4. Focus on consistent daily practice rather than cramming"
    )


def render_field_analysis(data: FieldAnalysisInput, test_title: str) -> str:
    """
    Deterministic category-wise report built from the wrong answers.

    Without wrong answers there is nothing to categorize, so the basic
    TEST ANALYSIS REPORT is returned instead of a category breakdown.
    """
    ranked, grouped = estimate_category_stats(data.wrong_questions, data.total_questions)
    if not ranked:
        return render_basic_report(data, test_title)

    parts = [f"QUESTION-BY-QUESTION ANALYSIS\n{test_title}\n{RULE}\n\n"]

    for category, stats in ranked:
        parts.append(
            f"{category.upper()}\n"
            f"Total Questions: {stats.total}\n"
            f"Correct Answers: {stats.correct}\n"
            f"Wrong Answers: {stats.wrong}\n"
            f"Accuracy: {stats.percentage}%\n\n"
        )
        questions = grouped.get(category, [])
        if questions:
            parts.append("Wrong Questions Details:\n")
            for idx, question in enumerate(questions, 1):
                parts.append(f"{idx}. Question: {_preview(question.text)}\n")
                parts.append(f"   Your Answer: {question.user_answer}\n")
                parts.append(f"   Correct Answer: {question.correct_answer}\n\n")
        parts.append("\n")

    parts.append(f"SUMMARY BY CATEGORY\n{RULE}\n\n")
    for category, stats in ranked:
        parts.append(f"{category.upper()}\n")
        parts.append(f"Performance: {stats.correct} correct out of {stats.total} questions ({stats.percentage}%)\n")
        parts.append(_category_summary_line(category, stats))
        parts.append("\n")

    parts.append(f"OVERALL PERFORMANCE SUMMARY\n{RULE}\n\nCorrect Answers by Category:\n")
    for category, stats in ranked:
        parts.append(f"{category}: {stats.correct} correct\n")

    parts.append("\nWrong Answers by Category:\n")
    for category, stats in ranked:
        parts.append(f"{category}: {stats.wrong} wrong\n")

    weakest_name, weakest = ranked[0]
    strongest_name, strongest = ranked[-1]
    parts.append(
        f"\nAREAS REQUIRING MOST FOCUS\n{RULE}\n\n"
        f"1. CRITICAL FOCUS: {weakest_name}\n"
        f"   - Performance: {weakest.percentage}% ({weakest.correct}/{weakest.total})\n"
        f"   - Action: Start with fundamentals. Practice 40-50 questions daily in this category.\n"
        f"   - Focus: Understand basic concepts before attempting complex problems.\n"
        f"\n"
        f"2. IMPROVEMENT NEEDED: \n"
        f"   - Focus on categories with less than 70% accuracy.\n"
        f"   - Practice similar questions to the ones you got wrong.\n"
        f"   - Review concepts for each wrong answer.\n"
        f"\n"
        f"3. MAINTAIN STRENGTH: {strongest_name}\n"
        f"   - Performance: {strongest.percentage}% ({strongest.correct}/{strongest.total})\n"
        f"   - Continue regular practice to maintain this level.\n"
        f"\n"
        f"DAILY STUDY RECOMMENDATION\n"
        f"- Dedicate 60 minutes daily to {weakest_name}\n"
        f"- 30 minutes for other weak categories\n"
        f"- 15 minutes for maintenance practice\n"
        f"- Expected improvement: 15-20% in 2-3 weeks with consistent effort"
    )

    return "".join(parts)


class TopicPerformance:
    def __init__(self, topic: str, correct: int, total: int):
        self.topic = topic
        self.correct = correct
        self.total = total
        self.percentage = percentage_of(correct, total)


def _topic_performances(stats: TestStats) -> List[TopicPerformance]:
    return [TopicPerformance(topic, data.correct, data.total) for topic, data in stats.topics.items()]


def _topic_verdict(t: TopicPerformance) -> str:
    ratio = f"{t.correct}/{t.total} correct ({t.percentage}%)"
    if t.percentage >= 80:
        return f"Excellent performance: {ratio}. You've mastered this topic! Continue with advanced practice to maintain this level."
    if t.percentage >= 70:
        return f"Strong performance: {ratio}. You're doing well here. Push for 90%+ by practicing trickier questions."
    if t.percentage >= 60:
        return f"Moderate performance: {ratio}. This needs focused attention. Review concepts and practice 15-20 questions daily."
    if t.percentage >= 40:
        return f"Weak area: {ratio}. Priority focus needed. Start with basics, understand fundamentals, then build up to complex problems."
    return f"Critical weakness: {ratio}. Requires immediate attention. Dedicate 1-2 hours daily to rebuild fundamentals in this topic."


def build_mock_comprehensive_summary(stats: TestStats, test_title: str) -> ComprehensiveSummary:
    """Deterministic study guide used whenever Gemini cannot provide one"""
    score = stats.score
    performances = _topic_performances(stats)
    strengths = [t for t in performances if t.percentage >= 70]
    weaknesses = [t for t in performances if t.percentage < 60]
    moderate = [t for t in performances if 60 <= t.percentage < 70]

    if score >= 80:
        outlook = "This is an excellent performance demonstrating strong command of the concepts!"
    elif score >= 60:
        outlook = "This shows a good foundation, with clear opportunities for improvement in specific areas."
    else:
        outlook = "This indicates that focused practice is needed to strengthen your fundamentals."
    answered = round_half_up(score / 100 * stats.total_questions)
    overview = (
        f"You scored {score}% on the {test_title} test, answering {answered} out of "
        f"{stats.total_questions} questions correctly. {outlook}"
    )

    if strengths:
        listed = ", ".join(f"{s.topic} ({s.percentage}%)" for s in strengths)
        closing = (
            "You have a balanced strong performance across all topics!"
            if len(strengths) == len(performances)
            else "These are your core strengths - maintain this level through regular practice."
        )
        strengths_analysis = f"You performed exceptionally well in {listed}. {closing}"
    elif moderate:
        strengths_analysis = (
            f"While you didn't have standout strengths (70%+), you showed moderate performance in "
            f"{', '.join(m.topic for m in moderate)}. With focused effort, these can become your strengths."
        )
    else:
        strengths_analysis = (
            "Your performance was consistent across topics, indicating you need foundational improvement "
            "across the board. This is actually good news - systematic study will help you improve everywhere!"
        )

    if weaknesses:
        listed = ", ".join(f"{w.topic} ({w.percentage}%)" for w in weaknesses)
        closing = (
            "Don't be discouraged - starting with basics in each area will build a strong foundation."
            if len(weaknesses) == len(performances)
            else "Focus your immediate study efforts on these specific areas for maximum impact."
        )
        weakness_analysis = f"You need significant improvement in {listed}. {closing}"
    elif score < 70:
        weakness_analysis = (
            "While no specific topic is critically weak, consistent improvement across all areas "
            "will boost your overall score significantly."
        )
    else:
        weakness_analysis = (
            "You have a solid foundation across all topics. Fine-tuning your approach and practicing "
            "advanced problems will help you reach excellence."
        )

    recommendations = []
    if weaknesses:
        recommendations.append(
            f"Focus on {weaknesses[0].topic}: Start with fundamental concepts, watch video tutorials, and practice 10 basic questions daily"
        )
    else:
        recommendations.append("Review all topics systematically to identify knowledge gaps")
    if len(weaknesses) > 1:
        recommendations.append(
            f"Work on {weaknesses[1].topic}: Use online platforms like GeeksforGeeks, InterviewBit, or Khan Academy for structured learning"
        )
    else:
        recommendations.append("Practice previous year placement papers specific to this company")
    recommendations.append("Take timed mock tests weekly to build speed and accuracy under pressure")
    recommendations.append("Join online study groups or forums to discuss difficult concepts and learn problem-solving strategies")
    if strengths:
        recommendations.append(f"Maintain your strength in {strengths[0].topic} with advanced-level practice problems")
    else:
        recommendations.append("Create a study schedule allocating 2-3 hours daily across all topics")

    if weaknesses:
        days_1_2 = (
            f"Deep dive into {weaknesses[0].topic} - review fundamental concepts, watch 2-3 tutorial videos, "
            f"and solve 15-20 basic problems."
        )
    else:
        days_1_2 = "Review all topic fundamentals and identify specific concept gaps."
    if len(weaknesses) > 1:
        days_3_4 = (
            f"Focus on {weaknesses[1].topic} - practice 20-25 questions of increasing difficulty. "
            f"Revise {weaknesses[0].topic} with 10 questions."
        )
    elif moderate:
        days_3_4 = f"Practice {moderate[0].topic} with 25-30 questions. Focus on accuracy over speed."
    else:
        days_3_4 = "Solve mixed difficulty questions across all topics - aim for 30-40 questions total."
    action_plan = (
        f"📅 Day 1-2: {days_1_2}\n\n"
        f"📅 Day 3-4: {days_3_4}\n\n"
        f"📅 Day 5: Take a full-length mock test under timed conditions. This simulates the actual placement test environment.\n\n"
        f"📅 Day 6: Analyze mock test mistakes in detail. For each wrong answer, understand why it was incorrect and practice 5 similar questions.\n\n"
        f"📅 Day 7: Quick revision of all topics. Solve 10 questions per topic. Focus on maintaining speed while ensuring accuracy. Get adequate rest before the actual test."
    )

    if score >= 80:
        motivation = (
            "🌟 Outstanding work! You're in the top tier. With this level of performance, you're well-prepared "
            "for the placement. Keep practicing to maintain your edge, and approach the actual test with "
            "confidence. You've got this! 💪"
        )
    elif score >= 70:
        focus = " and ".join(w.topic for w in weaknesses) if weaknesses else "specific areas"
        motivation = (
            f"💪 Great effort! You're above the average and on the right track. With focused improvement in "
            f"{focus}, you can reach 85-90%. Stay consistent with your preparation - success is within reach! 🎯"
        )
    elif score >= 60:
        motivation = (
            "🎯 Good foundation! You're at the qualifying level, but there's significant room for growth. "
            "The topics you're weak in are conquerable with dedicated practice. Many successful candidates "
            "started here and improved to 80%+. Believe in yourself and put in the work! 📚"
        )
    else:
        motivation = (
            "💡 Don't be discouraged! Every expert was once a beginner. Your current score shows you understand "
            "the basics, but need structured practice. Follow the action plan diligently - improvement of 20-30% "
            "is very achievable in a week with focused effort. Remember: persistence beats resistance. "
            "You can do this! 🚀"
        )

    return ComprehensiveSummary(
        performance_overview=overview,
        strengths_analysis=strengths_analysis,
        weakness_analysis=weakness_analysis,
        topic_breakdown={t.topic: _topic_verdict(t) for t in performances},
        study_recommendations=recommendations,
        action_plan=action_plan,
        motivational_message=motivation,
    )


def topics_from_breakdown(breakdown: Dict[str, CategoryStats]) -> Dict[str, dict]:
    return {category: {"correct": s.correct, "total": s.total} for category, s in breakdown.items()}


class FeedbackSummaryBuilder:
    """
    Builds coaching reports, preferring Gemini and falling back to the
    deterministic templates on any failure
    """

    def __init__(self, ai_client: Optional[GeminiServices] = None):
        self.ai = ai_client

    async def generate_field_analysis(self, data: FieldAnalysisInput, test_title: str) -> str:
        """Plain-text, category-wise analysis of an attempt"""
        if self.ai is None:
            logging.warning("Gemini is not configured, using deterministic field analysis")
            return render_field_analysis(data, test_title)

        prompt = field_analysis.get_field_analysis_prompt(
            test_title=test_title,
            total_questions=data.total_questions,
            correct=data.correct,
            wrong=data.wrong,
            score=data.score,
            wrong_questions=data.wrong_questions,
        )

        try:
            text = await self.ai.generate_with_retry(prompt=prompt, json_mode=False)
            text = (text or "").strip()
            if not text:
                raise AICollaboratorError("Gemini returned an empty analysis")
            logging.info(f"Field analysis generated by Gemini, length: {len(text)}")
            return text
        except Exception as e:
            logging.warning(f"Falling back to deterministic field analysis: {e}")
            return render_field_analysis(data, test_title)

    async def generate_comprehensive_summary(self, stats: TestStats, test_title: str) -> ComprehensiveSummary:
        """Structured study guide for an attempt"""
        if self.ai is None:
            logging.warning("Gemini is not configured, using deterministic comprehensive summary")
            return build_mock_comprehensive_summary(stats, test_title)

        performances = _topic_performances(stats)
        prompt = comprehensive_summary.get_comprehensive_summary_prompt(
            test_title=test_title,
            score=stats.score,
            total_questions=stats.total_questions,
            topics_line=", ".join(f"{t.topic}: {t.correct}/{t.total} ({t.percentage}%)" for t in performances),
            strengths=[t.topic for t in performances if t.percentage >= 70],
            weaknesses=[t.topic for t in performances if t.percentage < 60],
            topic_names=[t.topic for t in performances],
        )

        try:
            text = await self.ai.generate_with_retry(
                prompt=prompt,
                temperature=comprehensive_summary.SUMMARY_TEMPERATURE,
                json_mode=True,
            )
            try:
                parsed = extract_json_object(text)
            except ValueError as e:
                raise AICollaboratorError(f"Unparseable summary: {e}") from e

            return ComprehensiveSummary(
                performance_overview=parsed.get("performanceOverview") or "Test completed successfully.",
                strengths_analysis=parsed.get("strengthsAnalysis") or "Good effort on the test.",
                weakness_analysis=parsed.get("weaknessAnalysis") or "Areas for improvement exist.",
                topic_breakdown=parsed.get("topicBreakdown") or {},
                study_recommendations=parsed.get("studyRecommendations") or ["Continue practicing", "Review fundamentals"],
                action_plan=parsed.get("actionPlan") or "Study regularly and practice more questions.",
                motivational_message=parsed.get("motivationalMessage") or "Keep up the hard work!",
            )
        except Exception as e:
            logging.warning(f"Falling back to deterministic comprehensive summary: {e}")
            return build_mock_comprehensive_summary(stats, test_title)


def get_feedback_builder() -> FeedbackSummaryBuilder:
    """Get FeedbackSummaryBuilder instance"""
    return FeedbackSummaryBuilder(get_gemini_service())
