from typing import List

from placement_coach.models.scoring import WrongQuestion


def format_wrong_questions(wrong_questions: List[WrongQuestion]) -> str:
    return "\n\n".join(
        f"Question {idx}: {q.text}\nStudent's Answer: {q.user_answer}\nCorrect Answer: {q.correct_answer}"
        for idx, q in enumerate(wrong_questions, 1)
    )


def get_field_analysis_prompt(
    test_title: str,
    total_questions: int,
    correct: int,
    wrong: int,
    score: int,
    wrong_questions: List[WrongQuestion]
) -> str:
    """
    Generate the plain-text, category-wise analysis prompt
    """
    return f"""You are a professional test analysis expert. Analyze the following wrong answers from a placement test and categorize them by subject area (like Mathematics, Logical Reasoning, Aptitude, Verbal Reasoning, Coding, etc.).

Test Name: {test_title}
Total Questions: {total_questions}
Correct Answers: {correct}
Wrong Answers: {wrong}
Overall Score: {score}%

WRONG QUESTIONS TO ANALYZE:
{format_wrong_questions(wrong_questions)}

Your task:
1. Read each question and categorize it by subject area based on its content
2. Group the wrong questions by these categories
3. For each category, calculate how many questions the student got wrong
4. Provide a detailed analysis with the following format (NO markdown, NO emojis, plain text only):

QUESTION-BY-QUESTION ANALYSIS
======================================================================

[For each subject category:]
[CATEGORY NAME]
Total Questions in this Category: X
Correct Answers: Y
Wrong Answers: Z
Accuracy: A%

Wrong Questions in this Category:
- Question text with student's answer vs correct answer

======================================================================

SUMMARY BY CATEGORY
======================================================================

[For each category:]
[CATEGORY NAME]
Performance: Y correct out of X questions (A%)
Summary: You solved Y questions correctly in [CATEGORY NAME] out of X attempts. [Performance assessment]

======================================================================

OVERALL PERFORMANCE SUMMARY
======================================================================

Correct Answers by Category:
[Category Name]: X correct

Wrong Answers by Category:
[Category Name]: X wrong

======================================================================

AREAS REQUIRING MOST FOCUS
======================================================================

[Rank categories from lowest to highest performance:]
1. [CATEGORY - PERFORMANCE LEVEL]
   - Performance: X% (Y/Z)
   - Action: [Specific study recommendation]
   - Focus: [What to focus on]

[Include daily study recommendation at the end]

Be specific about which categories need focus based on accuracy percentage. Use plain, professional language."""
