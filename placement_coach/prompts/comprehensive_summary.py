from typing import List

SUMMARY_TEMPERATURE = 0.4


def get_comprehensive_summary_prompt(
    test_title: str,
    score: int,
    total_questions: int,
    topics_line: str,
    strengths: List[str],
    weaknesses: List[str],
    topic_names: List[str]
) -> str:
    """
    Generate the JSON study-guide prompt
    """
    topic_fields = ",\n    ".join(
        f'"{topic}": "specific analysis for {topic} based on their score - mention if it\'s a strength, weakness, or moderate, and provide 1-2 actionable tips"'
        for topic in topic_names
    )

    return f"""You are an expert placement test coach analyzing a {test_title} performance. Provide a comprehensive, personalized study guide.

Test: {test_title}
Overall Score: {score}%
Total Questions: {total_questions}
Topic-wise Performance: {topics_line}
Strong Topics: {', '.join(strengths) if strengths else 'None identified'}
Weak Topics: {', '.join(weaknesses) if weaknesses else 'None identified'}

Provide ONLY a JSON response with NO markdown formatting, NO code blocks, and NO extra text. Use this exact structure:
{{
  "performanceOverview": "2-3 sentences summarizing overall performance with specific mention of the overall score and key highlights",
  "strengthsAnalysis": "2-3 sentences highlighting specific topics where the candidate excelled (scored 70%+) with congratulatory tone. If no strong topics, acknowledge consistent effort.",
  "weaknessAnalysis": "2-3 sentences identifying specific topics that need improvement (scored below 60%) with constructive tone. Be specific about which areas need focus.",
  "topicBreakdown": {{
    {topic_fields}
  }},
  "studyRecommendations": [
    "specific resource or practice strategy for weak topic 1",
    "specific resource or practice strategy for weak topic 2",
    "general improvement strategy 1",
    "general improvement strategy 2"
  ],
  "actionPlan": "Detailed 7-day study plan with specific goals for each day.",
  "motivationalMessage": "encouraging and personalized feedback based on the score - if 80%+: celebrate; if 60-79%: acknowledge good effort; if below 60%: strong encouragement"
}}"""
