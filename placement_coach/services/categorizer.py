"""
Keyword heuristic that maps question text to a subject area.

The keyword sets, the x2 weight and the category order are kept stable so
that categories inferred today match the ones stored for earlier attempts.
"""
import re
from types import MappingProxyType

QUANTITATIVE_APTITUDE = "Quantitative Aptitude"
LOGICAL_REASONING = "Logical Reasoning"
VERBAL_AND_READING = "Verbal & Reading"
PROGRAMMING_CODING = "Programming/Coding"
DATA_INTERPRETATION = "Data Interpretation"
GENERAL_REASONING = "General Reasoning"
GENERAL_KNOWLEDGE = "General Knowledge"

KEYWORD_WEIGHT = 2
SHORT_TEXT_LENGTH = 100


def _keywords(*words: str) -> "re.Pattern[str]":
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


# Order matters: on equal scores the earlier category wins
CATEGORY_KEYWORDS = MappingProxyType({
    QUANTITATIVE_APTITUDE: _keywords(
        "find", "calculate", "solve", "percentage", "profit", "loss", "ratio", "proportion",
        "average", "sum", "product", "equation", "number", "digit", "integer", "fraction",
        "decimal", "prime", "even", "odd", "square", "cube", "root", "angle", "triangle",
        "circle", "area", "volume", "length", "distance", "speed", "time", "rate", "multiply",
        "divide", "add", "subtract", "money", "cost", "price", "value", "amount", "count",
        "total", "calculate",
    ),
    LOGICAL_REASONING: _keywords(
        "logic", "sequence", "pattern", "series", "analogy", "similar", "opposite", "code",
        "decode", "arrange", "order", "direction", "position", "relationship", "syllogism",
        "inference", "conclusion", "puzzle", "cryptic", "arrange", "next", "follows",
        "similar", "statement", "true", "false",
    ),
    VERBAL_AND_READING: _keywords(
        "grammar", "tense", "subject", "verb", "pronoun", "article", "preposition",
        "conjunction", "spelling", "vocabulary", "synonym", "antonym", "passage",
        "comprehension", "sentence", "paragraph", "meaning", "usage", "english", "word",
        "phrase", "language", "literature", "idiom", "fill", "blank", "error", "correct",
        "best", "sentence", "complete",
    ),
    PROGRAMMING_CODING: _keywords(
        "code", "program", "function", "variable", "algorithm", "array", "loop", "condition",
        "output", "input", "compile", "syntax", "error", "debug", "java", "python", "cpp",
        r"c\+\+", "javascript", "database", "query", "sql", "html", "css", "write", "print",
        "return", "class", "method", "object",
    ),
    DATA_INTERPRETATION: _keywords(
        "table", "graph", "chart", "bar", "pie", "diagram", "data", "statistics", "percentage",
        "ratio", "comparison", "analysis", "interpretation", "figure", "row", "column", "value",
        "shown", "increase", "decrease", "maximum", "minimum",
    ),
    # Scored but never matched; only reachable through the fallback below
    GENERAL_REASONING: None,
})

CATEGORIES = tuple(CATEGORY_KEYWORDS) + (GENERAL_KNOWLEDGE,)


def score_categories(text: str) -> dict:
    """Weighted keyword hits per category, in category order"""
    lowered = text.lower()
    scores = {}
    for category, pattern in CATEGORY_KEYWORDS.items():
        hits = sum(1 for _ in pattern.finditer(lowered)) if pattern is not None else 0
        scores[category] = hits * KEYWORD_WEIGHT
    return scores


def categorize_question(text: str) -> str:
    """Return the subject area label for a question's text"""
    if not text:
        return GENERAL_KNOWLEDGE

    best_category = GENERAL_KNOWLEDGE
    best_score = 0
    for category, score in score_categories(text).items():
        if score > best_score:
            best_score = score
            best_category = category

    if best_score == 0:
        lowered = text.lower()
        if len(lowered) < SHORT_TEXT_LENGTH:
            return GENERAL_REASONING
        if "passage" in lowered or "read" in lowered:
            return VERBAL_AND_READING
        return GENERAL_KNOWLEDGE

    return best_category
