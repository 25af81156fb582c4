import json
import re
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

_OUTERMOST_OBJECT = re.compile(r"\{[\s\S]*\}")


def clean_json_string(json_str: str) -> str:
    """
    Clean common JSON formatting issues from LLM output
    """
    # Remove markdown code blocks
    cleaned = re.sub(r'```json\s*', '', json_str)
    cleaned = re.sub(r'```\s*', '', cleaned)

    # Remove leading/trailing whitespace
    cleaned = cleaned.strip()

    # Fix trailing commas before closing brackets
    cleaned = re.sub(r',(\s*[}\]])', r'\1', cleaned)

    return cleaned


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Parse the outermost ``{...}`` of an LLM reply.

    Prose or code fences around the object are ignored. Raises ValueError
    when no JSON object can be recovered.
    """
    if not text or not text.strip():
        raise ValueError("Empty response")

    cleaned = clean_json_string(text)
    match = _OUTERMOST_OBJECT.search(cleaned)
    candidate = match.group(0) if match else cleaned

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in LLM response: {e}")
        raise ValueError(f"Cannot parse JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return normalize_json_fields(data)


def normalize_json_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize common LLM JSON deviations:
    - Trim text fields
    - Wrap a bare string where a list of strings is expected
    """
    for k in list(data.keys()):
        v = data[k]
        if isinstance(v, str):
            data[k] = v.strip()
        elif isinstance(v, list):
            data[k] = [str(x).strip() for x in v if str(x).strip()]

    recommendations = data.get("studyRecommendations")
    if isinstance(recommendations, str):
        data["studyRecommendations"] = [recommendations] if recommendations else []

    topics = data.get("topicBreakdown")
    if isinstance(topics, dict):
        data["topicBreakdown"] = {str(t): str(v).strip() for t, v in topics.items()}
    elif topics is not None:
        data["topicBreakdown"] = {}

    return data
