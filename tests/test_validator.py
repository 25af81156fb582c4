import pytest

from placement_coach.utils.validator import clean_json_string, extract_json_object


class TestExtractJsonObject:

    def test_plain_object(self):
        assert extract_json_object('{"actionPlan": "Study"}') == {"actionPlan": "Study"}

    def test_object_surrounded_by_prose(self):
        text = 'Sure! Here is the summary: {"performanceOverview": "Good"} Hope this helps.'
        assert extract_json_object(text) == {"performanceOverview": "Good"}

    def test_trailing_commas_removed(self):
        assert clean_json_string('```json\n{"a": [1, 2,],}\n```') == '{"a": [1, 2]}'

    def test_string_recommendations_wrapped(self):
        assert extract_json_object('{"studyRecommendations": "Practice"}') == {"studyRecommendations": ["Practice"]}

    def test_bad_topic_breakdown_dropped(self):
        assert extract_json_object('{"topicBreakdown": "n/a"}') == {"topicBreakdown": {}}

    @pytest.mark.parametrize("text", ["", "   ", "no json here", "[1, 2]", '{"a": }'])
    def test_unusable_text_raises(self, text):
        with pytest.raises(ValueError):
            extract_json_object(text)
