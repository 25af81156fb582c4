import pytest

from placement_coach.exceptions import UnknownCompanyOrStageError
from placement_coach.services.scoring_service import exact_percentage, percentage_of
from placement_coach.services.stage_policy import (
    COMPLETED,
    DEFAULT_POLICY_CONFIG,
    StagePolicy,
    StageTest,
)


@pytest.fixture
def policy():
    return StagePolicy()


class TestEvaluatePass:

    def test_tcs_foundation_thirteen_of_twenty_passes(self, policy):
        assert policy.evaluate_pass("TCS", "foundation", 65, 13) is True
        assert policy.next_stage("TCS", "foundation", True) == "advanced"

    @pytest.mark.parametrize("company,stage,percentage,raw,expected", [
        ("TCS", "foundation", 60, 0, True),
        ("TCS", "foundation", 59, 100, False),
        ("TCS", "advanced", 65, 0, True),
        ("TCS", "advanced", 64, 0, False),
        ("TCS", "coding", 0, 2, True),
        ("TCS", "coding", 100, 1, False),
        ("Wipro", "aptitude", 65, 0, True),
        ("Wipro", "aptitude", 64, 0, False),
        ("Wipro", "essay", 70, 0, True),
        ("Wipro", "essay", 69, 0, False),
        ("Wipro", "coding", 0, 1, True),
        ("Wipro", "coding", 100, 0, False),
    ])
    def test_thresholds(self, policy, company, stage, percentage, raw, expected):
        assert policy.evaluate_pass(company, stage, percentage, raw) is expected

    @pytest.mark.parametrize("company,stage", [
        ("Infosys", "foundation"),
        ("TCS", "interview"),
        ("Wipro", "voice"),
        ("TCS", "aptitude"),
    ])
    def test_unknown_combination_fails_closed(self, policy, company, stage):
        assert policy.evaluate_pass(company, stage, 100, 100) is False


class TestNextStage:

    def test_failed_stays_put(self, policy):
        assert policy.next_stage("Wipro", "essay", False) == "essay"

    def test_walks_company_order_without_skipping(self, policy):
        for company in ("TCS", "Wipro"):
            stages = policy.stages_for(company)
            for current, following in zip(stages, stages[1:]):
                assert policy.next_stage(company, current, True) == following

    def test_last_stage_moves_to_completed(self, policy):
        assert policy.next_stage("TCS", COMPLETED, True) == COMPLETED

    def test_unknown_company_completes(self, policy):
        assert policy.next_stage("Infosys", "round1", True) == COMPLETED

    def test_unknown_stage_completes(self, policy):
        assert policy.next_stage("TCS", "voice", True) == COMPLETED


class TestStages:

    def test_stage_orders(self, policy):
        assert policy.stages_for("TCS") == ("foundation", "advanced", "coding", "interview", "completed")
        assert policy.stages_for("Wipro") == ("aptitude", "essay", "coding", "voice", "interview", "completed")
        assert policy.stages_for("Infosys") == ()

    def test_first_stage(self, policy):
        assert policy.first_stage("TCS") == "foundation"
        assert policy.first_stage("Wipro") == "aptitude"
        with pytest.raises(UnknownCompanyOrStageError):
            policy.first_stage("Infosys")

    def test_is_last_stage(self, policy):
        assert policy.is_last_stage("TCS", "interview") is True
        assert policy.is_last_stage("Wipro", "completed") is True
        assert policy.is_last_stage("Wipro", "voice") is False
        assert policy.is_last_stage("Infosys", "interview") is False

    def test_require_stage(self, policy):
        policy.require_stage("Wipro", "voice")
        with pytest.raises(UnknownCompanyOrStageError):
            policy.require_stage("Infosys", "aptitude")
        with pytest.raises(UnknownCompanyOrStageError):
            policy.require_stage("TCS", "essay")
        with pytest.raises(UnknownCompanyOrStageError):
            policy.require_stage("TCS", COMPLETED)

    def test_stage_tests_are_per_company(self, policy):
        assert policy.stage_test("TCS", "coding") == StageTest("TCS", "Coding")
        assert policy.stage_test("Wipro", "coding") == StageTest("Wipro", "Coding")
        assert policy.stage_test("Wipro", "voice") is None

    def test_config_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_POLICY_CONFIG.stage_orders["Infosys"] = ("round1",)


def test_pass_uses_unrounded_percentage(policy):
    # 119/200 is 59.5%, which rounds to 60 but is below the foundation cut-off
    assert percentage_of(119, 200) == 60
    assert policy.evaluate_pass("TCS", "foundation", exact_percentage(119, 200), 119) is False
    assert policy.evaluate_pass("TCS", "foundation", exact_percentage(120, 200), 120) is True
