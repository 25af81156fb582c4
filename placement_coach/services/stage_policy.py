"""
Company assessment pipelines: stage order, pass thresholds and the
stage-to-test mapping.

All tables live in a frozen ``PlacementPolicyConfig`` built once at import.
``StagePolicy`` only reads it, so every method is a pure function of its
arguments and the config.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from placement_coach.exceptions import UnknownCompanyOrStageError

COMPLETED = "completed"
REJECTED = "rejected"
INTERVIEW = "interview"

PERCENTAGE = "percentage"
RAW_SCORE = "raw_score"


@dataclass(frozen=True)
class PassRule:
    """Minimum a submission must reach on either its percentage or raw score"""
    metric: str
    minimum: float

    def is_met(self, percentage: float, raw_score: float) -> bool:
        value = percentage if self.metric == PERCENTAGE else raw_score
        return value >= self.minimum


@dataclass(frozen=True)
class StageTest:
    """Where a stage's questions are stored"""
    company: str
    topic: str


@dataclass(frozen=True)
class PlacementPolicyConfig:
    stage_orders: Mapping[str, Tuple[str, ...]]
    pass_rules: Mapping[Tuple[str, str], PassRule]
    stage_tests: Mapping[Tuple[str, str], StageTest]
    terminal_stages: frozenset = field(default_factory=lambda: frozenset({INTERVIEW, COMPLETED}))


DEFAULT_POLICY_CONFIG = PlacementPolicyConfig(
    stage_orders=MappingProxyType({
        "TCS": ("foundation", "advanced", "coding", INTERVIEW, COMPLETED),
        "Wipro": ("aptitude", "essay", "coding", "voice", INTERVIEW, COMPLETED),
    }),
    pass_rules=MappingProxyType({
        ("TCS", "foundation"): PassRule(PERCENTAGE, 60),
        ("TCS", "advanced"): PassRule(PERCENTAGE, 65),
        # At least 2 of 3 problems
        ("TCS", "coding"): PassRule(RAW_SCORE, 2),
        ("Wipro", "aptitude"): PassRule(PERCENTAGE, 65),
        # Essay percentage comes from AI scoring
        ("Wipro", "essay"): PassRule(PERCENTAGE, 70),
        # At least 1 of 2 problems
        ("Wipro", "coding"): PassRule(RAW_SCORE, 1),
    }),
    stage_tests=MappingProxyType({
        ("TCS", "foundation"): StageTest("TCS", "Foundation"),
        ("TCS", "advanced"): StageTest("TCS", "Advanced"),
        ("TCS", "coding"): StageTest("TCS", "Coding"),
        ("Wipro", "aptitude"): StageTest("Wipro", "Aptitude"),
        ("Wipro", "essay"): StageTest("Wipro", "Essay"),
        ("Wipro", "coding"): StageTest("Wipro", "Coding"),
    }),
)


class StagePolicy:
    """Pass/fail rules and stage routing per company"""

    def __init__(self, config: PlacementPolicyConfig = DEFAULT_POLICY_CONFIG):
        self.config = config

    def is_known_company(self, company: str) -> bool:
        return company in self.config.stage_orders

    def stages_for(self, company: str) -> Tuple[str, ...]:
        return self.config.stage_orders.get(company, ())

    def first_stage(self, company: str) -> str:
        stages = self.stages_for(company)
        if not stages:
            raise UnknownCompanyOrStageError(f"Unknown company: {company}")
        return stages[0]

    def require_stage(self, company: str, stage: str) -> None:
        """Raise when the company or the stage is not part of the policy tables"""
        if not self.is_known_company(company):
            raise UnknownCompanyOrStageError(f"Unknown company: {company}")
        if stage not in self.stages_for(company) or stage == COMPLETED:
            raise UnknownCompanyOrStageError(f"Unknown stage '{stage}' for {company}")

    def evaluate_pass(self, company: str, stage: str, percentage: float, raw_score: float) -> bool:
        rule: Optional[PassRule] = self.config.pass_rules.get((company, stage))
        if rule is None:
            # Fail closed on anything without a rule
            logging.warning(f"No pass rule for {company}/{stage}, failing closed")
            return False
        return rule.is_met(percentage, raw_score)

    def next_stage(self, company: str, current_stage: str, passed: bool) -> str:
        if not passed:
            return current_stage

        stages = self.stages_for(company)
        if current_stage not in stages:
            return COMPLETED

        index = stages.index(current_stage)
        if index + 1 < len(stages):
            return stages[index + 1]
        return COMPLETED

    def is_last_stage(self, company: str, stage: str) -> bool:
        if not self.is_known_company(company):
            return False
        return stage in self.config.terminal_stages

    def stage_test(self, company: str, stage: str) -> Optional[StageTest]:
        return self.config.stage_tests.get((company, stage.lower()))


# Singleton instance
_stage_policy = None

def get_stage_policy() -> StagePolicy:
    """
    Get or create StagePolicy singleton
    """
    global _stage_policy
    if _stage_policy is None:
        _stage_policy = StagePolicy()
    return _stage_policy
