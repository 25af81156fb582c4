import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

STANDARD_TRACK = "Standard"


@dataclass(frozen=True)
class TrackRule:
    """
    Ordered (minimum percentage, track) bands plus the track given below
    every band. Candidates reaching track assignment already passed every
    stage, so the floor is a track, never a rejection.
    """
    bands: Tuple[Tuple[float, str], ...]
    floor: str
    # "stage:<name>" reads one stage's percentage, "average" the mean of all
    source: str

    def pick(self, percentage: Optional[float]) -> str:
        if percentage is None:
            return self.floor
        for minimum, track in self.bands:
            if percentage >= minimum:
                return track
        return self.floor


TRACK_RULES: Mapping[str, TrackRule] = MappingProxyType({
    # Digital: coding >= 2.5/3, Ninja: coding >= 2/3
    "TCS": TrackRule(bands=((83, "Digital"), (67, "Ninja")), floor="Ninja", source="stage:coding"),
    "Wipro": TrackRule(bands=((80, "Turbo"), (70, "Elite")), floor="Elite", source="average"),
})


def _source_percentage(rule: TrackRule, stages: list) -> Optional[float]:
    if rule.source == "average":
        if not stages:
            return None
        return sum((s.percentage or 0) for s in stages) / len(stages)

    stage_name = rule.source.split(":", 1)[1]
    for stage in stages:
        if stage.stage_name == stage_name:
            return stage.percentage or 0
    return None


def assign_track(company: str, stage_results: Iterable[Any], rules: Mapping[str, TrackRule] = TRACK_RULES) -> str:
    """Final placement track for a completed pipeline"""
    rule = rules.get(company)
    if rule is None:
        logging.warning(f"No track rule for company {company}, assigning {STANDARD_TRACK}")
        return STANDARD_TRACK

    stages = list(stage_results)
    track = rule.pick(_source_percentage(rule, stages))
    logging.info(f"Assigned {company} track {track} from {len(stages)} stage results")
    return track
