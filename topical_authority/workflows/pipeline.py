"""
Funnel Pipeline Definition

4-stage funnel with the item count requested at each generating stage.
This is the single source of truth for the funnel structure.
"""

from typing import List, Dict
from dataclasses import dataclass

from topical_authority.models import Stage


@dataclass(frozen=True)
class StageDefinition:
    key: Stage
    target_count: int = 0  # How many items the backend is asked for


FUNNEL_STAGES: List[StageDefinition] = [
    StageDefinition(key=Stage.ORIENTATION),
    StageDefinition(key=Stage.PILLARS, target_count=30),
    StageDefinition(key=Stage.VARIATIONS, target_count=10),
    StageDefinition(key=Stage.QUESTIONS, target_count=25),
]

STAGE_KEYS = [s.key for s in FUNNEL_STAGES]
STAGE_MAP: Dict[Stage, StageDefinition] = {s.key: s for s in FUNNEL_STAGES}

PILLAR_COUNT = STAGE_MAP[Stage.PILLARS].target_count
VARIATION_COUNT = STAGE_MAP[Stage.VARIATIONS].target_count
QUESTION_COUNT = STAGE_MAP[Stage.QUESTIONS].target_count


def get_stage_index(key: Stage) -> int:
    return STAGE_KEYS.index(key)


def stage_at_least(current_key: Stage, minimum: Stage) -> bool:
    return get_stage_index(current_key) >= get_stage_index(minimum)
