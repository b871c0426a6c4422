from topical_authority.workflows.pipeline import (
    FUNNEL_STAGES,
    STAGE_KEYS,
    STAGE_MAP,
    PILLAR_COUNT,
    VARIATION_COUNT,
    QUESTION_COUNT,
    get_stage_index,
    stage_at_least,
)
