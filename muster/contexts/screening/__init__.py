"""
Screening Context

Responsibilities:
- Holds the body composition lookup tables
- Classifies an applicant's measurements (within / tape / over / incomplete)

Owns: Screening tables, evaluation cascade
Never: Reads or writes the store
"""

from muster.contexts.screening.evaluator import (
    INCOMPLETE,
    OVER,
    STATUSES,
    TAPE,
    WITHIN,
    BodyCompResult,
    evaluate,
)
from muster.contexts.screening.tables import (
    TapeRow,
    allowable_body_fat_for,
    estimate_body_fat,
    screening_weight_for,
)

__all__ = [
    # Evaluation
    "evaluate",
    "BodyCompResult",
    "STATUSES",
    "INCOMPLETE",
    "WITHIN",
    "TAPE",
    "OVER",
    # Tables
    "TapeRow",
    "screening_weight_for",
    "allowable_body_fat_for",
    "estimate_body_fat",
]
