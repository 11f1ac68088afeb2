"""
Body composition eligibility evaluation.

Cascade, in order:
1. Missing height/weight -> incomplete
2. Weight within the screening table -> within
3. Circumference estimate within the age/gender allowance -> tape
4. Anything else -> over

Pure computation. Callers write the result back to the applicant record.
"""

from dataclasses import asdict, dataclass
from typing import Mapping, Optional, Sequence

from muster.contexts.screening.tables import (
    TapeRow,
    allowable_body_fat_for,
    estimate_body_fat,
    screening_weight_for,
    to_number,
)

INCOMPLETE = "incomplete"
WITHIN = "within"
TAPE = "tape"
OVER = "over"

STATUSES = (INCOMPLETE, WITHIN, TAPE, OVER)

DEFAULT_AGE = 18


@dataclass(frozen=True)
class BodyCompResult:
    """
    Outcome of a body composition evaluation.

    Attributes:
        status: One of "incomplete", "within", "tape", "over"
        message: Human-readable explanation
    """

    status: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


def evaluate(
    measurements: Mapping,
    chart: Optional[Sequence[TapeRow]] = None,
) -> BodyCompResult:
    """
    Classify an applicant's body composition.

    Boundaries are inclusive: a weight equal to the screening maximum, or an
    estimate equal to the allowance, passes.

    Args:
        measurements: Applicant record or any mapping with height, weight, age,
                      gender, neck, waist, hip (all optional)
        chart: Override circumference chart (defaults to the gender's table)

    Returns:
        BodyCompResult

    Examples:
        >>> evaluate({"height": 68, "weight": 175, "gender": "male"}).status
        'within'
    """
    height = to_number(measurements.get("height"))
    weight = to_number(measurements.get("weight"))
    if height is None or weight is None:
        return BodyCompResult(INCOMPLETE, "Height and weight are required for screening.")

    gender = measurements.get("gender")

    max_weight = screening_weight_for(height, gender)
    if max_weight is not None and weight <= max_weight:
        return BodyCompResult(
            WITHIN, f"Weight {weight:g} lb is within the {max_weight} lb screening limit."
        )

    age = to_number(measurements.get("age"))
    if age is None:
        age = DEFAULT_AGE
    allowed = allowable_body_fat_for(age, gender)

    estimate = estimate_body_fat(measurements, gender, chart=chart)

    if max_weight is None:
        screening_note = "No screening weight for this height"
    else:
        screening_note = f"Weight {weight:g} lb exceeds the {max_weight} lb screening limit"

    if estimate is not None and estimate <= allowed:
        return BodyCompResult(
            TAPE,
            f"{screening_note}; tape estimate {estimate:g}% is within the {allowed}% "
            "allowance. Formal tape required.",
        )

    if estimate is None:
        return BodyCompResult(
            OVER, f"{screening_note}; no tape chart match for the recorded circumferences."
        )
    return BodyCompResult(
        OVER, f"{screening_note}; tape estimate {estimate:g}% exceeds the {allowed}% allowance."
    )
