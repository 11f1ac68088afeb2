"""
Body composition lookup tables.

Three fixed tables, each keyed by gender ("male"/"female"):
- SCREENING_WEIGHTS: height (whole inches) -> maximum weight (lb)
- ALLOWABLE_BODY_FAT: age breakpoint -> maximum body fat percentage
- TAPE_CHART: ordered circumference reference rows -> body fat percentage

Gender is only a table selector here. "female" (any case) selects the female
tables; every other value, including None, selects the male tables.
"""

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

MALE = "male"
FEMALE = "female"

SCREENING_WEIGHTS = {
    MALE: {
        60: 141, 61: 145, 62: 149, 63: 153, 64: 158, 65: 163,
        66: 169, 67: 174, 68: 180, 69: 186, 70: 192,
    },
    FEMALE: {
        60: 131, 61: 134, 62: 137, 63: 141, 64: 145, 65: 149,
        66: 154, 67: 158, 68: 163, 69: 167, 70: 172,
    },
}

# Breakpoints must stay in ascending order
ALLOWABLE_BODY_FAT = {
    MALE: {17: 20, 20: 22, 28: 24, 40: 26},
    FEMALE: {17: 30, 20: 32, 28: 34, 40: 36},
}

# Allowed distance between a candidate measurement and a chart value (inches)
TAPE_TOLERANCES = {"neck": 0.75, "waist": 1.5, "hip": 1.5}


@dataclass(frozen=True)
class TapeRow:
    """
    One circumference reference row.

    Attributes:
        body_fat: Body fat percentage associated with the row
        neck: Neck circumference (inches)
        waist: Waist/abdomen circumference (inches)
        hip: Hip circumference (inches); female rows only
    """

    body_fat: float
    neck: Optional[float] = None
    waist: Optional[float] = None
    hip: Optional[float] = None

    def measurements(self) -> dict:
        """Measurements this row defines (skips unset fields)."""
        values = {"neck": self.neck, "waist": self.waist, "hip": self.hip}
        return {name: value for name, value in values.items() if value is not None}


TAPE_CHART = {
    MALE: (
        TapeRow(neck=15.0, waist=30.0, body_fat=12),
        TapeRow(neck=15.5, waist=32.0, body_fat=15),
        TapeRow(neck=16.0, waist=34.0, body_fat=18),
        TapeRow(neck=16.5, waist=36.0, body_fat=21),
        TapeRow(neck=17.0, waist=38.0, body_fat=24),
        TapeRow(neck=17.5, waist=40.0, body_fat=27),
        TapeRow(neck=18.0, waist=42.0, body_fat=30),
    ),
    FEMALE: (
        TapeRow(neck=12.5, waist=27.0, hip=36.0, body_fat=20),
        TapeRow(neck=13.0, waist=29.0, hip=38.0, body_fat=24),
        TapeRow(neck=13.5, waist=31.0, hip=40.0, body_fat=28),
        TapeRow(neck=14.0, waist=33.0, hip=42.0, body_fat=32),
        TapeRow(neck=14.5, waist=35.0, hip=44.0, body_fat=36),
        TapeRow(neck=15.0, waist=37.0, hip=46.0, body_fat=40),
    ),
}


def table_gender(gender) -> str:
    """Map any gender value onto a table selector."""
    if isinstance(gender, str) and gender.strip().lower() == FEMALE:
        return FEMALE
    return MALE


def to_number(value) -> Optional[float]:
    """
    Coerce a measurement to a finite float.

    Accepts ints, floats and numeric strings (form inputs arrive as text).
    Returns None for missing, boolean, non-numeric, NaN or infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def screening_weight_for(height, gender) -> Optional[int]:
    """
    Maximum screening weight for a height and gender.

    Heights are rounded half-up to the nearest whole inch before lookup.

    Returns:
        Maximum weight in pounds, or None if the height is missing or off-table
    """
    height = to_number(height)
    if height is None:
        return None
    inches = math.floor(height + 0.5)
    return SCREENING_WEIGHTS[table_gender(gender)].get(inches)


def allowable_body_fat_for(age, gender) -> int:
    """
    Maximum body fat percentage for an age and gender.

    Step function: the value at the largest breakpoint <= age. Ages below the
    first breakpoint use the first breakpoint's value.
    """
    table = ALLOWABLE_BODY_FAT[table_gender(gender)]
    breakpoints = sorted(table)
    allowed = table[breakpoints[0]]

    age = to_number(age)
    if age is None:
        return allowed

    for breakpoint in breakpoints:
        if breakpoint <= age:
            allowed = table[breakpoint]
        else:
            break
    return allowed


def _row_matches(row: TapeRow, candidate: Mapping[str, Optional[float]]) -> bool:
    for name, reference in row.measurements().items():
        value = candidate.get(name)
        if value is None or abs(value - reference) > TAPE_TOLERANCES[name]:
            return False
    return True


def estimate_body_fat(
    measurements: Mapping,
    gender,
    chart: Optional[Sequence[TapeRow]] = None,
) -> Optional[float]:
    """
    Estimate body fat percentage from circumference measurements.

    Walks the chart in order and returns the body fat of the first row whose
    every defined measurement is within tolerance of the candidate's. There is
    no closest-match search; table order decides between overlapping rows.

    Args:
        measurements: Mapping with optional "neck", "waist", "hip" values
        gender: Table selector
        chart: Rows to search instead of TAPE_CHART[gender]

    Returns:
        Body fat percentage, or None if no row matches
    """
    if chart is None:
        chart = TAPE_CHART[table_gender(gender)]

    candidate = {name: to_number(measurements.get(name)) for name in TAPE_TOLERANCES}

    for row in chart:
        if _row_matches(row, candidate):
            return row.body_fat
    return None
