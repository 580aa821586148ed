"""Reference range matching and result classification.

Pure functions over explicit values, no database access:
- parse_numeric: free-text result to Decimal (or None)
- select_reference_range: best range for a patient's age and gender
- classify: LOW / HIGH / Normal against a pair of bounds

Range selection:
1. Keep ranges whose gender is "Both" or equals the patient's gender
   (case-insensitive) and whose [min_age, max_age] contains the age.
   An unknown gender or age on either side does not exclude a range.
2. Prefer an exact gender match over "Both".
3. Then prefer the smallest min_age; a missing min_age sorts last.
4. The first range after ordering wins; full ties keep input order.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence

LOW = "LOW"
HIGH = "HIGH"
NORMAL = "Normal"

BOTH = "both"


@dataclass(frozen=True)
class Classification:
    """Outcome of checking a result value."""

    is_abnormal: bool
    remarks: str


UNCHECKED = Classification(is_abnormal=False, remarks="")


def parse_numeric(value) -> Optional[Decimal]:
    """Parse a result value as a finite Decimal, or None if it is not numeric."""
    if value is None:
        return None
    text = str(value).strip()
    # Decimal accepts digit-group underscores ("1_000"); results never use them
    if not text or "_" in text:
        return None
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _norm(gender) -> str:
    return (gender or "").strip().lower()


def matches(range_, age: Optional[int], gender: Optional[str]) -> bool:
    """Check whether a reference range applies to the patient."""
    range_gender = _norm(range_.gender)
    patient_gender = _norm(gender)
    if patient_gender and range_gender and range_gender != BOTH and range_gender != patient_gender:
        return False
    if age is not None:
        if range_.min_age is not None and age < range_.min_age:
            return False
        if range_.max_age is not None and age > range_.max_age:
            return False
    return True


def gender_score(range_, gender: Optional[str]) -> int:
    """2 for an exact gender match, 1 for "Both", 0 otherwise."""
    range_gender = _norm(range_.gender)
    patient_gender = _norm(gender)
    if patient_gender and range_gender == patient_gender:
        return 2
    if range_gender == BOTH:
        return 1
    return 0


def range_sort_key(range_, gender: Optional[str]) -> tuple:
    """Sort key: most gender-specific first, then smallest min_age, nulls last."""
    return (
        -gender_score(range_, gender),
        range_.min_age is None,
        range_.min_age if range_.min_age is not None else 0,
    )


def select_reference_range(ranges: Iterable, age: Optional[int], gender: Optional[str]):
    """Return the best-matching range for the patient, or None."""
    candidates = [r for r in ranges if matches(r, age, gender)]
    if not candidates:
        return None
    return sorted(candidates, key=lambda r: range_sort_key(r, gender))[0]


def classify(number: Decimal, min_val: Optional[Decimal], max_val: Optional[Decimal]) -> Classification:
    """Compare a number against bounds; a missing bound is not checked."""
    if min_val is not None and number < min_val:
        return Classification(is_abnormal=True, remarks=LOW)
    if max_val is not None and number > max_val:
        return Classification(is_abnormal=True, remarks=HIGH)
    return Classification(is_abnormal=False, remarks=NORMAL)


def classify_value(
    value,
    ranges: Sequence,
    age: Optional[int],
    gender: Optional[str],
    default_min: Optional[Decimal] = None,
    default_max: Optional[Decimal] = None,
) -> Classification:
    """
    Classify a free-text result.

    Non-numeric values are never range-checked. When the test has no
    reference ranges at all, its default bounds are used instead.

    Args:
        value: The entered result text
        ranges: All reference ranges of the test
        age: Patient age in years (None if unknown)
        gender: Patient gender (None or blank if unknown)
        default_min: Test's own lower bound
        default_max: Test's own upper bound

    Returns:
        Classification with is_abnormal and remarks
    """
    number = parse_numeric(value)
    if number is None:
        return UNCHECKED

    if not ranges:
        if default_min is None and default_max is None:
            return UNCHECKED
        return classify(number, default_min, default_max)

    selected = select_reference_range(ranges, age, gender)
    if selected is None:
        return UNCHECKED
    return classify(number, selected.min_val, selected.max_val)
