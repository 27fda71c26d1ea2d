"""
BMI domain model.

Imperial formula (pounds / inches) and the four health categories.
Everything here is a pure function over already-parsed numbers, except
parse_measurement_value which turns raw form text into one.
"""
import math
from typing import Optional

IMPERIAL_FACTOR = 703

UNDERWEIGHT = "Underweight"
HEALTHY = "Healthy"
OVERWEIGHT = "Overweight"
OBESE = "Obese"

CATEGORIES = (UNDERWEIGHT, HEALTHY, OVERWEIGHT, OBESE)


def compute_bmi(weight: float, height: float) -> float:
    """Weight in pounds, height in inches. Not rounded."""
    return weight / (height * height) * IMPERIAL_FACTOR


def classify(bmi: float) -> str:
    # Bands are closed at 18.5, 24.9 and 29.9; anything above 24.9 up to
    # 29.9 is Overweight, so 24.95 does not fall through to Obese.
    if bmi < 18.5:
        return UNDERWEIGHT
    elif bmi <= 24.9:
        return HEALTHY
    elif bmi <= 29.9:
        return OVERWEIGHT
    return OBESE


def parse_measurement_value(text) -> Optional[float]:
    """
    Convert a raw input string to a positive float.

    Returns None for missing, blank, non-numeric, non-finite or
    non-positive input, which callers treat as "do not compute".
    """
    if text is None:
        return None

    text = str(text).strip()
    if not text:
        return None

    try:
        value = float(text)
    except ValueError:
        return None

    if not math.isfinite(value) or value <= 0:
        return None
    return value


def is_computable(weight: float, height: float) -> bool:
    """False when the pair over- or underflows to a non-finite BMI."""
    try:
        return math.isfinite(compute_bmi(weight, height))
    except ZeroDivisionError:
        return False


def format_bmi(bmi: float, places: int = 2) -> str:
    return f"{bmi:.{places}f}"
