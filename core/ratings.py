# core/ratings.py
"""Rating scale conversion.

Ratings are shown as 0-5 stars in quarter steps and stored on a 0-10 scale.
"""
from typing import Optional, Union

Number = Union[int, float]

UI_MAX = 5
STORAGE_MAX = 10
UI_STEP = 0.25
SCALE_FACTOR = 2
UNRATED_PLACEHOLDER = "Not rated"


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def ui_to_storage(ui: Optional[Number]) -> Optional[float]:
    """Convert a 0-5 star rating to the 0-10 storage scale.

    The input is clamped to [0, 5] and snapped to the nearest quarter star first.
    """
    if ui is None:
        return None
    quantized = round(_clamp(float(ui), 0, UI_MAX) / UI_STEP) * UI_STEP
    return _clamp(quantized * SCALE_FACTOR, 0, STORAGE_MAX)


def storage_to_ui(stored: Optional[Number]) -> Optional[float]:
    """Convert a 0-10 stored rating back to 0-5 stars."""
    if stored is None:
        return None
    return _clamp(float(stored), 0, STORAGE_MAX) / SCALE_FACTOR


def _trim(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_rating(stored: Optional[Number], out_of_five: bool = False, decimals: int = 2) -> str:
    """Render a stored rating as "8/10" (or "4/5" with out_of_five)."""
    if stored is None:
        return UNRATED_PLACEHOLDER
    if out_of_five:
        return f"{_trim(storage_to_ui(stored), decimals)}/{UI_MAX}"
    return f"{_trim(_clamp(float(stored), 0, STORAGE_MAX), decimals)}/{STORAGE_MAX}"
