"""
Score formatting utilities for trust verification results
Maps 0-100 trust scores to display strings, colors and warning flags
"""

from typing import Union
from urllib.parse import urlparse

# (minimum score, description, hex color), highest band first
TRUST_BANDS = [
    (80.0, "Very Trustworthy", "#4CAF50"),
    (60.0, "Trustworthy", "#8BC34A"),
    (40.0, "Somewhat Trustworthy", "#FFC107"),
    (20.0, "Questionable", "#FF9800"),
    (0.0, "Not Trustworthy", "#F44336"),
]


def _band(score: Union[float, int, None]):
    value = 0.0 if score is None else float(score)
    for minimum, description, color in TRUST_BANDS:
        if value >= minimum:
            return description, color
    return TRUST_BANDS[-1][1], TRUST_BANDS[-1][2]


def get_trust_score_description(score: Union[float, int]) -> str:
    """
    Get a human-readable description of a trust score

    Args:
        score: Trust score on 0-100 scale

    Returns:
        Description string (e.g., "Trustworthy")
    """
    return _band(score)[0]


def get_trust_score_color(score: Union[float, int]) -> str:
    """Hex color for a trust score, using the same bands as the description."""
    return _band(score)[1]


def format_score_display(score: Union[float, int], include_max: bool = True) -> str:
    """
    Format score for display with optional "/ 100" suffix

    Args:
        score: Score on 0-100 scale
        include_max: If True, append "/ 100" to the score

    Returns:
        Formatted score string (e.g., "72.5 / 100" or "72.5")
    """
    display = 0.0 if score is None else round(float(score), 1)
    if include_max:
        return f"{display} / 100"
    return str(display)


def is_below_threshold(score: Union[float, int], warning_threshold: Union[float, int]) -> bool:
    """True when content should be flagged to the user."""
    return float(score) < float(warning_threshold)


def extract_domain(url: str) -> str:
    """Hostname of a URL, or the input unchanged if it has none."""
    return urlparse(url).hostname or url
