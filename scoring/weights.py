"""
Factor weight configuration for the trust aggregator.

Weights are relative: the aggregator divides by the sum of the weights of the
factors actually present, so they do not need to add up to 1.
"""

import logging
import math
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = {
    'source_verification': 0.35,
    'technical_analysis': 0.25,
    'community_rating': 0.15,
    'temporal_freshness': 0.15,
    'cross_validation': 0.10,
    'ai_content_analysis': 0.25,
}

# camelCase keys used by stored extension configs
WEIGHT_KEY_ALIASES = {
    'sourceVerification': 'source_verification',
    'technicalAnalysis': 'technical_analysis',
    'communityRating': 'community_rating',
    'temporalFreshness': 'temporal_freshness',
    'crossValidation': 'cross_validation',
    'aiContentAnalysis': 'ai_content_analysis',
}


class InvalidConfiguration(ValueError):
    """Raised when a weight or setting cannot be applied."""


class WeightConfig:
    """Weight mapping owned by a single aggregator."""

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self._weights: Dict[str, float] = dict(DEFAULT_WEIGHTS)
        if weights:
            self.update(weights)

    def __getitem__(self, key: str) -> float:
        return self._weights[key]

    def as_dict(self) -> Dict[str, float]:
        return dict(self._weights)

    def update(self, weights: Mapping[str, float]) -> None:
        """
        Merge a partial or full mapping into the current weights.

        The whole update is validated before anything is applied; on error
        the previous weights stay active.
        """
        validated = {}
        for key, value in weights.items():
            name = WEIGHT_KEY_ALIASES.get(key, key)
            if name not in DEFAULT_WEIGHTS:
                raise InvalidConfiguration(f"Unknown weight key '{key}'")
            validated[name] = _validate_weight(name, value)

        merged = dict(self._weights)
        merged.update(validated)
        self._weights = merged
        logger.info(f"Updated factor weights: {validated}")


def _validate_weight(name: str, value) -> float:
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Weight '{name}' must be a number, got {value!r}")
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"Weight '{name}' must be a number, got {value!r}")
    if not math.isfinite(weight):
        raise InvalidConfiguration(f"Weight '{name}' must be finite, got {value!r}")
    if weight < 0:
        raise InvalidConfiguration(f"Weight '{name}' must be >= 0, got {value!r}")
    return weight
