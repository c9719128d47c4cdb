"""
Factor Builder
Turns individual verification signals into 0-100 scored Factors using the
aggregator's weight configuration.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional

from scoring.types import (
    AI_CONTENT_ANALYSIS,
    AiContentAnalysisResult,
    CredentialStatus,
    CredentialVerificationResult,
    CrossValidationResult,
    Factor,
    MediaAnalysisResult,
    TextAnalysisResult,
)
from scoring.weights import WeightConfig

logger = logging.getLogger(__name__)

SOURCE_VERIFICATION = "Source Verification"
TECHNICAL_ANALYSIS = "Technical Analysis"
TEMPORAL_FRESHNESS = "Temporal Freshness"
CROSS_VALIDATION = "Cross Validation"
COMMUNITY_RATING = "Community Rating"

# Revoked ranks below unknown: a credential that was found and revoked is
# more suspicious than none being found at all.
CREDENTIAL_STATUS_SCORES = {
    CredentialStatus.VALID: (100.0, "Source has valid credentials"),
    CredentialStatus.EXPIRED: (50.0, "Source has expired credentials"),
    CredentialStatus.UNKNOWN: (30.0, "Source credentials could not be verified"),
    CredentialStatus.REVOKED: (10.0, "Source credentials have been revoked"),
    CredentialStatus.INVALID: (0.0, "Source has invalid credentials"),
}

# Visual manipulation counts for more than textual framing
MEDIA_BLEND_WEIGHT = 0.6
TEXT_BLEND_WEIGHT = 0.4
NO_ANALYSIS_SCORE = 50.0

FRESHNESS_DECAY_DAYS = 30.0
SECONDS_PER_DAY = 86400.0


def temporal_score(issuance_date: Optional[datetime], now: Optional[datetime] = None) -> float:
    """
    Exponential freshness decay of a credential, 0.0-1.0.

    Formula: exp(-age_days / 30), so freshness halves roughly every 20.8 days.
    No issuance date scores 0 (unverifiable is treated as stale).
    """
    if issuance_date is None:
        return 0.0
    age_days = _age_in_days(issuance_date, now)
    return math.exp(-age_days / FRESHNESS_DECAY_DAYS)


def technical_analysis_score(media: Optional[MediaAnalysisResult] = None,
                             text: Optional[TextAnalysisResult] = None) -> float:
    """Blend of inverted media-manipulation and text-misinformation probabilities (0-100)."""
    media_score = _inverted_percentage(media.manipulation_probability) if media else None
    text_score = _inverted_percentage(text.misinformation_probability) if text else None

    if media_score is not None and text_score is not None:
        return media_score * MEDIA_BLEND_WEIGHT + text_score * TEXT_BLEND_WEIGHT
    if media_score is not None:
        return media_score
    if text_score is not None:
        return text_score
    return NO_ANALYSIS_SCORE


def _inverted_percentage(probability: float) -> float:
    probability = max(0.0, min(1.0, float(probability)))
    return 100.0 - probability * 100.0


def _age_in_days(issuance_date: datetime, now: Optional[datetime]) -> float:
    if now is None:
        now = datetime.now(timezone.utc) if issuance_date.tzinfo else datetime.now()
    # Future issuance dates count as brand new
    return max(0.0, (now - issuance_date).total_seconds() / SECONDS_PER_DAY)


class FactorBuilder:
    """Builds one Factor per signal type, weighted from a WeightConfig"""

    def __init__(self, weights: WeightConfig):
        self.weights = weights

    def source_verification(self, credential: CredentialVerificationResult) -> Factor:
        score, details = CREDENTIAL_STATUS_SCORES[credential.status]
        return Factor(
            name=SOURCE_VERIFICATION,
            description="Verification of content source using decentralized credentials",
            score=score,
            weight=self.weights['source_verification'],
            details=details,
        )

    def technical_analysis(self, media: Optional[MediaAnalysisResult] = None,
                           text: Optional[TextAnalysisResult] = None) -> Factor:
        parts = []
        if media:
            parts.append(f"Media manipulation probability: {media.manipulation_probability * 100:.1f}%.")
            if media.manipulation_type and media.manipulation_type != "none":
                parts.append(f"Detected {media.manipulation_type}.")
        if text:
            parts.append(f"Text misinformation probability: {text.misinformation_probability * 100:.1f}%.")

        return Factor(
            name=TECHNICAL_ANALYSIS,
            description="AI-powered analysis of media and text content",
            score=technical_analysis_score(media, text),
            weight=self.weights['technical_analysis'],
            details=" ".join(parts) or None,
        )

    def temporal_freshness(self, issuance_date: Optional[datetime],
                           now: Optional[datetime] = None) -> Factor:
        if issuance_date is not None:
            days = round(_age_in_days(issuance_date, now))
            details = f"Credential issued {days} days ago"
        else:
            details = "No issuance date available"

        return Factor(
            name=TEMPORAL_FRESHNESS,
            description="Recency of the credential issuance",
            score=temporal_score(issuance_date, now) * 100.0,
            weight=self.weights['temporal_freshness'],
            details=details,
        )

    def cross_validation(self, cross_validation: CrossValidationResult) -> Factor:
        checked = cross_validation.sources_checked
        corroborating = cross_validation.sources_corroborating

        if checked > 0:
            score = max(0.0, min(100.0, corroborating / checked * 100.0))
            details = f"{corroborating} out of {checked} sources corroborate this content"
        else:
            score = 0.0
            details = "No cross-validation sources available"

        return Factor(
            name=CROSS_VALIDATION,
            description="Verification against other trusted sources",
            score=score,
            weight=self.weights['cross_validation'],
            details=details,
        )

    def community_rating(self, rating: float) -> Factor:
        score = max(0.0, min(100.0, float(rating)))
        if score != rating:
            logger.warning(f"Community rating {rating} outside 0-100, clamped to {score}")
        return Factor(
            name=COMMUNITY_RATING,
            description="Rating provided by the community",
            score=score,
            weight=self.weights['community_rating'],
            details=f"Community rating: {score:.1f}/100",
        )

    def ai_content(self, analysis: AiContentAnalysisResult) -> Factor:
        # Displayed raw; the aggregate uses 100 - score
        return Factor(
            name=AI_CONTENT_ANALYSIS,
            description="Detection of AI-generated content",
            score=max(0.0, min(100.0, float(analysis.score))),
            weight=self.weights['ai_content_analysis'],
            details=analysis.details or None,
            inverted=True,
        )
