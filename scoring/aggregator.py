"""
Trust Aggregator
Responsible for combining individual verification factors into the overall
trust score, applying weights and normalization, and for keeping that score
consistent when a factor arrives after the result was published.
"""

import dataclasses
import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from scoring.factors import FactorBuilder, technical_analysis_score
from scoring.types import (
    AiContentAnalysisResult,
    CredentialStatus,
    CredentialVerificationResult,
    CrossValidationResult,
    Factor,
    MediaAnalysisResult,
    TextAnalysisResult,
    VerificationResult,
)
from scoring.weights import WeightConfig

logger = logging.getLogger(__name__)


def calculate_trust_score(factors: Iterable[Factor]) -> float:
    """
    Weighted average of factor contributions.

    Formula:
    Trust Score = Sum(Contribution * Weight) / Sum(Weights), clamped to 0-100

    Inverted factors contribute 100 - score. Returns 0 when the weights sum to 0.
    """
    total_score = 0.0
    total_weight = 0.0

    for factor in factors:
        total_score += factor.contribution * factor.weight
        total_weight += factor.weight

    if total_weight <= 0:
        return 0.0
    return max(0.0, min(100.0, total_score / total_weight))


class TrustAggregator:
    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        """
        Initialize aggregator with factor weights

        Args:
            weights: Partial or full weight mapping; unspecified keys use defaults
        """
        self.weights = WeightConfig(weights)
        self.factor_builder = FactorBuilder(self.weights)

    def configure(self, weights: Mapping[str, float]) -> None:
        """
        Merge new weights into the configuration.

        Only scores computed afterwards are affected. Raises InvalidConfiguration
        for negative, non-finite or unknown weights, leaving the old config active.
        """
        self.weights.update(weights)

    def compute(
        self,
        credential: Optional[CredentialVerificationResult],
        media: Optional[MediaAnalysisResult] = None,
        text: Optional[TextAnalysisResult] = None,
        cross_validation: Optional[CrossValidationResult] = None,
        community_rating: Optional[float] = None,
        content_url: str = "",
    ) -> VerificationResult:
        """Build a fresh VerificationResult from whatever signals are available."""
        tech_score = technical_analysis_score(media, text)

        if credential is None:
            logger.warning(f"No credential result for {content_url}, publishing empty verdict")
            return VerificationResult(
                trust_score=0.0,
                source_verified=False,
                technical_analysis_score=tech_score,
                factors=[Factor(
                    name="Verification Unavailable",
                    description="Source credentials could not be resolved",
                    score=0.0,
                    weight=0.0,
                    details="Credential verification failed; no trust factors could be computed",
                )],
                content_url=content_url,
                verification_timestamp=datetime.now(),
                community_rating=community_rating,
                cross_validation=cross_validation,
            )

        builder = self.factor_builder
        factors = [builder.source_verification(credential)]

        if media is not None or text is not None:
            factors.append(builder.technical_analysis(media, text))

        factors.append(builder.temporal_freshness(credential.issuance_date))

        if cross_validation is not None:
            factors.append(builder.cross_validation(cross_validation))

        if community_rating is not None:
            factors.append(builder.community_rating(community_rating))

        trust_score = calculate_trust_score(factors)
        logger.info(f"Computed trust score {trust_score:.1f} for {content_url} from {[f.name for f in factors]}")

        return VerificationResult(
            trust_score=trust_score,
            source_verified=credential.status == CredentialStatus.VALID,
            technical_analysis_score=tech_score,
            factors=factors,
            content_url=content_url,
            verification_timestamp=datetime.now(),
            community_rating=community_rating,
            credential_issuance_date=credential.issuance_date,
            cross_validation=cross_validation,
        )

    def merge_factor(self, result: VerificationResult, factor: Factor) -> VerificationResult:
        """
        Insert or replace a factor by name and recompute the trust score.

        A same-named factor keeps its position; a new one is appended.
        The result is mutated in place and returned.
        """
        score = max(0.0, min(100.0, float(factor.score)))
        if score != factor.score:
            logger.warning(f"Factor '{factor.name}' score {factor.score} outside 0-100, clamped to {score}")
            factor = dataclasses.replace(factor, score=score)

        for index, existing in enumerate(result.factors):
            if existing.name == factor.name:
                result.factors[index] = factor
                break
        else:
            result.factors.append(factor)

        previous = result.trust_score
        result.trust_score = calculate_trust_score(result.factors)
        result.verification_timestamp = datetime.now()
        logger.info(
            f"Merged factor '{factor.name}' into {result.content_url}: "
            f"trust score {previous:.1f} -> {result.trust_score:.1f}"
        )
        return result

    def merge_ai_content(self, result: VerificationResult, analysis: AiContentAnalysisResult) -> VerificationResult:
        """Merge a late AI-content detection into an already published result."""
        result.ai_content_analysis = analysis
        return self.merge_factor(result, self.factor_builder.ai_content(analysis))

    def recalculate(self, result: VerificationResult) -> VerificationResult:
        """Recompute the trust score of a result, e.g. one decoded from history."""
        result.trust_score = calculate_trust_score(result.factors)
        return result
