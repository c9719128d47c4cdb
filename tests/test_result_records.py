"""Tests for VerificationResult plain-record encoding used by history storage."""
from datetime import datetime, timedelta, timezone

from scoring.aggregator import TrustAggregator
from scoring.types import (
    AiContentAnalysisResult,
    CredentialVerificationResult,
    CrossValidationResult,
    VerificationResult,
)


def build_result():
    aggregator = TrustAggregator()
    result = aggregator.compute(
        CredentialVerificationResult(status="valid", issuance_date=datetime(2024, 3, 1, 9, 30)),
        cross_validation=CrossValidationResult(sources_checked=5, sources_corroborating=4,
                                               corroborating_sources=["Source 1", "Source 2"]),
        community_rating=55,
        content_url="https://news.example.org/story",
    )
    aggregator.merge_ai_content(result, AiContentAnalysisResult(is_ai_generated=False, score=12,
                                                                content_types=["text"], details="Low"))
    return result


def test_timestamps_encoded_as_iso_strings():
    record = build_result().to_record()
    assert record["credential_issuance_date"] == "2024-03-01T09:30:00"
    assert isinstance(record["verification_timestamp"], str)
    datetime.fromisoformat(record["verification_timestamp"])


def test_record_decodes_back_to_result():
    original = build_result()
    decoded = VerificationResult.from_record(original.to_record())

    assert decoded.trust_score == original.trust_score
    assert decoded.credential_issuance_date == datetime(2024, 3, 1, 9, 30)
    assert decoded.verification_timestamp == original.verification_timestamp
    assert [f.name for f in decoded.factors] == [f.name for f in original.factors]
    assert decoded.get_factor("AI Content Analysis").inverted is True
    assert decoded.cross_validation.corroborating_sources == ["Source 1", "Source 2"]
    assert decoded.ai_content_analysis.score == 12


def test_decoded_result_can_be_recalculated():
    original = build_result()
    decoded = VerificationResult.from_record(original.to_record())
    decoded.trust_score = 0
    TrustAggregator().recalculate(decoded)
    assert decoded.trust_score == original.trust_score


def test_timezone_offsets_survive():
    issued = datetime(2024, 1, 2, 3, 4, tzinfo=timezone(timedelta(hours=2)))
    record = {"content_url": "u", "credential_issuance_date": issued.isoformat(),
              "verification_timestamp": "2024-01-05T00:00:00Z"}
    decoded = VerificationResult.from_record(record)
    assert decoded.credential_issuance_date == issued
    assert decoded.verification_timestamp.tzinfo is not None
    assert decoded.factors == []


def test_records_without_inverted_flag_still_invert_ai_factor():
    original = build_result()
    record = original.to_record()
    for factor in record["factors"]:
        factor.pop("inverted")

    decoded = VerificationResult.from_record(record)
    decoded.trust_score = 0
    TrustAggregator().recalculate(decoded)

    assert decoded.get_factor("AI Content Analysis").inverted is True
    assert decoded.get_factor("Source Verification").inverted is False
    assert decoded.trust_score == original.trust_score
