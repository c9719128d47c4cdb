from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional
from enum import Enum

from dateutil import parser as date_parser


class CredentialStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    REVOKED = "revoked"
    EXPIRED = "expired"
    UNKNOWN = "unknown"


@dataclass
class CredentialVerificationResult:
    """Outcome of resolving a source's decentralized credential"""
    status: CredentialStatus
    issuer: Optional[str] = None
    issuance_date: Optional[datetime] = None
    revocation_status: Optional[bool] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.status = CredentialStatus(self.status)


@dataclass
class MediaAnalysisResult:
    manipulation_probability: float  # 0.0-1.0
    confidence: float = 0.0          # 0.0-1.0
    manipulation_type: Optional[str] = None  # deepfake, photoshop, ai-generated, other, none
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TextAnalysisResult:
    misinformation_probability: float  # 0.0-1.0
    sentiment: Optional[float] = None  # -1.0 to 1.0
    language: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CrossValidationResult:
    sources_checked: int
    sources_corroborating: int
    corroborating_sources: List[str] = field(default_factory=list)


@dataclass
class AiContentAnalysisResult:
    """AI-generation estimate for a page (higher score = more AI content)"""
    is_ai_generated: bool
    score: float                 # 0-100
    content_types: List[str] = field(default_factory=list)  # text, image, audio, document, article, video
    detection_confidence: float = 0.0
    details: str = ""
    content_locations: List[str] = field(default_factory=list)


AI_CONTENT_ANALYSIS = "AI Content Analysis"

# Factors where a higher score means less trust
INVERTED_FACTOR_NAMES = {AI_CONTENT_ANALYSIS}


@dataclass
class Factor:
    """One named, weighted dimension of trust"""
    name: str
    description: str
    score: float                   # 0-100, the value shown to the user
    weight: float                  # weight in effect when computed
    details: Optional[str] = None
    icon: Optional[str] = None
    inverted: bool = False         # contributes 100 - score to the trust score

    def __post_init__(self):
        if self.name in INVERTED_FACTOR_NAMES:
            self.inverted = True

    @property
    def contribution(self) -> float:
        """Score as it enters the weighted average."""
        return 100.0 - self.score if self.inverted else self.score


@dataclass
class VerificationResult:
    """Aggregated trust verdict for one content URL"""
    trust_score: float
    source_verified: bool
    technical_analysis_score: float
    factors: List[Factor]
    content_url: str
    verification_timestamp: datetime
    community_rating: Optional[float] = None
    credential_issuance_date: Optional[datetime] = None
    cross_validation: Optional[CrossValidationResult] = None
    ai_content_analysis: Optional[AiContentAnalysisResult] = None

    def get_factor(self, name: str) -> Optional[Factor]:
        for factor in self.factors:
            if factor.name == name:
                return factor
        return None

    def to_record(self) -> Dict[str, Any]:
        """Plain dict for storage, with timestamps as ISO-8601 strings."""
        return {
            "trust_score": self.trust_score,
            "source_verified": self.source_verified,
            "technical_analysis_score": self.technical_analysis_score,
            "community_rating": self.community_rating,
            "credential_issuance_date": _to_iso(self.credential_issuance_date),
            "cross_validation": vars(self.cross_validation).copy() if self.cross_validation else None,
            "factors": [vars(f).copy() for f in self.factors],
            "content_url": self.content_url,
            "verification_timestamp": _to_iso(self.verification_timestamp),
            "ai_content_analysis": vars(self.ai_content_analysis).copy() if self.ai_content_analysis else None,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "VerificationResult":
        cross_validation = record.get("cross_validation")
        ai_analysis = record.get("ai_content_analysis")
        return cls(
            trust_score=float(record.get("trust_score", 0.0)),
            source_verified=bool(record.get("source_verified", False)),
            technical_analysis_score=float(record.get("technical_analysis_score", 50.0)),
            factors=[Factor(**f) for f in record.get("factors", [])],
            content_url=record.get("content_url", ""),
            verification_timestamp=_from_iso(record.get("verification_timestamp")) or datetime.now(),
            community_rating=record.get("community_rating"),
            credential_issuance_date=_from_iso(record.get("credential_issuance_date")),
            cross_validation=CrossValidationResult(**cross_validation) if cross_validation else None,
            ai_content_analysis=AiContentAnalysisResult(**ai_analysis) if ai_analysis else None,
        )


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _from_iso(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return date_parser.isoparse(value)
