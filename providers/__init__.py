"""Pluggable signal providers consumed by the verification service."""

from .base import (
    AiContentDetector,
    CommunityRatingProvider,
    CredentialProvider,
    CrossValidationProvider,
    MediaAnalysisProvider,
    SignalProvider,
    TextAnalysisProvider,
)
from .credentials import CachingCredentialProvider, map_credential_status

__all__ = [
    "AiContentDetector",
    "CachingCredentialProvider",
    "CommunityRatingProvider",
    "CredentialProvider",
    "CrossValidationProvider",
    "MediaAnalysisProvider",
    "SignalProvider",
    "TextAnalysisProvider",
    "map_credential_status",
]
