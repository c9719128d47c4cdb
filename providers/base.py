"""Signal provider interfaces for trust verification.

Each provider resolves one kind of signal asynchronously. Implementations may
raise on failure; the verification service degrades a failed signal to an
omitted one (or to an unknown credential) instead of propagating the error.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from scoring.types import (
    AiContentAnalysisResult,
    CredentialVerificationResult,
    CrossValidationResult,
    MediaAnalysisResult,
    TextAnalysisResult,
)


class SignalProvider(ABC):
    """Common base for all signal providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging (e.g., 'CHEQD', 'DEEPFAKE')."""
        pass


class CredentialProvider(SignalProvider):
    """Resolves the decentralized credential behind a content source."""

    @abstractmethod
    async def verify(self, identifier: str) -> CredentialVerificationResult:
        """Verify the credential for an identifier (usually a DID).

        Raises:
            Exception: If the credential registry cannot be reached
        """
        pass


class MediaAnalysisProvider(SignalProvider):
    @abstractmethod
    async def analyze(self, media: Any) -> MediaAnalysisResult:
        pass


class TextAnalysisProvider(SignalProvider):
    @abstractmethod
    async def analyze(self, text: str) -> TextAnalysisResult:
        pass


class AiContentDetector(SignalProvider):
    """Estimates how much of a page is AI generated. Typically slower than other signals."""

    @abstractmethod
    async def detect(self, url: str) -> AiContentAnalysisResult:
        pass


class CrossValidationProvider(SignalProvider):
    @abstractmethod
    async def validate(self, url: str) -> CrossValidationResult:
        pass


class CommunityRatingProvider(SignalProvider):
    @abstractmethod
    async def rating(self, url: str) -> Optional[float]:
        """Community rating 0-100, or None when nobody has rated the content."""
        pass
