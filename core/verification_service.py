"""Verification Service orchestrates signal providers, the trust aggregator and history."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Awaitable, Dict, Mapping, Optional

from config.settings import SETTINGS
from data import store
from providers.base import (
    AiContentDetector,
    CommunityRatingProvider,
    CredentialProvider,
    CrossValidationProvider,
    MediaAnalysisProvider,
    TextAnalysisProvider,
)
from providers.credentials import CachingCredentialProvider
from scoring.aggregator import TrustAggregator
from scoring.types import CredentialStatus, CredentialVerificationResult, Factor, VerificationResult
from utils.score_formatter import is_below_threshold

logger = logging.getLogger(__name__)


class VerificationService:
    """High level orchestrator for verifying content as it is browsed.

    Each content URL owns one VerificationResult. Writes to a result (initial
    publish and late merges) are serialised with one asyncio.Lock per URL.
    Only the most recently published `result_cache_size` results are kept.
    """

    def __init__(
        self,
        aggregator: TrustAggregator,
        credential_provider: CredentialProvider,
        media_provider: Optional[MediaAnalysisProvider] = None,
        text_provider: Optional[TextAnalysisProvider] = None,
        ai_detector: Optional[AiContentDetector] = None,
        cross_validator: Optional[CrossValidationProvider] = None,
        community_provider: Optional[CommunityRatingProvider] = None,
        engine=None,
        settings: Optional[dict] = None,
    ):
        self.aggregator = aggregator
        self.credential_provider = credential_provider
        self.media_provider = media_provider
        self.text_provider = text_provider
        self.ai_detector = ai_detector
        self.cross_validator = cross_validator
        self.community_provider = community_provider
        self.engine = engine
        self.settings = settings if settings is not None else SETTINGS

        weights = self.settings.get("factor_weights")
        if weights:
            self.aggregator.configure(weights)

        self._results: OrderedDict[str, VerificationResult] = OrderedDict()
        self._locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def analyze_content(self, url: str, identifier: str, media: Any = None,
                              text: Optional[str] = None) -> VerificationResult:
        """Resolve all available signals for a URL and publish its initial verdict."""
        enable_media = self.settings.get("enable_deepfake_detection", True)
        enable_text = self.settings.get("enable_text_analysis", True)

        credential, media_result, text_result, cross_validation, community_rating = await asyncio.gather(
            self._verify_credential(identifier),
            self._resolve("media analysis", self.media_provider,
                          lambda p: p.analyze(media), enabled=enable_media and media is not None),
            self._resolve("text analysis", self.text_provider,
                          lambda p: p.analyze(text), enabled=enable_text and bool(text)),
            self._resolve("cross validation", self.cross_validator, lambda p: p.validate(url)),
            self._resolve("community rating", self.community_provider, lambda p: p.rating(url)),
        )

        async with self._lock_for(url):
            result = self.aggregator.compute(
                credential,
                media=media_result,
                text=text_result,
                cross_validation=cross_validation,
                community_rating=community_rating,
                content_url=url,
            )
            self._store_result(url, result)

        await asyncio.to_thread(self._record_history, result)
        return result

    async def apply_ai_analysis(self, url: str) -> Optional[VerificationResult]:
        """Merge a late AI-content detection into the published result for a URL."""
        if url not in self._results:
            logger.info(f"No published result for {url}, skipping AI content analysis")
            return None

        analysis = await self._resolve("AI content detection", self.ai_detector, lambda p: p.detect(url))
        if analysis is None:
            return self._results.get(url)

        async with self._lock_for(url):
            result = self._results.get(url)
            if result is None:
                logger.info(f"Result for {url} was evicted before AI content analysis finished")
                return None
            return self.aggregator.merge_ai_content(result, analysis)

    async def merge_signal(self, url: str, factor: Factor) -> Optional[VerificationResult]:
        """Merge any late-arriving factor into the published result for a URL."""
        async with self._lock_for(url):
            result = self._results.get(url)
            if result is None:
                logger.warning(f"Cannot merge '{factor.name}': no published result for {url}")
                return None
            return self.aggregator.merge_factor(result, factor)

    def update_weights(self, weights: Mapping[str, float]) -> Dict[str, float]:
        """Apply new factor weights and persist them. Invalid weights raise before anything is saved."""
        self.aggregator.configure(weights)
        current = self.aggregator.weights.as_dict()
        if self.engine is not None:
            with store.session_scope(self.engine) as session:
                store.save_config(session, "factor_weights", current)
        return current

    def restore_weights(self) -> Dict[str, float]:
        """Load persisted factor weights, if any, into the aggregator."""
        if self.engine is not None:
            with store.session_scope(self.engine) as session:
                saved = store.load_config(session, "factor_weights")
            if saved:
                self.aggregator.configure(saved)
                logger.info("Restored persisted factor weights")
        return self.aggregator.weights.as_dict()

    def get_result(self, url: str) -> Optional[VerificationResult]:
        return self._results.get(url)

    def evict(self, url: str) -> bool:
        """Forget the published result for a URL, e.g. when its tab closes."""
        removed = self._results.pop(url, None) is not None
        self._discard_lock(url)
        return removed

    def should_warn(self, result: VerificationResult) -> bool:
        """True when the trust score falls below the configured warning threshold."""
        return is_below_threshold(result.trust_score, self.settings.get("warning_threshold", 60))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _lock_for(self, url: str) -> asyncio.Lock:
        lock = self._locks.get(url)
        if lock is None:
            lock = self._locks[url] = asyncio.Lock()
        return lock

    def _discard_lock(self, url: str) -> None:
        lock = self._locks.get(url)
        if lock is not None and not lock.locked():
            del self._locks[url]

    def _store_result(self, url: str, result: VerificationResult) -> None:
        self._results[url] = result
        self._results.move_to_end(url)
        limit = int(self.settings.get("result_cache_size", 100))
        while len(self._results) > limit:
            oldest, _ = self._results.popitem(last=False)
            self._discard_lock(oldest)
            logger.debug(f"Evicted cached result for {oldest}")

    async def _verify_credential(self, identifier: str) -> CredentialVerificationResult:
        try:
            return await self.credential_provider.verify(identifier)
        except Exception as e:
            logger.error(f"Credential verification failed for {identifier}: {e}")
            return CredentialVerificationResult(
                status=CredentialStatus.UNKNOWN,
                details={"error": "Verification failed, using fallback"},
            )

    async def _resolve(self, label: str, provider, call, enabled: bool = True):
        """Await one optional signal; a missing provider or a failure yields None."""
        if provider is None or not enabled:
            return None
        try:
            awaitable: Awaitable = call(provider)
            return await awaitable
        except Exception as e:
            logger.warning(f"{label} via {provider.name} failed, omitting signal: {e}")
            return None

    def _record_history(self, result: VerificationResult) -> None:
        if self.engine is None:
            return
        with store.session_scope(self.engine) as session:
            store.save_result_to_history(session, result, limit=self.settings.get("history_limit"))


def create_verification_service(
    credential_provider: CredentialProvider,
    settings: Optional[dict] = None,
    engine=None,
    **providers,
) -> VerificationService:
    """Build a service wired from settings.

    The aggregator takes the configured factor weights and the credential
    provider is wrapped in a cache using `credential_cache_ttl`.
    """
    settings = settings if settings is not None else SETTINGS
    cached = CachingCredentialProvider(credential_provider, ttl=settings.get("credential_cache_ttl", 3600))
    return VerificationService(
        aggregator=TrustAggregator(),
        credential_provider=cached,
        engine=engine,
        settings=settings,
        **providers,
    )
