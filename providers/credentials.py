"""Credential status mapping and a caching wrapper for credential providers.

Results are cached per identifier for a fixed TTL so repeated visits to the
same source do not hit the credential registry again.
"""
import logging
import time
from typing import Callable, Dict, Optional, Tuple

from providers.base import CredentialProvider
from scoring.types import CredentialStatus, CredentialVerificationResult

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 3600.0  # seconds


def map_credential_status(active: Optional[bool], revoked: Optional[bool] = None,
                          expired: Optional[bool] = None) -> CredentialStatus:
    """Collapse a registry's status flags into a single CredentialStatus.

    Precedence is active, revoked, expired; an explicitly inactive credential
    with no other flag is invalid, and no flags at all is unknown.
    """
    if active is True:
        return CredentialStatus.VALID
    if revoked is True:
        return CredentialStatus.REVOKED
    if expired is True:
        return CredentialStatus.EXPIRED
    if active is False:
        return CredentialStatus.INVALID
    return CredentialStatus.UNKNOWN


class CachingCredentialProvider(CredentialProvider):
    """Wraps a CredentialProvider with a per-identifier TTL cache.

    Usage:
        provider = CachingCredentialProvider(CheqdProvider(...), ttl=3600)
        result = await provider.verify('did:cheqd:testnet:abc')  # registry call
        result = await provider.verify('did:cheqd:testnet:abc')  # cached
    """

    def __init__(self, provider: CredentialProvider, ttl: float = DEFAULT_CACHE_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self._provider = provider
        self._ttl = ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[CredentialVerificationResult, float]] = {}

    @property
    def name(self) -> str:
        return f"CACHED_{self._provider.name}"

    @property
    def ttl(self) -> float:
        return self._ttl

    async def verify(self, identifier: str) -> CredentialVerificationResult:
        cached = self._get_from_cache(identifier)
        if cached is not None:
            logger.debug(f"Credential cache hit for {identifier}")
            return cached

        try:
            result = await self._provider.verify(identifier)
        except Exception as e:
            # Failures are not cached so the next visit retries the registry
            logger.error(f"{self._provider.name} credential verification failed for {identifier}: {e}")
            return CredentialVerificationResult(
                status=CredentialStatus.UNKNOWN,
                details={'error': f"Verification failed, using fallback: {e}"},
            )

        self._cache[identifier] = (result, self._clock())
        return result

    def _get_from_cache(self, identifier: str) -> Optional[CredentialVerificationResult]:
        entry = self._cache.get(identifier)
        if entry and (self._clock() - entry[1]) < self._ttl:
            return entry[0]
        return None

    def clear_expired_cache(self) -> int:
        """Drop expired entries. Returns the number removed."""
        now = self._clock()
        expired = [key for key, (_, stamp) in self._cache.items() if now - stamp >= self._ttl]
        for key in expired:
            del self._cache[key]
        if expired:
            logger.info(f"Cleared {len(expired)} expired credential cache entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._cache)
