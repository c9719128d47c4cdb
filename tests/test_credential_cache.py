"""
Tests for credential status mapping and the caching credential provider.
"""
import pytest

from providers.base import CredentialProvider
from providers.credentials import CachingCredentialProvider, map_credential_status
from scoring.types import CredentialStatus, CredentialVerificationResult


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingProvider(CredentialProvider):
    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail

    @property
    def name(self):
        return "FAKE"

    async def verify(self, identifier):
        self.calls += 1
        if self.fail:
            raise ConnectionError("registry unavailable")
        return CredentialVerificationResult(status="valid", issuer="did:cheqd:testnet:issuer")


class TestMapCredentialStatus:
    @pytest.mark.parametrize("flags,expected", [
        ((True, False, False), CredentialStatus.VALID),
        ((False, True, False), CredentialStatus.REVOKED),
        ((False, False, True), CredentialStatus.EXPIRED),
        ((False, True, True), CredentialStatus.REVOKED),
        ((False, False, False), CredentialStatus.INVALID),
        ((None, None, None), CredentialStatus.UNKNOWN),
    ])
    def test_flags(self, flags, expected):
        assert map_credential_status(*flags) == expected


class TestCachingCredentialProvider:
    @pytest.mark.asyncio
    async def test_second_lookup_is_cached(self):
        inner = CountingProvider()
        provider = CachingCredentialProvider(inner, ttl=60, clock=FakeClock())

        first = await provider.verify("did:cheqd:testnet:abc")
        second = await provider.verify("did:cheqd:testnet:abc")

        assert first is second
        assert inner.calls == 1
        assert provider.name == "CACHED_FAKE"

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        inner = CountingProvider()
        provider = CachingCredentialProvider(inner, ttl=60, clock=clock)

        await provider.verify("did:a")
        clock.now += 60
        await provider.verify("did:a")

        assert inner.calls == 2

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_unknown_and_is_not_cached(self):
        inner = CountingProvider(fail=True)
        provider = CachingCredentialProvider(inner, clock=FakeClock())

        result = await provider.verify("did:broken")
        assert result.status == CredentialStatus.UNKNOWN
        assert "error" in result.details
        assert len(provider) == 0

        await provider.verify("did:broken")
        assert inner.calls == 2

    @pytest.mark.asyncio
    async def test_clear_expired_cache(self):
        clock = FakeClock()
        provider = CachingCredentialProvider(CountingProvider(), ttl=100, clock=clock)

        await provider.verify("did:old")
        clock.now += 50
        await provider.verify("did:new")
        clock.now += 60

        assert provider.clear_expired_cache() == 1
        assert len(provider) == 1
