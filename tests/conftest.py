"""
Shared pytest fixtures for did-jwt tests.
"""

import pytest

from did_jwt import (
    DIDDocument,
    FixedTimeProvider,
    JWTTools,
    KeyPairSigner,
    ResolverRegistry,
    StaticDIDResolver,
)
from did_jwt.did_document import (
    SECP256K1_SIGNATURE_AUTHENTICATION_2018,
    SECP256K1_VERIFICATION_KEY_2018,
    AuthenticationEntry,
    PublicKeyEntry,
)

PRIVATE_KEY = "278a5de700e29faae8e40e366ec5012b5ec63d36ec77e8a2417154cc1d25383f"

NOW_MS = 1_700_000_000_000
NOW = NOW_MS // 1000


class CountingResolver(StaticDIDResolver):
    """StaticDIDResolver that records every resolve() call."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.calls = []

    async def resolve(self, did):
        self.calls.append(did)
        return await super().resolve(did)


def key_document(did, keys, authenticated_ids=()):
    """Build a DID document listing `keys`, with `authenticated_ids` under authentication."""
    return DIDDocument(
        id=did,
        public_key=list(keys),
        authentication=[
            AuthenticationEntry(type=SECP256K1_SIGNATURE_AUTHENTICATION_2018, public_key=key_id)
            for key_id in authenticated_ids
        ],
    )


@pytest.fixture
def signer() -> KeyPairSigner:
    """Signer with a fixed test key."""
    return KeyPairSigner(PRIVATE_KEY)


@pytest.fixture
def other_signer() -> KeyPairSigner:
    """Signer with an unrelated fresh key."""
    return KeyPairSigner.generate()


@pytest.fixture
def clock() -> FixedTimeProvider:
    """Deterministic clock."""
    return FixedTimeProvider(NOW_MS)


@pytest.fixture
def issuer_did() -> str:
    return "did:web:issuer.example.com"


@pytest.fixture
def issuer_document(signer, issuer_did) -> DIDDocument:
    """Document carrying the signer's public key as hex, listed for authentication."""
    key_id = f"{issuer_did}#keys-1"
    return key_document(
        issuer_did,
        [
            PublicKeyEntry(
                id=key_id,
                type=SECP256K1_VERIFICATION_KEY_2018,
                owner=issuer_did,
                public_key_hex=signer.public_key_hex,
            )
        ],
        authenticated_ids=[key_id],
    )


@pytest.fixture
def resolver(issuer_document) -> CountingResolver:
    return CountingResolver({issuer_document.id: issuer_document})


@pytest.fixture
def registry(resolver) -> ResolverRegistry:
    return ResolverRegistry([resolver])


@pytest.fixture
def tools(clock, registry) -> JWTTools:
    """JWTTools with a fixed clock and the static test resolver."""
    return JWTTools(time_provider=clock, registry=registry, register_defaults=False)


@pytest.fixture
def sample_payload() -> dict:
    """Sample payload for signing tests."""
    return {"hello": "world", "scope": ["read", "list"]}
