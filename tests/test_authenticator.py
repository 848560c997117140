"""
Unit tests for authenticator resolution.
"""

import pytest

from did_jwt import ES256K, ES256K_R, ResolverRegistry
from did_jwt.authenticator import resolve_authenticator
from did_jwt.did_document import (
    ECDSA_PUBLIC_KEY_SECP256K1,
    SECP256K1_SIGNATURE_VERIFICATION_KEY_2018,
    SECP256K1_VERIFICATION_KEY_2018,
    PublicKeyEntry,
)
from did_jwt.exceptions import (
    NO_USABLE_KEYS,
    NOT_AUTHENTICATED,
    DIDResolutionError,
    NoMatchingKeyError,
    UnsupportedAlgorithmError,
)

from conftest import CountingResolver, key_document

DID = "did:web:keys.example.com"


def make_registry(document):
    resolver = CountingResolver({document.id: document})
    return ResolverRegistry([resolver]), resolver


def key(fragment, key_type=SECP256K1_VERIFICATION_KEY_2018):
    return PublicKeyEntry(id=f"{DID}#{fragment}", type=key_type, public_key_hex="04" + "11" * 64)


class TestResolveAuthenticator:
    """Tests for resolve_authenticator()."""

    @pytest.mark.asyncio
    async def test_filters_supported_key_types(self):
        """Only secp256k1 key types are returned."""
        document = key_document(
            DID,
            [
                key("a", SECP256K1_VERIFICATION_KEY_2018),
                key("b", "Ed25519VerificationKey2018"),
                key("c", SECP256K1_SIGNATURE_VERIFICATION_KEY_2018),
                key("d", ECDSA_PUBLIC_KEY_SECP256K1),
                key("e", "RsaVerificationKey2018"),
            ],
        )
        registry, _ = make_registry(document)

        keys = await resolve_authenticator(registry, ES256K, DID, auth=False)

        assert [k.id for k in keys] == [f"{DID}#a", f"{DID}#c", f"{DID}#d"]

    @pytest.mark.asyncio
    async def test_auth_restricts_to_authentication_keys(self):
        """With auth, only keys listed under authentication are returned."""
        document = key_document(DID, [key("a"), key("b")], authenticated_ids=[f"{DID}#b"])
        registry, _ = make_registry(document)

        keys = await resolve_authenticator(registry, ES256K_R, DID, auth=True)

        assert [k.id for k in keys] == [f"{DID}#b"]

    @pytest.mark.asyncio
    async def test_without_auth_ignores_authentication(self):
        """Without auth, keys missing from authentication are still returned."""
        document = key_document(DID, [key("a"), key("b")], authenticated_ids=[])
        registry, _ = make_registry(document)

        keys = await resolve_authenticator(registry, ES256K_R, DID, auth=False)

        assert len(keys) == 2

    @pytest.mark.asyncio
    async def test_no_usable_keys(self):
        """A document without secp256k1 keys raises NoMatchingKeyError."""
        document = key_document(DID, [key("a", "Ed25519VerificationKey2018")])
        registry, _ = make_registry(document)

        with pytest.raises(NoMatchingKeyError, match="does not have public keys for ES256K") as exc:
            await resolve_authenticator(registry, ES256K, DID, auth=False)

        assert exc.value.reason == NO_USABLE_KEYS
        assert exc.value.issuer == DID

    @pytest.mark.asyncio
    async def test_empty_document(self):
        """A document without any key raises NoMatchingKeyError."""
        registry, _ = make_registry(key_document(DID, []))

        with pytest.raises(NoMatchingKeyError) as exc:
            await resolve_authenticator(registry, ES256K_R, DID, auth=True)

        assert exc.value.reason == NO_USABLE_KEYS

    @pytest.mark.asyncio
    async def test_no_authentication_keys(self):
        """Usable keys outside authentication raise a distinct NoMatchingKeyError."""
        document = key_document(DID, [key("a")], authenticated_ids=[f"{DID}#other"])
        registry, _ = make_registry(document)

        with pytest.raises(NoMatchingKeyError, match="suitable for authenticating") as exc:
            await resolve_authenticator(registry, ES256K_R, DID, auth=True)

        assert exc.value.reason == NOT_AUTHENTICATED

    @pytest.mark.asyncio
    async def test_unsupported_algorithm_before_resolution(self):
        """Unsupported algorithms are rejected without resolving the DID."""
        registry, resolver = make_registry(key_document(DID, [key("a")]))

        with pytest.raises(UnsupportedAlgorithmError):
            await resolve_authenticator(registry, "HS256", DID, auth=False)

        assert resolver.calls == []

    @pytest.mark.asyncio
    async def test_resolution_failure_propagates(self):
        """Resolver errors propagate unchanged."""
        registry, _ = make_registry(key_document(DID, [key("a")]))

        with pytest.raises(DIDResolutionError):
            await resolve_authenticator(registry, ES256K, "did:web:missing.example.com", auth=False)
