"""
did-jwt Tools - Create, decode and verify DID-signed JWTs.

Verification of a token runs through:

    decode -> time check -> authenticator resolution -> signature check

Resolution of the issuer's DID document is the only step that awaits I/O.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jwcrypto.common import json_encode

from did_jwt import config
from did_jwt.algorithms import get_verification_method
from did_jwt.authenticator import resolve_authenticator
from did_jwt.clock import SystemTimeProvider, TimeProvider
from did_jwt.codec import (
    decode_jose,
    decode_segment,
    encode_segment,
    join_segments,
    signing_input,
    split_token,
)
from did_jwt.did_document import PublicKeyEntry
from did_jwt.exceptions import (
    DIDJWTError,
    InvalidHeaderError,
    InvalidPayloadError,
    InvalidSignatureError,
    MalformedSignatureError,
    MalformedTokenError,
    ResolutionCancelled,
    TokenExpiredError,
    TokenNotYetValidError,
)
from did_jwt.models import JwtHeader, JwtPayload, reject_non_finite
from did_jwt.resolvers import ResolverRegistry, register_default_resolvers
from did_jwt.signer import JWTSignerAlgorithm, Signer

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Result of one token in a batch verification."""

    token_index: int
    is_valid: bool
    payload: Optional[JwtPayload]
    error: Optional[str] = None


def _decode_text(segment: str, error_cls: type, name: str) -> str:
    if not segment:
        raise error_cls(f"{name} cannot be empty")
    try:
        return decode_segment(segment).decode("utf-8")
    except MalformedTokenError as e:
        raise error_cls(f"{name} is not base64url encoded: {e.message}")
    except UnicodeDecodeError as e:
        raise error_cls(f"{name} is not valid UTF-8: {e}")


class JWTTools:
    """
    Issues and verifies JWTs whose signer is identified by a DID.

    Example:
        >>> tools = JWTTools()
        >>> signer = KeyPairSigner(private_key_hex)
        >>> token = tools.create_jwt({"hello": "world"}, signer.did, signer)
        >>> payload = await tools.verify(token)
        >>> payload["hello"]
        'world'
    """

    def __init__(
        self,
        time_provider: Optional[TimeProvider] = None,
        registry: Optional[ResolverRegistry] = None,
        register_defaults: bool = True,
    ):
        """
        Initialize the tools.

        Args:
            time_provider: Clock used for `iat`/`exp`; defaults to the wall clock.
            registry: Resolver registry shared by the calls of this instance.
            register_defaults: Add the ethr and https resolvers to the registry
                               for methods it cannot resolve yet.
        """
        self.time_provider = time_provider or SystemTimeProvider()
        self.registry = registry if registry is not None else ResolverRegistry()
        if register_defaults:
            register_default_resolvers(self.registry)

    def _now_seconds(self) -> int:
        return self.time_provider.now_ms() // 1000

    # =========================================================================
    # Issuance
    # =========================================================================

    def create_jwt(
        self,
        payload: Dict[str, Any],
        issuer_did: str,
        signer: Signer,
        expires_in_seconds: Optional[int] = None,
        algorithm: Optional[str] = None,
    ) -> str:
        """
        Create a signed JWT.

        Args:
            payload: Claims of the token. The dict is copied, never modified.
            issuer_did: DID written to `iss`, replacing any `iss` in the payload.
                        It is NOT checked for format nor for a match with the signer.
            signer: Produces the signature; it should control `issuer_did`.
            expires_in_seconds: Validity when the payload has no `exp`
                                (default: DIDJWT_DEFAULT_VALIDITY_SECONDS).
            algorithm: ES256K or ES256K-R (default: DIDJWT_DEFAULT_ALGORITHM).

        Returns:
            The compact `header.payload.signature` token.

        Raises:
            UnsupportedAlgorithmError: If `algorithm` is not supported.
        """
        if expires_in_seconds is None:
            expires_in_seconds = config.DEFAULT_JWT_VALIDITY_SECONDS
        header = JwtHeader(alg=algorithm or config.DEFAULT_ALGORITHM)

        claims = dict(payload)
        iat = self._now_seconds()
        claims["iat"] = iat
        claims["exp"] = payload["exp"] if payload.get("exp") is not None else iat + expires_in_seconds
        claims["iss"] = issuer_did

        encoded = join_segments([encode_segment(header.to_json()), encode_segment(json_encode(claims))])
        signature = JWTSignerAlgorithm(header).sign(encoded, signer)

        logger.debug(f"Created {header.alg} JWT for {issuer_did}, exp={claims['exp']}")
        return join_segments([encoded, signature])

    # =========================================================================
    # Decoding
    # =========================================================================

    def _decode_parts(self, token: str) -> Tuple[JwtHeader, Dict[str, Any], bytes]:
        try:
            encoded_header, encoded_payload, encoded_signature = split_token(token)

            header = JwtHeader.from_json(_decode_text(encoded_header, InvalidHeaderError, "Header"))
            payload_text = _decode_text(encoded_payload, InvalidPayloadError, "Payload")

            try:
                claims = json.loads(payload_text, parse_constant=reject_non_finite)
            except ValueError as e:
                raise InvalidPayloadError(f"Unable to parse the JWT payload: {e}")
            if not isinstance(claims, dict):
                raise InvalidPayloadError("JWT payload must be a JSON object")

            if not encoded_signature:
                raise MalformedSignatureError("Signature cannot be empty")
            try:
                signature = decode_segment(encoded_signature)
            except MalformedTokenError as e:
                raise MalformedSignatureError(e.message)
        except DIDJWTError as e:
            e.add_context(token=token)
            raise

        return header, claims, signature

    def decode(self, token: str) -> Tuple[JwtHeader, JwtPayload, bytes]:
        """
        Decode a token without verifying it.

        Returns:
            Tuple of (header, typed payload, raw signature bytes)

        Raises:
            MalformedTokenError: If the token is not three base64url segments.
            InvalidHeaderError: If the header is empty or unparsable.
            InvalidPayloadError: If the payload is empty or unparsable.
            MalformedSignatureError: If the signature segment is empty or not base64url.
        """
        header, claims, signature = self._decode_parts(token)
        try:
            payload = JwtPayload.from_dict(claims)
        except DIDJWTError as e:
            e.add_context(token=token, alg=header.alg)
            raise
        return header, payload, signature

    def decode_raw(self, token: str) -> Tuple[JwtHeader, Dict[str, Any], bytes]:
        """
        Decode a token keeping the payload as a plain dict.

        Useful when the recognized JwtPayload claims are not enough.
        """
        return self._decode_parts(token)

    # =========================================================================
    # Verification
    # =========================================================================

    async def resolve_authenticator(
        self, alg: str, issuer: str, auth: bool = False
    ) -> List[PublicKeyEntry]:
        """Keys of `issuer`'s DID document usable to verify an `alg` signature."""
        return await resolve_authenticator(self.registry, alg, issuer, auth)

    async def verify(self, token: str, auth: bool = False) -> JwtPayload:
        """
        Verify a token and return its payload.

        Args:
            token: The compact JWT.
            auth: Require the signing key to be listed under the issuer's
                  `authentication` relation.

        Returns:
            The typed payload of a valid token.

        Raises:
            InvalidJWTError: Or one of its subclasses, when the token is rejected.
            UnsupportedAlgorithmError: If the header's alg is not supported.
            ResolutionFailure: Or any resolver error, propagated unchanged.
            ResolutionCancelled: If the DID resolution was cancelled.
        """
        header, payload, signature_bytes = self.decode(token)
        try:
            signature = decode_jose(signature_bytes)
        except DIDJWTError as e:
            e.add_context(token=token, alg=header.alg, issuer=payload.iss)
            raise

        now = self._now_seconds()
        skew = config.TIME_SKEW_SECONDS

        if payload.iat is not None and payload.iat > now + skew:
            logger.debug(f"Rejecting token issued in the future: iat={payload.iat}, now={now}")
            raise TokenNotYetValidError(
                f"JWT not valid yet (issued in the future) iat: {payload.iat}",
                issuer=payload.iss,
                alg=header.alg,
                token=token,
            )

        if payload.exp is not None and payload.exp < now - skew:
            logger.debug(f"Rejecting expired token: exp={payload.exp}, now={now}")
            raise TokenExpiredError(
                f"JWT has expired: exp: {payload.exp}", issuer=payload.iss, alg=header.alg, token=token
            )

        try:
            verification = get_verification_method(header.alg)
        except DIDJWTError as e:
            e.add_context(issuer=payload.iss, token=token)
            raise

        if not payload.iss:
            raise InvalidPayloadError("JWT payload has no 'iss'", alg=header.alg, token=token)

        try:
            public_keys = await self.resolve_authenticator(header.alg, payload.iss, auth)
        except asyncio.CancelledError:
            logger.debug(f"Resolution of {payload.iss} cancelled")
            raise ResolutionCancelled(payload.iss)
        except DIDJWTError as e:
            e.add_context(token=token)
            raise

        if verification(public_keys, signature, signing_input(token)):
            return payload

        logger.warning(f"Signature invalid for JWT issued by {payload.iss}")
        raise InvalidSignatureError(
            f"Signature invalid for JWT. DID document for {payload.iss} "
            f"does not have any matching public keys",
            issuer=payload.iss,
            alg=header.alg,
            token=token,
        )

    async def verify_batch(
        self, tokens: List[str], auth: bool = False, max_concurrent: int = 50
    ) -> List[VerificationResult]:
        """
        Verify multiple tokens concurrently.

        Args:
            tokens: List of tokens to verify.
            auth: Passed to verify() for every token.
            max_concurrent: Maximum concurrent verifications.

        Returns:
            List of VerificationResult objects, in the order of `tokens`.
        """
        semaphore = asyncio.Semaphore(max_concurrent)

        async def verify_one(index: int, token: str) -> VerificationResult:
            async with semaphore:
                try:
                    payload = await self.verify(token, auth=auth)
                    return VerificationResult(token_index=index, is_valid=True, payload=payload)
                except Exception as e:
                    return VerificationResult(
                        token_index=index, is_valid=False, payload=None, error=str(e)
                    )

        tasks = [verify_one(i, token) for i, token in enumerate(tokens)]
        results = await asyncio.gather(*tasks)

        return list(results)
