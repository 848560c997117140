"""
did-jwt - JWTs signed by Decentralized Identifiers.

This package issues and verifies compact ES256K / ES256K-R signed tokens
whose issuer is a DID, resolving the issuer's keys from its DID Document.
"""

__version__ = "0.4.0"

from .config import ES256K, ES256K_R, DEFAULT_JWT_VALIDITY_SECONDS, TIME_SKEW_SECONDS
from .exceptions import (
    DIDJWTError,
    InvalidJWTError,
    MalformedTokenError,
    InvalidHeaderError,
    InvalidPayloadError,
    MalformedSignatureError,
    TokenNotYetValidError,
    TokenExpiredError,
    NoMatchingKeyError,
    InvalidSignatureError,
    UnsupportedAlgorithmError,
    ResolutionFailure,
    DIDResolutionError,
    ResolutionCancelled,
)
from .models import JwtHeader, JwtPayload, SignatureData
from .did_document import DIDDocument, PublicKeyEntry, AuthenticationEntry
from .clock import TimeProvider, SystemTimeProvider, FixedTimeProvider
from .signer import Signer, KeyPairSigner, JWTSignerAlgorithm
from .resolvers import (
    DIDResolver,
    ResolverRegistry,
    EthrDIDResolver,
    HttpsDIDResolver,
    StaticDIDResolver,
    register_default_resolvers,
)
from .tools import JWTTools, VerificationResult

__all__ = [
    "__version__",
    # Algorithms and defaults
    "ES256K",
    "ES256K_R",
    "DEFAULT_JWT_VALIDITY_SECONDS",
    "TIME_SKEW_SECONDS",
    # Core
    "JWTTools",
    "VerificationResult",
    "JwtHeader",
    "JwtPayload",
    "SignatureData",
    # Signing
    "Signer",
    "KeyPairSigner",
    "JWTSignerAlgorithm",
    # DID resolution
    "DIDDocument",
    "PublicKeyEntry",
    "AuthenticationEntry",
    "DIDResolver",
    "ResolverRegistry",
    "EthrDIDResolver",
    "HttpsDIDResolver",
    "StaticDIDResolver",
    "register_default_resolvers",
    # Time
    "TimeProvider",
    "SystemTimeProvider",
    "FixedTimeProvider",
    # Errors
    "DIDJWTError",
    "InvalidJWTError",
    "MalformedTokenError",
    "InvalidHeaderError",
    "InvalidPayloadError",
    "MalformedSignatureError",
    "TokenNotYetValidError",
    "TokenExpiredError",
    "NoMatchingKeyError",
    "InvalidSignatureError",
    "UnsupportedAlgorithmError",
    "ResolutionFailure",
    "DIDResolutionError",
    "ResolutionCancelled",
]
