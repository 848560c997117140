"""
Exceptions raised while issuing, decoding and verifying DID-signed JWTs.

Every failure is terminal for the token at hand. Context (issuer, algorithm
and a token fragment) is attached where it is known so callers can log a
useful diagnostic without re-parsing the token.
"""

import asyncio
from typing import Optional

NO_USABLE_KEYS = "no_usable_keys"
NOT_AUTHENTICATED = "not_authenticated"


def _fragment(token: Optional[str], limit: int = 32) -> Optional[str]:
    if token is None:
        return None
    return token if len(token) <= limit else token[:limit] + "..."


class DIDJWTError(Exception):
    """Base exception for did-jwt errors."""

    def __init__(
        self,
        message: str,
        issuer: Optional[str] = None,
        alg: Optional[str] = None,
        token: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.issuer = issuer
        self.alg = alg
        self.token = _fragment(token)

    def add_context(
        self,
        issuer: Optional[str] = None,
        alg: Optional[str] = None,
        token: Optional[str] = None,
    ) -> "DIDJWTError":
        """Fill in context that was not known where the error was raised."""
        self.issuer = self.issuer or issuer
        self.alg = self.alg or alg
        self.token = self.token or _fragment(token)
        return self

    def __str__(self) -> str:
        context = []
        if self.issuer:
            context.append(f"issuer={self.issuer}")
        if self.alg:
            context.append(f"alg={self.alg}")
        if self.token:
            context.append(f"token={self.token}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class InvalidJWTError(DIDJWTError):
    """Raised when a token fails decoding or verification."""

    pass


class MalformedTokenError(InvalidJWTError):
    """Raised when a token is not three dot-separated base64url segments."""

    pass


class InvalidHeaderError(InvalidJWTError):
    """Raised when the header segment is empty or not a usable JSON object."""

    pass


class InvalidPayloadError(InvalidJWTError):
    """Raised when the payload segment is empty or not a usable JSON object."""

    pass


class MalformedSignatureError(InvalidJWTError):
    """Raised when the signature segment does not hold a compact r || s [|| v]."""

    pass


class TokenNotYetValidError(InvalidJWTError):
    """Raised when `iat` lies further in the future than the allowed skew."""

    pass


class TokenExpiredError(InvalidJWTError):
    """Raised when `exp` lies further in the past than the allowed skew."""

    pass


class NoMatchingKeyError(InvalidJWTError):
    """
    Raised when the issuer's DID document has no key usable for the token.

    `reason` is NO_USABLE_KEYS when no key of a supported type exists, or
    NOT_AUTHENTICATED when such keys exist but none is listed under
    `authentication` and the caller required it.
    """

    def __init__(self, message: str, reason: str = NO_USABLE_KEYS, **context):
        super().__init__(message, **context)
        self.reason = reason


class InvalidSignatureError(InvalidJWTError):
    """Raised when no candidate key validates the signature."""

    pass


class UnsupportedAlgorithmError(DIDJWTError):
    """Raised when a header names an algorithm with no registered strategy."""

    pass


class ResolutionFailure(DIDJWTError):
    """Base for failures raised while resolving a DID document."""

    pass


class DIDResolutionError(ResolutionFailure):
    """Raised when no resolver handles a DID or the document is unusable."""

    pass


class ResolutionCancelled(asyncio.CancelledError):
    """
    Raised when the suspended DID resolution is cancelled mid-verification.

    Subclasses asyncio.CancelledError so the surrounding task is still
    reported as cancelled.
    """

    def __init__(self, issuer: Optional[str] = None):
        super().__init__(f"DID resolution cancelled for {issuer}")
        self.issuer = issuer
