"""
Compact JWT codec: segment splitting, base64url and Jose signature decoding.
"""

import re
from typing import List, Tuple, Union

from jwcrypto.common import base64url_decode, base64url_encode

from did_jwt.exceptions import MalformedSignatureError, MalformedTokenError
from did_jwt.models import SignatureData

_BASE64URL = re.compile(r"^[A-Za-z0-9_-]*$")

SIGNATURE_SIZE = 64
RECOVERABLE_SIGNATURE_SIZE = 65


def split_token(token: str) -> Tuple[str, str, str]:
    """
    Split a token into its header, payload and signature segments.

    Raises:
        MalformedTokenError: If the token does not have exactly three parts.
    """
    if not isinstance(token, str):
        raise MalformedTokenError("Token must be a string")

    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(
            f"Token must have 3 dot-separated parts, found {len(parts)}", token=token
        )
    return parts[0], parts[1], parts[2]


def join_segments(segments: List[str]) -> str:
    return ".".join(segments)


def encode_segment(data: Union[bytes, str]) -> str:
    """base64url without padding."""
    return base64url_encode(data)


def decode_segment(segment: str) -> bytes:
    """
    Decode an unpadded base64url segment. An empty segment decodes to b"".

    Raises:
        MalformedTokenError: On characters outside the base64url alphabet or a bad length.
    """
    if not _BASE64URL.match(segment):
        raise MalformedTokenError(f"Segment is not base64url encoded: {segment[:16]!r}")
    try:
        return base64url_decode(segment)
    except ValueError as e:
        raise MalformedTokenError(f"Segment is not base64url encoded: {e}")


def decode_jose(signature: bytes) -> SignatureData:
    """
    Interpret compact signature bytes as r || s [|| v].

    The recovery byte may be given as 0/1 or 27/28; it is normalized to 0/1.

    Raises:
        MalformedSignatureError: If the signature is not 64 or 65 bytes long.
    """
    if len(signature) not in (SIGNATURE_SIZE, RECOVERABLE_SIGNATURE_SIZE):
        raise MalformedSignatureError(
            f"Signature must be {SIGNATURE_SIZE} or {RECOVERABLE_SIGNATURE_SIZE} bytes, "
            f"got {len(signature)}"
        )

    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")

    recovery = None
    if len(signature) == RECOVERABLE_SIGNATURE_SIZE:
        recovery = signature[64]
        if recovery >= 27:
            recovery -= 27

    return SignatureData(r=r, s=s, recovery=recovery)


def decode_signature(segment: str) -> SignatureData:
    """Decode a base64url signature segment straight into SignatureData."""
    try:
        raw = decode_segment(segment)
    except MalformedTokenError as e:
        raise MalformedSignatureError(e.message)
    return decode_jose(raw)


def signing_input(token: str) -> bytes:
    """The exact bytes that were signed: everything before the last dot."""
    return token.rsplit(".", 1)[0].encode("utf-8")
