"""
secp256k1 primitives used by the verification strategies and the signer.

Public keys are passed around in their normalized form: the 64-byte
uncompressed point without the 0x04 prefix.
"""

import hashlib
import logging
from typing import Optional

import coincurve
from Crypto.Hash import keccak
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, encode_dss_signature

from did_jwt.models import SignatureData

logger = logging.getLogger(__name__)

PUBLIC_KEY_SIZE = 64

# Placeholder for keys that could not be decoded or recovered. It is not a
# curve point, so it never verifies and its address never matches a signer.
ZERO_PUBLIC_KEY = bytes(PUBLIC_KEY_SIZE)


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def normalize_public_key(key: bytes) -> bytes:
    """
    Bring a serialized public key to the 64-byte uncompressed form.

    Accepts 64-byte raw points, 65-byte 0x04-prefixed points and 33-byte
    compressed points. Anything else maps to ZERO_PUBLIC_KEY.
    """
    if len(key) == PUBLIC_KEY_SIZE:
        return key
    if len(key) == PUBLIC_KEY_SIZE + 1 and key[0] == 0x04:
        return key[1:]
    if len(key) == 33:
        try:
            return coincurve.PublicKey(key).format(compressed=False)[1:]
        except ValueError:
            logger.debug("Compressed public key is not on the curve")
            return ZERO_PUBLIC_KEY
    return ZERO_PUBLIC_KEY


def public_key_to_address(public_key: bytes) -> str:
    """Ethereum-style address: last 20 bytes of keccak256 over the raw point."""
    return "0x" + keccak256(normalize_public_key(public_key))[-20:].hex()


def recover_public_key(digest: bytes, signature: SignatureData) -> Optional[bytes]:
    """
    Recover the signer's normalized public key from a digest and signature.

    Returns:
        The 64-byte public key, or None when recovery fails.
    """
    recovery = signature.recovery if signature.recovery is not None else 0
    try:
        compact = signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")
        recovered = coincurve.PublicKey.from_signature_and_message(
            compact + bytes([recovery]), digest, hasher=None
        )
    except (ValueError, OverflowError) as e:
        logger.debug(f"Public key recovery failed: {e}")
        return None
    return recovered.format(compressed=False)[1:]


def verify_signature(digest: bytes, signature: SignatureData, public_key: bytes) -> bool:
    """Check a non-recoverable ECDSA signature over a sha256 digest."""
    try:
        point = ec.EllipticCurvePublicKey.from_encoded_point(
            ec.SECP256K1(), b"\x04" + normalize_public_key(public_key)
        )
    except ValueError:
        return False

    try:
        point.verify(
            encode_dss_signature(signature.r, signature.s),
            digest,
            ec.ECDSA(Prehashed(hashes.SHA256())),
        )
    except InvalidSignature:
        return False
    return True
