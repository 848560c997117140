"""
Signature verification strategies, keyed by JWT `alg`.

Both strategies take the candidate keys from the issuer's DID document and
succeed when any one of them matches the signature.
"""

import logging
from typing import Callable, Dict, List, Optional

from did_jwt.config import ES256K, ES256K_R
from did_jwt.crypto import (
    ZERO_PUBLIC_KEY,
    normalize_public_key,
    public_key_to_address,
    recover_public_key,
    sha256,
    verify_signature,
)
from did_jwt.did_document import PublicKeyEntry, clean_0x_prefix
from did_jwt.exceptions import UnsupportedAlgorithmError
from did_jwt.models import SignatureData

logger = logging.getLogger(__name__)

VerificationStrategy = Callable[[List[PublicKeyEntry], SignatureData, bytes], bool]


def decode_public_key(entry: PublicKeyEntry) -> bytes:
    """
    Normalized public key of a document entry.

    Encodings are tried hex, base64, base58; the first that decodes wins.
    Entries with no decodable material yield ZERO_PUBLIC_KEY.
    """
    for material in entry.key_materials():
        try:
            return normalize_public_key(material.decode())
        except ValueError as e:
            logger.debug(f"Skipping undecodable key material in {entry.id}: {e}")
    return ZERO_PUBLIC_KEY


def entry_address(entry: PublicKeyEntry) -> Optional[str]:
    """
    Lowercase address of an entry, without the 0x prefix.

    None when the entry has neither an address nor decodable key material.
    """
    if entry.ethereum_address:
        return clean_0x_prefix(entry.ethereum_address).lower()
    public_key = decode_public_key(entry)
    if public_key == ZERO_PUBLIC_KEY:
        return None
    return clean_0x_prefix(public_key_to_address(public_key)).lower()


def verify_es256k(
    public_keys: List[PublicKeyEntry], signature: SignatureData, signing_input: bytes
) -> bool:
    """Plain ECDSA over sha256(signing_input) against each candidate key."""
    digest = sha256(signing_input)
    matches = [
        entry
        for entry in public_keys
        if verify_signature(digest, signature, decode_public_key(entry))
    ]
    logger.debug(f"ES256K: {len(matches)} of {len(public_keys)} keys verified")
    return len(matches) > 0


def verify_es256k_recoverable(
    public_keys: List[PublicKeyEntry], signature: SignatureData, signing_input: bytes
) -> bool:
    """Recover the signer's key and compare its address with each candidate's."""
    recovered = recover_public_key(sha256(signing_input), signature) or ZERO_PUBLIC_KEY
    recovered_address = clean_0x_prefix(public_key_to_address(recovered)).lower()

    matches = [entry for entry in public_keys if entry_address(entry) == recovered_address]
    logger.debug(
        f"ES256K-R: recovered 0x{recovered_address}, "
        f"{len(matches)} of {len(public_keys)} keys matched"
    )
    return len(matches) > 0


VERIFICATION_METHODS: Dict[str, VerificationStrategy] = {
    ES256K_R: verify_es256k_recoverable,
    ES256K: verify_es256k,
}


def is_supported(alg: str) -> bool:
    return alg in VERIFICATION_METHODS


def get_verification_method(alg: str) -> VerificationStrategy:
    """
    Raises:
        UnsupportedAlgorithmError: If no strategy is registered for `alg`.
    """
    try:
        return VERIFICATION_METHODS[alg]
    except KeyError:
        raise UnsupportedAlgorithmError(f"JWT algorithm '{alg}' not supported", alg=alg)
