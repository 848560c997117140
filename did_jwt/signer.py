"""
did-jwt Signer - Produces the signature segment of a JWT.

A Signer only knows how to sign bytes with a secp256k1 key. The
JWTSignerAlgorithm adapter turns that raw signature into the compact
(Jose) encoding required by the token's `alg`.
"""

from abc import ABC, abstractmethod

import coincurve

from did_jwt.codec import encode_segment
from did_jwt.config import ES256K, ES256K_R
from did_jwt.crypto import public_key_to_address
from did_jwt.did_document import clean_0x_prefix
from did_jwt.exceptions import UnsupportedAlgorithmError
from did_jwt.models import JwtHeader, SignatureData


class Signer(ABC):
    """Abstract interface for JWT signers."""

    @abstractmethod
    def sign_jwt(self, data: bytes) -> SignatureData:
        """Sign sha256(data) and return the signature with its recovery id."""
        pass


class KeyPairSigner(Signer):
    """
    Signs with a local secp256k1 private key.

    Example:
        >>> signer = KeyPairSigner("0x278a5de700e29faae8e40e366ec5012b5ec63d36ec77e8a2417154cc1d25383f")
        >>> signer.did
        'did:ethr:0x...'
    """

    def __init__(self, private_key: str):
        """
        Initialize the signer.

        Args:
            private_key: Hex encoded 32-byte private key, with or without 0x.

        Raises:
            ValueError: If the private key is missing or invalid.
        """
        if not private_key:
            raise ValueError("KeyPairSigner requires a hex encoded 'private_key'")

        try:
            self._key = coincurve.PrivateKey(bytes.fromhex(clean_0x_prefix(private_key)))
        except ValueError as e:
            raise ValueError(f"Invalid secp256k1 private key: {e}")

    @classmethod
    def generate(cls) -> "KeyPairSigner":
        """Create a signer around a fresh random key."""
        return cls(coincurve.PrivateKey().to_hex())

    def sign_jwt(self, data: bytes) -> SignatureData:
        compact = self._key.sign_recoverable(data)  # sha256 hasher
        return SignatureData(
            r=int.from_bytes(compact[0:32], "big"),
            s=int.from_bytes(compact[32:64], "big"),
            recovery=compact[64],
        )

    @property
    def private_key_hex(self) -> str:
        return self._key.to_hex()

    @property
    def public_key_hex(self) -> str:
        """Uncompressed public key, 0x04 prefixed."""
        return self._key.public_key.format(compressed=False).hex()

    @property
    def address(self) -> str:
        return public_key_to_address(self._key.public_key.format(compressed=False))

    @property
    def did(self) -> str:
        """The did:ethr identifier controlled by this key."""
        return f"did:ethr:{self.address}"


class JWTSignerAlgorithm:
    """Encodes a Signer's output according to the header's `alg`."""

    def __init__(self, header: JwtHeader):
        self.header = header

    def sign(self, signing_input: str, signer: Signer) -> str:
        """
        Sign the `header.payload` string and return the signature segment.

        Raises:
            UnsupportedAlgorithmError: If the header's alg cannot be produced.
        """
        if self.header.alg == ES256K:
            recoverable = False
        elif self.header.alg == ES256K_R:
            recoverable = True
        else:
            raise UnsupportedAlgorithmError(
                f"Unsupported algorithm for signing: {self.header.alg}", alg=self.header.alg
            )

        signature = signer.sign_jwt(signing_input.encode("utf-8"))
        return encode_segment(signature.to_jose(recoverable))
