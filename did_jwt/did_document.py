"""
DID Document model.

Documents are produced by resolvers and only read by the verification
pipeline. Two document shapes are understood:

    legacy:  {"publicKey": [...], "authentication": [{"type": ..., "publicKey": "<key id>"}]}
    current: {"verificationMethod": [...], "authentication": ["<key id>" | {embedded method}]}
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import base58

# Key type tags usable for ES256K / ES256K-R signatures
SECP256K1_VERIFICATION_KEY_2018 = "Secp256k1VerificationKey2018"
SECP256K1_SIGNATURE_VERIFICATION_KEY_2018 = "Secp256k1SignatureVerificationKey2018"
ECDSA_PUBLIC_KEY_SECP256K1 = "EcdsaPublicKeySecp256k1"

SUPPORTED_KEY_TYPES = (
    SECP256K1_VERIFICATION_KEY_2018,
    SECP256K1_SIGNATURE_VERIFICATION_KEY_2018,
    ECDSA_PUBLIC_KEY_SECP256K1,
)

SECP256K1_SIGNATURE_AUTHENTICATION_2018 = "Secp256k1SignatureAuthentication2018"


def clean_0x_prefix(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


# =============================================================================
# Key Material
# =============================================================================


@dataclass(frozen=True)
class HexKey:
    value: str

    def decode(self) -> bytes:
        return bytes.fromhex(clean_0x_prefix(self.value))


@dataclass(frozen=True)
class Base64Key:
    value: str

    def decode(self) -> bytes:
        # Accept both the standard and the url-safe alphabets, padded or not
        text = self.value.replace("-", "+").replace("_", "/")
        text += "=" * (-len(text) % 4)
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 key material: {e}")


@dataclass(frozen=True)
class Base58Key:
    value: str

    def decode(self) -> bytes:
        return base58.b58decode(self.value)


KeyMaterial = Union[HexKey, Base64Key, Base58Key]


# =============================================================================
# Document Entries
# =============================================================================


@dataclass
class PublicKeyEntry:
    """A public key listed in a DID Document."""

    id: str
    type: str
    owner: Optional[str] = None
    ethereum_address: Optional[str] = None
    public_key_hex: Optional[str] = None
    public_key_base64: Optional[str] = None
    public_key_base58: Optional[str] = None

    def key_materials(self) -> List[KeyMaterial]:
        """Populated encodings, in decoding priority order: hex, base64, base58."""
        materials: List[KeyMaterial] = []
        if self.public_key_hex:
            materials.append(HexKey(self.public_key_hex))
        if self.public_key_base64:
            materials.append(Base64Key(self.public_key_base64))
        if self.public_key_base58:
            materials.append(Base58Key(self.public_key_base58))
        return materials

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PublicKeyEntry":
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            owner=data.get("owner") or data.get("controller"),
            ethereum_address=data.get("ethereumAddress"),
            public_key_hex=data.get("publicKeyHex"),
            public_key_base64=data.get("publicKeyBase64"),
            public_key_base58=data.get("publicKeyBase58"),
        )

    def to_json(self) -> Dict[str, Any]:
        data = {"id": self.id, "type": self.type}
        optional = {
            "owner": self.owner,
            "ethereumAddress": self.ethereum_address,
            "publicKeyHex": self.public_key_hex,
            "publicKeyBase64": self.public_key_base64,
            "publicKeyBase58": self.public_key_base58,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass
class AuthenticationEntry:
    """Reference from the `authentication` relation to a public key id."""

    type: str
    public_key: str


@dataclass
class DIDDocument:
    """Parsed DID Document."""

    id: str
    public_key: List[PublicKeyEntry] = field(default_factory=list)
    authentication: List[AuthenticationEntry] = field(default_factory=list)
    service: List[Dict[str, Any]] = field(default_factory=list)
    context: Optional[Any] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DIDDocument":
        """Parse a DID Document from JSON."""
        keys = [
            PublicKeyEntry.from_json(entry)
            for entry in list(data.get("publicKey", [])) + list(data.get("verificationMethod", []))
            if isinstance(entry, dict)
        ]

        authentication = []
        for entry in data.get("authentication", []):
            if isinstance(entry, str):
                authentication.append(AuthenticationEntry(type="", public_key=entry))
            elif isinstance(entry, dict) and "publicKey" in entry:
                authentication.append(
                    AuthenticationEntry(type=entry.get("type", ""), public_key=entry["publicKey"])
                )
            elif isinstance(entry, dict) and "id" in entry:
                # Embedded verification method
                keys.append(PublicKeyEntry.from_json(entry))
                authentication.append(
                    AuthenticationEntry(type=entry.get("type", ""), public_key=entry["id"])
                )

        return cls(
            id=data.get("id", ""),
            public_key=keys,
            authentication=authentication,
            service=data.get("service", []),
            context=data.get("@context"),
        )

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.context is not None:
            data["@context"] = self.context
        data["id"] = self.id
        data["publicKey"] = [key.to_json() for key in self.public_key]
        data["authentication"] = [
            {"type": auth.type, "publicKey": auth.public_key} for auth in self.authentication
        ]
        if self.service:
            data["service"] = self.service
        return data

    def authentication_key_ids(self) -> List[str]:
        return [auth.public_key for auth in self.authentication]
