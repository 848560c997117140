"""
Typed views of the JWT header, payload and signature.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jwcrypto.common import json_encode

from did_jwt.config import ES256K_R
from did_jwt.exceptions import InvalidHeaderError, InvalidPayloadError

JWT_TYPE = "JWT"


@dataclass(frozen=True)
class JwtHeader:
    """The JOSE header of a token."""

    alg: str = ES256K_R
    typ: str = JWT_TYPE
    extras: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data["typ"] = self.typ
        data["alg"] = self.alg
        return data

    def to_json(self) -> str:
        return json_encode(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "JwtHeader":
        """
        Parse a header segment.

        Raises:
            InvalidHeaderError: If the text is not a JSON object with a string `alg`.
        """
        try:
            data = json.loads(text, parse_constant=reject_non_finite)
        except ValueError as e:
            raise InvalidHeaderError(f"Unable to parse the JWT header: {e}")

        if not isinstance(data, dict):
            raise InvalidHeaderError("JWT header must be a JSON object")

        alg = data.pop("alg", None)
        if not isinstance(alg, str) or not alg:
            raise InvalidHeaderError("JWT header is missing 'alg'")

        typ = data.pop("typ", JWT_TYPE)
        return cls(alg=alg, typ=typ, extras=data)


def reject_non_finite(constant: str) -> Any:
    """`parse_constant` hook for json.loads: NaN and Infinity are not JSON."""
    raise ValueError(f"non-finite number {constant} is not allowed")


def _optional_seconds(data: Dict[str, Any], claim: str) -> Optional[int]:
    value = data.get(claim)
    if value is None:
        return None
    # bool is an int subclass and never a valid timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPayloadError(f"Claim '{claim}' must be a number of seconds, got {value!r}")
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise InvalidPayloadError(f"Claim '{claim}' must be a whole number of seconds, got {value!r}")
    return int(value)


@dataclass
class JwtPayload:
    """
    Typed view of the JWT claims.

    Recognized claims become attributes; everything else is kept in `extras`
    so that `to_dict()` returns the same map that was decoded.
    """

    iss: Optional[str] = None
    sub: Optional[str] = None
    aud: Any = None
    iat: Optional[int] = None
    exp: Optional[int] = None
    nbf: Optional[int] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    KNOWN_CLAIMS = ("iss", "sub", "aud", "iat", "exp", "nbf")

    def __getitem__(self, claim: str) -> Any:
        return self.to_dict()[claim]

    def get(self, claim: str, default: Any = None) -> Any:
        return self.to_dict().get(claim, default)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        for claim in self.KNOWN_CLAIMS:
            value = getattr(self, claim)
            if value is not None:
                data[claim] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JwtPayload":
        """
        Build a typed payload from a decoded claims map.

        Raises:
            InvalidPayloadError: If a time claim is not numeric or `iss` is not a string.
        """
        iss = data.get("iss")
        if iss is not None and not isinstance(iss, str):
            raise InvalidPayloadError(f"Claim 'iss' must be a string, got {iss!r}")

        return cls(
            iss=iss,
            sub=data.get("sub"),
            aud=data.get("aud"),
            iat=_optional_seconds(data, "iat"),
            exp=_optional_seconds(data, "exp"),
            nbf=_optional_seconds(data, "nbf"),
            extras={k: v for k, v in data.items() if k not in cls.KNOWN_CLAIMS},
        )


@dataclass(frozen=True)
class SignatureData:
    """An ECDSA signature as integers, with the optional recovery id (0 or 1)."""

    r: int
    s: int
    recovery: Optional[int] = None

    def to_jose(self, recoverable: bool) -> bytes:
        """Compact encoding: r || s, followed by the recovery byte when requested."""
        raw = self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big")
        if recoverable:
            raw += bytes([self.recovery or 0])
        return raw
