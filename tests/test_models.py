"""
Unit tests for the header and payload models.
"""

import json

import pytest

from did_jwt import ES256K, ES256K_R, JwtHeader, JwtPayload
from did_jwt.exceptions import InvalidHeaderError, InvalidPayloadError


class TestJwtHeader:
    """Tests for JwtHeader."""

    def test_defaults(self):
        """The default header is a recoverable-signature JWT."""
        header = JwtHeader()
        assert header.alg == ES256K_R
        assert header.typ == "JWT"

    def test_to_json(self):
        """to_json() emits compact, sorted JSON."""
        assert JwtHeader(alg=ES256K).to_json() == '{"alg":"ES256K","typ":"JWT"}'

    def test_from_json_keeps_extras(self):
        """Unrecognized header fields are preserved."""
        header = JwtHeader.from_json('{"alg":"ES256K","typ":"JWT","kid":"k1"}')
        assert header.alg == ES256K
        assert header.extras == {"kid": "k1"}
        assert json.loads(header.to_json())["kid"] == "k1"

    def test_from_json_missing_alg(self):
        """A header without alg is invalid."""
        with pytest.raises(InvalidHeaderError):
            JwtHeader.from_json('{"typ":"JWT"}')

    def test_from_json_not_object(self):
        """A header must be a JSON object."""
        with pytest.raises(InvalidHeaderError):
            JwtHeader.from_json('["ES256K"]')

    def test_from_json_garbage(self):
        """Unparsable JSON is an invalid header."""
        with pytest.raises(InvalidHeaderError):
            JwtHeader.from_json("not json")

    def test_from_json_non_finite(self):
        """NaN and Infinity are not JSON and make the header invalid."""
        with pytest.raises(InvalidHeaderError, match="non-finite"):
            JwtHeader.from_json('{"alg": "ES256K", "x": NaN}')

    def test_immutable(self):
        """Headers cannot be modified after construction."""
        header = JwtHeader()
        with pytest.raises(AttributeError):
            header.alg = ES256K


class TestJwtPayload:
    """Tests for JwtPayload."""

    def test_from_dict(self):
        """Recognized claims become attributes, the rest goes to extras."""
        payload = JwtPayload.from_dict(
            {"iss": "did:ethr:0xabc", "iat": 10, "exp": 20, "sub": "bob", "hello": "world"}
        )
        assert payload.iss == "did:ethr:0xabc"
        assert payload.iat == 10
        assert payload.exp == 20
        assert payload.sub == "bob"
        assert payload.extras == {"hello": "world"}
        assert payload["hello"] == "world"

    def test_to_dict_round_trip(self):
        """to_dict() returns the decoded claims map."""
        claims = {"iss": "did:ethr:0xabc", "iat": 10, "custom": {"nested": True}}
        assert JwtPayload.from_dict(claims).to_dict() == claims

    def test_missing_times(self):
        """Absent time claims are None."""
        payload = JwtPayload.from_dict({})
        assert payload.iat is None
        assert payload.exp is None
        assert payload.get("iss") is None

    def test_whole_float_times(self):
        """Whole-valued floats are read as seconds."""
        assert JwtPayload.from_dict({"exp": 20.0}).exp == 20

    @pytest.mark.parametrize("value", [20.9, 300.5, float("inf"), float("-inf"), float("nan")])
    def test_fractional_or_non_finite_time(self, value):
        """Fractional and non-finite time claims are invalid, not truncated."""
        with pytest.raises(InvalidPayloadError, match="whole number of seconds"):
            JwtPayload.from_dict({"iat": value})

    @pytest.mark.parametrize("value", ["soon", True, [1]])
    def test_non_numeric_time(self, value):
        """Non-numeric time claims are invalid."""
        with pytest.raises(InvalidPayloadError):
            JwtPayload.from_dict({"exp": value})

    def test_non_string_issuer(self):
        """iss must be a string."""
        with pytest.raises(InvalidPayloadError):
            JwtPayload.from_dict({"iss": 42})
