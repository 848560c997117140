"""
Tests for the did-jwt command line interface.
"""

import json
import sys

from did_jwt import cli

from conftest import PRIVATE_KEY


def run_cli(monkeypatch, *argv) -> int:
    monkeypatch.delenv("DIDJWT_DID", raising=False)
    monkeypatch.setattr(sys, "argv", ["did-jwt", *argv])
    return cli.main()


class TestCli:
    """Tests for the CLI commands."""

    def test_keygen_env(self, monkeypatch, capsys):
        """keygen --env prints shell exports."""
        assert run_cli(monkeypatch, "keygen", "--env") == 0
        out = capsys.readouterr().out
        assert "export DIDJWT_DID='did:ethr:0x" in out
        assert "export DIDJWT_PRIVATE_KEY=" in out

    def test_sign_then_decode(self, monkeypatch, capsys, signer):
        """A signed token decodes back to its payload."""
        assert run_cli(monkeypatch, "sign", '{"hello": "world"}', "--key", PRIVATE_KEY) == 0
        token = capsys.readouterr().out.strip()

        assert run_cli(monkeypatch, "decode", token) == 0
        decoded = json.loads(capsys.readouterr().out)
        assert decoded["header"]["alg"] == "ES256K-R"
        assert decoded["payload"]["hello"] == "world"
        assert decoded["payload"]["iss"] == signer.did

    def test_sign_requires_key(self, monkeypatch, capsys):
        """sign fails without a private key."""
        monkeypatch.delenv("DIDJWT_PRIVATE_KEY", raising=False)
        assert run_cli(monkeypatch, "sign", "{}") == 1
        assert "Missing private key" in capsys.readouterr().err

    def test_sign_rejects_non_object(self, monkeypatch, capsys):
        """sign only accepts JSON objects."""
        assert run_cli(monkeypatch, "sign", "[1]", "--key", PRIVATE_KEY) == 1

    def test_decode_malformed(self, monkeypatch, capsys):
        """decode reports malformed tokens."""
        assert run_cli(monkeypatch, "decode", "abc.def") == 1
        assert "3 dot-separated parts" in capsys.readouterr().err

    def test_verify_ethr_token(self, monkeypatch, capsys):
        """verify accepts a fresh did:ethr token offline."""
        assert run_cli(monkeypatch, "sign", '{"hello": "world"}', "--key", PRIVATE_KEY) == 0
        token = capsys.readouterr().out.strip()

        assert run_cli(monkeypatch, "verify", token, "--json") == 0
        result = json.loads(capsys.readouterr().out)
        assert result["valid"] is True
        assert result["payload"]["hello"] == "world"

    def test_verify_invalid(self, monkeypatch, capsys):
        """verify exits with 1 for an invalid token."""
        assert run_cli(monkeypatch, "verify", "abc.def", "--json") == 1
        assert json.loads(capsys.readouterr().out)["valid"] is False
