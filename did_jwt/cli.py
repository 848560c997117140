"""
did-jwt Command Line Interface.

Provides commands for generating a did:ethr identity, signing payloads,
and decoding or verifying tokens.
"""

import argparse
import asyncio
import json
import os
import sys
import logging

from did_jwt import config
from did_jwt.exceptions import DIDJWTError
from did_jwt.signer import KeyPairSigner
from did_jwt.tools import JWTTools


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def cmd_keygen(args: argparse.Namespace) -> int:
    """Generate a new secp256k1 key and its did:ethr identifier."""
    signer = KeyPairSigner.generate()

    if args.env:
        print(f"export DIDJWT_DID='{signer.did}'")
        print(f"export DIDJWT_PRIVATE_KEY='{signer.private_key_hex}'")
    else:
        print(f"DID:         {signer.did}")
        print(f"Address:     {signer.address}")
        print(f"Public key:  {signer.public_key_hex}")
        print(f"Private key: {signer.private_key_hex}")
    return 0


def cmd_sign(args: argparse.Namespace) -> int:
    """Sign a JSON payload."""
    private_key = args.key or os.environ.get('DIDJWT_PRIVATE_KEY')

    if not private_key:
        print("Error: Missing private key. Set DIDJWT_PRIVATE_KEY or use --key", file=sys.stderr)
        return 1

    try:
        payload = json.loads(args.payload)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON payload: {e}", file=sys.stderr)
        return 1
    if not isinstance(payload, dict):
        print("Error: Payload must be a JSON object", file=sys.stderr)
        return 1

    try:
        signer = KeyPairSigner(private_key)
        did = args.did or os.environ.get('DIDJWT_DID') or signer.did
        token = JWTTools(register_defaults=False).create_jwt(
            payload, did, signer, expires_in_seconds=args.expires_in, algorithm=args.alg
        )
    except (ValueError, DIDJWTError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(token)
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode a token without verifying it."""
    try:
        header, payload, _ = JWTTools(register_defaults=False).decode_raw(args.token)
    except DIDJWTError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"header": header.to_dict(), "payload": payload}, indent=2))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify a token against its issuer's DID document."""
    tools = JWTTools()

    try:
        payload = asyncio.run(tools.verify(args.token, auth=args.auth))
    except Exception as e:
        if args.json:
            print(json.dumps({"valid": False, "error": str(e)}))
        else:
            print(f"INVALID: {e}")
        return 1

    if args.json:
        print(json.dumps({"valid": True, "payload": payload.to_dict()}, indent=2))
    else:
        print("VALID")
        print(f"   Issuer:  {payload.iss}")
        print(f"   Payload: {json.dumps(payload.to_dict())}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog='did-jwt',
        description='did-jwt CLI - JWTs signed by Decentralized Identifiers'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    p_keygen = subparsers.add_parser('keygen', help='Generate a new did:ethr identity')
    p_keygen.add_argument('--env', action='store_true', help='Output as environment variables')

    p_sign = subparsers.add_parser('sign', help='Sign a JSON payload')
    p_sign.add_argument('payload', help='The payload, as a JSON object')
    p_sign.add_argument('--key', help='Private key (hex)')
    p_sign.add_argument('--did', help='Issuer DID (default: did:ethr of the key)')
    p_sign.add_argument('--alg', choices=config.SUPPORTED_ALGORITHMS, help='Signing algorithm')
    p_sign.add_argument('--expires-in', type=int, help='Validity in seconds')

    p_decode = subparsers.add_parser('decode', help='Decode a token without verifying it')
    p_decode.add_argument('token', help='The token to decode')

    p_verify = subparsers.add_parser('verify', help='Verify a token')
    p_verify.add_argument('token', help='The token to verify')
    p_verify.add_argument('--auth', action='store_true',
                          help='Require an authentication key of the issuer')
    p_verify.add_argument('--json', action='store_true', help='Output as JSON')

    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == 'keygen':
        return cmd_keygen(args)
    elif args.command == 'sign':
        return cmd_sign(args)
    elif args.command == 'decode':
        return cmd_decode(args)
    elif args.command == 'verify':
        return cmd_verify(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
