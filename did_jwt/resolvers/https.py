"""
did:https / did:web DID Resolution

Resolves domain-anchored identifiers to DID Documents without requiring a
central registry. The domain itself is the root of trust.

Usage:
    resolver = HttpsDIDResolver()
    doc = await resolver.resolve("did:https:example.com")
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Optional

import httpx

from did_jwt import config
from did_jwt.did_document import DIDDocument
from did_jwt.exceptions import DIDResolutionError
from did_jwt.resolvers.base import DIDResolver, parse_did_method

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("https", "web")


def did_to_url(did: str) -> str:
    """
    Convert a did:https or did:web identifier to the URL of its document.

    Examples:
        did:https:example.com → https://example.com/.well-known/did.json
        did:web:example.com:user:alice → https://example.com/user/alice/did.json
        did:web:example.com%3A8080 → https://example.com:8080/.well-known/did.json

    Raises:
        DIDResolutionError: If the DID is not a did:https or did:web identifier
    """
    method = parse_did_method(did)
    if method not in SUPPORTED_METHODS:
        raise DIDResolutionError(f"Not a did:https or did:web identifier: {did}", issuer=did)

    domain_and_path = did[len(f"did:{method}:"):]

    parts = domain_and_path.split(":")
    domain = urllib.parse.unquote(parts[0])
    path_segments = parts[1:]

    if path_segments:
        path = "/" + "/".join(path_segments) + "/did.json"
    else:
        path = "/.well-known/did.json"

    return f"https://{domain}{path}"


class HttpsDIDResolver(DIDResolver):
    """
    Fetches DID Documents over HTTPS.

    HTTP errors from httpx (connection failures, non-2xx responses) are not
    caught; retry and caching policy belong to the caller.
    """

    method = "https"

    def __init__(self, timeout: Optional[float] = None, verify_ssl: Optional[bool] = None):
        """
        Args:
            timeout: HTTP request timeout in seconds (default: DIDJWT_HTTP_TIMEOUT)
            verify_ssl: Whether to verify SSL certificates (default: DIDJWT_VERIFY_SSL)
        """
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.verify_ssl = verify_ssl if verify_ssl is not None else config.VERIFY_SSL

    def can_resolve(self, did: str) -> bool:
        return parse_did_method(did) in SUPPORTED_METHODS

    async def resolve(self, did: str) -> DIDDocument:
        """
        Resolve a did:https or did:web identifier to a DID Document.

        Raises:
            DIDResolutionError: If the DID is invalid or the body is not a JSON object
            httpx.HTTPError: If the request fails
        """
        url = did_to_url(did)
        logger.debug(f"Fetching DID document for {did} from {url}")

        async with httpx.AsyncClient(timeout=self.timeout, verify=self.verify_ssl) as client:
            response = await client.get(
                url,
                headers={
                    "Accept": "application/did+json, application/json",
                },
            )
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as e:
                raise DIDResolutionError(f"DID document at {url} is not JSON: {e}", issuer=did)

        if not isinstance(data, dict):
            raise DIDResolutionError(f"DID document at {url} is not a JSON object", issuer=did)

        return DIDDocument.from_json(data)
