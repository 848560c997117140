"""
In-memory resolver for pinned identities, offline use and tests.
"""

from typing import Dict, Optional

from did_jwt.did_document import DIDDocument
from did_jwt.exceptions import DIDResolutionError
from did_jwt.resolvers.base import DIDResolver


class StaticDIDResolver(DIDResolver):
    """Serves documents from a dict keyed by DID, for any method."""

    method = "static"

    def __init__(self, documents: Optional[Dict[str, DIDDocument]] = None):
        self._documents: Dict[str, DIDDocument] = dict(documents or {})

    def add(self, document: DIDDocument) -> None:
        self._documents[document.id] = document

    def can_resolve(self, did: str) -> bool:
        return did in self._documents

    async def resolve(self, did: str) -> DIDDocument:
        try:
            return self._documents[did]
        except KeyError:
            raise DIDResolutionError(f"DID document not found for {did}", issuer=did)
