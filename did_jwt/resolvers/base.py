"""
DID resolver interface and the registry that dispatches to resolvers by method.
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from did_jwt.did_document import DIDDocument
from did_jwt.exceptions import DIDResolutionError

logger = logging.getLogger(__name__)

_DID_PATTERN = re.compile(r"^did:([a-z0-9]+):(.+)$")


def parse_did_method(did: str) -> Optional[str]:
    """Return the method name of a DID (`ethr` for `did:ethr:0x...`), or None."""
    match = _DID_PATTERN.match(did or "")
    return match.group(1) if match else None


class DIDResolver(ABC):
    """Abstract interface for resolvers of one DID method."""

    method: str = ""

    def can_resolve(self, did: str) -> bool:
        """Whether this resolver handles `did`."""
        return parse_did_method(did) == self.method

    @abstractmethod
    async def resolve(self, did: str) -> DIDDocument:
        """Fetch and parse the DID Document for `did`."""
        pass


class ResolverRegistry:
    """
    Dispatches DID resolution to the registered resolvers.

    A registry is passed to JWTTools at construction. Default resolvers are
    added once, through register_default(), and only for methods that no
    registered resolver already handles.

    Example:
        >>> registry = ResolverRegistry()
        >>> registry.register_resolver(StaticDIDResolver({did: document}))
        >>> doc = await registry.resolve(did)
    """

    def __init__(self, resolvers: Optional[List[DIDResolver]] = None):
        self._resolvers: List[DIDResolver] = []
        self._lock = threading.Lock()
        for resolver in resolvers or []:
            self.register_resolver(resolver)

    def register_resolver(self, resolver: DIDResolver) -> None:
        """
        Register a resolver, replacing any previous one for the same method.

        Explicitly registered resolvers are consulted before defaults.
        """
        with self._lock:
            self._resolvers = [r for r in self._resolvers if r.method != resolver.method]
            self._resolvers.insert(0, resolver)
        logger.debug(f"Registered resolver for did:{resolver.method}")

    def register_default(self, blank_did: str, factory: Callable[[], DIDResolver]) -> bool:
        """
        Register `factory()` unless some resolver can already resolve `blank_did`.

        Returns:
            True if a resolver was registered.
        """
        with self._lock:
            if self._find(blank_did) is not None:
                return False
            resolver = factory()
            self._resolvers.append(resolver)
        logger.info(f"Registered default resolver for did:{resolver.method}")
        return True

    def can_resolve(self, did: str) -> bool:
        with self._lock:
            return self._find(did) is not None

    def get_resolver(self, did: str) -> Optional[DIDResolver]:
        with self._lock:
            return self._find(did)

    def _find(self, did: str) -> Optional[DIDResolver]:
        for resolver in self._resolvers:
            if resolver.can_resolve(did):
                return resolver
        return None

    async def resolve(self, did: str) -> DIDDocument:
        """
        Resolve a DID with the first resolver that accepts it.

        Raises:
            DIDResolutionError: If no registered resolver handles the DID.
            Exception: Whatever the resolver itself raises, unchanged.
        """
        resolver = self.get_resolver(did)
        if resolver is None:
            raise DIDResolutionError(f"No resolver registered for {did}", issuer=did)
        return await resolver.resolve(did)

    @property
    def methods(self) -> List[str]:
        with self._lock:
            return [r.method for r in self._resolvers]
