"""
DID resolvers and the registry that selects between them.
"""

from did_jwt import config
from did_jwt.resolvers.base import DIDResolver, ResolverRegistry, parse_did_method
from did_jwt.resolvers.ethr import EthrDIDResolver
from did_jwt.resolvers.https import HttpsDIDResolver, did_to_url
from did_jwt.resolvers.static import StaticDIDResolver


def register_default_resolvers(registry: ResolverRegistry) -> ResolverRegistry:
    """
    Add the ethr and https resolvers to `registry` where no resolver for
    those methods is registered yet. Safe to call repeatedly.
    """
    registry.register_default(config.BLANK_ETHR_DID, EthrDIDResolver)
    registry.register_default(config.BLANK_HTTPS_DID, HttpsDIDResolver)
    return registry


__all__ = [
    "DIDResolver",
    "ResolverRegistry",
    "EthrDIDResolver",
    "HttpsDIDResolver",
    "StaticDIDResolver",
    "register_default_resolvers",
    "parse_did_method",
    "did_to_url",
]
