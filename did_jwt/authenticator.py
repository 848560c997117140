"""
Selects the keys of an issuer's DID document that may verify a JWT.
"""

import logging
from typing import List, Optional

from did_jwt.algorithms import is_supported
from did_jwt.did_document import SUPPORTED_KEY_TYPES, PublicKeyEntry
from did_jwt.exceptions import (
    NO_USABLE_KEYS,
    NOT_AUTHENTICATED,
    NoMatchingKeyError,
    UnsupportedAlgorithmError,
)
from did_jwt.resolvers.base import ResolverRegistry

logger = logging.getLogger(__name__)


async def resolve_authenticator(
    registry: ResolverRegistry, alg: str, issuer: Optional[str], auth: bool = False
) -> List[PublicKeyEntry]:
    """
    Obtain the issuer's DID document and return the keys usable for `alg`.

    Args:
        registry: Resolver registry used to fetch the document.
        alg: The JWT algorithm the keys must serve.
        issuer: DID of the token issuer.
        auth: If True, only keys listed under `authentication` are returned.

    Returns:
        Non-empty list of candidate PublicKeyEntry objects.

    Raises:
        UnsupportedAlgorithmError: Before any resolution, if `alg` is unknown.
        NoMatchingKeyError: If the document yields no candidate key.
        ResolutionFailure: Or any resolver error, propagated unchanged.
    """
    if not is_supported(alg):
        raise UnsupportedAlgorithmError(f"JWT algorithm '{alg}' not supported", alg=alg, issuer=issuer)

    document = await registry.resolve(issuer)

    authentication_keys = set(document.authentication_key_ids()) if auth else set()

    typed_keys = [key for key in document.public_key if key.type in SUPPORTED_KEY_TYPES]
    authenticators = [key for key in typed_keys if not auth or key.id in authentication_keys]

    if not typed_keys:
        raise NoMatchingKeyError(
            f"DID document for {issuer} does not have public keys for {alg}",
            reason=NO_USABLE_KEYS,
            issuer=issuer,
            alg=alg,
        )
    if not authenticators:
        raise NoMatchingKeyError(
            f"DID document for {issuer} does not have public keys suitable for authenticating user",
            reason=NOT_AUTHENTICATED,
            issuer=issuer,
            alg=alg,
        )

    logger.debug(f"Found {len(authenticators)} candidate keys for {issuer} ({alg}, auth={auth})")
    return authenticators
