"""
did:ethr resolution from the identifier alone.

    did:ethr:0xf3beac30c498d9e26865f34fcaa57dbb935b0d74
    did:ethr:rinkeby:0xf3beac30c498d9e26865f34fcaa57dbb935b0d74
    did:ethr:0x02b97c30de767f084ce3080168ee293053ba33b235d7116a3263d29f1450936b71

The document produced is the one an identity has before any change is
recorded in the ERC-1056 registry: its owner key, listed under
`authentication`. Registry lookups (owner changes, delegates, attributes)
are not performed.
"""

import logging
import re
from typing import Optional, Tuple

from did_jwt.crypto import public_key_to_address
from did_jwt.did_document import (
    SECP256K1_SIGNATURE_AUTHENTICATION_2018,
    SECP256K1_VERIFICATION_KEY_2018,
    AuthenticationEntry,
    DIDDocument,
    PublicKeyEntry,
)
from did_jwt.exceptions import DIDResolutionError
from did_jwt.resolvers.base import DIDResolver

logger = logging.getLogger(__name__)

DID_CONTEXT = "https://w3id.org/did/v1"

_ETHR_PATTERN = re.compile(
    r"^did:ethr:(?:(?P<network>[a-zA-Z0-9_]+):)?"
    r"(?P<identifier>0x[0-9a-fA-F]{40}|0x[0-9a-fA-F]{66})$"
)


def parse_ethr_did(did: str) -> Optional[Tuple[Optional[str], str]]:
    """Split a did:ethr into (network, identifier), or None if it is not one."""
    match = _ETHR_PATTERN.match(did or "")
    if not match:
        return None
    return match.group("network"), match.group("identifier")


class EthrDIDResolver(DIDResolver):
    """Resolves did:ethr identifiers to their implicit owner document."""

    method = "ethr"

    def can_resolve(self, did: str) -> bool:
        return parse_ethr_did(did) is not None

    async def resolve(self, did: str) -> DIDDocument:
        parsed = parse_ethr_did(did)
        if parsed is None:
            raise DIDResolutionError(f"Not a did:ethr identifier: {did}", issuer=did)

        network, identifier = parsed
        logger.debug(f"Resolving {did} on network {network or 'mainnet'}")

        owner_id = f"{did}#owner"
        keys = []
        authentication = []

        if len(identifier) == 42:
            address = identifier.lower()
        else:
            public_key_hex = identifier[2:].lower()
            address = public_key_to_address(bytes.fromhex(public_key_hex))
            controller_id = f"{did}#controllerKey"
            keys.append(
                PublicKeyEntry(
                    id=controller_id,
                    type=SECP256K1_VERIFICATION_KEY_2018,
                    owner=did,
                    public_key_hex=public_key_hex,
                )
            )
            authentication.append(
                AuthenticationEntry(
                    type=SECP256K1_SIGNATURE_AUTHENTICATION_2018, public_key=controller_id
                )
            )

        keys.insert(
            0,
            PublicKeyEntry(
                id=owner_id,
                type=SECP256K1_VERIFICATION_KEY_2018,
                owner=did,
                ethereum_address=address,
            ),
        )
        authentication.insert(
            0, AuthenticationEntry(type=SECP256K1_SIGNATURE_AUTHENTICATION_2018, public_key=owner_id)
        )

        return DIDDocument(
            id=did, public_key=keys, authentication=authentication, context=DID_CONTEXT
        )
