# did_jwt/config.py
"""
Centralized configuration for did-jwt.

Configurable values are read from environment variables with sensible defaults.
Constructor arguments on JWTTools and the resolvers always take precedence.

Usage:
    from did_jwt.config import DEFAULT_JWT_VALIDITY_SECONDS, TIME_SKEW_SECONDS

Environment Variables:
    DIDJWT_DEFAULT_VALIDITY_SECONDS: Lifetime of issued tokens (default: 300)
    DIDJWT_DEFAULT_ALGORITHM: Signing algorithm for issued tokens (default: ES256K-R)
    DIDJWT_HTTP_TIMEOUT: Timeout for HTTPS DID document fetches (default: 10.0)
    DIDJWT_VERIFY_SSL: Verify TLS certificates when fetching documents (default: true)
"""

import os
import math
import logging
from typing import Callable, Final, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)


def _read_number(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning(f"Ignoring out-of-range {name}={raw!r}, using {default}")
        return default
    return value


ES256K: Final[str] = "ES256K"
ES256K_R: Final[str] = "ES256K-R"

SUPPORTED_ALGORITHMS: Final[tuple] = (ES256K, ES256K_R)

# =============================================================================
# Token Lifetime
# =============================================================================

# 5 minutes, used when the payload carries no `exp` of its own
DEFAULT_JWT_VALIDITY_SECONDS: Final[int] = _read_number("DIDJWT_DEFAULT_VALIDITY_SECONDS", 300, int)

# Clock drift tolerance for iat/exp checks. Not overridable.
TIME_SKEW_SECONDS: Final[int] = 300


def _read_default_algorithm() -> str:
    alg = os.getenv("DIDJWT_DEFAULT_ALGORITHM", ES256K_R)
    if alg not in SUPPORTED_ALGORITHMS:
        logger.warning(f"Ignoring unsupported DIDJWT_DEFAULT_ALGORITHM={alg!r}, using {ES256K_R}")
        return ES256K_R
    return alg


DEFAULT_ALGORITHM: Final[str] = _read_default_algorithm()

# =============================================================================
# DID Resolution
# =============================================================================

HTTP_TIMEOUT: Final[float] = _read_number("DIDJWT_HTTP_TIMEOUT", 10.0, float)

VERIFY_SSL: Final[bool] = os.getenv("DIDJWT_VERIFY_SSL", "true").lower() not in (
    "0",
    "false",
    "no",
)

# Identifiers used to probe the registry for a resolver of each method
BLANK_ETHR_DID: Final[str] = "did:ethr:0x0000000000000000000000000000000000000000"
BLANK_HTTPS_DID: Final[str] = "did:https:example.com"


# =============================================================================
# Configuration Summary (for debugging)
# =============================================================================

def print_config() -> None:
    """Print current configuration (useful for debugging)."""
    print("did-jwt Configuration:")
    print(f"  DEFAULT_JWT_VALIDITY_SECONDS: {DEFAULT_JWT_VALIDITY_SECONDS}")
    print(f"  DEFAULT_ALGORITHM:            {DEFAULT_ALGORITHM}")
    print(f"  TIME_SKEW_SECONDS:            {TIME_SKEW_SECONDS}")
    print(f"  HTTP_TIMEOUT:                 {HTTP_TIMEOUT}")
    print(f"  VERIFY_SSL:                   {VERIFY_SSL}")


if __name__ == "__main__":
    print_config()
