"""Client-side nonces for outbound sends."""

from __future__ import annotations

import logging
import random

LOGGER = logging.getLogger(__name__)

# Largest integer a double represents exactly, scaled down to leave headroom
# for consumers that parse the nonce as a float.
MAX_SAFE_INTEGER = 2**53 - 1
NONCE_BOUND = MAX_SAFE_INTEGER // 10


def generate_nonce() -> str:
    """Return a random decimal nonce used to deduplicate a single send."""

    nonce = str(random.randint(0, NONCE_BOUND))
    LOGGER.debug("Nonce: %s", nonce)
    return nonce
