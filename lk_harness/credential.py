"""
TURN REST API credentials.

Mints short-lived relay credentials the way coturn's "TURN REST API"
expects them (see https://github.com/coturn/coturn/):

    username = "<expiry unix seconds>:<user id>"
    password = base64(hmac-sha1(secret key, username))

The relay server validates the expiry; nothing here re-checks it.
"""

from dataclasses import dataclass
from typing import Callable
import base64
import hashlib
import hmac
import logging
import time

logger = logging.getLogger(__name__)

# Only for tests against a relay configured with the same value
DEFAULT_SECRET = "north"
USER_ID = "lk"
TTL_SECONDS = 60


@dataclass(frozen=True)
class Credential:
    """Username/password pair for the relay-authentication handshake."""

    username: str
    password: str

    def to_dict(self) -> dict:
        return {"username": self.username, "password": self.password}


def generate_user(clock: Callable[[], float] = time.time) -> str:
    """Build the "timestamp:userid" combo, valid for TTL_SECONDS."""
    expiry = int(clock()) + TTL_SECONDS
    return f"{expiry}:{USER_ID}"


def generate_password(secret_key: str, usercombo: str) -> str:
    mac = hmac.new(secret_key.encode("utf-8"), usercombo.encode("utf-8"), hashlib.sha1)
    return base64.b64encode(mac.digest()).decode("ascii")


def new_credential(secret_key: str = "", clock: Callable[[], float] = time.time) -> Credential:
    """Mint a credential for the given shared secret.

    Args:
        secret_key: Secret shared with the relay server. Empty falls back
            to DEFAULT_SECRET, which is only meant for testing.
        clock: Source of the current unix time

    Returns:
        Credential whose username expires TTL_SECONDS from now
    """
    if not secret_key:
        logger.warning("No TURN secret configured, using the test default")
        secret_key = DEFAULT_SECRET

    usercombo = generate_user(clock)
    return Credential(
        username=usercombo,
        password=generate_password(secret_key, usercombo),
    )
