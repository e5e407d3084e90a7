"""
Request signing for the SwitchBot API v1.1
Builds the sign / nonce / t header set sent with every request
"""

import base64
import hashlib
import hmac
import time
import uuid
from typing import Dict, Optional, Union


def current_millis() -> int:
    """Milliseconds since the epoch"""
    return int(time.time() * 1000)


def generate_nonce() -> str:
    """Random v4 UUID string, used once per request"""
    return str(uuid.uuid4())


def sign(token: str, secret: str, t: Union[int, str], nonce: str) -> str:
    """
    Compute the request signature.

    The message is token + t + nonce (t as its decimal string), signed with
    HMAC-SHA256 keyed by the secret. The raw digest is returned base64
    encoded (standard alphabet, padded).

    Args:
        token: Account token
        secret: Account secret key
        t: Timestamp in milliseconds
        nonce: Request nonce

    Returns:
        Base64 signature string

    Example:
        >>> sign("tok", "s3cr3t", 1700000000000, "00000000-0000-0000-0000-000000000000")
        'hsDeqpe48tj0mbBsGkncYMvuPDcUdJDSxT6/1ujcXrM='
    """
    message = f"{token}{t}{nonce}".encode('utf-8')
    digest = hmac.new(secret.encode('utf-8'), message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode('ascii')


def compute_auth_headers(
    token: str,
    secret: str,
    t: Optional[int] = None,
    nonce: Optional[str] = None
) -> Dict[str, str]:
    """
    Build a fresh header set for one request.

    t and nonce are generated when not given; pass them only to reproduce a
    known signature. The result must not be reused across requests.

    Returns:
        {"sign": ..., "nonce": ..., "t": ...} with t as a decimal string
    """
    if t is None:
        t = current_millis()
    if nonce is None:
        nonce = generate_nonce()

    return {
        "sign": sign(token, secret, t, nonce),
        "nonce": nonce,
        "t": str(t),
    }
