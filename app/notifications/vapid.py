"""
VAPID keys for Web Push notifications.

The browser subscribes with the public key (an uncompressed P-256 point,
65 bytes); the push sender signs a short-lived ES256 JWT with the private
key. Both keys travel as unpadded base64url strings.
"""

import base64
import time
from dataclasses import dataclass
from urllib.parse import urlparse

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

PUBLIC_KEY_BYTES = 65
PRIVATE_KEY_BYTES = 32
DEFAULT_TTL_SECONDS = 12 * 60 * 60


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


@dataclass(frozen=True)
class VapidKeys:
    public_key: str
    private_key: str


def _public_bytes(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def generate_vapid_keys() -> VapidKeys:
    private_key = ec.generate_private_key(ec.SECP256R1())
    private_value = private_key.private_numbers().private_value
    return VapidKeys(
        public_key=b64url_encode(_public_bytes(private_key)),
        private_key=b64url_encode(private_value.to_bytes(PRIVATE_KEY_BYTES, "big")),
    )


def load_private_key(private_key: str) -> ec.EllipticCurvePrivateKey:
    raw = b64url_decode(private_key)
    if len(raw) != PRIVATE_KEY_BYTES:
        raise ValueError(f"VAPID private key must be {PRIVATE_KEY_BYTES} bytes, got {len(raw)}")
    return ec.derive_private_key(int.from_bytes(raw, "big"), ec.SECP256R1())


def decode_public_key(public_key: str) -> bytes:
    return b64url_decode(public_key)


def is_valid_public_key(public_key: str) -> bool:
    """65 bytes starting with 0x04 (uncompressed point marker)."""
    try:
        raw = decode_public_key(public_key)
    except (ValueError, TypeError):
        return False
    return len(raw) == PUBLIC_KEY_BYTES and raw[0] == 0x04


def public_key_for(private_key: str) -> str:
    return b64url_encode(_public_bytes(load_private_key(private_key)))


def vapid_authorization(
    endpoint: str,
    private_key: str,
    subject: str,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
) -> str:
    """
    Build the ``Authorization`` header value for a push endpoint.

    Args:
        endpoint: Push subscription endpoint URL
        private_key: base64url VAPID private key
        subject: Contact URI, e.g. ``mailto:admin@example.com``
    """
    parsed = urlparse(endpoint)
    claims = {
        "aud": f"{parsed.scheme}://{parsed.netloc}",
        "exp": int(time.time()) + ttl_seconds,
        "sub": subject,
    }
    key = load_private_key(private_key)
    token = jwt.encode(claims, key, algorithm="ES256")
    return f"vapid t={token}, k={public_key_for(private_key)}"
