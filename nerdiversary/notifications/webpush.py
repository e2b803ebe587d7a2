"""
Web Push delivery: VAPID identification (RFC 8292) and ``aes128gcm`` message
encryption (RFC 8188 / RFC 8291).

Every message uses a fresh ephemeral P-256 key pair and a fresh 16-byte salt.
The wire layout is fixed; push services silently drop malformed bodies, so
nothing here is negotiable.
"""
import base64
import json
import logging
import os
import struct
import time
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlparse

import requests
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from jose import jwt

logger = logging.getLogger(__name__)

VAPID_TOKEN_LIFETIME_SECONDS = 12 * 3600

SALT_LENGTH = 16
KEY_LENGTH = 65  # uncompressed P-256 point
HEADER_LENGTH = SALT_LENGTH + 4 + 1 + KEY_LENGTH
PADDING_DELIMITER = b"\x02"

WEBPUSH_INFO = b"WebPush: info\x00"
CEK_INFO = b"Content-Encoding: aes128gcm\x00"
NONCE_INFO = b"Content-Encoding: nonce\x00"


class WebPushError(Exception):
    """Raised for malformed subscription keys or VAPID configuration."""


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    value = value.strip()
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def public_key_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def load_vapid_private_key(value: str) -> ec.EllipticCurvePrivateKey:
    """Load a VAPID key given as PEM or as a base64url raw 32-byte scalar."""
    if not value:
        raise WebPushError("VAPID private key is not configured")
    if "-----BEGIN" in value:
        try:
            key = serialization.load_pem_private_key(value.encode("utf-8"), password=None)
        except (ValueError, TypeError) as e:
            raise WebPushError(f"VAPID private key is not a valid PEM key: {e}") from e
    else:
        try:
            raw = b64url_decode(value)
        except ValueError as e:
            raise WebPushError(f"VAPID private key is not valid base64url: {e}") from e
        if len(raw) != 32:
            raise WebPushError(f"VAPID private key must be 32 bytes, got {len(raw)}")
        key = ec.derive_private_key(int.from_bytes(raw, "big"), ec.SECP256R1())
    if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
        raise WebPushError("VAPID private key must be a P-256 EC key")
    return key


def private_key_to_pem(private_key: ec.EllipticCurvePrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def private_key_to_b64url(private_key: ec.EllipticCurvePrivateKey) -> str:
    return b64url_encode(private_key.private_numbers().private_value.to_bytes(32, "big"))


def vapid_public_key(private_key: ec.EllipticCurvePrivateKey) -> str:
    """The ``applicationServerKey`` browsers subscribe with."""
    return b64url_encode(public_key_bytes(private_key.public_key()))


def endpoint_audience(endpoint: str) -> str:
    parsed = urlparse(endpoint)
    if not parsed.scheme or not parsed.netloc:
        raise WebPushError(f"Push endpoint is not an absolute URL: {endpoint!r}")
    return f"{parsed.scheme}://{parsed.netloc}"


def build_vapid_token(
    private_key: ec.EllipticCurvePrivateKey,
    endpoint: str,
    subject: str,
    now: Optional[float] = None,
) -> str:
    """ES256 JWT with ``aud`` = origin of the push endpoint, valid for 12 hours."""
    issued = int(now if now is not None else time.time())
    claims = {
        "aud": endpoint_audience(endpoint),
        "exp": issued + VAPID_TOKEN_LIFETIME_SECONDS,
        "sub": subject,
    }
    return jwt.encode(claims, private_key_to_pem(private_key), algorithm="ES256", headers={"typ": "JWT"})


def vapid_authorization(private_key: ec.EllipticCurvePrivateKey, endpoint: str, subject: str) -> str:
    token = build_vapid_token(private_key, endpoint, subject)
    return f"vapid t={token}, k={vapid_public_key(private_key)}"


def _hkdf(ikm: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=length, salt=salt, info=info).derive(ikm)


def encrypt_payload(
    payload: Union[bytes, str, dict],
    p256dh: str,
    auth: str,
    salt: Optional[bytes] = None,
    ephemeral_key: Optional[ec.EllipticCurvePrivateKey] = None,
) -> bytes:
    """
    Encrypt a push message for one subscriber.

    Args:
        payload: Message body; dicts are JSON-encoded, strings UTF-8 encoded.
        p256dh: Subscriber public key, base64url uncompressed point.
        auth: Subscriber auth secret, base64url.
        salt: Only for tests; a fresh random salt is used otherwise.
        ephemeral_key: Only for tests; a fresh key pair is generated otherwise.

    Returns:
        ``salt | record size | key id length | ephemeral public key | ciphertext``
    """
    if isinstance(payload, dict):
        payload = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    if isinstance(payload, str):
        payload = payload.encode("utf-8")

    try:
        ua_public_bytes = b64url_decode(p256dh)
        auth_secret = b64url_decode(auth)
        ua_public = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), ua_public_bytes)
    except ValueError as e:
        raise WebPushError(f"Invalid subscription keys: {e}") from e
    if len(ua_public_bytes) != KEY_LENGTH:
        raise WebPushError("Subscription p256dh must be an uncompressed P-256 point")

    salt = salt if salt is not None else os.urandom(SALT_LENGTH)
    if len(salt) != SALT_LENGTH:
        raise WebPushError(f"Salt must be {SALT_LENGTH} bytes")
    ephemeral_key = ephemeral_key if ephemeral_key is not None else ec.generate_private_key(ec.SECP256R1())
    as_public_bytes = public_key_bytes(ephemeral_key.public_key())

    shared_secret = ephemeral_key.exchange(ec.ECDH(), ua_public)
    ikm = _hkdf(shared_secret, auth_secret, WEBPUSH_INFO + ua_public_bytes + as_public_bytes, 32)
    cek = _hkdf(ikm, salt, CEK_INFO, 16)
    nonce = _hkdf(ikm, salt, NONCE_INFO, 12)

    ciphertext = AESGCM(cek).encrypt(nonce, payload + PADDING_DELIMITER, None)

    header = salt + struct.pack("!I", len(ciphertext) + HEADER_LENGTH) + bytes([KEY_LENGTH]) + as_public_bytes
    return header + ciphertext


@dataclass
class DeliveryResult:
    success: bool
    status_code: Optional[int] = None
    reason: Optional[str] = None
    stale: bool = False


class WebPushSender:
    """Signs, encrypts and POSTs push messages. No retries."""

    def __init__(
        self,
        vapid_private_key: Union[str, ec.EllipticCurvePrivateKey],
        subject: str,
        ttl: int = 86400,
        urgency: str = "normal",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if isinstance(vapid_private_key, str):
            vapid_private_key = load_vapid_private_key(vapid_private_key)
        self.private_key = vapid_private_key
        self.subject = subject
        self.ttl = ttl
        self.urgency = urgency
        self.timeout = timeout
        self.session = session or requests

    @property
    def public_key(self) -> str:
        return vapid_public_key(self.private_key)

    def build_request(self, endpoint: str, p256dh: str, auth: str, payload) -> tuple:
        body = encrypt_payload(payload, p256dh, auth)
        headers = {
            "Authorization": vapid_authorization(self.private_key, endpoint, self.subject),
            "Content-Encoding": "aes128gcm",
            "Content-Type": "application/octet-stream",
            "TTL": str(self.ttl),
            "Urgency": self.urgency,
        }
        return headers, body

    def send(self, subscription, payload) -> DeliveryResult:
        """
        Deliver ``payload`` to ``subscription``.

        ``subscription`` is anything with ``endpoint``, ``p256dh`` and ``auth``
        attributes (a Subscription row or a PendingNotification).
        """
        endpoint = subscription.endpoint
        try:
            headers, body = self.build_request(endpoint, subscription.p256dh, subscription.auth, payload)
        except WebPushError as e:
            logger.error(f"❌ [WebPush] Could not build message for {endpoint[:60]}: {e}")
            return DeliveryResult(success=False, reason=str(e))

        try:
            response = self.session.post(endpoint, data=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"⚠️ [WebPush] Transport error for {endpoint[:60]}: {e}")
            return DeliveryResult(success=False, reason=f"transport error: {e}")

        status = response.status_code
        if 200 <= status < 300:
            logger.debug(f"✅ [WebPush] Delivered to {endpoint[:60]} ({status})")
            return DeliveryResult(success=True, status_code=status)
        if status in (404, 410):
            logger.info(f"🗑️ [WebPush] Subscription gone ({status}) for {endpoint[:60]}")
            return DeliveryResult(success=False, status_code=status, reason="subscription expired", stale=True)

        reason = (response.text or "").strip()[:200] or f"HTTP {status}"
        logger.warning(f"⚠️ [WebPush] Push service rejected message ({status}): {reason}")
        return DeliveryResult(success=False, status_code=status, reason=reason)
