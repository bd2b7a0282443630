"""
Session tokens - compact HS256 JWTs signed with ``cryptography`` HMAC.

Token format:
    base64url(header).base64url(payload).base64url(signature)

Payload claims: caller data (e.g. ``{"userId": "alice"}``) plus ``iat`` and
``exp`` (seconds since epoch).
"""

from __future__ import annotations

import base64
import json
import time
from typing import Any, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..faults import TokenFault

DEFAULT_TTL = 86400  # 1 day


class TokenSigner:
    """
    Issues and validates signed tokens.

    Usage:
        signer = TokenSigner("secret")
        token = signer.sign({"userId": "alice"})
        claims = signer.verify(token)   # raises TokenFault when invalid
    """

    algorithm = "HS256"

    def __init__(self, secret: str, default_ttl: int = DEFAULT_TTL):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._key = secret.encode()
        self.default_ttl = default_ttl

    def sign(self, payload: dict[str, Any], ttl: Optional[int] = None) -> str:
        """Sign ``payload`` into a token valid for ``ttl`` seconds."""
        now = int(time.time())
        claims = {
            **payload,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.default_ttl),
        }
        header = {"alg": self.algorithm, "typ": "JWT"}

        header_b64 = self._base64_encode_json(header)
        payload_b64 = self._base64_encode_json(claims)
        message = f"{header_b64}.{payload_b64}".encode()
        signature_b64 = self._base64_encode(self._create_signature(message))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify(self, token: str) -> dict[str, Any]:
        """
        Validate and decode a token.

        Checks format, algorithm, signature and expiry.

        Raises:
            TokenFault: Invalid token
        """
        try:
            header_b64, payload_b64, signature_b64 = token.split(".")
        except (AttributeError, ValueError):
            raise TokenFault("Malformed token: expected 3 parts")

        try:
            header = self._base64_decode_json(header_b64)
            signature = self._base64_decode(signature_b64)
            payload = self._base64_decode_json(payload_b64)
        except (ValueError, TypeError) as exc:
            raise TokenFault(f"Malformed token: {exc}") from exc
        if not isinstance(header, dict) or not isinstance(payload, dict):
            raise TokenFault("Malformed token: expected JSON objects")

        if header.get("alg") != self.algorithm:
            raise TokenFault(f"Unsupported algorithm: {header.get('alg')}")

        message = f"{header_b64}.{payload_b64}".encode()
        if not self._verify_signature(message, signature):
            raise TokenFault("Invalid signature")

        exp = payload.get("exp")
        if not exp or exp < int(time.time()):
            raise TokenFault("Token expired")

        return payload

    def _create_signature(self, message: bytes) -> bytes:
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(message)
        return h.finalize()

    def _verify_signature(self, message: bytes, signature: bytes) -> bool:
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(message)
        try:
            h.verify(signature)
            return True
        except InvalidSignature:
            return False

    def _base64_encode(self, data: bytes) -> str:
        """URL-safe base64 encode."""
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode()

    def _base64_decode(self, data: str) -> bytes:
        """URL-safe base64 decode."""
        padding = 4 - (len(data) % 4)
        if padding != 4:
            data += "=" * padding
        return base64.urlsafe_b64decode(data)

    def _base64_encode_json(self, data: dict) -> str:
        json_bytes = json.dumps(data, separators=(",", ":")).encode()
        return self._base64_encode(json_bytes)

    def _base64_decode_json(self, data: str) -> dict:
        return json.loads(self._base64_decode(data))
