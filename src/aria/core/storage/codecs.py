"""On-disk codecs for collection files.

Most collections are stored as plain JSON. The private collections (wellness
entries, conversation context) go through an extra encoding step: base64
obfuscation by default, which is NOT encryption, or Fernet symmetric
encryption when an ``ENCRYPTION_KEY`` is configured.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class CodecError(Exception):
    """Raised when a collection payload cannot be encoded or decoded."""


@runtime_checkable
class Codec(Protocol):
    """Transforms serialized JSON text to and from its on-disk form."""

    name: str

    def encode(self, text: str) -> str: ...

    def decode(self, stored: str) -> str: ...


class PlainCodec:
    """Stores JSON text unchanged."""

    name = "plain"

    def encode(self, text: str) -> str:
        return text

    def decode(self, stored: str) -> str:
        return stored


class Base64Codec:
    """Base64 obfuscation: keeps casual readers out, offers no secrecy."""

    name = "base64"

    def encode(self, text: str) -> str:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def decode(self, stored: str) -> str:
        try:
            return base64.b64decode(stored.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise CodecError(f"Failed to decode base64 payload: {exc}") from exc


class FernetCodec:
    """Fernet symmetric encryption for private collections.

    Usage::

        codec = FernetCodec(key=FernetCodec.generate_key())
        token = codec.encode('[{"mood": "calm"}]')
        codec.decode(token)  # '[{"mood": "calm"}]'
    """

    name = "fernet"

    def __init__(self, key: str) -> None:
        """Initialize with a Fernet key.

        Raises:
            CodecError: If the key is empty or invalid.
        """
        if not key or not key.strip():
            raise CodecError("Encryption key must not be empty")
        try:
            self._fernet = Fernet(key.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            raise CodecError(f"Invalid encryption key: {exc}") from exc

    def encode(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("utf-8")

    def decode(self, stored: str) -> str:
        try:
            return self._fernet.decrypt(stored.strip().encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise CodecError("Decryption failed: invalid token or wrong key") from exc

    @staticmethod
    def generate_key() -> str:
        """Generate a new URL-safe base64-encoded 32-byte Fernet key."""
        return Fernet.generate_key().decode("utf-8")


def private_codec(encryption_key: str = "") -> Codec:
    """Codec for private collections: Fernet when a key is set, else base64."""
    if encryption_key:
        return FernetCodec(encryption_key)
    logger.info("No ENCRYPTION_KEY configured; private collections use base64 obfuscation")
    return Base64Codec()
