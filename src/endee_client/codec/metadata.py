"""Metadata compression and optional AES-256-CBC encryption.

Metadata is stored as compact JSON, compressed with a raw (headerless) DEFLATE
stream and, when a key is configured, encrypted with a fresh IV prepended to
the ciphertext::

    blob = IV (16 bytes) || AES-256-CBC(PKCS7(deflate(json)))

Decoding is lenient: a blob that cannot be decrypted, inflated or parsed
decodes to an empty dict.
"""

from __future__ import annotations

import json
import logging
import os
import re
import zlib
from collections.abc import Mapping
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from endee_client.exceptions import CodecError, InvalidKeyError
from endee_client.types import MetaValue

logger = logging.getLogger(__name__)

IV_SIZE = 16
BLOCK_SIZE = 16

_RAW_DEFLATE_WBITS = -zlib.MAX_WBITS

HEX_KEY_PATTERN = re.compile(r"[0-9a-fA-F]{64}")


def parse_key(key_hex: str) -> bytes:
    """Convert a 64-character hex key to 32 raw bytes.

    Raises:
        InvalidKeyError: If the key is not exactly 256 bits of hex.
    """
    if not isinstance(key_hex, str) or HEX_KEY_PATTERN.fullmatch(key_hex) is None:
        raise InvalidKeyError()
    return bytes.fromhex(key_hex)


def key_checksum(key_hex: str | None) -> int:
    """Return the last two hex characters of the key as an int, or -1."""
    if not key_hex or len(key_hex) < 2:
        return -1
    try:
        return int(key_hex[-2:], 16)
    except ValueError:
        return -1


def pkcs7_unpad(data: bytes) -> bytes:
    """Strip PKCS#7 padding, returning the buffer unchanged if it looks invalid."""
    if not data:
        return data
    pad_length = data[-1]
    if pad_length > BLOCK_SIZE or pad_length > len(data):
        return data
    return data[: len(data) - pad_length]


def aes_encrypt(data: bytes, key: bytes) -> bytes:
    """Encrypt with AES-256-CBC and return ``IV || ciphertext``."""
    iv = os.urandom(IV_SIZE)
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return iv + encryptor.update(padded) + encryptor.finalize()


def aes_decrypt(data: bytes, key: bytes) -> bytes:
    """Decrypt ``IV || ciphertext`` produced by aes_encrypt."""
    if len(data) < IV_SIZE:
        raise ValueError("Data too short to contain IV")
    iv, ciphertext = data[:IV_SIZE], data[IV_SIZE:]

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    return pkcs7_unpad(padded)


def _deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(
        zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, _RAW_DEFLATE_WBITS
    )
    return compressor.compress(data) + compressor.flush()


def _inflate(data: bytes) -> bytes:
    try:
        return zlib.decompressobj(_RAW_DEFLATE_WBITS).decompress(data)
    except zlib.error:
        # Accept zlib-framed streams as well.
        return zlib.decompress(data)


class MetadataCodec:
    """Compress and decompress metadata maps, optionally encrypted."""

    def __init__(self, key: str | None = None) -> None:
        """Initialize the codec.

        Args:
            key: Optional 64-character hex key enabling AES-256-CBC.

        Raises:
            InvalidKeyError: If the key is not exactly 256 bits of hex.
        """
        self._key = parse_key(key) if key else None

    @property
    def encrypted(self) -> bool:
        """Whether blobs are encrypted."""
        return self._key is not None

    def compress(self, data: Mapping[str, MetaValue] | None) -> bytes:
        """Serialize a metadata map into a wire blob.

        Empty or missing maps encode to ``b""`` without invoking the
        compressor.

        Raises:
            CodecError: If the map is not JSON-serializable.
        """
        if not data:
            return b""
        try:
            text = json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CodecError(f"Failed to compress metadata: {exc}") from exc

        blob = _deflate(text.encode("utf-8"))
        if self._key is not None:
            blob = aes_encrypt(blob, self._key)
        return blob

    def decompress(self, blob: bytes | None) -> dict[str, MetaValue]:
        """Decode a wire blob into a metadata map.

        Never raises for bad data: any failure yields an empty dict.
        """
        if not blob:
            return {}
        decoded = self._decode_or_none(blob)
        if decoded is None:
            return {}
        return decoded

    def _decode_or_none(self, blob: bytes) -> dict[str, Any] | None:
        """Decode a blob, returning None instead of raising on bad data."""
        try:
            buffer = blob
            if self._key is not None:
                buffer = aes_decrypt(buffer, self._key)
            parsed = json.loads(_inflate(buffer).decode("utf-8"))
        except (ValueError, RecursionError, zlib.error) as exc:
            logger.debug("Discarding undecodable metadata blob: %s", exc)
            return None

        if not isinstance(parsed, dict):
            logger.debug("Discarding metadata blob that is not a JSON object")
            return None
        return parsed


def compress(data: Mapping[str, MetaValue] | None, key: str | None = None) -> bytes:
    """Compress a metadata map, encrypting it when a key is given."""
    return MetadataCodec(key).compress(data)


def decompress(blob: bytes | None, key: str | None = None) -> dict[str, MetaValue]:
    """Decompress a metadata blob; bad data decodes to an empty dict."""
    return MetadataCodec(key).decompress(blob)
