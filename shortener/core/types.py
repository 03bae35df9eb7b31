"""
Identifier Types

Short codes and the keys they are stored under are both plain strings at
runtime. NewType keeps them apart for type checkers so a raw string, a short
code and an encoded key cannot be mixed up by accident.

The encoded key is standard base64 of the short code's UTF-8 bytes. It is
what the database stores and indexes; the short code itself is never stored.
"""

import base64
from typing import NewType

ShortCode = NewType("ShortCode", str)
EncodedKey = NewType("EncodedKey", str)


def encode_short_code(short_code: ShortCode) -> EncodedKey:
    """
    Derive the storage key for a short code.

    Example:
        encode_short_code("abc") -> "YWJj"
    """
    return EncodedKey(base64.b64encode(short_code.encode("utf-8")).decode("ascii"))


def decode_encoded_key(encoded_key: EncodedKey) -> ShortCode:
    """Recover the short code a storage key was derived from."""
    return ShortCode(base64.b64decode(encoded_key.encode("ascii")).decode("utf-8"))
