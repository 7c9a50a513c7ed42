"""Hex text form of raw signatures."""

import re

from .errors import InvalidEncoding

_HEX_RE = re.compile(r'[0-9a-fA-F]*')


def encode(data: bytes) -> str:
    """Return uppercase hex text for ``data``."""
    return bytes(data).hex().upper()


def decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise InvalidEncoding("Hex input must be text")
    if len(text) % 2:
        raise InvalidEncoding(f"Hex input has odd length {len(text)}")
    if not _HEX_RE.fullmatch(text):
        raise InvalidEncoding("Hex input contains characters outside [0-9a-fA-F]")
    return bytes.fromhex(text)
