"""Persist key material as PEM files, one file per key kind."""

import enum
import logging
from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from .errors import KeyCorrupt, KeyMismatch, KeyNotFound, StreamError
from .fileio import write_atomic, write_atomic_many

log = logging.getLogger(__name__)

KeyMaterial = Union[rsa.RSAPublicKey, rsa.RSAPrivateKey, dsa.DSAPublicKey, dsa.DSAPrivateKey]


class KeyKind(enum.Enum):
    RSA_PUBLIC = 'rsa-public'
    RSA_PRIVATE = 'rsa-private'
    DSA_PUBLIC = 'dsa-public'
    DSA_PRIVATE = 'dsa-private'

    @property
    def is_private(self) -> bool:
        return self in (KeyKind.RSA_PRIVATE, KeyKind.DSA_PRIVATE)


_KEY_CLASSES = {
    KeyKind.RSA_PUBLIC: rsa.RSAPublicKey,
    KeyKind.RSA_PRIVATE: rsa.RSAPrivateKey,
    KeyKind.DSA_PUBLIC: dsa.DSAPublicKey,
    KeyKind.DSA_PRIVATE: dsa.DSAPrivateKey,
}


@dataclass(frozen=True)
class KeyPair:
    public: KeyMaterial
    private: KeyMaterial


def kind_of(key) -> KeyKind:
    for kind, cls in _KEY_CLASSES.items():
        if isinstance(key, cls):
            return kind
    raise KeyMismatch(f"Unsupported key object: {type(key).__name__}")


def _serialize(key, kind: KeyKind) -> bytes:
    if kind.is_private:
        return key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def save(key, location: str) -> None:
    """Serialize ``key`` to ``location``, replacing whatever is there."""
    kind = kind_of(key)
    write_atomic(location, _serialize(key, kind), private=kind.is_private)
    log.info("Saved %s key to '%s'", kind.value, location)


def save_pair(pair: KeyPair, private_location: str, public_location: str) -> None:
    """Store both halves of ``pair``; a failed write leaves both locations untouched."""
    private_kind = kind_of(pair.private)
    public_kind = kind_of(pair.public)
    write_atomic_many([
        (private_location, _serialize(pair.private, private_kind), True),
        (public_location, _serialize(pair.public, public_kind), False),
    ])
    log.info("Saved %s key to '%s' and %s key to '%s'",
             private_kind.value, private_location, public_kind.value, public_location)


def load(kind: KeyKind, location: str):
    """Load a key of ``kind`` from ``location``.

    Raises KeyNotFound when the location is empty and KeyCorrupt when its
    content is not a key of the requested kind.
    """
    try:
        with open(location, 'rb') as key_file:
            key_data = key_file.read()
    except FileNotFoundError as e:
        raise KeyNotFound(f"No {kind.value} key at '{location}'") from e
    except OSError as e:
        raise StreamError(f"Cannot read key file '{location}': {e.strerror or e}") from e

    try:
        if kind.is_private:
            key = serialization.load_pem_private_key(key_data, password=None)
        else:
            key = serialization.load_pem_public_key(key_data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyCorrupt(f"File '{location}' does not contain a valid {kind.value} key.") from e

    if not isinstance(key, _KEY_CLASSES[kind]):
        raise KeyCorrupt(f"File '{location}' holds a {_describe(key)} key, expected {kind.value}.")
    log.debug("Loaded %s key from '%s'", kind.value, location)
    return key


def _describe(key) -> str:
    try:
        return kind_of(key).value
    except KeyMismatch:
        return type(key).__name__
