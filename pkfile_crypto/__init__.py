"""
RSA encryption and DSA signing for files.

High-level API:
- CryptoManager(rsa_key_size=2048, dsa_key_size=2048, key_paths=None)
    .generate_rsa_keys() -> bool
    .encrypt_rsa(input_path, output_path) -> bool
    .decrypt_rsa(input_path, output_path) -> bool
    .generate_dsa_keys() -> bool
    .sign_dsa(input_path) -> (bool, hex_signature)
    .verify_dsa(input_path, hex_signature) -> bool
- load_config(path='config.ini') -> Config

The facade never raises; the component modules (rsa_cipher, dsa_signer,
key_store, hex_codec) raise the CryptoError subclasses from errors.
"""

from .config import Config, KeyPaths, load_config
from .errors import (
    CryptoError,
    ParameterError,
    KeyNotFound,
    KeyCorrupt,
    KeyMismatch,
    StreamError,
    InvalidEncoding,
    MalformedSignature,
    CryptoOperationError,
)
from .key_store import KeyKind, KeyPair
from .manager import CryptoManager, Outcome

__all__ = [
    "CryptoManager",
    "Outcome",
    "Config",
    "KeyPaths",
    "load_config",
    "KeyKind",
    "KeyPair",
    "CryptoError",
    "ParameterError",
    "KeyNotFound",
    "KeyCorrupt",
    "KeyMismatch",
    "StreamError",
    "InvalidEncoding",
    "MalformedSignature",
    "CryptoOperationError",
]
