"""RSA key generation and RSA-OAEP (SHA-256, MGF1-SHA-256) encryption.

Inputs longer than one OAEP block are split into blocks of
``max_block_size(key)`` bytes, each encrypted on its own; the ciphertext is
the concatenation of the resulting modulus-sized blocks.

Blocks are not bound to each other: reordering, dropping or duplicating whole
blocks of a ciphertext still decrypts, to correspondingly rearranged
plaintext. Only the content of each block is protected by OAEP.
"""

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import CryptoOperationError, KeyMismatch, ParameterError
from .fileio import BytesOrStream, read_all, read_chunks
from .key_store import KeyPair

log = logging.getLogger(__name__)

MIN_KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537

_HASH_SIZE = hashes.SHA256.digest_size


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def generate_key_pair(bit_length: int) -> KeyPair:
    if not isinstance(bit_length, int) or bit_length < MIN_KEY_SIZE:
        raise ParameterError(f"RSA key size must be at least {MIN_KEY_SIZE} bits, got {bit_length!r}")
    try:
        private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bit_length)
    except ValueError as e:
        raise ParameterError(f"Unsupported RSA key size {bit_length}") from e
    log.info("Generated %d-bit RSA key pair", bit_length)
    return KeyPair(public=private_key.public_key(), private=private_key)


def max_block_size(key) -> int:
    """Largest plaintext a single OAEP block can carry for ``key``."""
    return key.key_size // 8 - 2 * _HASH_SIZE - 2


def encrypt_block(public_key: rsa.RSAPublicKey, block: bytes) -> bytes:
    limit = max_block_size(public_key)
    if len(block) > limit:
        raise CryptoOperationError(f"Plaintext block of {len(block)} bytes exceeds the OAEP limit of {limit}")
    try:
        return public_key.encrypt(block, _oaep())
    except ValueError as e:
        raise CryptoOperationError("RSA encryption failed") from e


def encrypt(public_key: rsa.RSAPublicKey, plaintext: BytesOrStream) -> bytes:
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise KeyMismatch("RSA encryption requires an RSA public key")

    out = bytearray()
    blocks = 0
    for block in read_chunks(plaintext, max_block_size(public_key)):
        out += encrypt_block(public_key, block)
        blocks += 1
    if not blocks:
        out += encrypt_block(public_key, b'')
        blocks = 1
    log.debug("Encrypted %d OAEP block(s)", blocks)
    return bytes(out)


def decrypt(private_key: rsa.RSAPrivateKey, ciphertext: BytesOrStream) -> bytes:
    """Decrypt a ciphertext produced by :func:`encrypt`.

    Every failure past the key type check raises the same
    CryptoOperationError with the same message and no chained cause, so the
    caller cannot tell bad padding from a bad length or a wrong key.
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise KeyMismatch("RSA decryption requires an RSA private key")

    blob = read_all(ciphertext)
    block_size = private_key.key_size // 8
    failed = not blob or len(blob) % block_size != 0

    out = bytearray()
    if not failed:
        oaep = _oaep()
        for start in range(0, len(blob), block_size):
            try:
                out += private_key.decrypt(blob[start:start + block_size], oaep)
            except ValueError:
                failed = True
                break
    if failed:
        raise CryptoOperationError("RSA decryption failed")
    return bytes(out)
