"""DSA key generation, signing and verification over SHA-256 digests.

Each call to generate_key_pair creates fresh domain parameters, so two
independently generated pairs do not share p, q and g.
"""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature

from .errors import KeyMismatch, MalformedSignature, ParameterError
from .fileio import BytesOrStream, read_chunks
from .key_store import KeyPair

log = logging.getLogger(__name__)

SUPPORTED_KEY_SIZES = (2048, 3072, 4096)


def generate_key_pair(bit_length: int) -> KeyPair:
    if bit_length not in SUPPORTED_KEY_SIZES:
        raise ParameterError(
            f"DSA key size must be one of {', '.join(map(str, SUPPORTED_KEY_SIZES))}, got {bit_length!r}"
        )
    parameters = dsa.generate_parameters(key_size=bit_length)
    private_key = parameters.generate_private_key()
    log.info("Generated %d-bit DSA key pair with fresh domain parameters", bit_length)
    return KeyPair(public=private_key.public_key(), private=private_key)


def _digest(message: BytesOrStream) -> bytes:
    hasher = hashes.Hash(hashes.SHA256())
    for chunk in read_chunks(message):
        hasher.update(chunk)
    return hasher.finalize()


def sign(private_key: dsa.DSAPrivateKey, message: BytesOrStream) -> bytes:
    """Return a DER-encoded (r, s) signature over the SHA-256 of ``message``."""
    if not isinstance(private_key, dsa.DSAPrivateKey):
        raise KeyMismatch("DSA signing requires a DSA private key")
    digest = _digest(message)
    return private_key.sign(digest, Prehashed(hashes.SHA256()))


def verify(public_key: dsa.DSAPublicKey, message: BytesOrStream, signature: bytes) -> bool:
    """Check ``signature`` against ``message``.

    A signature that does not match returns False. MalformedSignature is
    reserved for bytes that are not a DER (r, s) sequence at all.
    """
    if not isinstance(public_key, dsa.DSAPublicKey):
        raise KeyMismatch("DSA verification requires a DSA public key")
    try:
        decode_dss_signature(bytes(signature))
    except ValueError as e:
        raise MalformedSignature("Signature is not a DER encoded (r, s) pair") from e

    digest = _digest(message)
    try:
        public_key.verify(bytes(signature), digest, Prehashed(hashes.SHA256()))
    except InvalidSignature:
        log.debug("DSA signature did not match")
        return False
    return True
