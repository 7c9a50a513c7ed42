import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from . import dsa_signer, hex_codec, key_store, rsa_cipher
from .config import DEFAULT_KEY_SIZE, Config, KeyPaths
from .errors import CryptoError, CryptoOperationError, StreamError
from .fileio import open_input, read_all, write_atomic
from .key_store import KeyKind

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    error: Optional[CryptoError] = None


class CryptoManager:
    """File-level RSA encryption and DSA signing backed by key files.

    Only the requested key sizes and key locations are kept between calls;
    every operation loads the keys it needs from storage. No operation
    raises: failures are logged and reported as False.
    """

    def __init__(self, rsa_key_size: int = DEFAULT_KEY_SIZE, dsa_key_size: int = DEFAULT_KEY_SIZE,
                 key_paths: Optional[KeyPaths] = None):
        self.rsa_key_size = rsa_key_size
        self.dsa_key_size = dsa_key_size
        self.key_paths = key_paths or KeyPaths()
        self.last_error: Optional[CryptoError] = None

    @classmethod
    def from_config(cls, config: Config) -> 'CryptoManager':
        return cls(config.rsa_key_size, config.dsa_key_size, config.key_paths)

    def _attempt(self, action: str, func: Callable[..., Any], *args) -> Outcome:
        try:
            outcome = Outcome(ok=True, value=func(*args))
        except CryptoError as e:
            log.error("%s failed: %s: %s", action, type(e).__name__, e)
            outcome = Outcome(ok=False, error=e)
        except Exception as e:
            log.exception("%s failed unexpectedly", action)
            outcome = Outcome(ok=False, error=CryptoOperationError(f"{action} failed: {type(e).__name__}"))
        self.last_error = outcome.error
        return outcome

    # --- RSA ---

    def _generate_rsa_keys(self) -> None:
        pair = rsa_cipher.generate_key_pair(self.rsa_key_size)
        key_store.save_pair(pair, self.key_paths.rsa_private, self.key_paths.rsa_public)

    def _encrypt_rsa(self, input_path: str, output_path: str) -> None:
        public_key = key_store.load(KeyKind.RSA_PUBLIC, self.key_paths.rsa_public)
        with open_input(input_path) as f_in:
            ciphertext = rsa_cipher.encrypt(public_key, f_in)
        write_atomic(output_path, ciphertext)

    def _decrypt_rsa(self, input_path: str, output_path: str) -> None:
        private_key = key_store.load(KeyKind.RSA_PRIVATE, self.key_paths.rsa_private)
        with open_input(input_path) as f_in:
            plaintext = rsa_cipher.decrypt(private_key, f_in)
        write_atomic(output_path, plaintext)

    def generate_rsa_keys(self) -> bool:
        return self._attempt("RSA key generation", self._generate_rsa_keys).ok

    def encrypt_rsa(self, input_path: str, output_path: str) -> bool:
        outcome = self._attempt("RSA encryption", self._encrypt_rsa, input_path, output_path)
        if outcome.ok:
            log.info("File '%s' encrypted to '%s'", input_path, output_path)
        return outcome.ok

    def decrypt_rsa(self, input_path: str, output_path: str) -> bool:
        outcome = self._attempt("RSA decryption", self._decrypt_rsa, input_path, output_path)
        if outcome.ok:
            log.info("File '%s' decrypted to '%s'", input_path, output_path)
        return outcome.ok

    # --- DSA ---

    def _generate_dsa_keys(self) -> None:
        pair = dsa_signer.generate_key_pair(self.dsa_key_size)
        key_store.save_pair(pair, self.key_paths.dsa_private, self.key_paths.dsa_public)

    def _sign_dsa(self, input_path: str) -> str:
        private_key = key_store.load(KeyKind.DSA_PRIVATE, self.key_paths.dsa_private)
        with open_input(input_path) as f_in:
            signature = dsa_signer.sign(private_key, f_in)
        return hex_codec.encode(signature)

    def _verify_dsa(self, input_path: str, hex_signature: str) -> bool:
        public_key = key_store.load(KeyKind.DSA_PUBLIC, self.key_paths.dsa_public)
        signature = hex_codec.decode(hex_signature)
        with open_input(input_path) as f_in:
            return dsa_signer.verify(public_key, f_in, signature)

    def generate_dsa_keys(self) -> bool:
        return self._attempt("DSA key generation", self._generate_dsa_keys).ok

    def sign_dsa(self, input_path: str) -> Tuple[bool, str]:
        outcome = self._attempt("DSA signing", self._sign_dsa, input_path)
        if not outcome.ok:
            return False, ''
        return True, outcome.value

    def verify_dsa(self, input_path: str, hex_signature: str) -> bool:
        outcome = self._attempt("DSA verification", self._verify_dsa, input_path, hex_signature)
        if outcome.ok and not outcome.value:
            log.warning("Signature for '%s' is not valid", input_path)
        return outcome.ok and outcome.value

    # --- Signature files ---

    def save_signature(self, hex_signature: str, path: str) -> bool:
        return self._attempt("Saving signature", write_atomic, path, hex_signature.encode('utf-8')).ok

    def read_signature(self, path: str) -> Tuple[bool, str]:
        outcome = self._attempt("Reading signature", self._read_signature, path)
        if not outcome.ok:
            return False, ''
        return True, outcome.value

    @staticmethod
    def _read_signature(path: str) -> str:
        with open_input(path) as f_in:
            data = read_all(f_in)
        try:
            return data.decode('utf-8').strip()
        except UnicodeDecodeError as e:
            raise StreamError(f"Signature file '{path}' is not UTF-8 text") from e
