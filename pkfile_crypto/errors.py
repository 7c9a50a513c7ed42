"""Error kinds raised by the crypto components.

The facade (CryptoManager) catches every one of these and turns it into a
boolean result, so callers of the component functions see the specific kind
while callers of the facade never see an exception.
"""


class CryptoError(Exception):
    """Base class for every failure raised by pkfile_crypto."""


class ParameterError(CryptoError):
    """Requested key size is not supported."""


class KeyNotFound(CryptoError):
    """Nothing is stored at the key location."""


class KeyCorrupt(CryptoError):
    """Stored bytes do not deserialize into the requested key kind."""


class KeyMismatch(CryptoError):
    """Key of the wrong algorithm or visibility was supplied."""


class StreamError(CryptoError):
    """A file or stream could not be opened, read or written."""


class InvalidEncoding(CryptoError):
    """Hex text is malformed."""


class MalformedSignature(CryptoError):
    """Signature bytes are not a structurally valid DER (r, s) sequence."""


class CryptoOperationError(CryptoError):
    """Encryption or decryption failed."""
