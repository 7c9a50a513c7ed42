import os
import tempfile
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, List, Sequence, Tuple, Union

from .errors import StreamError

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
PUBLIC_FILE_MODE = 0o644

BytesOrStream = Union[bytes, bytearray, BinaryIO]


def read_chunks(source: BytesOrStream, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield ``source`` in pieces of at most ``chunk_size`` bytes.

    ``source`` may be a bytes-like object or a readable binary stream. Read
    failures surface as StreamError.
    """
    if isinstance(source, (bytes, bytearray)):
        for start in range(0, len(source), chunk_size):
            yield bytes(source[start:start + chunk_size])
        return

    while True:
        try:
            chunk = source.read(chunk_size)
        except (OSError, ValueError) as e:
            raise StreamError(f"Failed to read input stream: {e}") from e
        if not chunk:
            break
        yield chunk


def read_all(source: BytesOrStream) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return b''.join(read_chunks(source))


@contextmanager
def open_input(path: str) -> Iterator[BinaryIO]:
    try:
        f_in = open(path, 'rb')
    except OSError as e:
        raise StreamError(f"Cannot open '{path}': {e.strerror or e}") from e
    with f_in:
        yield f_in


def _write_temp(path: str, data: bytes, private: bool) -> str:
    # mkstemp creates a fresh 0600 file, never reusing an existing path
    directory = os.path.dirname(path) or '.'
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{os.path.basename(path)}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as f_out:
            f_out.write(data)
        if not private:
            os.chmod(tmp_path, PUBLIC_FILE_MODE)
    except OSError:
        os.remove(tmp_path)
        raise
    return tmp_path


def write_atomic_many(files: Sequence[Tuple[str, bytes, bool]]) -> None:
    """Write several ``(path, data, private)`` files as one unit.

    Every file is written to its own temp file first; targets are only
    replaced once all temp files exist, so a failed write leaves every target
    untouched. Private files are readable and writable by the owner only.
    """
    staged: List[Tuple[str, str]] = []
    current = ''
    try:
        try:
            for path, data, private in files:
                current = path
                staged.append((_write_temp(path, data, private), path))
            for tmp_path, path in staged:
                current = path
                os.replace(tmp_path, path)
        except OSError as e:
            raise StreamError(f"Cannot write '{current}': {e.strerror or e}") from e
        for path, data, _ in files:
            log.debug("Wrote %d bytes to '%s'", len(data), path)
    finally:
        for tmp_path, _ in staged:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


def write_atomic(path: str, data: bytes, *, private: bool = False) -> None:
    """Write ``data`` to ``path`` through a temp file and rename it into place."""
    write_atomic_many([(path, data, private)])
