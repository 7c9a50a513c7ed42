import pytest

from pkfile_crypto import dsa_signer, key_store, rsa_cipher
from pkfile_crypto.config import KeyPaths


@pytest.fixture(scope='session')
def rsa_pair():
    return rsa_cipher.generate_key_pair(2048)


@pytest.fixture(scope='session')
def other_rsa_pair():
    return rsa_cipher.generate_key_pair(2048)


@pytest.fixture(scope='session')
def dsa_pair():
    return dsa_signer.generate_key_pair(2048)


@pytest.fixture(scope='session')
def other_dsa_pair():
    return dsa_signer.generate_key_pair(2048)


@pytest.fixture(scope='session')
def key_dir(tmp_path_factory, rsa_pair, dsa_pair):
    """Directory holding all four key files of the session key pairs."""
    directory = tmp_path_factory.mktemp('keys')
    paths = KeyPaths.in_directory(str(directory))
    key_store.save(rsa_pair.private, paths.rsa_private)
    key_store.save(rsa_pair.public, paths.rsa_public)
    key_store.save(dsa_pair.private, paths.dsa_private)
    key_store.save(dsa_pair.public, paths.dsa_public)
    return directory
