import os
import stat
import sys

import pytest

from pkfile_crypto import key_store
from pkfile_crypto.errors import KeyCorrupt, KeyMismatch, KeyNotFound, StreamError
from pkfile_crypto.key_store import KeyKind


def test_kind_of(rsa_pair, dsa_pair):
    assert key_store.kind_of(rsa_pair.public) is KeyKind.RSA_PUBLIC
    assert key_store.kind_of(rsa_pair.private) is KeyKind.RSA_PRIVATE
    assert key_store.kind_of(dsa_pair.public) is KeyKind.DSA_PUBLIC
    assert key_store.kind_of(dsa_pair.private) is KeyKind.DSA_PRIVATE


def test_kind_of_rejects_other_objects():
    with pytest.raises(KeyMismatch):
        key_store.kind_of(b'not a key')


def test_save_and_load_rsa(tmp_path, rsa_pair):
    pub_path = str(tmp_path / 'rsa_public.key')
    priv_path = str(tmp_path / 'rsa_private.key')
    key_store.save(rsa_pair.public, pub_path)
    key_store.save(rsa_pair.private, priv_path)

    public = key_store.load(KeyKind.RSA_PUBLIC, pub_path)
    private = key_store.load(KeyKind.RSA_PRIVATE, priv_path)
    assert public.public_numbers() == rsa_pair.public.public_numbers()
    assert private.private_numbers() == rsa_pair.private.private_numbers()


def test_save_and_load_dsa(tmp_path, dsa_pair):
    pub_path = str(tmp_path / 'dsa_public.key')
    priv_path = str(tmp_path / 'dsa_private.key')
    key_store.save(dsa_pair.public, pub_path)
    key_store.save(dsa_pair.private, priv_path)

    public = key_store.load(KeyKind.DSA_PUBLIC, pub_path)
    private = key_store.load(KeyKind.DSA_PRIVATE, priv_path)
    assert public.public_numbers() == dsa_pair.public.public_numbers()
    assert private.private_numbers() == dsa_pair.private.private_numbers()


def test_save_overwrites(tmp_path, rsa_pair, other_rsa_pair):
    path = str(tmp_path / 'rsa_public.key')
    key_store.save(rsa_pair.public, path)
    key_store.save(other_rsa_pair.public, path)
    loaded = key_store.load(KeyKind.RSA_PUBLIC, path)
    assert loaded.public_numbers() == other_rsa_pair.public.public_numbers()
    assert not os.path.exists(path + '.tmp')


@pytest.mark.skipif(sys.platform.startswith('win'), reason='POSIX permissions')
def test_private_key_is_owner_only(tmp_path, rsa_pair):
    path = str(tmp_path / 'rsa_private.key')
    key_store.save(rsa_pair.private, path)
    assert stat.S_IMODE(os.stat(path).st_mode) == stat.S_IRUSR | stat.S_IWUSR


def test_load_missing_raises_key_not_found(tmp_path):
    with pytest.raises(KeyNotFound):
        key_store.load(KeyKind.RSA_PUBLIC, str(tmp_path / 'missing.key'))


@pytest.mark.parametrize('content', [b'', b'garbage', b'-----BEGIN PUBLIC KEY-----\nAAAA\n-----END PUBLIC KEY-----\n'])
def test_load_garbage_raises_key_corrupt(tmp_path, content):
    path = tmp_path / 'bad.key'
    path.write_bytes(content)
    with pytest.raises(KeyCorrupt):
        key_store.load(KeyKind.RSA_PUBLIC, str(path))


def test_load_wrong_kind_raises_key_corrupt(tmp_path, rsa_pair):
    path = str(tmp_path / 'rsa_public.key')
    key_store.save(rsa_pair.public, path)
    with pytest.raises(KeyCorrupt):
        key_store.load(KeyKind.DSA_PUBLIC, path)
    with pytest.raises(KeyCorrupt):
        key_store.load(KeyKind.RSA_PRIVATE, path)


@pytest.mark.skipif(sys.platform.startswith('win'), reason='POSIX permissions')
def test_private_key_is_owner_only_despite_leftover_temp_file(tmp_path, rsa_pair):
    path = str(tmp_path / 'rsa_private.key')
    leftover = tmp_path / 'rsa_private.key.tmp'
    leftover.write_bytes(b'stale')
    os.chmod(str(leftover), 0o644)

    key_store.save(rsa_pair.private, path)
    assert stat.S_IMODE(os.stat(path).st_mode) == stat.S_IRUSR | stat.S_IWUSR
    assert leftover.read_bytes() == b'stale'


def test_save_pair(tmp_path, dsa_pair):
    priv_path = str(tmp_path / 'dsa_private.key')
    pub_path = str(tmp_path / 'dsa_public.key')
    key_store.save_pair(dsa_pair, priv_path, pub_path)

    assert key_store.load(KeyKind.DSA_PRIVATE, priv_path).private_numbers() == dsa_pair.private.private_numbers()
    assert key_store.load(KeyKind.DSA_PUBLIC, pub_path).public_numbers() == dsa_pair.public.public_numbers()
    assert sorted(os.listdir(str(tmp_path))) == ['dsa_private.key', 'dsa_public.key']


def test_save_pair_failure_leaves_existing_keys(tmp_path, rsa_pair, other_rsa_pair):
    priv_path = str(tmp_path / 'rsa_private.key')
    key_store.save(rsa_pair.private, priv_path)
    before = open(priv_path, 'rb').read()
    blocker = tmp_path / 'blocker'
    blocker.write_bytes(b'')

    with pytest.raises(StreamError):
        key_store.save_pair(other_rsa_pair, priv_path, str(blocker / 'rsa_public.key'))
    assert open(priv_path, 'rb').read() == before
    assert sorted(os.listdir(str(tmp_path))) == ['blocker', 'rsa_private.key']
