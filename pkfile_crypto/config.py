"""Settings read from an INI file.

    [RSA]
    KeySize = 2048

    [DSA]
    KeySize = 2048

    [Keys]
    Directory = .

Missing or unreadable files, sections or options fall back to the defaults.
Key sizes are passed through as read (a non-integer becomes 0) and are only
range-checked when keys are generated.
"""

import configparser
import logging
import os
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config.ini'
DEFAULT_KEY_SIZE = 2048

RSA_PUBLIC_KEY = 'rsa_public.key'
RSA_PRIVATE_KEY = 'rsa_private.key'
DSA_PUBLIC_KEY = 'dsa_public.key'
DSA_PRIVATE_KEY = 'dsa_private.key'


@dataclass(frozen=True)
class KeyPaths:
    rsa_public: str = RSA_PUBLIC_KEY
    rsa_private: str = RSA_PRIVATE_KEY
    dsa_public: str = DSA_PUBLIC_KEY
    dsa_private: str = DSA_PRIVATE_KEY

    @classmethod
    def in_directory(cls, directory: str) -> 'KeyPaths':
        directory = os.path.expanduser(directory)
        return cls(
            rsa_public=os.path.join(directory, RSA_PUBLIC_KEY),
            rsa_private=os.path.join(directory, RSA_PRIVATE_KEY),
            dsa_public=os.path.join(directory, DSA_PUBLIC_KEY),
            dsa_private=os.path.join(directory, DSA_PRIVATE_KEY),
        )


@dataclass(frozen=True)
class Config:
    rsa_key_size: int = DEFAULT_KEY_SIZE
    dsa_key_size: int = DEFAULT_KEY_SIZE
    key_paths: KeyPaths = field(default_factory=KeyPaths)


def _key_size(parser: configparser.ConfigParser, section: str) -> int:
    raw = parser.get(section, 'KeySize', fallback=None)
    if raw is None:
        return DEFAULT_KEY_SIZE
    try:
        return int(raw)
    except ValueError:
        # left for generation to reject with ParameterError
        log.warning("%s/KeySize %r is not an integer; treating it as 0", section, raw)
        return 0


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    parser = configparser.ConfigParser()
    # Option names are case sensitive ("KeySize").
    parser.optionxform = str
    try:
        read = parser.read(path, encoding='utf-8')
    except (configparser.Error, UnicodeDecodeError) as e:
        log.warning("Cannot parse config '%s' (%s); using defaults", path, e)
        return Config()
    if not read:
        log.info("No config at '%s'; using defaults", path)

    directory = parser.get('Keys', 'Directory', fallback=None)
    key_paths = KeyPaths.in_directory(directory) if directory else KeyPaths()
    return Config(
        rsa_key_size=_key_size(parser, 'RSA'),
        dsa_key_size=_key_size(parser, 'DSA'),
        key_paths=key_paths,
    )
