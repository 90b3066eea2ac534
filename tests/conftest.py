import pytest

from bitcoinkey.crypto.keys import Key
from bitcoinkey.utils.encoding import double_sha256


@pytest.fixture
def key():
    return Key.generate()


@pytest.fixture
def digest():
    return double_sha256(b"bitcoinkey test message")
