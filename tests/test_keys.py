import pytest

from bitcoinkey import generate, from_der
from bitcoinkey.constants import SECP256K1_GX, SECP256K1_GY, SECP256K1_N
from bitcoinkey.crypto import curve as curve_module
from bitcoinkey.crypto import keys as keys_module
from bitcoinkey.crypto.keys import Key
from bitcoinkey.crypto.secret import SecretScalar
from bitcoinkey.exceptions import (
    CurveInitError,
    EncodingError,
    InvalidInputError,
    InvalidPointError,
    PreconditionError,
    RandomnessError,
)

ONE = (1).to_bytes(32, "big")
TWO_G_X = 0xC6047F9441ED7D6D3045406E95C07CD85C778E4B8CEF3CA7ABAC09B95C709EE5
TWO_G_Y = 0x1AE168FEA63DC339A3C58419466CEAEEF7F632653266D0E1236431A950CFE52A


def test_new_key_is_empty():
    key = Key.new()
    assert not key.has_private
    assert not key.has_public
    assert key.get_private() is None
    assert key.get_public() is None
    assert key.public_point is None
    assert key.curve.name == "secp256k1"


def test_generate_sets_both_halves():
    key = generate()
    assert key.has_private and key.has_public
    scalar = int.from_bytes(key.get_private(), "big")
    assert 0 < scalar < SECP256K1_N
    assert key.curve.contains(*key.public_point)
    assert len(key.get_public()) == 65
    assert key.get_public()[0] == 0x04


def test_generate_gives_distinct_keys():
    assert Key.generate().get_private() != Key.generate().get_private()


def test_generate_entropy_failure(monkeypatch):
    def broken(n):
        raise OSError("no entropy")

    monkeypatch.setattr(keys_module.secrets, "token_bytes", broken)
    with pytest.raises(RandomnessError):
        Key.generate()


@pytest.mark.parametrize("rejected", [b"\x00" * 32, b"\xff" * 32, SECP256K1_N.to_bytes(32, "big")])
def test_generate_retries_out_of_range_candidates(monkeypatch, rejected):
    candidates = [rejected, rejected, ONE]
    wiped = []
    original_wipe = SecretScalar.wipe

    def tracking_wipe(self):
        if not self.wiped:
            wiped.append(self.to_int())
        original_wipe(self)

    monkeypatch.setattr(keys_module.secrets, "token_bytes", lambda n: candidates.pop(0))
    monkeypatch.setattr(SecretScalar, "wipe", tracking_wipe)

    key = Key.generate()
    assert candidates == []
    assert key.get_private() == ONE
    assert key.public_point == (SECP256K1_GX, SECP256K1_GY)
    assert wiped == [int.from_bytes(rejected, "big")] * 2


def test_curve_init_failure(monkeypatch):
    class BrokenPublicKey:
        @classmethod
        def from_secret(cls, secret):
            raise RuntimeError("library unavailable")

    curve_module.load_curve.cache_clear()
    monkeypatch.setattr(curve_module, "SecpPublicKey", BrokenPublicKey)
    with pytest.raises(CurveInitError):
        Key()
    monkeypatch.undo()
    curve_module.load_curve.cache_clear()
    assert Key().curve.generator == (SECP256K1_GX, SECP256K1_GY)


def test_private_roundtrip(key):
    raw = key.get_private()
    other = Key()
    other.set_private(raw)
    assert other.get_private() == raw
    assert len(raw) == 32


def test_short_private_is_left_padded():
    key = Key()
    key.set_private(b"\x01")
    assert key.get_private() == ONE
    key.private = b"\x00" * 40 + b"\x02"
    assert key.private == (2).to_bytes(32, "big")


def test_oversized_private_fails_to_encode():
    key = Key()
    key.set_private(b"\x01" + b"\x00" * 32)
    assert key.has_private
    with pytest.raises(EncodingError):
        key.get_private()


def test_set_private_rejects_non_bytes():
    with pytest.raises(InvalidInputError):
        Key().set_private("00" * 32)


def test_private_only_has_no_public_until_regenerate(key):
    other = Key()
    other.set_private(key.get_private())
    assert other.get_public() is None
    assert other.to_der() is None
    other.regenerate()
    assert other.has_public
    assert other.get_public() == key.get_public()
    assert other == key


def test_regenerate_known_points():
    key = Key()
    key.set_private(ONE)
    key.regenerate()
    assert key.public_point == (SECP256K1_GX, SECP256K1_GY)

    key.set_private(b"\x02")
    key.regenerate()
    assert key.public_point == (TWO_G_X, TWO_G_Y)


def test_regenerate_restores_invariant_after_set_private(key):
    other = Key.generate()
    key.set_private(other.get_private())
    assert key.public_point != other.public_point
    key.regenerate()
    assert key.public_point == other.public_point


def test_regenerate_requires_private():
    key = Key()
    with pytest.raises(PreconditionError, match="Regeneration requires a private key"):
        key.regenerate()


@pytest.mark.parametrize("scalar", [0, SECP256K1_N, SECP256K1_N + 1])
def test_regenerate_out_of_range_leaves_key_unchanged(scalar):
    key = Key()
    key.set_private(scalar.to_bytes(32, "big"))
    with pytest.raises(PreconditionError):
        key.regenerate()
    assert key.has_private
    assert not key.has_public


def test_regenerate_wipes_replaced_container(key):
    old_buf = key._secret._buf
    key.regenerate()
    assert not any(old_buf)
    assert key.has_private


def test_set_private_wipes_previous_scalar(key):
    old_buf = key._secret._buf
    key.set_private(ONE)
    assert not any(old_buf)


def test_public_roundtrip(key):
    other = Key()
    other.set_public(key.get_public())
    assert other.has_public
    assert not other.has_private
    assert other.public_point == key.public_point
    assert other.get_public() == key.get_public()


def test_compressed_public(key):
    compressed = key.get_public()
    key.compressed = True
    assert len(key.get_public()) == 33
    other = Key()
    other.public = key.public
    assert other.compressed
    assert other.public_point == key.public_point
    assert len(compressed) == 65


@pytest.mark.parametrize("data", [
    b"",
    b"\x04" + b"\x00" * 63,
    b"\x05" + b"\x11" * 64,
    b"\x02" + SECP256K1_N.to_bytes(32, "big")[:31],
    b"\x02" + (2 ** 256 - 1).to_bytes(32, "big"),
    b"\x04" + SECP256K1_GX.to_bytes(32, "big") + (SECP256K1_GY + 1).to_bytes(32, "big"),
])
def test_set_public_rejects_invalid_points(key, data):
    before = key.get_public()
    with pytest.raises(InvalidPointError):
        key.set_public(data)
    assert key.get_public() == before


def test_set_public_rejects_non_bytes():
    with pytest.raises(InvalidPointError):
        Key().set_public(None)


def test_der_scenario(key):
    der = key.to_der()
    restored = from_der(der)
    assert restored.get_private() == key.get_private()
    assert restored.get_public() == key.get_public()
    assert restored == key


def test_close_scrubs_secret(key):
    buf = key._secret._buf
    key.close()
    assert not any(buf)
    assert not key.has_private
    assert not key.has_public


def test_context_manager_closes():
    with Key.generate() as key:
        buf = key._secret._buf
    assert not any(buf)
    assert not key.has_private


def test_equality():
    a = Key()
    a.set_private(ONE)
    a.regenerate()
    b = Key()
    b.set_private(b"\x01")
    b.regenerate()
    assert a == b
    assert a != Key()
    assert a != "key"


def test_repr_hides_secret(key):
    text = repr(key)
    assert key.get_private().hex() not in text
    assert "private=True" in text


def test_secret_scalar_wipe():
    secret = SecretScalar(b"\x01\x02\x03")
    buf = secret._buf
    assert secret.to_int() == 0x010203
    assert secret.to_bytes(4) == b"\x00\x01\x02\x03"
    with secret:
        pass
    assert secret.wiped
    assert not any(buf)
    assert "01" not in repr(secret)
    with pytest.raises(ValueError):
        secret.to_int()


def test_secret_scalar_from_int():
    secret = SecretScalar.from_int(SECP256K1_N - 1)
    assert secret.natural_size() == 32
    assert secret.copy() == secret
    with pytest.raises(EncodingError):
        SecretScalar.from_int(2 ** 256).to_bytes()
