"""
DER codec for EC private keys (RFC 5915 ECPrivateKey).

    ECPrivateKey ::= SEQUENCE {
        version        INTEGER { ecPrivkeyVer1(1) },
        privateKey     OCTET STRING,
        parameters [0] ECParameters {{ NamedCurve }} OPTIONAL,
        publicKey  [1] BIT STRING OPTIONAL
    }

Encoding always emits the named-curve form with the public key embedded,
the layout OpenSSL writes for a named-curve key. Decoding also accepts the
explicit-parameter form older OpenSSL releases wrote, provided the
parameters are exactly secp256k1.
"""

import logging
from typing import NamedTuple, Optional, Tuple

from coincurve import PublicKey as SecpPublicKey
from ecdsa import der

from ..constants import (
    ECPARAMETERS_VERSION,
    ECPRIVKEY_VERSION,
    PRIME_FIELD_OID,
    PRIVATE_KEY_SIZE,
)
from ..exceptions import DecodeError, EncodingError
from ..utils.encoding import bytes_to_int
from .curve import SECP256K1, Curve
from .secret import SecretScalar

__all__ = ["DecodedPrivateKey", "encode_private_key", "decode_private_key"]

logger = logging.getLogger(__name__)

_PARAMETERS_TAG = 0
_PUBLIC_KEY_TAG = 1

_DER_ERRORS = (der.UnexpectedDER, ValueError, IndexError)


class DecodedPrivateKey(NamedTuple):
    """Result of decoding an ECPrivateKey structure."""

    secret: SecretScalar
    public_key: Optional[bytes]


def encode_private_key(secret: bytes, public_key: bytes, curve: Curve = SECP256K1) -> bytes:
    """
    Encode an EC private key as DER.
    
    Args:
        secret: 32-byte big-endian private scalar
        public_key: SEC1-encoded public point
        curve: Curve whose OID goes in the parameters field
        
    Returns:
        DER-encoded ECPrivateKey
        
    Raises:
        EncodingError: If the inputs cannot be encoded
    """
    if len(secret) != PRIVATE_KEY_SIZE:
        raise EncodingError(f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(secret)}")
    if not public_key:
        raise EncodingError("Public key is required for DER export")

    try:
        return der.encode_sequence(
            der.encode_integer(ECPRIVKEY_VERSION),
            der.encode_octet_string(secret),
            der.encode_constructed(_PARAMETERS_TAG, der.encode_oid(*curve.oid)),
            der.encode_constructed(
                _PUBLIC_KEY_TAG, der.encode_bitstring(public_key, unused=0)
            ),
        )
    except (ValueError, TypeError, AssertionError) as e:
        raise EncodingError(f"Error encoding EC private key: {e}") from e


def decode_private_key(data: bytes, curve: Curve = SECP256K1) -> DecodedPrivateKey:
    """
    Decode a DER ECPrivateKey for the given curve.
    
    The embedded public key, if any, is returned as raw SEC1 bytes; checking
    it against the scalar is left to the caller.
    
    Args:
        data: DER bytes
        curve: Curve the key must belong to
        
    Returns:
        DecodedPrivateKey with the scalar and optional public key
        
    Raises:
        DecodeError: If data is not a valid ECPrivateKey for curve
    """
    try:
        body, rest = der.remove_sequence(data)
        if rest:
            raise DecodeError("Trailing data after EC private key")

        version, body = der.remove_integer(body)
        if version != ECPRIVKEY_VERSION:
            raise DecodeError(f"Unsupported EC private key version: {version}")

        secret_bytes, body = der.remove_octet_string(body)
        public_key = None

        if body and body[0] == 0xA0 | _PARAMETERS_TAG:
            _, params, body = der.remove_constructed(body)
            _check_parameters(params, curve)

        if body and body[0] == 0xA0 | _PUBLIC_KEY_TAG:
            _, wrapped, body = der.remove_constructed(body)
            public_key, extra = der.remove_bitstring(wrapped, expect_unused=0)
            if extra:
                raise DecodeError("Trailing data after public key")
            public_key = bytes(public_key)

        if body:
            raise DecodeError("Unexpected field in EC private key")
    except _DER_ERRORS as e:
        raise DecodeError(f"Error decoding EC private key: {e}") from e

    if not 0 < len(secret_bytes) <= PRIVATE_KEY_SIZE:
        raise DecodeError(f"Invalid private key length: {len(secret_bytes)}")
    scalar = bytes_to_int(secret_bytes)
    if not 0 < scalar < curve.n:
        raise DecodeError("Private key out of range for curve")

    secret = SecretScalar(secret_bytes.rjust(PRIVATE_KEY_SIZE, b"\x00"))
    return DecodedPrivateKey(secret=secret, public_key=public_key)


def _check_parameters(params: bytes, curve: Curve) -> None:
    """Accept a named-curve OID or explicit parameters matching curve."""
    if params and params[0] == 0x06:
        oid, rest = der.remove_object(params)
        if rest:
            raise DecodeError("Trailing data after curve OID")
        if tuple(oid) != curve.oid:
            oid_str = ".".join(str(part) for part in oid)
            raise DecodeError(f"Unsupported curve OID: {oid_str}")
        return

    p, a, b, generator, n = _remove_explicit_parameters(params)
    if (p, a, b, n) != (curve.p, curve.a, curve.b, curve.n):
        raise DecodeError("Explicit curve parameters do not match secp256k1")
    try:
        point = SecpPublicKey(generator).point()
    except ValueError as e:
        raise DecodeError(f"Invalid curve generator: {e}") from e
    if point != curve.generator:
        raise DecodeError("Explicit curve generator does not match secp256k1")
    logger.debug("Decoded EC private key with explicit %s parameters", curve.name)


def _remove_explicit_parameters(params: bytes) -> Tuple[int, int, int, bytes, int]:
    """Parse SEC1 ECParameters into (p, a, b, generator, n)."""
    body, rest = der.remove_sequence(params)
    if rest:
        raise DecodeError("Trailing data after curve parameters")

    version, body = der.remove_integer(body)
    if version != ECPARAMETERS_VERSION:
        raise DecodeError(f"Unsupported curve parameters version: {version}")

    field_id, body = der.remove_sequence(body)
    field_type, field_id = der.remove_object(field_id)
    if tuple(field_type) != PRIME_FIELD_OID:
        raise DecodeError("Only prime-field curves are supported")
    p, _ = der.remove_integer(field_id)

    curve_seq, body = der.remove_sequence(body)
    a_bytes, curve_seq = der.remove_octet_string(curve_seq)
    b_bytes, _ = der.remove_octet_string(curve_seq)

    generator, body = der.remove_octet_string(body)
    n, _ = der.remove_integer(body)

    return p, bytes_to_int(a_bytes), bytes_to_int(b_bytes), bytes(generator), n
