"""Constants for secp256k1 key handling."""

from typing import Tuple

__all__ = [
    "CURVE_NAME",
    "SECP256K1_OID",
    "PRIME_FIELD_OID",
    "SECP256K1_P",
    "SECP256K1_A",
    "SECP256K1_B",
    "SECP256K1_N",
    "SECP256K1_H",
    "SECP256K1_GX",
    "SECP256K1_GY",
    "PRIVATE_KEY_SIZE",
    "DIGEST_SIZE",
    "COMPRESSED_PUBKEY_SIZE",
    "UNCOMPRESSED_PUBKEY_SIZE",
    "COMPRESSED_PREFIXES",
    "UNCOMPRESSED_PREFIXES",
    "ECPRIVKEY_VERSION",
    "ECPARAMETERS_VERSION",
]

# Curve identity
CURVE_NAME = "secp256k1"
SECP256K1_OID: Tuple[int, ...] = (1, 3, 132, 0, 10)
PRIME_FIELD_OID: Tuple[int, ...] = (1, 2, 840, 10045, 1, 1)

# Domain parameters (SEC 2, section 2.4.1)
SECP256K1_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
SECP256K1_A = 0
SECP256K1_B = 7
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_H = 1
SECP256K1_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
SECP256K1_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

# Sizes in bytes
PRIVATE_KEY_SIZE = 32
DIGEST_SIZE = 32
COMPRESSED_PUBKEY_SIZE = 33
UNCOMPRESSED_PUBKEY_SIZE = 65

# SEC1 point prefixes (0x06/0x07 are the hybrid forms)
COMPRESSED_PREFIXES = (0x02, 0x03)
UNCOMPRESSED_PREFIXES = (0x04, 0x06, 0x07)

# ASN.1 structure versions
ECPRIVKEY_VERSION = 1
ECPARAMETERS_VERSION = 1
