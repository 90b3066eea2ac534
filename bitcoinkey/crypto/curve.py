"""secp256k1 curve binding."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from coincurve import PublicKey as SecpPublicKey

from ..constants import (
    CURVE_NAME,
    PRIVATE_KEY_SIZE,
    SECP256K1_A,
    SECP256K1_B,
    SECP256K1_GX,
    SECP256K1_GY,
    SECP256K1_H,
    SECP256K1_N,
    SECP256K1_OID,
    SECP256K1_P,
)
from ..exceptions import CurveInitError
from ..utils.encoding import byte_length, int_to_bytes

__all__ = ["Curve", "SECP256K1", "load_curve"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curve:
    """Short Weierstrass curve domain parameters."""

    name: str
    oid: Tuple[int, ...]
    p: int
    a: int
    b: int
    n: int
    h: int
    gx: int
    gy: int

    @property
    def generator(self) -> Tuple[int, int]:
        return self.gx, self.gy

    @property
    def field_size(self) -> int:
        """Byte length of a field element."""
        return byte_length(self.p)

    def generator_bytes(self, compressed: bool = False) -> bytes:
        """SEC1 encoding of the generator."""
        size = self.field_size
        if compressed:
            prefix = b"\x03" if self.gy & 1 else b"\x02"
            return prefix + int_to_bytes(self.gx, size)
        return b"\x04" + int_to_bytes(self.gx, size) + int_to_bytes(self.gy, size)

    def contains(self, x: int, y: int) -> bool:
        """Check whether (x, y) satisfies the curve equation."""
        return (y * y - (x * x * x + self.a * x + self.b)) % self.p == 0


SECP256K1 = Curve(
    name=CURVE_NAME,
    oid=SECP256K1_OID,
    p=SECP256K1_P,
    a=SECP256K1_A,
    b=SECP256K1_B,
    n=SECP256K1_N,
    h=SECP256K1_H,
    gx=SECP256K1_GX,
    gy=SECP256K1_GY,
)


@lru_cache(maxsize=None)
def load_curve() -> Curve:
    """
    Bind secp256k1 to the curve library.
    
    Checks once per process that libsecp256k1 multiplies 1 onto the expected
    generator. Failures are not cached, so a later call retries the binding.
    
    Returns:
        The secp256k1 Curve
        
    Raises:
        CurveInitError: If the library is unusable or disagrees on the generator
    """
    one = int_to_bytes(1, PRIVATE_KEY_SIZE)
    try:
        point = SecpPublicKey.from_secret(one).point()
    except Exception as e:
        raise CurveInitError(f"Error initializing {CURVE_NAME}: {e}") from e

    if point != SECP256K1.generator:
        raise CurveInitError(f"Curve library generator mismatch for {CURVE_NAME}")

    logger.debug("Bound curve %s", CURVE_NAME)
    return SECP256K1
