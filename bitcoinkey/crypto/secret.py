"""Scrubbable container for private scalars."""

from typing import Optional

from ..constants import PRIVATE_KEY_SIZE
from ..exceptions import EncodingError
from ..utils.encoding import byte_length, bytes_to_int, int_to_bytes

__all__ = ["SecretScalar"]


class SecretScalar:
    """
    Mutable holder for a big-endian private scalar.
    
    The buffer is zeroed before it is released, whether through wipe(),
    a with-block exit or garbage collection. Python ints and bytes derived
    from the scalar are immutable and cannot be scrubbed, so callers should
    keep them short-lived.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: bytes) -> None:
        self._buf: Optional[bytearray] = bytearray(data)

    @classmethod
    def from_int(cls, value: int) -> "SecretScalar":
        return cls(int_to_bytes(value, max(byte_length(value), 1)))

    @property
    def wiped(self) -> bool:
        return self._buf is None

    def _require(self) -> bytearray:
        if self._buf is None:
            raise ValueError("Secret scalar has been wiped")
        return self._buf

    def to_int(self) -> int:
        return bytes_to_int(bytes(self._require()))

    def natural_size(self) -> int:
        """Length of the scalar without leading zero bytes."""
        return byte_length(self.to_int())

    def to_bytes(self, length: int = PRIVATE_KEY_SIZE) -> bytes:
        """
        Fixed-width big-endian encoding, left-padded with zeros.
        
        Raises:
            EncodingError: If the scalar is longer than length bytes
        """
        value = self.to_int()
        if byte_length(value) > length:
            raise EncodingError("Secret too large (incorrect curve parameters?)")
        return int_to_bytes(value, length)

    def copy(self) -> "SecretScalar":
        return SecretScalar(bytes(self._require()))

    def wipe(self) -> None:
        """Zero the buffer and drop it."""
        buf = self._buf
        if buf is None:
            return
        for i in range(len(buf)):
            buf[i] = 0
        self._buf = None

    def __enter__(self) -> "SecretScalar":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __del__(self) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretScalar) or self.wiped or other.wiped:
            return False
        return self.to_int() == other.to_int()

    def __repr__(self) -> str:
        state = "wiped" if self.wiped else "set"
        return f"SecretScalar(<{state}>)"
