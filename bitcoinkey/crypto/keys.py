"""secp256k1 key management."""

import logging
import secrets
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple

from coincurve import PublicKey as SecpPublicKey

from ..constants import COMPRESSED_PUBKEY_SIZE, PRIVATE_KEY_SIZE
from ..exceptions import (
    DecodeError,
    EncodingError,
    InvalidPointError,
    PreconditionError,
    RandomnessError,
)
from ..types.common import (
    DERBytes,
    PrivateKeyBytes,
    PublicKeyBytes,
    Signature,
    VerifyResult,
)
from ..utils.encoding import bytes_to_hex
from ..utils.validation import ensure_bytes, is_valid_scalar, validate_public_key
from .curve import Curve, load_curve
from .der import decode_private_key, encode_private_key
from .secret import SecretScalar

if TYPE_CHECKING:
    from .verifier import SignatureVerifier

__all__ = ["Key"]

logger = logging.getLogger(__name__)


class Key:
    """
    secp256k1 key holding optional private and public material.

    A key can be private-only (after set_private), public-only (for
    verification) or hold both. When both are present the public point
    should equal scalar * G; set_private and set_public do not enforce this,
    regenerate() restores it.

    The private scalar lives in a SecretScalar that is zeroed when the key is
    closed, replaced or garbage collected.
    """

    def __init__(self) -> None:
        """
        Create an empty key bound to secp256k1.

        Raises:
            CurveInitError: If the curve library cannot be initialized
        """
        self._curve = load_curve()
        self._secret: Optional[SecretScalar] = None
        self._public_key: Optional[SecpPublicKey] = None
        self._compressed = False

    @classmethod
    def new(cls) -> "Key":
        """Create an empty key."""
        return cls()

    @classmethod
    def generate(cls) -> "Key":
        """
        Create a key with a fresh random scalar and its public point.

        Returns:
            New Key with both private and public material

        Raises:
            CurveInitError: If the curve library cannot be initialized
            RandomnessError: If the entropy source fails
        """
        key = cls()

        # Rejection sampling keeps the scalar uniform in [1, n-1]
        while True:
            try:
                candidate = SecretScalar(secrets.token_bytes(PRIVATE_KEY_SIZE))
            except (OSError, NotImplementedError) as e:
                raise RandomnessError(f"Error from entropy source: {e}") from e
            if is_valid_scalar(candidate.to_int()):
                break
            candidate.wipe()

        try:
            public_key = SecpPublicKey.from_secret(candidate.to_bytes())
        except ValueError as e:
            candidate.wipe()
            raise RandomnessError(f"Error deriving generated public key: {e}") from e

        key._secret = candidate
        key._public_key = public_key
        logger.debug("Generated new %s key", key._curve.name)
        return key

    @classmethod
    def from_der(cls, data: Any) -> "Key":
        """
        Import a key from a DER-encoded EC private key.

        The public point is taken from the structure when embedded (and must
        match the scalar), otherwise derived.

        Args:
            data: DER ECPrivateKey bytes

        Returns:
            New Key with both private and public material

        Raises:
            DecodeError: If data is not a valid secp256k1 EC private key
        """
        data = ensure_bytes(data, "der")
        key = cls()
        decoded = decode_private_key(data, key._curve)

        try:
            try:
                expected = SecpPublicKey.from_secret(decoded.secret.to_bytes())
            except ValueError as e:
                raise DecodeError(f"Invalid private key: {e}") from e

            if decoded.public_key is None:
                public_key = expected
                compressed = False
            else:
                try:
                    public_key = SecpPublicKey(decoded.public_key)
                except ValueError as e:
                    raise DecodeError(f"Invalid embedded public key: {e}") from e
                if public_key.point() != expected.point():
                    raise DecodeError("Embedded public key does not match private key")
                compressed = len(decoded.public_key) == COMPRESSED_PUBKEY_SIZE
        except DecodeError:
            decoded.secret.wipe()
            raise

        key._secret = decoded.secret
        key._public_key = public_key
        key._compressed = compressed
        logger.debug("Imported %s key from DER", key._curve.name)
        return key

    @property
    def curve(self) -> Curve:
        """Bound curve parameters."""
        return self._curve

    @property
    def has_private(self) -> bool:
        return self._secret is not None

    @property
    def has_public(self) -> bool:
        return self._public_key is not None

    @property
    def compressed(self) -> bool:
        """Whether the public key is exported in compressed SEC1 form."""
        return self._compressed

    @compressed.setter
    def compressed(self, value: bool) -> None:
        self._compressed = bool(value)

    @property
    def public_point(self) -> Optional[Tuple[int, int]]:
        """Public point as (x, y), or None."""
        if self._public_key is None:
            return None
        return self._public_key.point()

    def get_private(self) -> Optional[PrivateKeyBytes]:
        """
        Get private scalar as 32 big-endian bytes.

        Returns:
            Left-zero-padded scalar, or None if no private key is set

        Raises:
            EncodingError: If the scalar does not fit in 32 bytes
        """
        if self._secret is None:
            return None
        return PrivateKeyBytes(self._secret.to_bytes(PRIVATE_KEY_SIZE))

    def set_private(self, data: Any) -> None:
        """
        Set private scalar from big-endian bytes.

        The public point is left untouched; call regenerate() to derive it.

        Args:
            data: Big-endian unsigned integer bytes
        """
        secret = SecretScalar(ensure_bytes(data, "private"))
        old, self._secret = self._secret, secret
        if old is not None:
            old.wipe()

    def get_public(self) -> Optional[PublicKeyBytes]:
        """
        Get public key in SEC1 encoding.

        Returns:
            33 or 65 bytes depending on `compressed`, or None if no public key is set

        Raises:
            EncodingError: If the point cannot be encoded
        """
        if self._public_key is None:
            return None
        try:
            return PublicKeyBytes(self._public_key.format(compressed=self._compressed))
        except ValueError as e:
            raise EncodingError(f"Error encoding public key: {e}") from e

    def set_public(self, data: Any) -> None:
        """
        Set public point from SEC1 bytes.

        The key is only updated once the point has been fully decoded.

        Args:
            data: Compressed (33 byte) or uncompressed (65 byte) point

        Raises:
            InvalidPointError: If data is not a point on secp256k1
        """
        point_bytes = validate_public_key(data)
        try:
            public_key = SecpPublicKey(point_bytes)
        except ValueError as e:
            raise InvalidPointError(f"Invalid public key: {e}") from e

        self._public_key = public_key
        self._compressed = len(point_bytes) == COMPRESSED_PUBKEY_SIZE

    private = property(get_private, set_private, doc="Raw private key accessor.")
    public = property(get_public, set_public, doc="Raw public key accessor.")

    def regenerate(self) -> None:
        """
        Recompute the public point from the private scalar.

        The scalar is copied into a new container and the point derived from
        it; the live material is replaced only when that succeeds.

        Raises:
            PreconditionError: If no private key is set or it is out of range
        """
        if self._secret is None:
            raise PreconditionError("Regeneration requires a private key")

        fresh = self._secret.copy()
        try:
            if not is_valid_scalar(fresh.to_int()):
                raise PreconditionError("Regeneration requires a private key in [1, n-1]")
            public_key = SecpPublicKey.from_secret(fresh.to_bytes())
        except ValueError as e:
            fresh.wipe()
            raise PreconditionError(f"Regeneration failed: {e}") from e
        except PreconditionError:
            fresh.wipe()
            raise

        old, self._secret = self._secret, fresh
        old.wipe()
        self._public_key = public_key
        logger.debug("Regenerated public key")

    def to_der(self) -> Optional[DERBytes]:
        """
        Export as DER-encoded EC private key.

        Returns:
            DER bytes, or None unless both private and public keys are set

        Raises:
            EncodingError: If the key material cannot be encoded
        """
        if self._secret is None or self._public_key is None:
            return None
        return DERBytes(
            encode_private_key(self._secret.to_bytes(), self.get_public(), self._curve)
        )

    def sign(self, digest: Any) -> Signature:
        """Sign a 32-byte digest. See bitcoinkey.crypto.signature.sign."""
        from .signature import sign
        return sign(self, digest)

    def verify(self, digest: Any, signature: Any) -> VerifyResult:
        """Verify a DER signature. See bitcoinkey.crypto.signature.verify."""
        from .signature import verify
        return verify(self, digest, signature)

    def verify_async(
        self,
        digest: Any,
        signature: Any,
        callback: Optional[Callable[[Optional[BaseException], Optional[VerifyResult]], Any]] = None,
        verifier: Optional["SignatureVerifier"] = None,
    ) -> Any:
        """
        Verify on a worker thread.

        Args:
            digest: 32-byte message hash
            signature: DER-encoded signature
            callback: Optional callback(error, result), run on the event loop
            verifier: SignatureVerifier to use (default: event loop executor)

        Returns:
            Awaitable VerifyResult when no callback is given, otherwise the
            asyncio.Future tracking the submission
        """
        from .verifier import SignatureVerifier
        verifier = verifier or SignatureVerifier()
        if callback is None:
            return verifier.verify(self, digest, signature)
        return verifier.submit(self, digest, signature, callback)

    def _secret_copy(self) -> SecretScalar:
        if self._secret is None:
            raise PreconditionError("Key does not have a private key set")
        return self._secret.copy()

    def close(self) -> None:
        """Scrub the private scalar and drop all key material."""
        secret = getattr(self, "_secret", None)
        if secret is not None:
            secret.wipe()
        self._secret = None
        self._public_key = None

    def __enter__(self) -> "Key":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        """Check equality of private scalar and public point."""
        if not isinstance(other, Key):
            return False
        if self.has_private != other.has_private or self.has_public != other.has_public:
            return False
        if self._secret is not None and self._secret != other._secret:
            return False
        return self.public_point == other.public_point

    def __repr__(self) -> str:
        """String representation without secret material."""
        public = self.get_public() if self.has_public else None
        public_str = f"{bytes_to_hex(public)[:12]}..." if public else None
        return f"Key(private={self.has_private}, public={public_str})"

