from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from sigflow.errors import SigningError, VerificationError
from sigflow.models.keys import SigningKey, VerifyingKey


class RSASignatureEngine:
    """RSASSA-PKCS1-v1_5 signatures over a SHA-256 digest of the payload."""

    def sign(self, signing_key: SigningKey, payload: bytes) -> bytes:
        if not isinstance(signing_key, SigningKey):
            raise SigningError(f"expected a SigningKey, got {type(signing_key).__name__}")

        try:
            return signing_key.private_key.sign(payload, padding.PKCS1v15(), hashes.SHA256())
        except (TypeError, ValueError) as exc:
            raise SigningError(f"signing failed: {exc}") from exc

    def verify(self, verifying_key: VerifyingKey, signature: bytes, payload: bytes) -> bool:
        """Return whether ``signature`` is valid; mismatches are ``False``, not errors.

        Wrong key, altered payload and corrupted signature bytes all collapse
        to ``False``. Only a handle of the wrong kind or a signature whose
        length does not match the modulus raises ``VerificationError``.
        """
        if not isinstance(verifying_key, VerifyingKey):
            raise VerificationError(f"expected a VerifyingKey, got {type(verifying_key).__name__}")

        expected_size = verifying_key.signature_size
        if len(signature) != expected_size:
            raise VerificationError(
                f"signature must be {expected_size} bytes for a {verifying_key.key_size}-bit key, "
                f"got {len(signature)}",
            )

        try:
            verifying_key.public_key.verify(signature, payload, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        except TypeError as exc:
            raise VerificationError(f"verification inputs are malformed: {exc}") from exc
        return True


__all__ = ["RSASignatureEngine"]
