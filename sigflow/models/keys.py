"""Opaque key handles that split RSA keys into sign-only and verify-only capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field

from cryptography.hazmat.primitives.asymmetric import rsa


@dataclass(frozen=True, slots=True)
class VerifyingKey:
    """Verify-only capability built from an RSA public key."""

    public_key: rsa.RSAPublicKey = field(repr=False)

    @property
    def key_size(self) -> int:
        return self.public_key.key_size

    @property
    def signature_size(self) -> int:
        """Byte length every signature for this modulus must have."""
        return (self.public_key.key_size + 7) // 8


@dataclass(frozen=True, slots=True)
class SigningKey:
    """Sign-only capability. Only the issuer's key generation produces one."""

    private_key: rsa.RSAPrivateKey = field(repr=False)

    @property
    def key_size(self) -> int:
        return self.private_key.key_size

    def verifying_key(self) -> VerifyingKey:
        return VerifyingKey(self.private_key.public_key())


@dataclass(frozen=True, slots=True)
class KeyPair:
    signing_key: SigningKey
    verifying_key: VerifyingKey


__all__ = ["KeyPair", "SigningKey", "VerifyingKey"]
