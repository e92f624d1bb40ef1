from __future__ import annotations

from typing import Protocol, runtime_checkable

from sigflow.models.keys import KeyPair, SigningKey, VerifyingKey


@runtime_checkable
class KeyManager(Protocol):
    def generate_keypair(self) -> KeyPair: ...

    def export_public_key(self, key: SigningKey | VerifyingKey) -> str: ...

    def export_private_key(self, key: SigningKey) -> str: ...

    def import_public_key(self, armored: str) -> VerifyingKey: ...


@runtime_checkable
class SignatureEngine(Protocol):
    def sign(self, signing_key: SigningKey, payload: bytes) -> bytes: ...

    def verify(self, verifying_key: VerifyingKey, signature: bytes, payload: bytes) -> bool: ...


__all__ = ["KeyManager", "SignatureEngine"]
