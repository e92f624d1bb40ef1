from __future__ import annotations

import pytest
from sigflow.core.key_manager import RSAKeyManager
from sigflow.core.signature_engine import RSASignatureEngine
from sigflow.models.keys import KeyPair


class StaticKeyManager(RSAKeyManager):
    """Hands out a pre-generated pair so workflow tests skip RSA generation."""

    def __init__(self, key_pair: KeyPair, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._key_pair = key_pair
        self.generate_calls = 0

    def generate_keypair(self) -> KeyPair:
        self.generate_calls += 1
        return self._key_pair


@pytest.fixture(scope="session")
def key_manager() -> RSAKeyManager:
    return RSAKeyManager()


@pytest.fixture(scope="session")
def key_pair(key_manager: RSAKeyManager) -> KeyPair:
    return key_manager.generate_keypair()


@pytest.fixture(scope="session")
def other_key_pair(key_manager: RSAKeyManager) -> KeyPair:
    return key_manager.generate_keypair()


@pytest.fixture
def engine() -> RSASignatureEngine:
    return RSASignatureEngine()


@pytest.fixture
def static_key_manager(key_pair: KeyPair) -> StaticKeyManager:
    return StaticKeyManager(key_pair)


@pytest.fixture
def other_static_key_manager(other_key_pair: KeyPair) -> StaticKeyManager:
    return StaticKeyManager(other_key_pair)
