from __future__ import annotations

import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sigflow.core.codec import DEFAULT_LINE_WIDTH, armor, decode_base64, encode_base64, unarmor
from sigflow.errors import DecodeError, KeyGenError, KeyImportError
from sigflow.models.keys import KeyPair, SigningKey, VerifyingKey

logger = logging.getLogger(__name__)

PUBLIC_KEY_TAG = "PUBLIC KEY"
PRIVATE_KEY_TAG = "PRIVATE KEY"

DEFAULT_KEY_SIZE = 2048
DEFAULT_PUBLIC_EXPONENT = 65537


class RSAKeyManager:
    """Generates RSA key pairs and moves keys in and out of armored text.

    Public keys travel as SubjectPublicKeyInfo DER and private keys as
    unencrypted PKCS#8 DER, so the armored text is ordinary PEM that external
    tooling can read.
    """

    def __init__(
        self,
        key_size: int = DEFAULT_KEY_SIZE,
        public_exponent: int = DEFAULT_PUBLIC_EXPONENT,
        line_width: int = DEFAULT_LINE_WIDTH,
        strict_armor: bool = False,
    ) -> None:
        self._key_size = key_size
        self._public_exponent = public_exponent
        self._line_width = line_width
        self._strict_armor = strict_armor

    def generate_keypair(self) -> KeyPair:
        try:
            private_key = rsa.generate_private_key(
                public_exponent=self._public_exponent,
                key_size=self._key_size,
            )
        except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
            raise KeyGenError(f"RSA key generation failed: {exc}") from exc

        signing_key = SigningKey(private_key)
        logger.info(
            "generated RSA key pair key_size=%d public_exponent=%d",
            self._key_size,
            self._public_exponent,
        )
        return KeyPair(signing_key=signing_key, verifying_key=signing_key.verifying_key())

    def export_public_key(self, key: SigningKey | VerifyingKey) -> str:
        if isinstance(key, SigningKey):
            public_key = key.private_key.public_key()
        elif isinstance(key, VerifyingKey):
            public_key = key.public_key
        else:
            raise TypeError(f"cannot export public key from {type(key).__name__}")

        der = public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        return armor(encode_base64(der), PUBLIC_KEY_TAG, self._line_width)

    def export_private_key(self, key: SigningKey) -> str:
        if not isinstance(key, SigningKey):
            raise TypeError(f"cannot export private key from {type(key).__name__}")

        der = key.private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return armor(encode_base64(der), PRIVATE_KEY_TAG, self._line_width)

    def import_public_key(self, armored: str) -> VerifyingKey:
        try:
            der = decode_base64(unarmor(armored, strict=self._strict_armor))
        except DecodeError as exc:
            raise KeyImportError(f"public key text is not valid armored base64: {exc}") from exc

        if not der:
            raise KeyImportError("public key text is empty")

        try:
            public_key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyImportError("decoded bytes are not a valid public key") from exc

        if not isinstance(public_key, rsa.RSAPublicKey):
            raise KeyImportError(f"expected an RSA public key, got {type(public_key).__name__}")

        logger.debug("imported RSA public key key_size=%d", public_key.key_size)
        return VerifyingKey(public_key)


__all__ = [
    "DEFAULT_KEY_SIZE",
    "DEFAULT_PUBLIC_EXPONENT",
    "PRIVATE_KEY_TAG",
    "PUBLIC_KEY_TAG",
    "RSAKeyManager",
]
