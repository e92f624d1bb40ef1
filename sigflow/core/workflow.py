"""Two-party signing workflow: an issuer session, a verifier session and the wire between them.

The sessions never share object references. Everything that crosses from the
issuer to the verifier is text: the armored public key, the Base64 signature
and the message itself. ``WorkflowController`` plays the channel between the
two, which is also where a simulated attacker can rewrite the message.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from sigflow.config import TAMPER_MARKER, SigflowSettings
from sigflow.core.codec import decode_base64, encode_base64
from sigflow.core.logging import session_scope
from sigflow.core.signature_engine import RSASignatureEngine
from sigflow.errors import DecodeError, SigningError, VerificationError, WorkflowStateError
from sigflow.models.keys import KeyPair, VerifyingKey
from sigflow.models.verification import ArmoredKeyPair, VerificationOutcome, WorkflowStage
from sigflow.protocols.security import KeyManager, SignatureEngine

logger = logging.getLogger(__name__)

MESSAGE_ENCODING = "utf-8"


def tamper_message(message: str, marker: str = TAMPER_MARKER) -> str:
    return message + marker


def classify_outcome(is_valid: bool, message: str, signed_message: str) -> VerificationOutcome:
    """Turn a raw signature check into an outcome.

    A failed check on a message that differs from the signed snapshot is
    reported as tampering; a failed check on the unchanged message means the
    key or the signature bytes are wrong.
    """
    if is_valid:
        return VerificationOutcome.authentic()
    if message != signed_message:
        return VerificationOutcome.tamper_detected()
    return VerificationOutcome.invalid()


class IssuerSession:
    """Holds the issuer's key pair and signs messages with it."""

    role = "issuer"

    def __init__(
        self,
        key_manager: KeyManager,
        engine: SignatureEngine,
        session_id: str | None = None,
    ) -> None:
        self._key_manager = key_manager
        self._engine = engine
        self.session_id = session_id or uuid.uuid4().hex
        self.key_pair: KeyPair | None = None
        self.exported_keys: ArmoredKeyPair | None = None
        self.signed_message = ""
        self.signature = ""

    @property
    def public_key_text(self) -> str:
        if self.exported_keys is None:
            raise WorkflowStateError("generate keys before sharing the public key")
        return self.exported_keys.public_key

    async def generate_keys(self) -> ArmoredKeyPair:
        with session_scope(self, "generate_keys"):
            key_pair = await asyncio.to_thread(self._key_manager.generate_keypair)
            exported = ArmoredKeyPair(
                public_key=self._key_manager.export_public_key(key_pair.verifying_key),
                private_key=self._key_manager.export_private_key(key_pair.signing_key),
            )
            self.key_pair = key_pair
            self.exported_keys = exported
            logger.info("issuer key pair ready")
            return exported

    async def sign(self, message: str) -> str:
        if self.key_pair is None:
            raise WorkflowStateError("generate a key pair before signing")
        if not message:
            raise WorkflowStateError("message to sign must not be empty")

        with session_scope(self, "sign"):
            try:
                payload = message.encode(MESSAGE_ENCODING)
            except UnicodeEncodeError as exc:
                raise SigningError(f"message is not encodable as {MESSAGE_ENCODING}: {exc.reason}") from exc
            raw_signature = self._engine.sign(self.key_pair.signing_key, payload)
            self.signed_message = message
            self.signature = encode_base64(raw_signature)
            logger.info("signed message of %d characters", len(message))
            return self.signature


class VerifierSession:
    """Holds the public key text the verifier received and the key imported from it."""

    role = "verifier"

    def __init__(
        self,
        key_manager: KeyManager,
        engine: SignatureEngine,
        session_id: str | None = None,
    ) -> None:
        self._key_manager = key_manager
        self._engine = engine
        self.session_id = session_id or uuid.uuid4().hex
        self.public_key_text = ""
        self.imported_key: VerifyingKey | None = None

    def receive_public_key(self, armored: str) -> None:
        self.public_key_text = armored

    async def import_key(self, armored: str | None = None) -> VerifyingKey:
        text = self.public_key_text if armored is None else armored
        if not text.strip():
            raise WorkflowStateError("paste an armored public key before importing")

        with session_scope(self, "import_key"):
            imported = self._key_manager.import_public_key(text)
            self.public_key_text = text
            self.imported_key = imported
            logger.info("imported verifier public key key_size=%d", imported.key_size)
            return imported

    async def check(self, message: str, signature_b64: str) -> bool:
        """Return the raw signature check; decode and length problems raise."""
        if self.imported_key is None:
            raise WorkflowStateError("import the public key before verifying")
        if not signature_b64.strip():
            raise WorkflowStateError("paste or generate a signature before verifying")

        with session_scope(self, "verify"):
            signature = decode_base64(signature_b64)
            try:
                payload = message.encode(MESSAGE_ENCODING)
            except UnicodeEncodeError as exc:
                raise DecodeError(f"message is not encodable as {MESSAGE_ENCODING}: {exc.reason}") from exc
            is_valid = self._engine.verify(self.imported_key, signature, payload)
            logger.info("signature check result=%s", is_valid)
            return is_valid


class WorkflowController:
    """Drives the issuer/verifier scenario and classifies the verification result.

    ``message`` and ``signature`` are the in-transit texts the verifier will
    check; ``tamper_message`` rewrites ``message`` the way an interceptor
    would, leaving the signed snapshot and the signature untouched.
    """

    def __init__(
        self,
        settings: SigflowSettings | None = None,
        *,
        key_manager: KeyManager | None = None,
        engine: SignatureEngine | None = None,
    ) -> None:
        self.settings = settings or SigflowSettings()
        key_manager = key_manager or self.settings.build_key_manager()
        engine = engine or RSASignatureEngine()
        self.issuer = IssuerSession(key_manager, engine)
        self.verifier = VerifierSession(key_manager, engine)
        self.message = ""
        self.signature = ""
        self.outcome: VerificationOutcome | None = None
        self.stage = WorkflowStage.no_keys

    async def generate_keys(self) -> ArmoredKeyPair:
        exported = await self.issuer.generate_keys()
        self.stage = WorkflowStage.keys_generated
        return exported

    async def sign(self, message: str | None = None) -> str:
        text = self.message if message is None else message
        signature = await self.issuer.sign(text)
        self.message = text
        self.signature = signature
        self.stage = WorkflowStage.signed
        return signature

    def tamper_message(self) -> str:
        self.message = tamper_message(self.message, self.settings.workflow.tamper_marker)
        logger.warning("in-transit message rewritten by simulated attacker")
        return self.message

    def copy_public_key_to_verifier(self) -> str:
        if self.issuer.exported_keys is None:
            raise WorkflowStateError("generate keys on the issuer side first")
        armored = self.issuer.public_key_text
        self.verifier.receive_public_key(armored)
        return armored

    async def import_verifier_key(self, armored: str | None = None) -> None:
        await self.verifier.import_key(armored)
        self.stage = WorkflowStage.key_imported

    async def verify(self) -> VerificationOutcome:
        try:
            is_valid = await self.verifier.check(self.message, self.signature)
        except (DecodeError, VerificationError) as exc:
            logger.warning("verification failed with %s: %s", type(exc).__name__, exc)
            outcome = VerificationOutcome.from_error(exc)
        else:
            outcome = classify_outcome(is_valid, self.message, self.issuer.signed_message)

        self.outcome = outcome
        self.stage = WorkflowStage.verified
        logger.info("verification outcome=%s", outcome.status)
        return outcome


__all__ = [
    "IssuerSession",
    "MESSAGE_ENCODING",
    "VerifierSession",
    "WorkflowController",
    "classify_outcome",
    "tamper_message",
]
