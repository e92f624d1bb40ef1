from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class VerificationStatus(StrEnum):
    authentic = "authentic"
    invalid = "invalid"
    tamper_detected = "tamper_detected"
    error = "error"


class WorkflowStage(StrEnum):
    no_keys = "no_keys"
    keys_generated = "keys_generated"
    signed = "signed"
    key_imported = "key_imported"
    verified = "verified"


_DESCRIPTIONS: dict[VerificationStatus, str] = {
    VerificationStatus.authentic: "Valid signature: the message is authentic.",
    VerificationStatus.invalid: "Invalid signature: wrong key or altered signature.",
    VerificationStatus.tamper_detected: "Attack detected: the message was modified.",
}


class VerificationOutcome(BaseModel):
    """Classified result of checking a signature against the received message."""

    model_config = ConfigDict(frozen=True)

    status: VerificationStatus
    reason: str | None = None
    error_type: str | None = None

    @classmethod
    def authentic(cls) -> VerificationOutcome:
        return cls(status=VerificationStatus.authentic)

    @classmethod
    def invalid(cls) -> VerificationOutcome:
        return cls(status=VerificationStatus.invalid)

    @classmethod
    def tamper_detected(cls) -> VerificationOutcome:
        return cls(status=VerificationStatus.tamper_detected)

    @classmethod
    def from_error(cls, exc: Exception) -> VerificationOutcome:
        return cls(
            status=VerificationStatus.error,
            reason=str(exc),
            error_type=type(exc).__name__,
        )

    @property
    def is_authentic(self) -> bool:
        return self.status == VerificationStatus.authentic

    def describe(self) -> str:
        if self.status == VerificationStatus.error:
            return f"Verification error ({self.error_type}): {self.reason}"
        return _DESCRIPTIONS[self.status]


class ArmoredKeyPair(BaseModel):
    """Both halves of a generated key pair in armored text form."""

    model_config = ConfigDict(frozen=True)

    public_key: str
    private_key: str


__all__ = [
    "ArmoredKeyPair",
    "VerificationOutcome",
    "VerificationStatus",
    "WorkflowStage",
]
