from __future__ import annotations

from sigflow.models.keys import KeyPair, SigningKey, VerifyingKey
from sigflow.models.verification import (
    ArmoredKeyPair,
    VerificationOutcome,
    VerificationStatus,
    WorkflowStage,
)

__all__ = [
    "ArmoredKeyPair",
    "KeyPair",
    "SigningKey",
    "VerificationOutcome",
    "VerificationStatus",
    "VerifyingKey",
    "WorkflowStage",
]
