"""Error taxonomy shared by the codec, key, signature and workflow layers."""

from __future__ import annotations


class SigflowError(Exception):
    """Base class for every error raised by sigflow."""


class DecodeError(SigflowError):
    """Raised when Base64 text or an armored block cannot be decoded."""


class KeyGenError(SigflowError):
    """Raised when the crypto provider cannot produce a key pair."""


class KeyImportError(SigflowError):
    """Raised when armored text does not hold a usable RSA public key."""


class SigningError(SigflowError):
    """Raised when a payload cannot be signed with the given handle."""


class VerificationError(SigflowError):
    """Raised when verification inputs are malformed rather than mismatched."""


class WorkflowStateError(SigflowError):
    """Raised when a workflow step is invoked before its preconditions hold."""


__all__ = [
    "DecodeError",
    "KeyGenError",
    "KeyImportError",
    "SigflowError",
    "SigningError",
    "VerificationError",
    "WorkflowStateError",
]
