"""Core module: lightweight re-exports only.

The workflow controller is NOT imported here because it depends on
``sigflow.config``, which itself imports from this package. Import it directly:
    from sigflow.core.workflow import WorkflowController
"""

from sigflow.core.codec import armor, decode_base64, encode_base64, unarmor
from sigflow.core.key_manager import RSAKeyManager
from sigflow.core.signature_engine import RSASignatureEngine

__all__ = [
    "RSAKeyManager",
    "RSASignatureEngine",
    "armor",
    "decode_base64",
    "encode_base64",
    "unarmor",
]
