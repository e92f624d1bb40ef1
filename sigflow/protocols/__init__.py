from sigflow.protocols.security import KeyManager, SignatureEngine

__all__ = ["KeyManager", "SignatureEngine"]
