"""Two-party RSA signature workflow: issue, exchange, verify, detect tampering."""

__version__ = "0.1.0"
