"""guardscan — pattern-based security, secret and quality scanning."""

__version__ = "0.1.0"
