"""Core data structures for collaborative values: hashes, signatures, IDs, headers, signed session logs and sync messages."""

__version__ = "0.1.0"