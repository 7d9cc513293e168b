"""
Custom exceptions for evidence store operations.
"""


class EvidenceStoreError(Exception):
    """Base exception for evidence store errors."""

    pass


class StoreUnavailableError(EvidenceStoreError):
    """Raised when the store cannot be reached."""

    pass


class StoreQueryError(EvidenceStoreError):
    """Raised when a lookup fails or returns rows that cannot be parsed."""

    pass
