"""
Error types for profile store operations.

Store and fetch failures are explicit and propagate to the caller.
"""


class ProfileStoreError(Exception):
    """Base exception for all profile store errors."""
    pass


class BlobNotFoundError(ProfileStoreError):
    """Raised when a requested blob does not exist."""
    
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Blob not found: {address}")


class BlobCorruptedError(ProfileStoreError):
    """Raised when a blob's content does not match its address."""
    
    def __init__(self, address: str, expected: str, actual: str):
        self.address = address
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Blob corrupted: {address}\n"
            f"Expected hash: {expected}\n"
            f"Actual hash: {actual}"
        )


class InvalidReferenceError(ProfileStoreError):
    """Raised when a content address is malformed."""
    
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid reference: {reason}")


class StorageError(ProfileStoreError):
    """Raised when filesystem operations fail."""
    
    def __init__(self, operation: str, path: str, cause: Exception = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        msg = f"Storage error during {operation}: {path}"
        if cause:
            msg += f"\nCause: {cause}"
        super().__init__(msg)
