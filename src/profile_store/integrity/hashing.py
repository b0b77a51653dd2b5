"""
Content-addressed hashing using BLAKE3.

Digests are 64 lowercase hex characters, which is the shape every
content address in this package must have.
"""

import hashlib
import re

import blake3


CONTENT_ADDRESS_PATTERN = re.compile(r'[0-9a-f]{64}')


def compute_hash(data: bytes) -> str:
    """
    Compute hash of raw bytes.
    
    Returns hex-encoded BLAKE3 hash string.
    """
    return blake3.blake3(data).hexdigest()


def verify_hash(data: bytes, expected_hash: str) -> bool:
    """
    Verify that data matches expected hash.
    
    Returns True if match, False otherwise.
    """
    actual_hash = compute_hash(data)
    return actual_hash == expected_hash


def is_content_address(value) -> bool:
    """
    Check whether a value is a content-address reference.
    
    Only strings of exactly 64 lowercase hex characters qualify.
    Anything else, including 63 or 65 characters or a single
    uppercase digit, is raw content.
    """
    return isinstance(value, str) and CONTENT_ADDRESS_PATTERN.fullmatch(value) is not None


def seed_digest(seed: str) -> str:
    """BLAKE2s hex digest of a seed string."""
    return hashlib.blake2s(seed.encode('utf-8')).hexdigest()


def get_hash_prefix(hash_str: str, prefix_length: int = 2) -> str:
    """
    Get prefix of hash for directory sharding.
    
    Default is 2 characters, creating 256 subdirectories.
    """
    if len(hash_str) < prefix_length:
        raise ValueError(f"Hash too short for prefix length {prefix_length}")
    return hash_str[:prefix_length]
