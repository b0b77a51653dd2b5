"""
Interfaces of the collaborators a profile depends on.

Any object with matching methods can be plugged in; the package ships
LocalBlobStore, BcryptPasswordHasher and IdenticonAvatarGenerator.
"""

from typing import Protocol


class BlobStore(Protocol):
    """Content-addressed store returning 64-hex addresses."""
    
    async def store(self, data: bytes | str) -> str:
        ...
    
    async def fetch(self, address: str) -> bytes:
        ...


class AvatarGenerator(Protocol):
    """Deterministic avatar renderer keyed on a seed."""
    
    def generate(self, seed: str) -> tuple[str, int]:
        ...
    
    def picture_for(self, username: str) -> dict:
        ...


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str:
        ...
    
    def verify(self, plaintext: str, hashed: str) -> bool:
        ...
