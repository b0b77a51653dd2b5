"""
Profile Store Engine.

Main entry point wiring storage, hashing and avatars together.
"""

from pathlib import Path
from typing import Optional

from .avatar import IdenticonAvatarGenerator
from .collaborators import AvatarGenerator, BlobStore, PasswordHasher
from .passwords import BcryptPasswordHasher
from .picture.normalizer import PictureNormalizer
from .profile.record import ProfileRecord
from .storage.blob_store import LocalBlobStore
from .storage.layout import StorageLayout


class ProfileStoreEngine:
    """
    Creates profile records bound to a shared set of collaborators.
    
    By default pictures go to a LocalBlobStore under ``store_path``,
    passwords are hashed with bcrypt and fallback avatars are SVG
    identicons. Any collaborator can be replaced by keyword.
    """
    
    def __init__(
        self,
        store_path: str | Path,
        *,
        bcrypt_rounds: int = 12,
        avatar_grid: int = 5,
        blob_store: Optional[BlobStore] = None,
        hasher: Optional[PasswordHasher] = None,
        avatar_generator: Optional[AvatarGenerator] = None,
    ):
        """
        Initialize the engine.
        
        Args:
            store_path: filesystem path for blob storage
            bcrypt_rounds: bcrypt cost factor for new password hashes
            avatar_grid: cells per side of generated avatars
            blob_store: overrides the local blob store
            hasher: overrides the bcrypt hasher
            avatar_generator: overrides the identicon generator
        """
        self.store_path = Path(store_path).resolve()
        self.layout = StorageLayout(self.store_path)
        self.blob_store = blob_store or LocalBlobStore(self.layout)
        self.normalizer = PictureNormalizer(self.blob_store)
        self.hasher = hasher or BcryptPasswordHasher(bcrypt_rounds)
        self.avatar_generator = avatar_generator or IdenticonAvatarGenerator(avatar_grid)
    
    def initialize(self) -> None:
        """
        Initialize the store.
        
        Creates necessary directory structure.
        Safe to call multiple times (idempotent).
        """
        self.layout.initialize()
    
    def new_profile(self, data: Optional[dict] = None) -> ProfileRecord:
        """Create a record around an existing (or empty) data dict."""
        return self._record({} if data is None else data)
    
    def load_profile(self, serialized: str | bytes) -> ProfileRecord:
        """
        Load a record from its JSON serialization.
        
        Malformed input yields an empty record.
        """
        return self._record(serialized)
    
    def dump_profile(self, record: ProfileRecord) -> str:
        """Serialize a record to JSON."""
        return record.to_json()
    
    def _record(self, data) -> ProfileRecord:
        return ProfileRecord(
            data,
            normalizer=self.normalizer,
            hasher=self.hasher,
            avatar_generator=self.avatar_generator,
        )
    
    def __repr__(self) -> str:
        return f"ProfileStoreEngine(path={self.store_path})"
