"""
Filesystem layout for blob storage.

Implements content-addressed storage with directory sharding.
"""

from pathlib import Path

from ..errors import StorageError
from ..integrity.hashing import get_hash_prefix


class StorageLayout:
    """
    Manages filesystem layout for content-addressed blobs.
    
    Layout:
        store_root/
            objects/
                <prefix>/
                    <address>    # raw blob bytes
    """
    
    def __init__(self, store_root: Path):
        """Initialize storage layout at given root."""
        self.store_root = Path(store_root).resolve()
        self.objects_dir = self.store_root / "objects"
    
    def initialize(self) -> None:
        """
        Initialize storage directory structure.
        
        Idempotent - safe to call multiple times.
        """
        try:
            self.store_root.mkdir(parents=True, exist_ok=True)
            self.objects_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise StorageError("initialize", str(self.store_root), e)
    
    def get_object_path(self, address: str) -> Path:
        """
        Get filesystem path for a blob by its address.
        
        Uses 2-character prefix for directory sharding.
        """
        prefix = get_hash_prefix(address, 2)
        return self.objects_dir / prefix / address
    
    def ensure_object_directory(self, address: str) -> None:
        """Ensure the directory for a blob exists."""
        prefix_dir = self.objects_dir / get_hash_prefix(address, 2)
        try:
            prefix_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("mkdir", str(prefix_dir), e)
    
    def list_all_objects(self) -> list[str]:
        """List all blob addresses by scanning the prefix directories."""
        objects = []
        
        if not self.objects_dir.exists():
            return objects
        
        try:
            for prefix_dir in self.objects_dir.iterdir():
                if not prefix_dir.is_dir():
                    continue
                
                for obj_file in prefix_dir.iterdir():
                    if obj_file.is_file() and not obj_file.name.startswith('.'):
                        objects.append(obj_file.name)
        
        except OSError as e:
            raise StorageError("list_objects", str(self.objects_dir), e)
        
        return objects
    
    def object_exists(self, address: str) -> bool:
        """Check if a blob exists in storage."""
        return self.get_object_path(address).exists()
