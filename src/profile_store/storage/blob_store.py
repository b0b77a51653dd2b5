"""
Content-addressed blob storage on the local filesystem.

Blobs are stored by the hash of their raw bytes. Once written, they
never change.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from ..errors import (
    BlobNotFoundError,
    BlobCorruptedError,
    InvalidReferenceError,
    StorageError,
)
from ..integrity.hashing import compute_hash, is_content_address, verify_hash
from .layout import StorageLayout

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """
    Content-addressed blob store with immutable blobs.
    
    Satisfies the BlobStore protocol: ``store`` and ``fetch`` are
    coroutines, the blocking file I/O runs in a worker thread.
    """
    
    def __init__(self, layout: StorageLayout | str | Path):
        """Initialize blob store with a layout or a root directory."""
        if not isinstance(layout, StorageLayout):
            layout = StorageLayout(layout)
        self.layout = layout
    
    def initialize(self) -> None:
        """Create the directory structure. Idempotent."""
        self.layout.initialize()
    
    async def store(self, data: bytes | str) -> str:
        """
        Store content and return its 64-hex address.
        
        Strings are stored as their UTF-8 encoding. Storing content that
        already exists is a no-op returning the same address.
        """
        return await asyncio.to_thread(self.put_blob, data)
    
    async def fetch(self, address: str) -> bytes:
        """
        Retrieve previously stored content.
        
        Raises BlobNotFoundError if the address is unknown.
        """
        return await asyncio.to_thread(self.get_blob, address)
    
    def put_blob(self, data: bytes | str) -> str:
        """Synchronous counterpart of ``store``."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        
        address = compute_hash(data)
        obj_path = self.layout.get_object_path(address)
        
        # Idempotent: an intact existing blob is left untouched
        if obj_path.exists():
            if verify_hash(self._read_object_file(obj_path), address):
                logger.debug("blob %s already stored", address)
                return address
            logger.warning("overwriting corrupted blob %s", address)
        
        self.layout.ensure_object_directory(address)
        self._write_object_atomic(obj_path, data)
        logger.debug("stored blob %s (%d bytes)", address, len(data))
        
        return address
    
    def get_blob(self, address: str, verify: bool = True) -> bytes:
        """
        Synchronous counterpart of ``fetch``.
        
        If verify=True (default), checks the content against its address.
        
        Raises InvalidReferenceError for a malformed address.
        Raises BlobNotFoundError if the blob doesn't exist.
        Raises BlobCorruptedError if verification fails.
        """
        self._check_address(address)
        obj_path = self.layout.get_object_path(address)
        
        if not obj_path.exists():
            raise BlobNotFoundError(address)
        
        data = self._read_object_file(obj_path)
        
        if verify:
            actual = compute_hash(data)
            if actual != address:
                raise BlobCorruptedError(address, address, actual)
        
        logger.debug("fetched blob %s (%d bytes)", address, len(data))
        return data
    
    def has_blob(self, address: str) -> bool:
        """Check if a blob exists in the store."""
        return is_content_address(address) and self.layout.object_exists(address)
    
    def list_blobs(self) -> list[str]:
        """List all blob addresses in the store."""
        return self.layout.list_all_objects()
    
    @staticmethod
    def _check_address(address: str) -> None:
        if not is_content_address(address):
            raise InvalidReferenceError(
                f"expected 64 lowercase hex characters, got {address!r}"
            )
    
    def _read_object_file(self, path: Path) -> bytes:
        """Read blob file contents."""
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError("read_file", str(path), e)
    
    def _write_object_atomic(self, path: Path, data: bytes) -> None:
        """
        Write blob file atomically.
        
        Uses temp file + rename for atomicity.
        """
        fd = None
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=str(path.parent),
                prefix='.tmp_',
            )
            
            os.write(fd, data)
            os.close(fd)
            fd = None
            
            os.replace(temp_path, path)
            temp_path = None
        
        except Exception as e:
            if fd is not None:
                try:
                    os.close(fd)
                except OSError:
                    pass
            if temp_path is not None and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
            if isinstance(e, OSError):
                raise StorageError("write_file", str(path), e)
            raise
