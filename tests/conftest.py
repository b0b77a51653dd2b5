"""Shared fixtures: a temporary blob store and an engine around it."""

import pytest

from profile_store import LocalBlobStore, PictureNormalizer, ProfileStoreEngine


class RecordingBlobStore:
    """Wraps a blob store and records every call made to it."""
    
    def __init__(self, inner):
        self.inner = inner
        self.stored = []
        self.fetched = []
    
    async def store(self, data):
        self.stored.append(data)
        return await self.inner.store(data)
    
    async def fetch(self, address):
        self.fetched.append(address)
        return await self.inner.fetch(address)


@pytest.fixture
def local_store(tmp_path):
    """Create a temporary blob store for testing."""
    store = LocalBlobStore(tmp_path / "blobs")
    store.initialize()
    return store


@pytest.fixture
def blob_store(local_store):
    return RecordingBlobStore(local_store)


@pytest.fixture
def normalizer(blob_store):
    return PictureNormalizer(blob_store)


@pytest.fixture
def engine(tmp_path, blob_store):
    engine = ProfileStoreEngine(tmp_path / "store", bcrypt_rounds=4, blob_store=blob_store)
    engine.initialize()
    return engine
