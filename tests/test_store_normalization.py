"""
Test store-direction picture normalization.

Verifies which inputs are written to the blob store and what store form
comes back.
"""

import pytest

from profile_store import Composite
from profile_store.integrity.hashing import compute_hash


PNG = b"\x89PNG\r\n\x1a\nfake"
SVG = '<svg xmlns="http://www.w3.org/2000/svg"/>'
ADDRESS = "ab" * 32


class TestRawContent:
    """Raw bytes and non-reference text are stored."""
    
    @pytest.mark.asyncio
    async def test_bytes_without_meta_return_bare_address(self, normalizer, blob_store):
        """Bytes with no metadata come back as a bare address."""
        result = await normalizer.normalize_for_store(PNG)
        
        assert result == compute_hash(PNG)
        assert blob_store.stored == [PNG]
    
    @pytest.mark.asyncio
    async def test_bytes_with_meta_are_wrapped(self, normalizer):
        """Supplied metadata is wrapped around the address with a measured length."""
        result = await normalizer.normalize_for_store(PNG, {'content-type': 'image/png'})
        
        assert result == {
            'head': {'content-type': 'image/png', 'content-length': len(PNG)},
            'body': compute_hash(PNG),
        }
    
    @pytest.mark.asyncio
    async def test_derived_length_overrides_supplied_length(self, normalizer):
        """A caller-supplied content-length is replaced by the real one."""
        body = b"12345"
        result = await normalizer.normalize_for_store(
            body, {'content-type': 'x', 'content-length': 999}
        )
        
        assert result['head']['content-length'] == 5
        assert result['head']['content-type'] == 'x'
    
    @pytest.mark.asyncio
    async def test_bytearray_is_raw(self, normalizer, blob_store):
        result = await normalizer.normalize_for_store(bytearray(PNG))
        
        assert result == compute_hash(PNG)
        assert len(blob_store.stored) == 1
    
    @pytest.mark.asyncio
    async def test_text_is_stored_like_bytes(self, normalizer, blob_store):
        """Inline markup is stored as UTF-8 and measured in bytes."""
        text = '<svg><text>héllo</text></svg>'
        result = await normalizer.normalize_for_store(text, {'content-type': 'image/svg+xml'})
        
        assert blob_store.stored == [text]
        assert result['body'] == compute_hash(text.encode('utf-8'))
        assert result['head']['content-length'] == len(text.encode('utf-8'))
    
    @pytest.mark.asyncio
    async def test_empty_meta_still_wraps(self, normalizer):
        """An empty metadata dict counts as supplied."""
        result = await normalizer.normalize_for_store(PNG, {})
        
        assert result == {'head': {'content-length': len(PNG)}, 'body': compute_hash(PNG)}


class TestReferenceIdempotence:
    """Strings that are already content addresses are never re-stored."""
    
    @pytest.mark.asyncio
    async def test_bare_reference_unchanged(self, normalizer, blob_store):
        result = await normalizer.normalize_for_store(ADDRESS)
        
        assert result == ADDRESS
        assert blob_store.stored == []
    
    @pytest.mark.asyncio
    async def test_reference_with_full_meta_is_wrapped(self, normalizer, blob_store):
        meta = {'content-type': 'image/png', 'content-length': 42}
        result = await normalizer.normalize_for_store(ADDRESS, meta)
        
        assert result == {'head': meta, 'body': ADDRESS}
        assert blob_store.stored == []
    
    @pytest.mark.asyncio
    async def test_reference_with_incomplete_meta_stays_bare(self, normalizer):
        """Without a content-length the metadata is dropped."""
        result = await normalizer.normalize_for_store(ADDRESS, {'content-type': 'image/png'})
        
        assert result == ADDRESS
    
    @pytest.mark.asyncio
    async def test_reference_with_zero_length_stays_bare(self, normalizer):
        result = await normalizer.normalize_for_store(
            ADDRESS, {'content-type': 'image/png', 'content-length': 0}
        )
        
        assert result == ADDRESS
    
    @pytest.mark.asyncio
    async def test_storing_store_form_again_is_noop(self, normalizer, blob_store):
        """Normalizing an already normalized picture changes nothing."""
        first = await normalizer.normalize_for_store(PNG, {'content-type': 'image/png'})
        second = await normalizer.normalize_for_store(first)
        
        assert second == first
        assert blob_store.stored == [PNG]


class TestReferencePatternBoundary:
    """Near-miss strings are treated as content and stored."""
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [
        "a" * 63,
        "a" * 65,
        "A" + "a" * 63,
        "g" + "a" * 63,
        "a" * 64 + "\n",
    ])
    async def test_near_miss_is_stored(self, normalizer, blob_store, value):
        result = await normalizer.normalize_for_store(value)
        
        assert blob_store.stored == [value]
        assert result == compute_hash(value.encode('utf-8'))


class TestCompositeUnwrap:
    """Composites are unwrapped recursively."""
    
    @pytest.mark.asyncio
    async def test_head_becomes_meta(self, normalizer):
        picture = {'head': {'content-type': 'image/png'}, 'body': PNG}
        result = await normalizer.normalize_for_store(picture)
        
        assert result == {
            'head': {'content-type': 'image/png', 'content-length': len(PNG)},
            'body': compute_hash(PNG),
        }
    
    @pytest.mark.asyncio
    async def test_composite_instance_accepted(self, normalizer):
        picture = Composite({'content-type': 'image/png'}, PNG)
        result = await normalizer.normalize_for_store(picture)
        
        assert result['body'] == compute_hash(PNG)
    
    @pytest.mark.asyncio
    async def test_caller_meta_ignored_for_composite(self, normalizer):
        """The composite's own head replaces caller-supplied metadata."""
        picture = {'head': {'content-type': 'image/png'}, 'body': PNG}
        result = await normalizer.normalize_for_store(picture, {'content-type': 'text/plain', 'x': 1})
        
        assert result['head'] == {'content-type': 'image/png', 'content-length': len(PNG)}
    
    @pytest.mark.asyncio
    async def test_nested_composite_uses_outer_head(self, normalizer, blob_store):
        """Only the outermost head is carried down; inner heads are ignored."""
        m1 = {'content-type': 'image/png', 'alt': 'outer'}
        m2 = {'content-type': 'image/jpeg', 'extra': True}
        picture = {'head': m1, 'body': {'head': m2, 'body': PNG}}
        
        result = await normalizer.normalize_for_store(picture)
        
        assert blob_store.stored == [PNG]
        assert result == {
            'head': {'content-type': 'image/png', 'alt': 'outer', 'content-length': len(PNG)},
            'body': compute_hash(PNG),
        }
    
    @pytest.mark.asyncio
    async def test_composite_without_head(self, normalizer):
        result = await normalizer.normalize_for_store({'body': PNG})
        
        assert result == compute_hash(PNG)
    
    @pytest.mark.asyncio
    async def test_composite_without_body(self, normalizer):
        assert await normalizer.normalize_for_store({'head': {'content-type': 'image/png'}}) is None


class TestUnrecognizedShapes:
    """Anything else resolves to None without touching the store."""
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, 42, 1.5, ["a"]])
    async def test_unknown_shape(self, normalizer, blob_store, value):
        assert await normalizer.normalize_for_store(value) is None
        assert blob_store.stored == []
    
    @pytest.mark.asyncio
    async def test_unresolved_awaitable(self, normalizer):
        async def later():
            return PNG
        
        coro = later()
        try:
            assert await normalizer.normalize_for_store(coro) is None
        finally:
            coro.close()
