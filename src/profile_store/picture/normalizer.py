"""
Picture normalization between in-memory and store form.

Store form is what gets persisted: a bare content address, or
``{'head': meta, 'body': address}``. Resolved form is what gets
displayed: the body holds the actual bytes or text.

The two directions treat metadata differently when unwrapping nested
composites:

- store: the head of the outermost composite is passed down as-is;
  caller-supplied metadata and inner heads are not merged into it.
- fetch: heads are merged on the way down, inner keys overriding
  outer ones.

Existing stored profiles depend on both behaviours.
"""

import logging
from typing import Optional

from ..collaborators import BlobStore
from .model import (
    CONTENT_LENGTH,
    CONTENT_TYPE,
    Composite,
    RawBytes,
    Reference,
    TextBody,
    byte_length,
    classify,
)

logger = logging.getLogger(__name__)


def _with_length(meta: dict, body: bytes | str) -> dict:
    # The measured length always replaces whatever the caller supplied
    return {**meta, CONTENT_LENGTH: byte_length(body)}


def _is_full_meta(meta: Optional[dict]) -> bool:
    return bool(meta) and bool(meta.get(CONTENT_TYPE)) and bool(meta.get(CONTENT_LENGTH))


class PictureNormalizer:
    """
    Canonicalizes pictures against a blob store.
    
    Both operations are coroutines; they suspend only while the blob
    store stores or fetches. Store failures propagate unchanged.
    """
    
    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store
    
    async def store_raw(self, body: bytes | str, meta: Optional[dict] = None):
        """
        Store raw content and return its store form.
        
        Returns the bare address, or a composite with the measured
        content-length when metadata was supplied.
        """
        address = await self.blob_store.store(body)
        if meta is None:
            return address
        return {
            'head': _with_length(meta, body),
            'body': address,
        }
    
    async def normalize_for_store(self, picture, meta: Optional[dict] = None):
        """
        Convert any picture shape into store form.
        
        Args:
            picture: raw bytes, text, a content address, or a composite
            meta: metadata for the body; content-length may be omitted
        
        Returns:
            the store-form picture, or None for unrecognized shapes
        """
        return await self._to_store_form(picture, meta, False)
    
    async def _to_store_form(self, picture, meta: Optional[dict], unwrapping: bool):
        variant = classify(picture)
        
        if isinstance(variant, RawBytes):
            return await self.store_raw(variant.data, meta)
        
        if isinstance(variant, Reference):
            # Already stored
            if _is_full_meta(meta):
                return {'head': meta, 'body': variant.address}
            return variant.address
        
        if isinstance(variant, TextBody):
            return await self.store_raw(variant.text, meta)
        
        if isinstance(variant, Composite):
            # The outermost head governs everything nested below it
            head = meta if unwrapping else variant.head
            return await self._to_store_form(variant.body, head, True)
        
        logger.debug("cannot store picture of type %s", type(picture).__name__)
        return None
    
    async def normalize_for_fetch(self, picture, meta: Optional[dict] = None):
        """
        Resolve a picture into displayable form.
        
        References are fetched from the blob store. Without metadata the
        bare body (or fetched bytes) is returned; with metadata the result
        is a ``{'head', 'body'}`` composite.
        
        Returns None for unrecognized shapes.
        """
        variant = classify(picture)
        
        if isinstance(variant, Reference):
            fetched = await self.blob_store.fetch(variant.address)
            if meta is None:
                return fetched
            return {'head': meta, 'body': fetched}
        
        if isinstance(variant, (RawBytes, TextBody)):
            body = variant.data if isinstance(variant, RawBytes) else variant.text
            if meta is None:
                return body
            return {'head': _with_length(meta, body), 'body': body}
        
        if isinstance(variant, Composite):
            if meta is not None:
                merged = {**meta, **(variant.head or {})}
            else:
                merged = variant.head
            return await self.normalize_for_fetch(variant.body, merged)
        
        logger.debug("cannot resolve picture of type %s", type(picture).__name__)
        return None
