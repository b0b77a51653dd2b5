"""
Picture variants.

A picture arrives in one of a few shapes: raw bytes, a text body (inline
SVG and the like), a content-address reference, or a composite
``{head, body}`` whose body is again any picture. ``classify`` maps an
arbitrary value onto exactly one of these variants.
"""

from typing import Optional, Union

from ..integrity.hashing import is_content_address


CONTENT_TYPE = 'content-type'
CONTENT_LENGTH = 'content-length'


def byte_length(body: bytes | str) -> int:
    """Length of a picture body in bytes, text counted as UTF-8."""
    if isinstance(body, str):
        return len(body.encode('utf-8'))
    return len(body)


class RawBytes:
    """Binary image data held in memory."""
    
    def __init__(self, data: bytes):
        self.data = bytes(data)
    
    def __repr__(self) -> str:
        return f"RawBytes(size={len(self.data)})"


class TextBody:
    """Textual image data, e.g. inline SVG."""
    
    def __init__(self, text: str):
        self.text = text
    
    def __repr__(self) -> str:
        return f"TextBody(size={byte_length(self.text)})"


class Reference:
    """Address of a blob held by a blob store."""
    
    def __init__(self, address: str):
        self.address = address
    
    def __repr__(self) -> str:
        return f"Reference({self.address[:8]}...)"


class Composite:
    """
    Picture metadata alongside a body.
    
    The body may itself be any picture shape, including another
    composite.
    """
    
    def __init__(self, head: Optional[dict], body):
        self.head = head
        self.body = body
    
    def to_dict(self) -> dict:
        """Convert to the plain ``{'head', 'body'}`` representation."""
        obj = {'body': self.body}
        if self.head is not None:
            obj['head'] = self.head
        return obj
    
    @classmethod
    def from_dict(cls, data: dict) -> 'Composite':
        """Wrap a plain mapping. Missing keys become None."""
        return cls(data.get('head'), data.get('body'))
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Composite):
            return NotImplemented
        return self.head == other.head and self.body == other.body
    
    def __repr__(self) -> str:
        return f"Composite(head={self.head!r}, body={self.body!r})"


PictureVariant = Union[RawBytes, TextBody, Reference, Composite]


def classify(value) -> Optional[PictureVariant]:
    """
    Determine which picture variant a value is.
    
    Strings are references only when they look exactly like a content
    address; every other string is text content. Unknown shapes,
    including awaitables that have not been resolved yet, yield None.
    """
    if isinstance(value, (bytes, bytearray)):
        return RawBytes(value)
    if isinstance(value, str):
        if is_content_address(value):
            return Reference(value)
        return TextBody(value)
    if isinstance(value, Composite):
        return value
    if isinstance(value, dict):
        return Composite.from_dict(value)
    return None
