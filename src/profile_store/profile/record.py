"""
Profile record.

Wraps a plain data dict (username, password hash, gender, picture and
whatever else the caller keeps there) and enforces its invariants: the
password is only ever stored hashed, and the picture is only ever
stored in store form.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Optional

from ..collaborators import AvatarGenerator, PasswordHasher
from ..picture.normalizer import PictureNormalizer

logger = logging.getLogger(__name__)


def parse_or_default(serialized: str | bytes | None) -> dict:
    """
    Decode a serialized profile.
    
    Malformed JSON, or JSON that is not an object, yields an empty dict.
    The fallback is logged, never raised.
    """
    if not serialized:
        return {}
    try:
        data = json.loads(serialized)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("discarding malformed profile data: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "discarding profile data of type %s, expected an object",
            type(data).__name__,
        )
        return {}
    return data


class ProfileRecord:
    """
    A single user's profile.
    
    Pictures are read and written through ``get_picture`` and
    ``set_picture``. Writes run in the background and are applied in
    the order they were issued; reads wait for the write in flight.
    """
    
    def __init__(
        self,
        data: dict | str | bytes | None = None,
        *,
        normalizer: PictureNormalizer,
        hasher: PasswordHasher,
        avatar_generator: AvatarGenerator,
    ):
        """
        Create a record.
        
        Args:
            data: existing data dict (used as-is, not copied) or its
                JSON serialization
            normalizer: picture normalizer bound to a blob store
            hasher: password hasher
            avatar_generator: renders the fallback picture
        """
        if isinstance(data, dict):
            self.data = data
        else:
            self.data = parse_or_default(data)
        self.normalizer = normalizer
        self.hasher = hasher
        self.avatar_generator = avatar_generator
        self._pending_picture: Optional[asyncio.Task] = None
    
    # ========== Serialization ==========
    
    def to_dict(self) -> dict:
        """
        Plain representation of the record.
        
        Includes the stored password hash; redact it before sending the
        record anywhere. A picture that has not resolved yet is left out.
        """
        computed = {
            'username': self.username,
            'password': self.password,
            'gender': self.gender,
        }
        obj = {k: v for k, v in computed.items() if v is not None}
        obj.update(
            (k, v) for k, v in self.data.items() if not inspect.isawaitable(v)
        )
        return obj
    
    def to_json(self) -> str:
        """Serialize the record to a JSON string."""
        return json.dumps(self.to_dict())
    
    def __str__(self) -> str:
        return self.to_json()
    
    # ========== Fields ==========
    
    @property
    def username(self) -> Optional[str]:
        return self.data.get('username') or None
    
    @username.setter
    def username(self, value: Optional[str]) -> None:
        if value:
            self.data['username'] = value
    
    @property
    def password(self) -> Optional[str]:
        """The stored password hash."""
        return self.data.get('password') or None
    
    @password.setter
    def password(self, plaintext: Optional[str]) -> None:
        if plaintext:
            self.data['password'] = self.hasher.hash(plaintext)
    
    def check_password(self, plaintext: str) -> bool:
        """Verify a plaintext against the stored hash. False if none is stored."""
        stored = self.data.get('password')
        if not stored:
            return False
        return self.hasher.verify(plaintext, stored)
    
    @property
    def gender(self) -> Optional[str]:
        return self.data.get('gender')
    
    @gender.setter
    def gender(self, value: Optional[str]) -> None:
        # None clears; empty string is kept
        if value is None:
            self.data.pop('gender', None)
        else:
            self.data['gender'] = value
    
    # ========== Picture ==========
    
    @property
    def pending_picture(self) -> Optional[asyncio.Task]:
        """The picture write still in flight, if any."""
        return self._pending_picture
    
    async def get_picture(self) -> Any:
        """
        Resolve the profile picture for display.
        
        Waits for an in-flight write first, so a read issued after
        ``set_picture`` sees the new picture. Falls back to the avatar
        generated from the username when no picture resolves.
        
        Errors from the blob store, including a failed in-flight write,
        propagate.
        """
        pending = self._pending_picture
        if pending is not None:
            await pending
        
        stored = self.data.get('picture')
        if inspect.isawaitable(stored):
            if not isinstance(stored, asyncio.Future):
                # a coroutine can only be awaited once
                stored = asyncio.ensure_future(stored)
                self.data['picture'] = stored
            pending_value = stored
            stored = await stored
            if self.data.get('picture') is pending_value:
                self.data['picture'] = stored
        
        resolved = None
        if stored:
            resolved = await self.normalizer.normalize_for_fetch(stored)
        
        return resolved or self.avatar_generator.picture_for(self.username or '')
    
    def set_picture(self, value: Any) -> asyncio.Task:
        """
        Replace the profile picture.
        
        Returns immediately with the task performing the write; await it
        to observe completion or failure. Must be called with an event
        loop running. Writes on the same record are applied one at a
        time, in call order.
        """
        previous = self._pending_picture
        task = asyncio.ensure_future(self._write_picture(value, previous))
        self._pending_picture = task
        task.add_done_callback(self._clear_pending)
        return task
    
    async def _write_picture(self, value: Any, previous: Optional[asyncio.Task]) -> Any:
        if previous is not None and not previous.done():
            # Outcome of the earlier write belongs to its own awaiters
            await asyncio.wait({previous})
        
        if inspect.isawaitable(value):
            value = await value
        
        stored = await self.normalizer.normalize_for_store(value)
        if stored is None:
            self.data.pop('picture', None)
        else:
            self.data['picture'] = stored
        return stored
    
    def _clear_pending(self, task: asyncio.Task) -> None:
        if self._pending_picture is task:
            self._pending_picture = None
        if not task.cancelled() and task.exception() is not None:
            logger.warning("picture write failed: %s", task.exception())
    
    def __repr__(self) -> str:
        return f"ProfileRecord(username={self.username!r})"
