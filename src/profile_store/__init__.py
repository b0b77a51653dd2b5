from .engine import ProfileStoreEngine
from .avatar import IdenticonAvatarGenerator
from .passwords import BcryptPasswordHasher
from .picture.model import Composite, classify
from .picture.normalizer import PictureNormalizer
from .profile.record import ProfileRecord, parse_or_default
from .storage.blob_store import LocalBlobStore
from .errors import (
    ProfileStoreError,
    BlobNotFoundError,
    BlobCorruptedError,
    InvalidReferenceError,
    StorageError,
)

__version__ = '0.1.0'

__all__ = [
    'ProfileStoreEngine',
    'ProfileRecord',
    'parse_or_default',
    'PictureNormalizer',
    'Composite',
    'classify',
    'LocalBlobStore',
    'BcryptPasswordHasher',
    'IdenticonAvatarGenerator',
    'ProfileStoreError',
    'BlobNotFoundError',
    'BlobCorruptedError',
    'InvalidReferenceError',
    'StorageError',
]
