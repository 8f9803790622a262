"""blockbucket - Minimal single-file key/value bucket with queue-style pop."""
__version__ = '1.0.0'

from .core.bucket import Bucket, open_bucket, NOT_FOUND
from .core.codec import Record
from .core.errors import BucketError, CorruptBlockError

__all__ = ['Bucket', 'open_bucket', 'NOT_FOUND', 'Record', 'BucketError', 'CorruptBlockError']
