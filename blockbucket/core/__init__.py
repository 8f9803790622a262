"""Core storage components."""
from .bucket import Bucket, open_bucket, NOT_FOUND
from .codec import Record, encode, decode
from .scanner import scan, scan_blocks, ScanEntry
from .rewrite import rewrite, RewriteResult
from .errors import BucketError, CorruptBlockError

__all__ = [
    'Bucket', 'open_bucket', 'NOT_FOUND', 'Record', 'encode', 'decode',
    'scan', 'scan_blocks', 'ScanEntry', 'rewrite', 'RewriteResult', 'BucketError', 'CorruptBlockError',
]
