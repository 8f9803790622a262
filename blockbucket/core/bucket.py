"""Main Bucket implementation."""
import os
from contextlib import closing
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

from .codec import Record, encode, encode_many, to_bytes
from .rewrite import rewrite
from .scanner import scan_records
from ..utils.config import Config

# Returned by get() when no record has the requested key
NOT_FOUND = Record(b'', b'')


def _check_count(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, not {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


class Bucket:
    """
    File-backed key/value bucket.

    Records are kept in insertion order in a single file. Every operation
    opens the file, does its work and closes it again; nothing is cached
    between calls, so two calls on the same Bucket each re-read the file.

    No locking is performed. Mutating calls against one file (from this or
    any other Bucket, thread or process) must be serialized by the caller;
    two concurrent deleters can otherwise lose each other's changes.
    """

    def __init__(self, path):
        self.path = os.fspath(path)
        self._ensure_file()

    def __repr__(self):
        return f"Bucket({self.path!r})"

    def _ensure_file(self):
        """Create the backing file if it does not exist."""
        if not os.path.exists(self.path):
            with open(self.path, 'ab'):
                pass

    def _append(self, data: bytes):
        """Append encoded blocks with a single write."""
        with open(self.path, 'ab') as f:
            f.write(data)
            f.flush()
            if Config.FSYNC_WRITES:
                os.fsync(f.fileno())

    def _records(self) -> Iterator[Tuple[int, Record]]:
        self._ensure_file()
        return scan_records(self.path)

    def _find_position(self, key: bytes) -> Optional[int]:
        """Position of the first record whose key equals ``key``."""
        with closing(self._records()) as records:
            for position, record in records:
                if record.key == key:
                    return position
        return None

    def set(self, key: bytes, value: bytes):
        """Append a key/value pair. Existing records with the same key are kept."""
        data = encode(key, value)
        self._ensure_file()
        self._append(data)

    def set_many(self, items: Iterable[Tuple[bytes, bytes]]):
        """Append several pairs in one write, in the given order."""
        data = encode_many(items)
        self._ensure_file()
        if data:
            self._append(data)

    def get(self, key: bytes) -> Record:
        """
        Return the first record stored under ``key``.

        Returns ``(b'', b'')`` when no record matches.
        """
        key = to_bytes(key, 'key')
        with closing(self._records()) as records:
            for _, record in records:
                if record.key == key:
                    return record
        return NOT_FOUND

    def delete(self, key: bytes) -> int:
        """Remove every record stored under ``key``. Returns the number removed."""
        key = to_bytes(key, 'key')
        self._ensure_file()
        result = rewrite(self.path, lambda record, position: record.key != key)
        return result.removed

    def list(self, limit: int) -> List[Record]:
        """Return up to ``limit`` records from the start of the file."""
        _check_count(limit, 'limit')
        with closing(self._records()) as records:
            return [record for _, record in islice(records, limit)]

    def list_next(self, limit: int, skip: int) -> List[Record]:
        """
        Return up to ``limit`` records after skipping the first ``skip``.

        Every call scans from the start of the file, so paging through a
        bucket costs O(skip + limit) per page.
        """
        _check_count(limit, 'limit')
        _check_count(skip, 'skip')
        with closing(self._records()) as records:
            return [record for _, record in islice(records, skip, skip + limit)]

    def find_next(self, key: bytes, limit: int, only_after_key: bool = False) -> List[Record]:
        """
        Return up to ``limit`` records starting at the first record stored under ``key``.

        With ``only_after_key`` the matching record itself is excluded and the
        window starts right after it. Returns an empty list if no record matches.
        """
        key = to_bytes(key, 'key')
        _check_count(limit, 'limit')
        result = []
        if limit == 0:
            return result

        found = False
        with closing(self._records()) as records:
            for _, record in records:
                if not found:
                    if record.key != key:
                        continue
                    found = True
                    if only_after_key:
                        continue
                result.append(record)
                if len(result) >= limit:
                    break
        return result

    def delete_to(self, key: bytes, also_delete_the_found_block: bool = False) -> int:
        """
        Remove every record before the first record stored under ``key``.

        With ``also_delete_the_found_block`` the matching record is removed
        as well. Nothing is removed when no record matches. Returns the
        number of records removed.
        """
        key = to_bytes(key, 'key')
        found = self._find_position(key)
        if found is None:
            return 0

        if also_delete_the_found_block:
            result = rewrite(self.path, lambda record, position: position > found)
        else:
            result = rewrite(self.path, lambda record, position: position >= found)
        return result.removed

    def list_lock_delete(self, limit: int) -> List[Record]:
        """
        Pop the first ``limit`` records: return them and remove them from the file.

        Records are removed by position, so duplicate keys among the popped
        records never cause later records to be removed. The read and the
        removal happen in one rewrite pass; this does not protect against
        other Bucket instances working on the same file.
        """
        _check_count(limit, 'limit')
        if limit == 0:
            return []
        self._ensure_file()
        result = rewrite(self.path, lambda record, position: position >= limit, collect_removed=True)
        return result.records

    def count(self) -> int:
        """Number of records in the file."""
        with closing(self._records()) as records:
            return sum(1 for _ in records)

    def exists(self, key: bytes) -> bool:
        """Whether any record is stored under ``key``."""
        return self._find_position(to_bytes(key, 'key')) is not None

    def size(self) -> int:
        """Size of the backing file in bytes."""
        self._ensure_file()
        return os.path.getsize(self.path)

    def clear(self):
        """Remove all records."""
        with open(self.path, 'wb'):
            pass

    def destroy(self):
        """Delete the backing file. A later operation recreates it empty."""
        if os.path.exists(self.path):
            os.remove(self.path)

    def __len__(self):
        return self.count()

    def __contains__(self, key):
        return self.exists(key)

    def __iter__(self) -> Iterator[Record]:
        with closing(self._records()) as records:
            for _, record in records:
                yield record


def open_bucket(path) -> Bucket:
    """Open (creating if missing) the bucket stored at ``path``."""
    return Bucket(path)
