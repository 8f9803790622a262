"""Sequential, memory-mapped traversal of a bucket file."""
import mmap
import os
from contextlib import closing
from typing import Iterator, NamedTuple, Tuple

from .codec import Record, decode
from .errors import CorruptBlockError


class ScanEntry(NamedTuple):
    """A decoded record together with its byte span [start, end) in the file."""
    record: Record
    start: int
    end: int


def scan(path: str, offset: int = 0) -> Iterator[ScanEntry]:
    """
    Yield every block from ``offset`` to the end of the file.

    The file and its memory map are held only while the generator is
    running; they are released when it is exhausted, raises, or is closed.
    Callers that stop early should close the generator (or wrap it in
    ``contextlib.closing``) to release the file promptly.
    """
    if offset < 0:
        raise ValueError("offset must be non-negative")

    with open(path, 'rb') as f:
        size = os.fstat(f.fileno()).st_size
        if size == 0:
            return  # mmap cannot map an empty file

        with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as view:
            position = offset
            while True:
                try:
                    decoded = decode(view, position)
                except CorruptBlockError as e:
                    e.path = path
                    raise
                if decoded is None:
                    break
                record, end = decoded
                yield ScanEntry(record, position, end)
                position = end


def scan_records(path: str, offset: int = 0) -> Iterator[Tuple[int, Record]]:
    """Yield (position, record) pairs, position counting from the first block scanned."""
    with closing(scan(path, offset)) as entries:
        for position, entry in enumerate(entries):
            yield position, entry.record


def scan_blocks(path: str, offset: int = 0) -> Iterator[Tuple[int, Record, bytes]]:
    """Yield (position, record, block) where block is the record's encoded bytes as stored."""
    if offset < 0:
        raise ValueError("offset must be non-negative")

    with open(path, 'rb') as f:
        if os.fstat(f.fileno()).st_size == 0:
            return

        with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as view:
            start = offset
            position = 0
            while True:
                try:
                    decoded = decode(view, start)
                except CorruptBlockError as e:
                    e.path = path
                    raise
                if decoded is None:
                    break
                record, end = decoded
                yield position, record, view[start:end]
                start = end
                position += 1
