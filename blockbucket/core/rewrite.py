"""Filter-and-replace rewrite of a bucket file, the only way records are removed."""
import os
import stat
import tempfile
import time
from contextlib import closing
from typing import Callable, List, NamedTuple

from .codec import Record
from .scanner import scan_blocks
from ..utils.config import Config


class RewriteResult(NamedTuple):
    """Outcome of a rewrite: records kept, records removed, and (if collected) the removed records in file order."""
    kept: int
    removed: int
    records: List[Record]


def rewrite(path: str, keep: Callable[[Record, int], bool],
            collect_removed: bool = False) -> RewriteResult:
    """
    Rewrite ``path`` keeping only the records for which ``keep(record, position)`` is true.

    Kept blocks are copied as stored, in order, into a temporary file beside
    the real file (symlinks are resolved) which then replaces it with
    ``os.replace``. If the scan or a write fails, the temporary file is
    removed and the original is left untouched. When nothing is removed the
    original is not replaced. Removed records are only held in memory when
    ``collect_removed`` is set.
    """
    start_time = time.time()
    path = os.path.realpath(path)
    directory = os.path.dirname(path)
    fd, temp_path = tempfile.mkstemp(
        prefix=os.path.basename(path) + '.', suffix=Config.REWRITE_SUFFIX, dir=directory)

    kept = 0
    removed = 0
    records = []
    try:
        with os.fdopen(fd, 'wb') as out:
            with closing(scan_blocks(path)) as blocks:
                for position, record, block in blocks:
                    if keep(record, position):
                        out.write(block)
                        kept += 1
                    else:
                        removed += 1
                        if collect_removed:
                            records.append(record)
            out.flush()
            if Config.FSYNC_WRITES:
                os.fsync(out.fileno())

        if removed:
            os.chmod(temp_path, stat.S_IMODE(os.stat(path).st_mode))
            os.replace(temp_path, path)
        else:
            os.remove(temp_path)
    except BaseException:
        # Clean up temporary file if it still exists
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise

    if Config.VERBOSE:
        duration = time.time() - start_time
        print(f"[Rewrite] {path}: kept {kept}, removed {removed} in {duration:.3f}s")

    return RewriteResult(kept, removed, records)
