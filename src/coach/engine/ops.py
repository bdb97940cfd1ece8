# src/coach/engine/ops.py

"""
Filesystem-level operations.

This module contains:
- bounded, UTF-8-checked reads of coach files,
- atomic writes of serialized entries,
- day file naming and creation (with carry-over of unfinished tasks).

"Today" is always passed in by the caller; the clock is never read here.
"""

from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from datetime import date
from pathlib import Path
from typing import Final, Optional

from .actions import merge_unfinished, new_entry
from .model import Entry
from .parse import parse
from .render import serialize
from .validate import validate_entry

logger = logging.getLogger(__name__)


# A typical entry written by hand is around 1-2K.
DEFAULT_MAX_ENTRY_BYTES: Final[int] = 8 * 1024

_DAY_FILE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class StorageError(Exception):
    """
    Raised when a coach file cannot be read or written.
    """


# ---------------------------------------------------------------------
# Day files
# ---------------------------------------------------------------------

def day_label(day: date) -> str:
    """Label (and file name) used for a day's entry: YYYY-MM-DD."""
    return day.isoformat()


def day_path(journal_dir: Path, day: date) -> Path:
    return Path(journal_dir) / day_label(day)


def find_previous_entry(journal_dir: Path, day: date) -> Optional[Path]:
    """
    Return the most recent day file strictly before `day`, if any.
    """
    d = Path(journal_dir)
    if not d.is_dir():
        return None

    best: Optional[tuple[date, Path]] = None
    for p in d.iterdir():
        if not p.is_file() or not _DAY_FILE_RE.match(p.name):
            continue
        try:
            when = date.fromisoformat(p.name)
        except ValueError:
            continue
        if when >= day:
            continue
        if best is None or when > best[0]:
            best = (when, p)

    return best[1] if best else None


# ---------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------

def read_bounded_text(path: str | Path, max_bytes: int = DEFAULT_MAX_ENTRY_BYTES) -> str:
    """
    Read a file as UTF-8, refusing files larger than `max_bytes`.
    """
    p = Path(path)
    try:
        with p.open("rb") as f:
            data = f.read(max_bytes + 1)
    except OSError as e:
        raise StorageError(f"{p}: cannot read file: {e}") from e

    if len(data) > max_bytes:
        raise StorageError(f"{p}: file is longer than the maximum allowed ({max_bytes} bytes)")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StorageError(f"{p}: file is not valid UTF-8: {e}") from e


def load_entry(path: str | Path, max_bytes: int = DEFAULT_MAX_ENTRY_BYTES) -> Entry:
    """
    Read and parse a coach file. FormatError propagates unchanged.
    """
    text = read_bounded_text(path, max_bytes)
    logger.debug("loaded %s (%d characters)", path, len(text))
    return parse(text)


# ---------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------

def _write_atomic(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def save_entry(path: str | Path, entry: Entry) -> None:
    """
    Persist an entry by fully re-rendering the file.

    Behaviour:
    - the entry is validated first; nothing is written if it has issues,
    - the file is replaced atomically (temp file + rename),
    - the target directory must already exist.
    """
    p = Path(path)

    result = validate_entry(entry)
    if not result.ok:
        details = "; ".join(f"{i.code}: {i.message}" for i in result.issues)
        raise StorageError(f"{p}: refusing to write invalid entry ({details})")

    if not p.parent.is_dir():
        raise StorageError(f"{p}: directory not found: {p.parent}")

    _write_atomic(p, serialize(entry))
    logger.debug("wrote %s", p)


def create_day_entry(
    journal_dir: str | Path,
    day: date,
    *,
    max_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
) -> Path:
    """
    Create the entry file for `day`, carrying over unfinished tasks from
    the most recent earlier day file.

    Returns the path of the new file. Fails if it already exists.
    """
    d = Path(journal_dir)
    path = day_path(d, day)
    if path.exists():
        raise StorageError(f"{path}: entry already exists")

    carried = []
    previous = find_previous_entry(d, day)
    if previous is not None:
        carried = merge_unfinished(load_entry(previous, max_bytes))
        logger.debug("carrying %d unfinished task(s) over from %s", len(carried), previous.name)

    entry = new_entry(day_label(day), carried)

    try:
        with path.open("x", encoding="utf-8", newline="") as f:
            f.write(serialize(entry))
            f.flush()
            os.fsync(f.fileno())
    except FileExistsError as e:
        raise StorageError(f"{path}: entry already exists") from e
    except OSError as e:
        raise StorageError(f"{path}: cannot create file: {e}") from e

    return path
