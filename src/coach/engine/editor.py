# src/coach/engine/editor.py

"""
External editor prompt for multi-line input (notes).
"""

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """
    Raised when the editor cannot be started or exits unsuccessfully.
    """


def edit_prompt(editor: str, *, initial: str = "") -> str:
    """
    Open `editor` on a temporary file and return what was saved.

    The editor command is split with shlex (no shell), so values such as
    "vim -e" or "code --wait" work.
    """
    argv = shlex.split(editor)
    if not argv:
        raise EditorError("no editor configured")

    fd, name = tempfile.mkstemp(prefix="coach-", suffix=".txt")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(initial)

        logger.debug("launching editor: %s %s", argv, path)
        try:
            proc = subprocess.run([*argv, str(path)])
        except OSError as e:
            raise EditorError(f"cannot start editor '{argv[0]}': {e}") from e

        if proc.returncode != 0:
            raise EditorError(f"editor '{argv[0]}' exited with status {proc.returncode}")

        return path.read_text(encoding="utf-8")
    finally:
        path.unlink(missing_ok=True)
