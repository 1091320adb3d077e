"""
External editor capability.

The edit workflow only needs "something that edits a file in place". It takes
that as a plain callable so tests can pass a deterministic fake instead of
spawning a process.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from tppctl.errors import EditorError

logger = logging.getLogger(__name__)

# Edits the file at the given path in place; raises EditorError on failure.
Editor = Callable[[Path], None]


def external_editor(command: str) -> Editor:
    """
    Build an Editor that runs an interactive editor program.

    The command is split shell-style, so values such as "code --wait" work,
    and the file path is appended as the last argument. The process runs in
    the foreground and inherits stdin, stdout and stderr.

    Args:
        command: Editor command line, typically from $EDITOR.

    Returns:
        Editor callable.

    Raises:
        EditorError: If the command is empty (raised when called).
    """
    argv = shlex.split(command)

    def run(path: Path) -> None:
        if not argv:
            raise EditorError("no editor configured")

        logger.debug(f"Running editor: {argv[0]} {path}")
        try:
            result = subprocess.run([*argv, str(path)], check=False)
        except OSError as e:
            raise EditorError(f"cannot run editor '{argv[0]}': {e}") from e

        if result.returncode != 0:
            raise EditorError(
                f"editor '{argv[0]}' exited with status {result.returncode}",
                returncode=result.returncode,
            )

    return run
