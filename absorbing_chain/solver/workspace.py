"""Scoped scratch directories for one chain-processing call."""

import logging
import shutil
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from absorbing_chain.errors import ChainIOError

log = logging.getLogger(__name__)

SCRATCH_PREFIX = ".absorbing-"


@contextmanager
def scratch_directory(root: str | Path = ".") -> Generator[Path, None, None]:
    """Create a private directory under `root`, removed on every exit path.

    Args:
        root: Writable directory supplied by the caller.

    Yields:
        Absolute path of the new directory.
    """
    root = Path(root)
    try:
        path = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=root)).resolve()
    except OSError as exc:
        raise ChainIOError(root, "creating scratch directory") from exc
    log.debug("Scratch directory %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
