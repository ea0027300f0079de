"""Invocation of the external linear-system solver.

The solver is an opaque process: it is given the binary system file, the
output path, and the number of right-hand sides, and must exit 0 after
writing one ASCII-matlab vector per right-hand side. How it is built or
where its assets live is configured by SolverConfig.
"""

import contextlib
import logging
import os
import signal
import subprocess
import threading
import time
from pathlib import Path

from absorbing_chain.config.settings import SolverConfig
from absorbing_chain.errors import ChainIOError, SolverCancelledError, SolverError

log = logging.getLogger(__name__)

DRAIN_GRACE = 1.0  # seconds to wait for the stderr pipe to close after exit


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the solver's session, reaching wrappers' children such as `make`'s."""
    with contextlib.suppress(ProcessLookupError):
        os.killpg(proc.pid, signal.SIGKILL)
    proc.wait()


def build_command(config: SolverConfig, infile: Path, outfile: Path, imax: int) -> list[str]:
    """Substitute {infile}, {outfile} and {imax} into the command template."""
    values = {"{infile}": str(infile), "{outfile}": str(outfile), "{imax}": str(imax)}
    argv = []
    for arg in config.command:
        for placeholder, value in values.items():
            arg = arg.replace(placeholder, value)
        argv.append(arg)
    return argv


def run_solver(
    config: SolverConfig,
    infile: str | Path,
    outfile: str | Path,
    imax: int,
    cwd: str | Path | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """Run the solver to completion, blocking the calling thread.

    In/out paths are made absolute so the solver may run in any directory.
    The solver is started in its own session; cancellation and timeout
    kill its whole process group, not only the direct child.

    Args:
        config: Command template, working directory and timeout.
        infile: Binary linear system written by write_linear_system.
        outfile: Where the solver writes its ASCII-matlab output.
        imax: Number of right-hand-side vectors (absorbing nodes).
        cwd: Fallback working directory when config.working_dir is unset.
        cancel: Event that aborts the wait when set.

    Raises:
        SolverError: Non-zero exit status; carries the captured stderr.
        SolverCancelledError: Cancelled through `cancel` or timed out.
        ChainIOError: The solver could not be started.
    """
    infile, outfile = Path(infile).resolve(), Path(outfile).resolve()
    argv = build_command(config, infile, outfile, imax)
    workdir = config.working_dir or cwd
    log.debug("Running solver %s in %s", argv, workdir or ".")

    try:
        proc = subprocess.Popen(
            argv,
            cwd=workdir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            start_new_session=True,
        )
    except OSError as exc:
        raise ChainIOError(argv[0], "starting external solver") from exc

    # stderr is drained concurrently with the wait loop.
    stderr_parts: list[str] = []
    drain = threading.Thread(
        target=lambda: stderr_parts.append(proc.stderr.read()), daemon=True
    )
    drain.start()

    deadline = None if config.timeout is None else time.monotonic() + config.timeout
    cancelled = ""
    try:
        while True:
            try:
                proc.wait(timeout=config.poll_interval)
                break
            except subprocess.TimeoutExpired:
                pass
            if cancel is not None and cancel.is_set():
                cancelled = "cancellation requested"
                break
            if deadline is not None and time.monotonic() >= deadline:
                cancelled = f"timed out after {config.timeout}s"
                break
    finally:
        if proc.returncode is None:
            _kill_group(proc)
        drain.join(timeout=DRAIN_GRACE)
        if drain.is_alive():
            log.warning("Solver descendants still hold stderr, killing process group %d", proc.pid)
            _kill_group(proc)
            drain.join(timeout=DRAIN_GRACE)
        if not drain.is_alive():
            proc.stderr.close()

    stderr = "".join(stderr_parts)
    if cancelled:
        raise SolverCancelledError(cancelled, stderr)
    if proc.returncode != 0:
        raise SolverError(proc.returncode, stderr)
    if stderr.strip():
        log.warning("Solver exited cleanly but wrote to stderr:\n%s", stderr)
