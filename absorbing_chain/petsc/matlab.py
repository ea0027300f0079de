"""Pull-based rewrite of PETSc ASCII-matlab vector output into JSON arrays.

PETSc prints each solution vector as a bracketed block whose entries are
separated by newlines, with a blank first and last interior line:

    Vec_0x1_0 = [
    8.0000000000000004e-01
    7.0000000000000007e-01
    ];

MatlabToJSONReader scans to the next '[' and its matching ']', turns the
block into `[a,b,...]\\n` and hands it out; anything outside brackets is
skipped. At most one block is held in memory.
"""

import io
from collections.abc import Iterator
from typing import TextIO

from absorbing_chain.errors import ChainIOError, SolutionFormatError

CHUNK_SIZE = 64 * 1024
EXCERPT_LENGTH = 100


class MatlabToJSONReader(io.TextIOBase):
    """Readable text stream of JSON arrays over a matlab-format stream.

    Iterating yields one converted block per solution vector; read()
    returns the same text as a continuous stream.
    """

    def __init__(self, stream: TextIO, name: object = "<stream>", chunk_size: int = CHUNK_SIZE) -> None:
        super().__init__()
        self._stream = stream
        self._name = name
        self._chunk_size = chunk_size
        self._pending = ""  # read from the stream but not yet scanned
        self._buffer = ""  # converted text not yet handed out
        self._eof = False
        self._done = False

    def readable(self) -> bool:
        return True

    def _read_until(self, delimiter: str, keep: bool = True) -> tuple[str, bool]:
        """Consume up to and including `delimiter`; (text, found).

        With keep=False the consumed text is dropped as it is scanned.
        """
        parts = []
        while True:
            pos = self._pending.find(delimiter)
            if pos >= 0:
                if keep:
                    parts.append(self._pending[: pos + 1])
                self._pending = self._pending[pos + 1 :]
                return "".join(parts), True
            if keep:
                parts.append(self._pending)
            self._pending = ""
            if self._eof:
                return "".join(parts), False
            try:
                chunk = self._stream.read(self._chunk_size)
            except OSError as exc:
                raise ChainIOError(self._name, "reading solver output") from exc
            if not chunk:
                self._eof = True
            self._pending = chunk

    def next_block(self) -> str | None:
        """Convert the next bracketed block, or None at a clean end of stream."""
        if self._done:
            return None
        _, found = self._read_until("[", keep=False)
        if not found:
            self._done = True
            return None

        block, closed = self._read_until("]")
        interior = block[:-1] if closed else block
        if not closed or len(interior) < 1 or interior[0] != "\n" or interior[-1] != "\n":
            self._done = True
            excerpt = block[-EXCERPT_LENGTH:]
            reason = "unterminated block" if not closed else "invalid block"
            raise SolutionFormatError(self._name, reason, excerpt)

        values = interior.strip("\n")
        return "[" + values.replace("\n", ",") + "]\n"

    def __iter__(self) -> Iterator[str]:
        while True:
            block = self.next_block()
            if block is None:
                return
            yield block

    def read(self, size: int | None = -1) -> str:
        if size is None or size < 0:
            parts = [self._buffer]
            self._buffer = ""
            parts.extend(self)
            return "".join(parts)
        while len(self._buffer) < size:
            block = self.next_block()
            if block is None:
                break
            self._buffer += block
        out, self._buffer = self._buffer[:size], self._buffer[size:]
        return out
