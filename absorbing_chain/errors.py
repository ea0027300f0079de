"""Exception hierarchy for absorbing chain processing.

Every failure aborts the current chain-processing call and surfaces as a
subclass of AbsorbingChainError. Nothing is retried.
"""


class AbsorbingChainError(Exception):
    """Base class for all errors raised while processing a chain."""


class ChainValidationError(AbsorbingChainError):
    """Raised when a chain violates a structural invariant."""


class DanglingEdgeError(ChainValidationError):
    """Raised when a successor is not itself a node of the graph."""

    def __init__(self, source: int, target: int) -> None:
        self.source = source
        self.target = target
        super().__init__(
            f"dangling edge: arc ({source},{target}) shouldn't exist, "
            f"{target} isn't a graph node"
        )


class InvalidAbsorbingNodeError(ChainValidationError):
    """Raised when an absorbing node can leave itself (or is not a node)."""

    def __init__(self, node: int, reason: str = "") -> None:
        self.node = node
        message = f"invalid absorbing node: {node} is not a valid absorbing node"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class UnreachableNodeError(ChainValidationError):
    """Raised when a non-absorbing node cannot reach any absorbing node."""

    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(
            f"node {node} is neither transient-with-absorbing-reachability "
            f"nor absorbing"
        )


class WeightError(AbsorbingChainError):
    """Raised when an edge weight is non-positive, infinite, NaN or unavailable."""

    def __init__(self, source: int, target: int, weight: float | None, reason: str) -> None:
        self.source = source
        self.target = target
        self.weight = weight
        super().__init__(f"arc ({source},{target}) {reason} ({weight})")


class TranslationError(AbsorbingChainError):
    """Raised when a translator is asked for an ID outside its domain."""

    def __init__(self, node_id: int, direction: str) -> None:
        self.node_id = node_id
        self.direction = direction
        super().__init__(f"translator: inexistent {direction} id {node_id}")


class ChainIOError(AbsorbingChainError):
    """Raised when a scratch directory or file operation fails."""

    def __init__(self, path: object, operation: str) -> None:
        self.path = path
        self.operation = operation
        super().__init__(f"I/O failure while {operation} at {path}")


class SolverError(AbsorbingChainError):
    """Raised when the external solver exits with a non-zero status."""

    def __init__(self, returncode: int | None, stderr: str, detail: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        head = detail or f"external solver failed with exit status {returncode}"
        super().__init__(f"{head}, with the following error stream:\n{stderr}")


class SolverCancelledError(SolverError):
    """Raised when the solver wait is cancelled or times out."""

    def __init__(self, reason: str, stderr: str = "") -> None:
        self.reason = reason
        super().__init__(None, stderr, detail=f"external solver cancelled: {reason}")


class SolutionFormatError(AbsorbingChainError):
    """Raised when the solver output stream cannot be decoded."""

    def __init__(self, path: object, message: str, excerpt: str = "") -> None:
        self.path = path
        self.excerpt = excerpt
        text = f"{message} in {path}"
        if excerpt:
            text += f", ends with ...'{excerpt}'"
        super().__init__(text)
