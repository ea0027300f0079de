"""PETSc binary system encoding and ASCII-matlab solution decoding."""

from absorbing_chain.petsc.decoder import decode_rows, read_solution
from absorbing_chain.petsc.encoder import (
    MAT_FILE_CLASSID,
    VEC_FILE_CLASSID,
    ImplicitWeightedEdge,
    LinearSystemLayout,
    compressed_rhs,
    write_linear_system,
)
from absorbing_chain.petsc.matlab import MatlabToJSONReader

__all__ = [
    "MAT_FILE_CLASSID",
    "VEC_FILE_CLASSID",
    "ImplicitWeightedEdge",
    "LinearSystemLayout",
    "MatlabToJSONReader",
    "compressed_rhs",
    "decode_rows",
    "read_solution",
    "write_linear_system",
]
