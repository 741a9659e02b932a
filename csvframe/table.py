"""The in-memory table produced by a load: a header plus a numeric matrix."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

import numpy as np

from csvframe.errors import AllocationError


def allocate_matrix(rows: int, cols: int, dtype: Any = np.float64, *, source: str = "<stream>") -> np.ndarray:
    """Allocate an uninitialised (rows, cols) matrix for the population pass.

    Every cell is overwritten before the table is handed out, so the
    uninitialised contents never escape.
    """
    if rows < 0 or cols < 0:
        raise AllocationError(f"invalid dimensions ({rows}, {cols})", stage="population", source=source)
    try:
        return np.empty((rows, cols), dtype=dtype)
    except (MemoryError, ValueError) as e:
        raise AllocationError(
            f"cannot allocate a {rows}x{cols} matrix", stage="population", source=source
        ) from e


@dataclass(frozen=True, eq=False)
class Table:
    """Header names and a (row_count, col_count) float matrix.

    The matrix is stored read-only. The caller's array is copied first unless
    it already is a read-only float array, and integer or boolean input is
    cast to float64. Use ``matrix.copy()`` to get a mutable array.
    """
    delimiter: str
    header: Tuple[str, ...]
    matrix: np.ndarray

    def __post_init__(self):
        matrix = self.matrix
        if not (isinstance(matrix, np.ndarray) and matrix.dtype.kind == "f"
                and not matrix.flags.writeable):
            # private copy, so freezing it never touches the caller's array
            matrix = np.array(matrix)
            if matrix.dtype.kind in "biu":
                matrix = matrix.astype(np.float64)
            elif matrix.dtype.kind != "f":
                raise ValueError(f"matrix must hold floats, got dtype {matrix.dtype}")
        if matrix.ndim != 2:
            raise ValueError(f"matrix must be 2-D, got shape {matrix.shape}")
        header = tuple(self.header)
        if len(header) != matrix.shape[1]:
            raise ValueError(
                f"header has {len(header)} names but matrix has {matrix.shape[1]} columns"
            )
        matrix.setflags(write=False)
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "matrix", matrix)

    @property
    def row_count(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def col_count(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.row_count, self.col_count

    def __len__(self) -> int:
        return self.row_count

    def index_of(self, name: str) -> int:
        """Position of the first column called `name`."""
        try:
            return self.header.index(name)
        except ValueError:
            raise KeyError(f"no column named {name!r}; columns are {list(self.header)}") from None

    def column(self, key: Union[str, int]) -> np.ndarray:
        """Return one column (by name or position) as a read-only 1-D view."""
        idx = self.index_of(key) if isinstance(key, str) else key
        return self.matrix[:, idx]

    def row(self, index: int) -> np.ndarray:
        return self.matrix[index]

    def columns(self, keys: Sequence[Union[str, int]]) -> np.ndarray:
        idx = [self.index_of(k) if isinstance(k, str) else k for k in keys]
        return self.matrix[:, idx]
