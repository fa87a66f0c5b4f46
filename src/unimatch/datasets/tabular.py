from __future__ import annotations

from typing import Sequence

import numpy as np

from unimatch.errors import InvalidLabelError, ShapeMismatchError


def to_matrix(rows: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Turn a list of rows (e.g. decoded JSON) into an (n, d) float64 matrix.
    Every row must have the same length; ragged tables are rejected here so they
    never reach the classifier.
    """
    if len(rows) == 0:
        raise ShapeMismatchError("X must not be empty")
    d = len(rows[0])
    for i, row in enumerate(rows):
        if len(row) != d:
            raise ShapeMismatchError(
                f"all rows of X must have the same number of columns (row 0 has {d}, row {i} has {len(row)})"
            )
    return np.asarray(rows, dtype=np.float64).reshape(len(rows), d)


def to_labels(labels: Sequence[int], n_samples: int) -> np.ndarray:
    y = np.asarray(labels, dtype=np.int64).ravel()
    if y.size != n_samples:
        raise ShapeMismatchError(f"X and y must have the same number of rows ({n_samples} != {y.size})")
    if (y < 0).any():
        raise InvalidLabelError("labels must be integers in [0, K-1]")
    return y
