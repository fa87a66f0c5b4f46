from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

# Three classes in 2-D, three points each.
# class 0 around (-1, -1), class 1 around (0, 1), class 2 around (2, 2)
_THREE_CLUSTERS_X = [
    [-1.0, -1.2],
    [-0.8, -0.9],
    [-1.2, -1.1],
    [0.0, 1.0],
    [0.2, 0.8],
    [-0.1, 1.1],
    [2.0, 2.1],
    [1.8, 1.9],
    [2.2, 2.0],
]
_THREE_CLUSTERS_Y = [0, 0, 0, 1, 1, 1, 2, 2, 2]

# One unseen point near each cluster center, in class order.
THREE_CLUSTER_HOLDOUT = np.array([[-1.0, -0.8], [0.1, 1.2], [2.1, 2.0]], dtype=np.float64)
THREE_CLUSTER_CENTERS = ((-1.0, -1.0), (0.0, 1.0), (2.0, 2.0))


def make_three_clusters() -> Tuple[np.ndarray, np.ndarray]:
    X = np.array(_THREE_CLUSTERS_X, dtype=np.float64)
    y = np.array(_THREE_CLUSTERS_Y, dtype=np.int64)
    return X, y


def make_blobs(
    n_per_class: int = 50,
    centers: Sequence[Sequence[float]] = THREE_CLUSTER_CENTERS,
    spread: float = 0.3,
    seed: int = 42,
):
    """
    Isotropic Gaussian blobs, one per center; label k for samples drawn around centers[k].
    Rows are shuffled so classes are interleaved.
    """
    rng = np.random.default_rng(seed)
    C = np.asarray(centers, dtype=np.float64)
    k, d = C.shape
    X = np.concatenate([c + spread * rng.normal(size=(n_per_class, d)) for c in C])
    y = np.repeat(np.arange(k, dtype=np.int64), n_per_class)
    perm = rng.permutation(X.shape[0])
    return X[perm], y[perm]
