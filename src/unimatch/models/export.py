from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from unimatch.core.io import ensure_dir


def points_frame(X: np.ndarray, y: Optional[Sequence[int]], probs: np.ndarray) -> pd.DataFrame:
    """
    One row per sample: x1..xd, y_true, y_pred, p0..p{K-1}.
    Rows without a known label get y_true = -1.
    """
    X = np.asarray(X, dtype=np.float64)
    probs = np.asarray(probs, dtype=np.float64)
    n = X.shape[0]
    y_true = np.full(n, -1, dtype=np.int64)
    if y is not None:
        y = np.asarray(y, dtype=np.int64).ravel()
        y_true[: min(n, y.size)] = y[:n]

    df = pd.DataFrame(X, columns=[f"x{j + 1}" for j in range(X.shape[1])])
    df["y_true"] = y_true
    df["y_pred"] = probs.argmax(axis=1)
    for k in range(probs.shape[1]):
        df[f"p{k}"] = probs[:, k]
    return df


def export_points_csv(
    path: Path | str, X: np.ndarray, y: Optional[Sequence[int]], probs: np.ndarray
) -> Path:
    p = Path(path)
    ensure_dir(p.parent)
    points_frame(X, y, probs).to_csv(p, index=False, float_format="%.6f")
    return p
