# src/unimatch/models/softmax_numpy.py
from __future__ import annotations

import io
import json
import logging
import zipfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from unimatch.core.io import atomic_write_bytes
from unimatch.errors import (
    ContractViolation,
    CorruptModelError,
    InvalidLabelError,
    ModelIOError,
    ModelNotFoundError,
    NotFittedError,
    ShapeMismatchError,
)

log = logging.getLogger("unimatch.softmax")

MODEL_FORMAT = "unimatch.softmax"
MODEL_VERSION = 1
INIT_SCALE = 0.01

Seed = Union[int, np.random.Generator, None]


def _one_hot(y: np.ndarray, num_classes: int) -> np.ndarray:
    Y = np.zeros((y.size, num_classes), dtype=np.float64)
    Y[np.arange(y.size), y] = 1.0
    return Y


def _softmax(logits: np.ndarray) -> np.ndarray:
    # the row max becomes exp(0) = 1, so the denominator is always >= 1
    z = logits - logits.max(axis=1, keepdims=True)
    e = np.exp(z)
    return e / e.sum(axis=1, keepdims=True)


def _log_softmax(logits: np.ndarray) -> np.ndarray:
    z = logits - logits.max(axis=1, keepdims=True)
    return z - np.log(np.exp(z).sum(axis=1, keepdims=True))


def softmax_loss(
    X: np.ndarray, Y: np.ndarray, W: np.ndarray, b: np.ndarray, l2: float = 0.0
) -> float:
    """
    Mean cross-entropy of one-hot targets Y plus the weight penalty 0.5 * l2 * ||W||^2.
    The bias is never penalized.
    """
    n = X.shape[0]
    nll = -float(np.sum(Y * _log_softmax(X @ W + b))) / n
    return nll + 0.5 * l2 * float(np.sum(W * W))


def softmax_grads(
    X: np.ndarray, Y: np.ndarray, W: np.ndarray, b: np.ndarray, l2: float = 0.0
) -> tuple[np.ndarray, np.ndarray]:
    """Gradients of `softmax_loss` w.r.t. (W, b)."""
    n = X.shape[0]
    P = _softmax(X @ W + b)                    # (n,K)
    dS = (P - Y) / n                           # (n,K)
    dW = X.T @ dS                              # (d,K)
    if l2 > 0:
        dW += l2 * W
    db = dS.sum(axis=0)                        # (K,)
    return dW, db


def _as_features(X, where: str) -> np.ndarray:
    try:
        X = np.asarray(X, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ShapeMismatchError(f"{where}: X must be a rectangular numeric matrix") from e
    if X.ndim != 2:
        raise ShapeMismatchError(f"{where}: X must be 2-D (n_samples, n_features), got ndim={X.ndim}")
    if X.shape[0] == 0:
        raise ShapeMismatchError(f"{where}: X is empty")
    if X.shape[1] == 0:
        raise ShapeMismatchError(f"{where}: X has no feature columns")
    if not np.isfinite(X).all():
        raise ContractViolation(f"{where}: X contains NaN or inf")
    return X


def _as_labels(y, n_samples: int, where: str) -> np.ndarray:
    y = np.asarray(y).ravel()
    if y.size != n_samples:
        raise ShapeMismatchError(f"{where}: X has {n_samples} rows but y has {y.size} labels")
    if y.dtype.kind == "f":
        if not (np.isfinite(y).all() and np.all(y == np.round(y))):
            raise InvalidLabelError(f"{where}: labels must be integer class indices")
    elif y.dtype.kind not in "iub":
        raise InvalidLabelError(f"{where}: labels must be integer class indices, got dtype {y.dtype}")
    y = y.astype(np.int64)
    if (y < 0).any():
        raise InvalidLabelError(f"{where}: labels must be >= 0")
    return y


@dataclass(frozen=True)
class SoftmaxConfig:
    lr: float = 0.1
    epochs: int = 2000
    l2: float = 1e-3

    def __post_init__(self):
        if not self.lr > 0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if isinstance(self.epochs, bool) or int(self.epochs) != self.epochs or self.epochs < 0:
            raise ValueError(f"epochs must be a non-negative integer, got {self.epochs}")
        if not self.l2 >= 0:
            raise ValueError(f"l2 must be >= 0, got {self.l2}")
        # frozen: normalize through object.__setattr__ (e.g. epochs=5.0 from YAML/JSON)
        object.__setattr__(self, "lr", float(self.lr))
        object.__setattr__(self, "epochs", int(self.epochs))
        object.__setattr__(self, "l2", float(self.l2))


class SoftmaxRegressionGD:
    """
    Multinomial logistic regression trained with full-batch gradient descent.

    Parameters are created lazily by the first `fit` call:
      W ~ 0.01 * N(0, 1) with shape (n_features, n_classes), b = 0.
    Later `fit` calls keep training the same parameters, so the feature count and
    class count are fixed from then on.

    `seed` is the initializer's random source: an int or a numpy Generator for
    reproducible runs, None for fresh OS entropy.
    """

    def __init__(
        self,
        lr: float = 0.1,
        epochs: int = 2000,
        l2: float = 1e-3,
        seed: Seed = None,
        log_every: int = 200,
    ):
        self.config = SoftmaxConfig(lr=lr, epochs=epochs, l2=l2)
        self.seed = seed
        self.log_every = log_every
        self._W: Optional[np.ndarray] = None   # (d, K)
        self._b: Optional[np.ndarray] = None   # (K,)

    @classmethod
    def from_config(cls, config: SoftmaxConfig, seed: Seed = None) -> "SoftmaxRegressionGD":
        return cls(lr=config.lr, epochs=config.epochs, l2=config.l2, seed=seed)

    # --------------- State ---------------

    @property
    def lr(self) -> float:
        return self.config.lr

    @property
    def epochs(self) -> int:
        return self.config.epochs

    @property
    def l2(self) -> float:
        return self.config.l2

    @property
    def is_fitted(self) -> bool:
        return self._W is not None and self._b is not None

    @property
    def n_features_(self) -> int:
        return self._require_fitted("n_features_").shape[0]

    @property
    def n_classes_(self) -> int:
        return self._require_fitted("n_classes_").shape[1]

    @property
    def weights(self) -> np.ndarray:
        return self._require_fitted("weights").copy()

    @property
    def bias(self) -> np.ndarray:
        self._require_fitted("bias")
        return self._b.copy()

    def _require_fitted(self, where: str) -> np.ndarray:
        if not self.is_fitted:
            raise NotFittedError(f"{where}: model is not trained")
        return self._W

    def _init_params(self, d: int, k: int) -> None:
        rng = np.random.default_rng(self.seed)
        self._W = INIT_SCALE * rng.standard_normal((d, k))
        self._b = np.zeros((k,), dtype=np.float64)
        log.debug("init params: W=(%d, %d) b=(%d,)", d, k, k)

    # --------------- Training ---------------

    def fit(self, X, y) -> "SoftmaxRegressionGD":
        X = _as_features(X, "fit")
        n, d = X.shape
        y = _as_labels(y, n, "fit")
        k_seen = int(y.max()) + 1

        if self.is_fitted:
            if d != self.n_features_:
                raise ShapeMismatchError(
                    f"fit: model was trained on {self.n_features_} features, got {d}"
                )
            if k_seen > self.n_classes_:
                raise InvalidLabelError(
                    f"fit: model has {self.n_classes_} classes, got label {k_seen - 1}"
                )
        else:
            self._init_params(d, k_seen)

        W, b = self._W, self._b
        Y = _one_hot(y, W.shape[1])
        lr, l2 = self.lr, self.l2
        debug = log.isEnabledFor(logging.DEBUG) and self.log_every > 0

        for it in range(self.epochs):
            dW, db = softmax_grads(X, Y, W, b, l2)
            W -= lr * dW
            b -= lr * db
            if debug and (it % self.log_every == 0 or it == self.epochs - 1):
                log.debug("iter %d/%d loss=%.6f", it + 1, self.epochs, softmax_loss(X, Y, W, b, l2))

        log.debug(
            "fit done: n=%d d=%d K=%d epochs=%d lr=%g l2=%g", n, d, W.shape[1], self.epochs, lr, l2
        )
        return self

    # --------------- Inference ---------------

    def _checked_features(self, X, where: str) -> np.ndarray:
        self._require_fitted(where)
        X = _as_features(X, where)
        if X.shape[1] != self.n_features_:
            raise ShapeMismatchError(
                f"{where}: model expects {self.n_features_} features, got {X.shape[1]}"
            )
        return X

    def predict_proba(self, X) -> np.ndarray:
        X = self._checked_features(X, "predict_proba")
        return _softmax(X @ self._W + self._b)

    def predict(self, X) -> np.ndarray:
        # argmax keeps the first maximum, so ties go to the lowest class index
        return self.predict_proba(X).argmax(axis=1)

    def accuracy(self, X, y) -> float:
        y_hat = self.predict(X)
        y = np.asarray(y).ravel()
        if y.size != y_hat.size:
            raise ShapeMismatchError(
                f"accuracy: {y_hat.size} predictions but {y.size} ground-truth labels"
            )
        return float((y_hat == y).mean())

    def loss(self, X, y) -> float:
        X = self._checked_features(X, "loss")
        y = _as_labels(y, X.shape[0], "loss")
        if int(y.max()) >= self.n_classes_:
            raise InvalidLabelError(f"loss: model has {self.n_classes_} classes, got label {int(y.max())}")
        return softmax_loss(X, _one_hot(y, self.n_classes_), self._W, self._b, self.l2)

    # --------------- Persistence ---------------

    def _meta(self) -> dict:
        return {
            "format": MODEL_FORMAT,
            "version": MODEL_VERSION,
            **asdict(self.config),
            "n_features": self.n_features_,
            "n_classes": self.n_classes_,
        }

    def save(self, path: Path | str) -> Path:
        """
        Write parameters and hyperparameters as a single .npz record.
        float64 arrays are stored raw, so a load gives back the exact same bits.
        """
        self._require_fitted("save")
        buf = io.BytesIO()
        np.savez(buf, W=self._W, b=self._b, meta=np.array(json.dumps(self._meta())))
        try:
            return atomic_write_bytes(path, buf.getvalue())
        except OSError as e:
            raise ModelIOError(f"cannot write model to {path}: {e}") from e

    @classmethod
    def load(cls, path: Path | str, seed: Seed = None) -> "SoftmaxRegressionGD":
        p = Path(path)
        try:
            data = np.load(p, allow_pickle=False)
        except FileNotFoundError as e:
            raise ModelNotFoundError(f"no model at {p}") from e
        except (OSError, ValueError, EOFError, zipfile.BadZipFile) as e:
            raise CorruptModelError(f"cannot read model at {p}: {e}") from e

        if not hasattr(data, "files"):
            raise CorruptModelError(f"{p} is not a model archive")
        try:
            with data:
                meta = json.loads(data["meta"].item())
                W = np.array(data["W"], dtype=np.float64)
                b = np.array(data["b"], dtype=np.float64)
        except (KeyError, TypeError, ValueError, OSError, zipfile.BadZipFile) as e:
            raise CorruptModelError(f"cannot read model at {p}: {e}") from e

        if not isinstance(meta, dict) or meta.get("format") != MODEL_FORMAT:
            raise CorruptModelError(f"{p}: not a {MODEL_FORMAT} file")
        if meta.get("version") != MODEL_VERSION:
            raise CorruptModelError(f"{p}: unsupported model version {meta.get('version')!r}")
        if W.ndim != 2 or b.shape != (W.shape[1],):
            raise CorruptModelError(f"{p}: inconsistent shapes W={W.shape} b={b.shape}")
        if (meta.get("n_features"), meta.get("n_classes")) != W.shape:
            raise CorruptModelError(f"{p}: header dims do not match W={W.shape}")
        if not (np.isfinite(W).all() and np.isfinite(b).all()):
            raise CorruptModelError(f"{p}: parameters contain NaN or inf")

        try:
            model = cls(lr=meta["lr"], epochs=meta["epochs"], l2=meta["l2"], seed=seed)
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptModelError(f"{p}: bad hyperparameters: {e}") from e
        model._W, model._b = W, b
        return model

    def __repr__(self) -> str:
        shape = f"d={self._W.shape[0]}, K={self._W.shape[1]}" if self.is_fitted else "unfitted"
        return f"SoftmaxRegressionGD(lr={self.lr}, epochs={self.epochs}, l2={self.l2}, {shape})"
