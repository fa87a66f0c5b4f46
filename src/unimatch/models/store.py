from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from unimatch.core.timers import Timer
from unimatch.errors import ModelIOError
from unimatch.models.softmax_numpy import Seed, SoftmaxConfig, SoftmaxRegressionGD


@dataclass
class TrainReport:
    accuracy: float
    n_samples: int
    n_features: int
    n_classes: int
    seconds: float
    saved: bool


class ModelStore:
    """
    Owns "the" active classifier for a process and its file on disk.

    - current(): active model, lazily loaded from `path` on first access
    - replace(): swap in a new model and persist it
    - train(): fit a fresh model and replace the active one, serialized by a lock

    Inference on the returned model needs no lock: train() never mutates a model
    that callers can already see, it builds a new one and swaps the reference.
    """

    def __init__(self, path: Path | str, logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.log = logger or logging.getLogger("unimatch.store")
        self._model: Optional[SoftmaxRegressionGD] = None
        self._tried_disk = False
        self._lock = threading.Lock()

    def current(self) -> Optional[SoftmaxRegressionGD]:
        if self._model is None and not self._tried_disk:
            with self._lock:
                if self._model is None and not self._tried_disk:
                    self._model = self._load_from_disk()
        return self._model

    def is_ready(self) -> bool:
        return self.current() is not None

    def _load_from_disk(self) -> Optional[SoftmaxRegressionGD]:
        self._tried_disk = True
        try:
            model = SoftmaxRegressionGD.load(self.path)
        except ModelIOError as e:
            self.log.info("softmax model not loaded (%s); train it via /softmax/train", e)
            return None
        self.log.info("softmax model loaded from %s (%r)", self.path, model)
        return model

    def reload(self) -> Optional[SoftmaxRegressionGD]:
        """Drop the in-memory model and read the file again."""
        with self._lock:
            self._model = self._load_from_disk()
            return self._model

    def _swap(self, model: SoftmaxRegressionGD, persist: bool) -> None:
        self._model = model
        self._tried_disk = True
        if persist:
            try:
                model.save(self.path)
            except ModelIOError:
                self.log.exception("failed to save softmax model to %s", self.path)
                raise
            self.log.info("softmax model saved to %s", self.path)

    def replace(self, model: SoftmaxRegressionGD, persist: bool = True) -> None:
        with self._lock:
            self._swap(model, persist)

    def train(self, X, y, config: SoftmaxConfig, seed: Seed = None) -> TrainReport:
        with self._lock:
            t = Timer()
            model = SoftmaxRegressionGD.from_config(config, seed=seed).fit(X, y)
            acc = model.accuracy(X, y)
            seconds = t.elapsed
            self.log.info(
                "trained softmax: n=%d d=%d K=%d acc=%.4f in %.3fs",
                len(X), model.n_features_, model.n_classes_, acc, seconds,
            )
            saved = True
            try:
                self._swap(model, persist=True)
            except ModelIOError:
                saved = False
            return TrainReport(
                accuracy=acc,
                n_samples=len(X),
                n_features=model.n_features_,
                n_classes=model.n_classes_,
                seconds=seconds,
                saved=saved,
            )
