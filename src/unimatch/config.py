from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional

from unimatch.core.io import load_yaml
from unimatch.models.softmax_numpy import SoftmaxConfig


@dataclass(frozen=True)
class TrainDefaults:
    """Hyperparameters used when a train request leaves them out (or sends 0)."""

    lr: float = 0.1
    n_iter: int = 2000
    reg_lambda: float = 1e-3

    @classmethod
    def from_yaml(cls, path: Optional[Path | str]) -> "TrainDefaults":
        if not path or not Path(path).exists():
            return cls()
        cfg = load_yaml(path) or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in cfg.items() if k in known})

    def resolve(
        self, lr: Optional[float] = None, n_iter: Optional[int] = None, reg_lambda: Optional[float] = None
    ) -> SoftmaxConfig:
        return SoftmaxConfig(
            lr=lr or self.lr,
            epochs=n_iter or self.n_iter,
            l2=reg_lambda or self.reg_lambda,
        )


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


@dataclass
class Settings:
    model_path: str = "weights/softmax_model.npz"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_file: Optional[str] = None
    train_defaults: TrainDefaults = field(default_factory=TrainDefaults)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            model_path=os.getenv("UNIMATCH_MODEL_PATH", "weights/softmax_model.npz"),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            train_defaults=TrainDefaults.from_yaml(os.getenv("UNIMATCH_TRAIN_CONFIG")),
        )
