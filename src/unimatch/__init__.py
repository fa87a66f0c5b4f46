from .errors import (
    ContractViolation as ContractViolation,
    ModelIOError as ModelIOError,
    NotFittedError as NotFittedError,
)
from .models.softmax_numpy import SoftmaxConfig as SoftmaxConfig, SoftmaxRegressionGD as SoftmaxRegressionGD
from .models.store import ModelStore as ModelStore

__version__ = "0.1.0"

__all__ = [
    "SoftmaxRegressionGD",
    "SoftmaxConfig",
    "ModelStore",
    "ContractViolation",
    "NotFittedError",
    "ModelIOError",
]
