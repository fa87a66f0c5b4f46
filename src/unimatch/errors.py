"""
Two kinds of failure:

- ContractViolation: the caller broke a precondition (bad shapes, empty input,
  inference before training). These are bugs in the calling code and are never
  caught inside the engine.
- ModelIOError: persistence failed (missing file, corrupt payload, disk error).
  Callers are expected to recover, e.g. by treating the model as not trained.
"""


class ContractViolation(RuntimeError):
    """A caller passed input the engine cannot accept."""


class NotFittedError(ContractViolation):
    """Parameters do not exist yet; call fit() or load() first."""


class ShapeMismatchError(ContractViolation, ValueError):
    pass


class InvalidLabelError(ContractViolation, ValueError):
    pass


class ModelIOError(Exception):
    """Reading or writing a persisted model failed."""


class ModelNotFoundError(ModelIOError):
    pass


class CorruptModelError(ModelIOError):
    pass
