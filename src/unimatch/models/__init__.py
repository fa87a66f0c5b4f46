from .export import export_points_csv as export_points_csv
from .softmax_numpy import SoftmaxConfig as SoftmaxConfig, SoftmaxRegressionGD as SoftmaxRegressionGD
from .store import ModelStore as ModelStore, TrainReport as TrainReport

__all__ = ["SoftmaxConfig", "SoftmaxRegressionGD", "ModelStore", "TrainReport", "export_points_csv"]
