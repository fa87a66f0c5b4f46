import numpy as np
import pytest

from unimatch.config import TrainDefaults
from unimatch.datasets.toy import THREE_CLUSTER_HOLDOUT, make_three_clusters
from unimatch.errors import ShapeMismatchError
from unimatch.models.softmax_numpy import SoftmaxConfig, SoftmaxRegressionGD
from unimatch.models.store import ModelStore


def test_missing_file_means_not_trained(tmp_path):
    store = ModelStore(tmp_path / "m.npz")
    assert store.current() is None
    assert not store.is_ready()


def test_corrupt_file_means_not_trained(tmp_path):
    p = tmp_path / "m.npz"
    p.write_bytes(b"garbage")
    assert ModelStore(p).current() is None


def test_train_replaces_and_persists(tmp_path):
    X, y = make_three_clusters()
    store = ModelStore(tmp_path / "weights" / "m.npz")
    report = store.train(X, y, SoftmaxConfig(lr=0.1, epochs=2000, l2=1e-3), seed=0)

    assert report.accuracy == 1.0
    assert (report.n_samples, report.n_features, report.n_classes) == (9, 2, 3)
    assert report.saved
    assert store.is_ready()

    fresh = ModelStore(tmp_path / "weights" / "m.npz")
    assert fresh.current() is not None
    assert np.array_equal(
        fresh.current().predict_proba(THREE_CLUSTER_HOLDOUT),
        store.current().predict_proba(THREE_CLUSTER_HOLDOUT),
    )


def test_train_builds_a_new_model_each_time(tmp_path):
    X, y = make_three_clusters()
    store = ModelStore(tmp_path / "m.npz")
    store.train(X, y, SoftmaxConfig(epochs=10), seed=0)
    first = store.current()
    W_first = first.weights
    store.train(X, y, SoftmaxConfig(epochs=10), seed=1)
    assert store.current() is not first
    assert np.array_equal(first.weights, W_first)


def test_failed_training_keeps_previous_model(tmp_path):
    X, y = make_three_clusters()
    store = ModelStore(tmp_path / "m.npz")
    store.train(X, y, SoftmaxConfig(epochs=10), seed=0)
    before = store.current()
    with pytest.raises(ShapeMismatchError):
        store.train(X, y[:-1], SoftmaxConfig(epochs=10))
    assert store.current() is before


def test_save_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "afile"
    blocker.write_text("x")
    X, y = make_three_clusters()
    store = ModelStore(blocker / "m.npz")
    report = store.train(X, y, SoftmaxConfig(epochs=10), seed=0)
    assert not report.saved
    assert store.is_ready()


def test_replace_without_persist(tmp_path):
    X, y = make_three_clusters()
    store = ModelStore(tmp_path / "m.npz")
    model = SoftmaxRegressionGD(epochs=10, seed=0).fit(X, y)
    store.replace(model, persist=False)
    assert store.current() is model
    assert not (tmp_path / "m.npz").exists()
    assert store.reload() is None


def test_non_string_meta_means_not_trained(tmp_path):
    p = tmp_path / "m.npz"
    with open(p, "wb") as fh:
        np.savez(fh, W=np.zeros((2, 3)), b=np.zeros(3), meta=np.array(3.0))
    store = ModelStore(p)
    assert store.current() is None
    assert not store.is_ready()


def test_train_with_float_iterations_from_yaml_defaults(tmp_path):
    X, y = make_three_clusters()
    store = ModelStore(tmp_path / "m.npz")
    report = store.train(X, y, TrainDefaults(n_iter=20.0).resolve(), seed=0)
    assert report.saved
    assert store.current().epochs == 20
