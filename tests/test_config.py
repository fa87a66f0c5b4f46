from unimatch.config import Settings, TrainDefaults
from unimatch.core.io import save_yaml


def test_train_defaults_fill_missing_and_zero_values():
    cfg = TrainDefaults().resolve(lr=None, n_iter=0, reg_lambda=0.0)
    assert (cfg.lr, cfg.epochs, cfg.l2) == (0.1, 2000, 1e-3)
    cfg = TrainDefaults().resolve(lr=0.5, n_iter=10, reg_lambda=0.2)
    assert (cfg.lr, cfg.epochs, cfg.l2) == (0.5, 10, 0.2)


def test_train_defaults_from_yaml(tmp_path):
    p = tmp_path / "train.yaml"
    save_yaml(p, {"lr": 0.05, "n_iter": 300, "unknown": 1})
    d = TrainDefaults.from_yaml(p)
    assert (d.lr, d.n_iter, d.reg_lambda) == (0.05, 300, 1e-3)
    assert TrainDefaults.from_yaml(tmp_path / "missing.yaml") == TrainDefaults()
    assert TrainDefaults.from_yaml(None) == TrainDefaults()


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("UNIMATCH_MODEL_PATH", str(tmp_path / "m.npz"))
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("UNIMATCH_TRAIN_CONFIG", raising=False)
    s = Settings.from_env()
    assert s.model_path == str(tmp_path / "m.npz")
    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert s.log_level == "DEBUG"
    assert s.log_file is None
    assert s.train_defaults == TrainDefaults()


def test_settings_defaults(monkeypatch):
    for k in ("UNIMATCH_MODEL_PATH", "CORS_ORIGINS", "LOG_LEVEL", "LOG_FILE", "UNIMATCH_TRAIN_CONFIG"):
        monkeypatch.delenv(k, raising=False)
    s = Settings.from_env()
    assert s.model_path == "weights/softmax_model.npz"
    assert s.cors_origins == ["*"]
