import importlib.util
from pathlib import Path

from typer.testing import CliRunner

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_softmax.py"


def _load_app():
    mod_spec = importlib.util.spec_from_file_location("run_softmax", SCRIPT)
    mod = importlib.util.module_from_spec(mod_spec)
    mod_spec.loader.exec_module(mod)
    return mod.app


def test_predict_without_model_prints_hint(tmp_path):
    result = CliRunner().invoke(_load_app(), ["predict", "--model", str(tmp_path / "missing.npz")])
    assert result.exit_code == 1
    assert "Run `toy` first" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_toy_then_predict(tmp_path):
    app = _load_app()
    runner = CliRunner()
    out = tmp_path / "weights"
    result = runner.invoke(app, ["toy", "--out", str(out), "--seed", "0"])
    assert result.exit_code == 0, result.output
    assert (out / "softmax_model.npz").exists()
    result = runner.invoke(app, ["predict", "--model", str(out / "softmax_model.npz"), "--x", "2.1,2.0"])
    assert result.exit_code == 0, result.output
    assert "y_pred=2" in result.output
