import typer, numpy as np
from typing import Optional
from pathlib import Path

from unimatch.core.io import ensure_dir, save_json
from unimatch.core.logs import get_logger
from unimatch.core.timers import timed
from unimatch.datasets.toy import THREE_CLUSTER_HOLDOUT, make_blobs, make_three_clusters
from unimatch.errors import ModelIOError
from unimatch.models.export import export_points_csv
from unimatch.models.softmax_numpy import SoftmaxRegressionGD

app = typer.Typer(add_completion=False)

@app.command()
def toy(out: str = "weights", lr: float = 0.1, epochs: int = 2000, l2: float = 1e-3,
        seed: Optional[int] = None, log_level: str = "INFO"):
    """Train on the 9-point three-cluster set and export points + probabilities for plotting."""
    log = get_logger("unimatch", log_level)
    X, y = make_three_clusters()
    with timed("softmax toy fit", log):
        clf = SoftmaxRegressionGD(lr=lr, epochs=epochs, l2=l2, seed=seed).fit(X, y)
    acc = clf.accuracy(X, y)
    typer.echo(f"Softmax toy: train acc={acc:.4f}")

    test_probs = clf.predict_proba(THREE_CLUSTER_HOLDOUT)
    for x, p in zip(THREE_CLUSTER_HOLDOUT, test_probs):
        typer.echo(f"x={x.tolist()} -> probs={np.round(p, 4).tolist()}, y_pred={int(p.argmax())}")

    out_dir = ensure_dir(out)
    export_points_csv(out_dir / "softmax_train_points.csv", X, y, clf.predict_proba(X))
    export_points_csv(out_dir / "softmax_test_points.csv", THREE_CLUSTER_HOLDOUT, None, test_probs)
    model_path = clf.save(out_dir / "softmax_model.npz")
    save_json(out_dir / "softmax_metrics.json", {"train_accuracy": acc, "loss": clf.loss(X, y)})
    typer.echo(f"Wrote {out_dir / 'softmax_train_points.csv'}, {out_dir / 'softmax_test_points.csv'}, {model_path}")

@app.command()
def blobs(n: int = 200, spread: float = 0.6, lr: float = 0.1, epochs: int = 500, l2: float = 0.0, seed: int = 0):
    """Synthetic multiclass demo with a held-out split."""
    X, y = make_blobs(n_per_class=n // 3, spread=spread, seed=seed)
    cut = int(0.8 * len(X))
    clf = SoftmaxRegressionGD(lr=lr, epochs=epochs, l2=l2, seed=seed).fit(X[:cut], y[:cut])
    typer.echo(f"Softmax: train acc={clf.accuracy(X[:cut], y[:cut]):.3f} | test acc={clf.accuracy(X[cut:], y[cut:]):.3f}")

@app.command()
def predict(model: Path = Path("weights/softmax_model.npz"), x: str = "-1.0,-0.8"):
    """Predict one row (comma-separated features) with a saved model."""
    try:
        clf = SoftmaxRegressionGD.load(model)
    except ModelIOError as e:
        typer.echo(f"Cannot load model: {e}. Run `toy` first to train and save one.", err=True)
        raise typer.Exit(code=1)
    row = np.array([[float(v) for v in x.split(",")]])
    p = clf.predict_proba(row)[0]
    typer.echo(f"y_pred={int(p.argmax())} probs={np.round(p, 4).tolist()}")

if __name__ == "__main__":
    app()
