from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from unimatch.config import Settings
from unimatch.core.logs import get_logger
from unimatch.datasets.tabular import to_labels, to_matrix
from unimatch.errors import ContractViolation
from unimatch.models.store import ModelStore

SERVER_VERSION = "0.1.0"

# =====================================================================
# SCHEMAS
# =====================================================================


class SoftmaxTrainRequest(BaseModel):
    x: List[List[float]] = Field(..., description="Feature matrix, n_samples x n_features")
    y: List[int] = Field(..., description="Integer labels 0..K-1, one per row of x")
    lr: Optional[float] = Field(None, description="Learning rate (default 0.1)")
    n_iter: Optional[int] = Field(None, description="Gradient descent iterations (default 2000)")
    reg_lambda: Optional[float] = Field(None, description="L2 strength (default 1e-3)")


class SoftmaxPredictRequest(BaseModel):
    x: List[List[float]] = Field(..., description="Feature matrix, n_samples x n_features")


class SoftmaxTrainResponse(BaseModel):
    message: str
    accuracy: float
    n_classes: int
    saved: bool


class SoftmaxPredictResponse(BaseModel):
    y_pred: List[int]
    probs: List[List[float]]


# =====================================================================
# APP
# =====================================================================


def build_app(store: Optional[ModelStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    The store is the only holder of the active model; pass one in to share it
    (or to point tests at a temporary path).
    """
    settings = settings or Settings.from_env()
    log = get_logger("unimatch", settings.log_level, settings.log_file)
    store = store or ModelStore(settings.model_path)
    defaults = settings.train_defaults

    app = FastAPI(title="UniMatch Softmax Server", version=SERVER_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.state.store = store

    # -------------------- health --------------------

    @app.get("/")
    def root() -> Dict[str, str]:
        return {"status": "UniMatch server running"}

    @app.get("/healthz")
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/readyz")
    def readyz() -> Dict[str, str]:
        if not store.is_ready():
            raise HTTPException(503, "model not trained")
        return {"status": "ready"}

    # -------------------- softmax --------------------

    @app.post("/softmax/train", response_model=SoftmaxTrainResponse)
    async def softmax_train(req: SoftmaxTrainRequest) -> SoftmaxTrainResponse:
        if not req.x or not req.y:
            raise HTTPException(400, "x and y are required")
        if len(req.x) != len(req.y):
            raise HTTPException(400, "x and y must have the same number of rows")
        try:
            config = defaults.resolve(req.lr, req.n_iter, req.reg_lambda)
            X = to_matrix(req.x)
            y = to_labels(req.y, X.shape[0])
        except (ContractViolation, ValueError) as e:
            raise HTTPException(400, str(e)) from e

        try:
            report = await asyncio.get_event_loop().run_in_executor(None, store.train, X, y, config)
        except ContractViolation as e:
            raise HTTPException(400, str(e)) from e
        if not report.saved:
            log.warning("softmax model trained but not persisted to %s", store.path)

        return SoftmaxTrainResponse(
            message="Softmax model trained",
            accuracy=report.accuracy,
            n_classes=report.n_classes,
            saved=report.saved,
        )

    @app.post("/softmax/predict", response_model=SoftmaxPredictResponse)
    def softmax_predict(req: SoftmaxPredictRequest) -> SoftmaxPredictResponse:
        if not req.x:
            raise HTTPException(400, "x is required")
        model = store.current()
        if model is None:
            raise HTTPException(400, "Model not trained. Call /softmax/train first.")
        try:
            X = to_matrix(req.x)
            probs = model.predict_proba(X)
        except ContractViolation as e:
            raise HTTPException(400, str(e)) from e
        return SoftmaxPredictResponse(
            y_pred=probs.argmax(axis=1).tolist(),
            probs=probs.tolist(),
        )

    log.info("UniMatch softmax server ready (model path: %s)", store.path)
    return app
