"""
UniMatch softmax HTTP server.

Run:
  uv run python scripts/serve_softmax.py --host 0.0.0.0 --port 8080

Environment:
  UNIMATCH_MODEL_PATH   model file (default weights/softmax_model.npz)
  UNIMATCH_TRAIN_CONFIG optional YAML with lr / n_iter / reg_lambda defaults
  CORS_ORIGINS          comma-separated origins (default *)
  LOG_LEVEL, LOG_FILE
"""
import argparse

import uvicorn

from unimatch.serving.app import build_app


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    app = build_app()
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
