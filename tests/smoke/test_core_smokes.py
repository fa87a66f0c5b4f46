import json
import logging
from pathlib import Path

from unimatch.core.io import atomic_write_bytes, ensure_dir, load_yaml, save_json, save_yaml
from unimatch.core.logs import get_logger
from unimatch.core.timers import Timer, timed


def test_io_roundtrip(tmp_path: Path):
    p = tmp_path / "x" / "y.json"
    ensure_dir(p.parent)
    save_json(p, {"a": 1})
    obj = json.loads(p.read_text())
    assert obj["a"] == 1

    q = tmp_path / "cfg" / "z.yaml"
    save_yaml(q, {"lr": 0.1, "n_iter": 5})
    assert load_yaml(q) == {"lr": 0.1, "n_iter": 5}


def test_atomic_write(tmp_path: Path):
    p = atomic_write_bytes(tmp_path / "deep" / "blob.bin", b"abc")
    assert p.read_bytes() == b"abc"
    atomic_write_bytes(p, b"xyz")
    assert p.read_bytes() == b"xyz"
    assert [c.name for c in p.parent.iterdir()] == ["blob.bin"]


def test_logger_handlers_attached_once(tmp_path: Path):
    log_file = tmp_path / "logs" / "smoke.log"
    log = get_logger("unimatch.smoke_test", "DEBUG", str(log_file))
    again = get_logger("unimatch.smoke_test", "DEBUG", str(log_file))
    assert log is again
    assert len(log.handlers) == 2
    assert log.level == logging.DEBUG
    log.info("hello")
    for h in log.handlers:
        h.flush()
    assert "| INFO | hello" in log_file.read_text()


def test_timer(caplog):
    t = Timer()
    assert t.elapsed >= 0.0
    with caplog.at_level(logging.INFO, logger="unimatch"):
        with timed("smoke"):
            pass
    assert "[timer] smoke" in caplog.text
