from __future__ import annotations

import json
import os
from pathlib import Path
import sys
import threading
import time
from typing import Any


def get_base_dir() -> Path:
    """Return project root or the bundle directory of a frozen build."""
    return Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent.parent))


def get_data_dir() -> Path:
    """Return the directory holding the session and snapshot files.

    ``PORTFOLIO_ADMIN_DATA_DIR`` overrides the default ``<base>/data``.
    """
    override = os.getenv("PORTFOLIO_ADMIN_DATA_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return get_base_dir() / "data"


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write ``payload`` to a sibling temp file, then swap it into place.

    Readers see either the previous file or the new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = f".tmp.{os.getpid()}.{threading.get_ident()}.{int(time.time() * 1_000_000)}"
    tmp_path = path.with_suffix(path.suffix + suffix)
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
            fh.flush()
            try:
                os.fsync(fh.fileno())
            except OSError:
                # Not every platform supports fsync on text files.
                pass
        os.replace(tmp_path, path)
    except BaseException:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        raise


__all__ = ["get_base_dir", "get_data_dir", "write_json_atomic"]
