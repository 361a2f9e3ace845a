from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_response(
    *,
    path: str,
    worker: Optional[int],
    record_id: Optional[str],
    status: str = "ok",
    duration_ms: Optional[int] = None,
    body: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
) -> None:
    """Append a single JSON line describing one enrichment API response."""
    log_path = Path(path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "pid": os.getpid(),
        "worker": worker,
        "record_id": record_id,
        "status": status,
        "duration_ms": duration_ms,
        "error": error,
        "body": body,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id

    line = json.dumps(payload, ensure_ascii=False, default=str) + "\n"
    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(line)
    except OSError:
        # Never break the pipeline on logging failures
        return
