from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from models.credential import Credential


WORKER_MODES = ("process", "thread")


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_credentials(raw: str | None) -> list[Credential]:
    """Parse `key:secret,key2:secret2` into an ordered credential list."""
    creds: list[Credential] = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, sep, secret = chunk.partition(":")
        if not sep or not key.strip() or not secret.strip():
            raise RuntimeError(f"Malformed ENRICH_CREDENTIALS entry: {chunk!r} (expected key:secret)")
        creds.append(Credential(key=key.strip(), secret=secret.strip()))
    return creds


@dataclass(frozen=True)
class Settings:
    enrich_url: str
    enrich_search_type: str
    credentials: list[Credential]

    # Throttle / retry
    max_concurrent_requests: int
    throttle_error_threshold: int
    max_attempts: int
    retry_backoff_seconds: float
    http_timeout_seconds: float

    # Worker pool
    target_load: float
    worker_count: int | None
    worker_mode: str

    # Output / logging
    output_path: str
    log_dir: str
    log_path: str
    error_log_path: str
    raw_log_path: str
    log_level: str
    raw_log: bool = True
    progress_every: int = 1000

    run_env: str = "local"
    free_mail_domains: list[str] = field(
        default_factory=lambda: ["aol.com", "gmail.com", "outlook.com", "hotmail.com", "yahoo.com"]
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()

    credentials = _parse_credentials(os.getenv("ENRICH_CREDENTIALS"))
    if not credentials:
        api_key = os.getenv("ENRICH_API_KEY")
        api_password = os.getenv("ENRICH_API_PASSWORD")
        if api_key and api_password:
            credentials = [Credential(key=api_key, secret=api_password)]
    if not credentials:
        raise RuntimeError(
            "ENRICH_CREDENTIALS (or ENRICH_API_KEY and ENRICH_API_PASSWORD) must be set"
        )

    worker_mode = os.getenv("WORKER_MODE", "process").strip().lower()
    if worker_mode not in WORKER_MODES:
        raise RuntimeError(f"WORKER_MODE must be one of {', '.join(WORKER_MODES)}, got {worker_mode!r}")

    max_concurrent = int(os.getenv("MAX_CONCURRENT_REQUESTS", "50"))
    if max_concurrent < 1:
        raise RuntimeError("MAX_CONCURRENT_REQUESTS must be at least 1")

    worker_count_raw = os.getenv("WORKER_COUNT")
    worker_count = int(worker_count_raw) if worker_count_raw else None

    log_dir = os.getenv("LOG_DIR", "logs")
    return Settings(
        enrich_url=os.getenv("ENRICH_URL", "https://devapi.endato.com/Contact/Enrich"),
        enrich_search_type=os.getenv("ENRICH_SEARCH_TYPE", "DevAPIContactEnrich"),
        credentials=credentials,
        max_concurrent_requests=max_concurrent,
        throttle_error_threshold=int(os.getenv("THROTTLE_ERROR_THRESHOLD", "5")),
        max_attempts=max(1, int(os.getenv("MAX_ATTEMPTS", "3"))),
        retry_backoff_seconds=float(os.getenv("RETRY_BACKOFF_SECONDS", "0")),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        target_load=float(os.getenv("TARGET_LOAD", "0.8")),
        worker_count=worker_count,
        worker_mode=worker_mode,
        output_path=os.getenv("OUTPUT_PATH", "output.txt"),
        log_dir=log_dir,
        log_path=os.getenv("LOG_PATH", str(Path(log_dir) / "log.jsonl")),
        error_log_path=os.getenv("ERROR_LOG_PATH", str(Path(log_dir) / "error_log.jsonl")),
        raw_log_path=os.getenv("RAW_LOG_PATH", str(Path(log_dir) / "raw_log.jsonl")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        raw_log=_as_bool(os.getenv("RAW_LOG"), default=True),
        progress_every=max(1, int(os.getenv("PROGRESS_EVERY", "1000"))),
        run_env=os.getenv("RUN_ENV", "local"),
    )
