"""
Line dispatcher: sizes the worker pool from host load, hands each input line
to the least-loaded worker, then signals end-of-work and waits for drain.
"""
from __future__ import annotations

import logging
import multiprocessing
import os
import queue
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from ports.enrichment import ClientFactory
from pipelines.worker import EMAILS, STOPPED, TASK_COMPLETED, WorkerMessage, run_worker
from services.email_domains import available_emails


logger = logging.getLogger(__name__)

# How long to block on the outbox before checking that workers are still alive
_LIVENESS_INTERVAL_SECONDS = 1.0


class InputNotFound(FileNotFoundError):
    """The input file does not exist."""


def compute_worker_count(cpu_count: int, load: float, target_load: float = 0.8) -> int:
    """clamp(round(cpu * target / max(load, 1)), 1, cpu)."""
    cpu_count = max(1, cpu_count)
    count = round((cpu_count * target_load) / max(load, 1.0))
    return max(1, min(cpu_count, count))


def current_load() -> float:
    try:
        return os.getloadavg()[0]
    except (AttributeError, OSError):
        # Not available on this platform
        return 0.0


def optimal_worker_count(settings: Settings) -> int:
    if settings.worker_count:
        return max(1, settings.worker_count)
    return compute_worker_count(os.cpu_count() or 1, current_load(), settings.target_load)


@dataclass
class WorkerHandle:
    worker_id: int
    inbox: Any
    runner: Any = None
    pending: int = 0
    stopped: bool = False

    def is_alive(self) -> bool:
        return self.runner is not None and self.runner.is_alive()


class DispatchTable:
    """Dispatcher-owned view of the pool: {handle, pending count}."""

    def __init__(self, handles: List[WorkerHandle]) -> None:
        if not handles:
            raise ValueError("dispatch table needs at least one worker")
        self.handles = handles
        self._by_id = {h.worker_id: h for h in handles}

    def least_loaded(self) -> WorkerHandle:
        # min() keeps the first of equal keys, so ties go to the lowest position
        return min(self.handles, key=lambda h: h.pending)

    def assign(self, line: str) -> WorkerHandle:
        handle = self.least_loaded()
        handle.inbox.put(line)
        handle.pending += 1
        return handle

    def complete(self, worker_id: int) -> None:
        handle = self._by_id.get(worker_id)
        if handle is not None and handle.pending > 0:
            handle.pending -= 1

    def get(self, worker_id: int) -> Optional[WorkerHandle]:
        return self._by_id.get(worker_id)

    def spread(self) -> int:
        counts = [h.pending for h in self.handles]
        return max(counts) - min(counts)

    def __len__(self) -> int:
        return len(self.handles)


@dataclass
class RunSummary:
    lines_dispatched: int = 0
    elapsed_seconds: float = 0.0
    worker_count: int = 0
    outcomes: Dict[str, int] = field(default_factory=dict)


class Dispatcher:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
        worker_count: Optional[int] = None,
    ) -> None:
        self.settings = settings or get_settings()
        # Only used in thread mode; process workers build their own clients
        self.client_factory = client_factory
        self.worker_count = worker_count
        self.outcomes: Counter = Counter()

    def _start_workers(self, count: int) -> tuple[DispatchTable, Any]:
        handles: List[WorkerHandle] = []
        if self.settings.worker_mode == "process":
            mp = multiprocessing.get_context()
            outbox = mp.Queue()
            for worker_id in range(count):
                inbox = mp.Queue()
                proc = mp.Process(
                    target=run_worker,
                    args=(worker_id, self.settings, inbox, outbox),
                    name=f"enrich-worker-{worker_id}",
                )
                proc.start()
                handles.append(WorkerHandle(worker_id, inbox, runner=proc))
        else:
            outbox = queue.Queue()
            for worker_id in range(count):
                inbox = queue.Queue()
                thread = threading.Thread(
                    target=run_worker,
                    args=(worker_id, self.settings, inbox, outbox),
                    kwargs={"client_factory": self.client_factory, "configure_logging": False},
                    name=f"enrich-worker-{worker_id}",
                    daemon=True,
                )
                thread.start()
                handles.append(WorkerHandle(worker_id, inbox, runner=thread))
        return DispatchTable(handles), outbox

    def _handle_message(self, table: DispatchTable, msg: WorkerMessage) -> None:
        if msg.kind == TASK_COMPLETED:
            table.complete(msg.worker_id)
            if msg.outcome is not None:
                self.outcomes[msg.outcome.value] += 1
            handle = table.get(msg.worker_id)
            logger.debug(
                "Worker %s completed a task. Remaining tasks: %s",
                msg.worker_id, handle.pending if handle else "?",
                extra={"step": "dispatch", "worker": msg.worker_id},
            )
        elif msg.kind == EMAILS:
            logger.info(
                "Extracted Emails for %s: %s", msg.name, ", ".join(msg.emails),
                extra={"step": "emails", "worker": msg.worker_id},
            )
            available = available_emails(msg.emails, self.settings.free_mail_domains)
            if available:
                logger.info("Available Emails: %s", ", ".join(available), extra={"step": "emails"})
            else:
                logger.info("All emails are taken.", extra={"step": "emails"})
        elif msg.kind == STOPPED:
            handle = table.get(msg.worker_id)
            if handle is not None:
                handle.stopped = True
            logger.info(
                "Worker %s stopped: %s", msg.worker_id, msg.totals,
                extra={"step": "dispatch", "worker": msg.worker_id, "status": "stopped"},
            )

    def _drain_outbox(self, table: DispatchTable, outbox: Any) -> None:
        while True:
            try:
                msg = outbox.get_nowait()
            except queue.Empty:
                return
            self._handle_message(table, msg)

    def _await_shutdown(self, table: DispatchTable, outbox: Any) -> None:
        while not all(h.stopped for h in table.handles):
            try:
                msg = outbox.get(timeout=_LIVENESS_INTERVAL_SECONDS)
            except queue.Empty:
                for handle in table.handles:
                    if not handle.stopped and not handle.is_alive():
                        logger.error(
                            "Worker %s exited without draining (%s tasks pending)",
                            handle.worker_id, handle.pending,
                            extra={"step": "dispatch", "worker": handle.worker_id, "status": "lost"},
                        )
                        handle.stopped = True
                continue
            self._handle_message(table, msg)
        # Pick up anything sent just before the final STOPPED
        self._drain_outbox(table, outbox)
        for handle in table.handles:
            if handle.runner is not None:
                handle.runner.join()

    def run(self, input_path: str | os.PathLike) -> RunSummary:
        path = Path(input_path)
        if not path.is_file():
            raise InputNotFound(f"Input file does not exist: {path}")

        count = self.worker_count or optimal_worker_count(self.settings)
        logger.info("Starting with %s workers...", count, extra={"step": "dispatch", "status": "starting"})
        start = time.monotonic()
        self.outcomes = Counter()
        table, outbox = self._start_workers(count)

        line_count = 0
        try:
            with path.open("r", encoding="utf-8", errors="replace", newline="") as f:
                for raw in f:
                    line = raw.rstrip("\r\n")
                    self._drain_outbox(table, outbox)
                    handle = table.assign(line)
                    line_count += 1
                    logger.debug(
                        "Assigned line %s to worker %s. Worker task count: %s",
                        line_count, handle.worker_id, handle.pending,
                        extra={"step": "dispatch", "worker": handle.worker_id},
                    )
                    if line_count % self.settings.progress_every == 0:
                        logger.info("Dispatched %s lines...", line_count, extra={"step": "dispatch"})
        finally:
            for handle in table.handles:
                handle.inbox.put(None)
            self._await_shutdown(table, outbox)

        elapsed = time.monotonic() - start
        logger.info(
            "File processing completed. Total lines: %s. Time taken: %.3f seconds", line_count, elapsed,
            extra={"step": "dispatch", "status": "done"},
        )
        return RunSummary(
            lines_dispatched=line_count,
            elapsed_seconds=elapsed,
            worker_count=count,
            outcomes=dict(self.outcomes),
        )
