"""
Worker execution context.

A worker owns its throttle, its credential rotation index and a thread pool
of in-flight records. It talks to the dispatcher only through messages:
lines (or a None stop sentinel) arrive on its inbox, completion notices go
out on the shared outbox.
"""
from __future__ import annotations

import logging
import threading
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional

from config.settings import Settings
from models.credential import Credential
from models.outcome import RecordOutcome
from models.person import Person
from pipelines.enrichment_pipeline import EnrichmentPipeline
from ports.enrichment import ClientFactory
from services.credentials import CredentialRing
from services.enrichment_client import EnrichmentClient
from services.output_sink import OutputSink
from services.throttle import AdaptiveThrottle
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)

TASK_COMPLETED = "task_completed"
EMAILS = "emails"
STOPPED = "stopped"


@dataclass
class WorkerMessage:
    kind: str
    worker_id: int
    outcome: Optional[RecordOutcome] = None
    name: Optional[str] = None
    emails: List[str] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)


class WorkerState:
    """Per-worker bookkeeping; touched only by this worker's own threads."""

    def __init__(self, worker_id: int, throttle: AdaptiveThrottle, ring: CredentialRing) -> None:
        self.worker_id = worker_id
        self.throttle = throttle
        self.ring = ring
        self.in_flight = 0
        self.outcomes: Counter = Counter()
        self._lock = threading.Lock()

    @property
    def budget(self) -> int:
        return self.throttle.budget

    @property
    def consecutive_errors(self) -> int:
        return self.throttle.consecutive_errors

    @property
    def credential_index(self) -> int:
        return self.ring.index

    def task_started(self) -> None:
        with self._lock:
            self.in_flight += 1

    def task_finished(self, outcome: RecordOutcome) -> None:
        with self._lock:
            self.in_flight -= 1
            self.outcomes[outcome.value] += 1

    def totals(self) -> Dict[str, int]:
        with self._lock:
            return dict(self.outcomes)


class Worker:
    def __init__(
        self,
        worker_id: int,
        settings: Settings,
        outbox: Any,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.worker_id = worker_id
        self.settings = settings
        self.outbox = outbox
        factory = client_factory or partial(EnrichmentClient, settings=settings)
        throttle = AdaptiveThrottle(
            settings.max_concurrent_requests,
            error_threshold=settings.throttle_error_threshold,
            name=f"throttle-{worker_id}",
        )
        # Each worker rotates through its own copy of the shared list
        ring = CredentialRing(list(settings.credentials), factory, worker_id=worker_id)
        self.state = WorkerState(worker_id, throttle, ring)
        self.sink = OutputSink(settings.output_path)
        self.pipeline = EnrichmentPipeline(
            settings,
            throttle,
            lambda: self.state.ring.client,
            self.sink,
            worker_id=worker_id,
            on_emails=self._report_emails,
        )
        self.executor = ThreadPoolExecutor(
            max_workers=settings.max_concurrent_requests,
            thread_name_prefix=f"worker-{worker_id}",
        )

    def rotate_credentials(self) -> Credential:
        return self.state.ring.rotate()

    def _report_emails(self, person: Person, emails: List[str]) -> None:
        self.outbox.put(WorkerMessage(EMAILS, self.worker_id, name=person.display_name, emails=list(emails)))

    def _on_done(self, fut: Future) -> None:
        try:
            outcome = fut.result()
        except Exception:
            logger.exception("record task crashed", extra={"worker": self.worker_id})
            outcome = RecordOutcome.EXHAUSTED
        self.state.task_finished(outcome)
        self.outbox.put(WorkerMessage(TASK_COMPLETED, self.worker_id, outcome=outcome))

    def submit(self, line: str) -> Future:
        self.state.task_started()
        fut = self.executor.submit(self.pipeline.process, line)
        fut.add_done_callback(self._on_done)
        return fut

    def drain(self) -> None:
        """Wait for every in-flight record, then release resources."""
        self.executor.shutdown(wait=True)
        self.state.ring.close()
        self.sink.close()

    def serve(self, inbox: Any) -> None:
        logger.info("Worker %s started", self.worker_id, extra={"worker": self.worker_id, "status": "started"})
        try:
            while True:
                line = inbox.get()
                if line is None:
                    break
                logger.debug("Worker %s received a line for processing.", self.worker_id, extra={"worker": self.worker_id})
                self.submit(line)
        finally:
            self.drain()
            self.outbox.put(WorkerMessage(STOPPED, self.worker_id, totals=self.state.totals()))
            logger.info("Worker %s drained and stopped", self.worker_id, extra={"worker": self.worker_id, "status": "stopped"})


def run_worker(
    worker_id: int,
    settings: Settings,
    inbox: Any,
    outbox: Any,
    client_factory: Optional[ClientFactory] = None,
    configure_logging: bool = True,
) -> None:
    """Entry point for a worker process or thread."""
    if configure_logging:
        init_logging(settings=settings, force=True)
    worker = Worker(worker_id, settings, outbox, client_factory=client_factory)
    worker.serve(inbox)
