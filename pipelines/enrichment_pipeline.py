from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from config.settings import Settings
from models.outcome import RecordOutcome
from models.person import Person
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import EnrichPerson, ParseRecord, PersistRecord, ValidatePerson
from ports.enrichment import EnrichmentClientPort
from ports.sink import OutputSinkPort
from services.throttle import AdaptiveThrottle


logger = logging.getLogger(__name__)


class EnrichmentPipeline:
    """Parse -> validate -> enrich -> persist for one line at a time.

    Safe to call `process` from several threads of the same worker: the only
    shared pieces are the throttle (locked) and the sink (atomic appends).
    """

    def __init__(
        self,
        settings: Settings,
        throttle: AdaptiveThrottle,
        client_provider: Callable[[], EnrichmentClientPort],
        sink: OutputSinkPort,
        worker_id: Optional[int] = None,
        on_emails: Optional[Callable[[Person, List[str]], None]] = None,
        today: Optional[date] = None,
    ) -> None:
        self.worker_id = worker_id
        self.pipeline = Pipeline([
            ParseRecord(today=today),
            ValidatePerson(),
            EnrichPerson(
                settings,
                throttle,
                client_provider,
                worker_id=worker_id,
                on_emails=on_emails,
            ),
            PersistRecord(sink),
        ])

    def run(self, line: str) -> RunContext:
        return self.pipeline.run(RunContext(line=line))

    def process(self, line: str) -> RecordOutcome:
        """Run one line to a terminal outcome; never raises."""
        try:
            ctx = self.run(line)
        except Exception as e:
            logger.exception(
                "Unexpected failure while processing line",
                extra={"step": "pipeline", "status": "exhausted", "worker": self.worker_id, "error": str(e)},
            )
            return RecordOutcome.EXHAUSTED
        return ctx.outcome or RecordOutcome.EXHAUSTED
