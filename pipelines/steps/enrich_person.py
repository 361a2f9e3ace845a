from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from config.settings import Settings
from models.enrichment import EnrichmentResponse
from models.outcome import RecordOutcome
from models.person import Person
from pipelines.runner import RunContext
from ports.enrichment import EnrichmentClientPort
from services.enrichment_client import EnrichmentError, HttpError
from services.mapping import merge_enriched
from services.throttle import AdaptiveThrottle
from utils.api_logger import log_response


logger = logging.getLogger(__name__)


class EnrichPerson:
    """Send one record to the API through the throttle, retrying on failure.

    `client_provider` is called on every attempt so a credential rotation
    takes effect on the next attempt.
    """

    def __init__(
        self,
        settings: Settings,
        throttle: AdaptiveThrottle,
        client_provider: Callable[[], EnrichmentClientPort],
        worker_id: Optional[int] = None,
        on_emails: Optional[Callable[[Person, List[str]], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.throttle = throttle
        self.client_provider = client_provider
        self.worker_id = worker_id
        self.on_emails = on_emails
        self.sleep = sleep

    def _backoff(self, attempt: int) -> None:
        base = self.settings.retry_backoff_seconds
        if base > 0:
            self.sleep(base * (2 ** (attempt - 1)))

    def _raw_log(self, person: Person, status: str, duration_ms: int, body=None, error=None) -> None:
        if not self.settings.raw_log:
            return
        log_response(
            path=self.settings.raw_log_path,
            worker=self.worker_id,
            record_id=person.record_id,
            status=status,
            duration_ms=duration_ms,
            body=body,
            error=error,
        )

    def run(self, ctx: RunContext) -> RunContext:
        person = ctx.person
        if person is None or ctx.request is None:
            ctx.outcome = RecordOutcome.PARSE_DROPPED
            return ctx
        payload = ctx.request.to_payload()
        log_extra = {"step": "enrich", "worker": self.worker_id}
        logger.info("Sending data for %s", person.display_name, extra={**log_extra, "status": "sent"})

        retries = self.settings.max_attempts
        while retries > 0:
            ctx.attempts += 1
            t0 = time.monotonic()
            with self.throttle.slot() as slot:
                try:
                    body = self.client_provider().enrich(payload)
                    try:
                        response = EnrichmentResponse.model_validate(body).person
                    except ValidationError as e:
                        raise HttpError(f"Unexpected response shape: {e.error_count()} errors") from e
                except EnrichmentError as e:
                    slot.failed()
                    duration_ms = int((time.monotonic() - t0) * 1000)
                    self._raw_log(person, "error", duration_ms, error=str(e))
                    retries -= 1
                    logger.error(
                        "Error processing person %s. Retries left: %s", person.display_name, retries,
                        extra={**log_extra, "status": "retry" if retries else "exhausted", "error": str(e)},
                    )
                    ctx.errors.append(str(e))
                    if retries == 0:
                        break
                    response = None
                else:
                    duration_ms = int((time.monotonic() - t0) * 1000)
                    self._raw_log(person, "ok", duration_ms, body=body)
            if response is None:
                self._backoff(ctx.attempts)
                continue

            ctx.response = response
            emails = response.email_list()
            logger.info(
                "Success for %s after %s attempt(s)", person.display_name, ctx.attempts,
                extra={**log_extra, "status": "ok"},
            )
            if self.on_emails:
                try:
                    self.on_emails(person, emails)
                except Exception:
                    logger.debug("emails callback failed", exc_info=True)
            ctx.enriched = merge_enriched(response, person)
            return ctx

        logger.error(
            "Failed to process %s after %s attempts.", person.display_name, self.settings.max_attempts,
            extra={**log_extra, "status": "exhausted"},
        )
        ctx.outcome = RecordOutcome.EXHAUSTED
        return ctx
