from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from models.outcome import RecordOutcome
from pipelines.runner import RunContext
from services.record_parser import parse_record


logger = logging.getLogger(__name__)


class ParseRecord:
    def __init__(self, today: Optional[date] = None) -> None:
        self.today = today

    def run(self, ctx: RunContext) -> RunContext:
        person = parse_record(ctx.line, today=self.today)
        if person is None:
            logger.warning(
                "No valid data parsed from line: %s", ctx.line[:200],
                extra={"step": "parse", "status": "dropped"},
            )
            ctx.outcome = RecordOutcome.PARSE_DROPPED
            return ctx
        ctx.person = person
        return ctx
