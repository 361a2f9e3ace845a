from __future__ import annotations

import logging

from models.outcome import RecordOutcome
from pipelines.runner import RunContext
from services.mapping import map_person
from services.validation import validate_person


logger = logging.getLogger(__name__)


class ValidatePerson:
    def run(self, ctx: RunContext) -> RunContext:
        person = ctx.person
        if person is None:
            ctx.outcome = RecordOutcome.PARSE_DROPPED
            return ctx
        errors = validate_person(person)
        if errors:
            ctx.errors.extend(errors)
            logger.warning(
                "Validation errors for %s: %s", person.display_name, "; ".join(errors),
                extra={"step": "validate", "status": "dropped"},
            )
            ctx.outcome = RecordOutcome.VALIDATION_DROPPED
            return ctx
        ctx.request = map_person(person)
        return ctx
