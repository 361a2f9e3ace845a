from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from models.enrichment import EnrichedRecord, EnrichmentRequest, ResponsePerson
from models.outcome import RecordOutcome
from models.person import Person


@dataclass
class RunContext:
    """State of one record as it moves through the pipeline."""

    line: str = ""
    person: Optional[Person] = None
    request: Optional[EnrichmentRequest] = None
    response: Optional[ResponsePerson] = None
    enriched: Optional[EnrichedRecord] = None
    attempts: int = 0
    outcome: Optional[RecordOutcome] = None
    errors: List[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.outcome is not None


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        for step in self.steps:
            ctx = step.run(ctx)
            # A step that settles the outcome ends the record
            if ctx.finished:
                break
        return ctx
