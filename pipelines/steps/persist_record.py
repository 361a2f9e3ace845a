from __future__ import annotations

from models.outcome import RecordOutcome
from pipelines.runner import RunContext
from ports.sink import OutputSinkPort


class PersistRecord:
    def __init__(self, sink: OutputSinkPort) -> None:
        self.sink = sink

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.enriched is None:
            ctx.outcome = RecordOutcome.EXHAUSTED
            return ctx
        self.sink.write_line(ctx.enriched.to_line())
        ctx.outcome = RecordOutcome.SUCCEEDED
        return ctx
