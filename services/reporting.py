from __future__ import annotations

from typing import Optional

from models.outcome import RecordOutcome
from pipelines.dispatcher import RunSummary


def print_summary(summary: RunSummary, total_seconds: Optional[float] = None, output_path: Optional[str] = None) -> None:
    """Print summary of the enrichment run."""
    outcomes = summary.outcomes or {}

    print("\n" + "="*60)
    print("CONTACT ENRICHMENT - SUMMARY")
    print("="*60)
    print(f"Workers: {summary.worker_count}")
    print(f"Total lines: {summary.lines_dispatched}")
    print(f"Time taken: {summary.elapsed_seconds:.3f} seconds")
    print()
    print("Record Outcomes:")
    print(f"  Enriched: {outcomes.get(RecordOutcome.SUCCEEDED.value, 0)}")
    print(f"  Unparsable: {outcomes.get(RecordOutcome.PARSE_DROPPED.value, 0)}")
    print(f"  Failed Validation: {outcomes.get(RecordOutcome.VALIDATION_DROPPED.value, 0)}")
    print(f"  Failed After Retries: {outcomes.get(RecordOutcome.EXHAUSTED.value, 0)}")
    if output_path:
        print(f"Output File: {output_path}")
    if total_seconds is not None:
        print(f"Total execution time: {total_seconds:.3f} seconds")
    print("="*60)
