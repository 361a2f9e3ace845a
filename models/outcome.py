from __future__ import annotations

from enum import Enum


class RecordOutcome(str, Enum):
    """Terminal state of one input line."""

    SUCCEEDED = "succeeded"
    PARSE_DROPPED = "parse_dropped"
    VALIDATION_DROPPED = "validation_dropped"
    EXHAUSTED = "exhausted"
