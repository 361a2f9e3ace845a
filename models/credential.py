from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Credential(BaseModel):
    """API key/password pair used to sign enrichment requests."""

    key: str
    secret: str

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return f"Credential(key={self.key!r}, secret='***')"

    __str__ = __repr__
