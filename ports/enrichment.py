from __future__ import annotations

from typing import Any, Dict, Protocol

from models.credential import Credential


class EnrichmentClientPort(Protocol):
    credential: Credential

    def enrich(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def close(self) -> None:
        ...


class ClientFactory(Protocol):
    def __call__(self, credential: Credential) -> EnrichmentClientPort:
        ...
