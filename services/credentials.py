from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from models.credential import Credential
from ports.enrichment import ClientFactory, EnrichmentClientPort


logger = logging.getLogger(__name__)


class CredentialRing:
    """A worker's private view of the shared credential list.

    Holds the current rotation index and the client built for it. Rotation is
    an explicit action; nothing in the retry path calls it.
    """

    def __init__(
        self,
        credentials: Sequence[Credential],
        client_factory: ClientFactory,
        worker_id: Optional[int] = None,
    ) -> None:
        if not credentials:
            raise ValueError("at least one credential is required")
        self.credentials: List[Credential] = list(credentials)
        self.client_factory = client_factory
        self.worker_id = worker_id
        self.index = 0
        self._client = client_factory(self.credentials[0])

    @property
    def current(self) -> Credential:
        return self.credentials[self.index]

    @property
    def client(self) -> EnrichmentClientPort:
        return self._client

    def rotate(self) -> Credential:
        """Advance to the next credential (wrapping) and rebuild the client."""
        self.index = (self.index + 1) % len(self.credentials)
        old = self._client
        self._client = self.client_factory(self.current)
        try:
            old.close()
        except Exception:
            logger.debug("closing previous client failed", exc_info=True)
        logger.info(
            "Switched to API key: %s", self.current.key,
            extra={"step": "credentials", "status": "rotated", "worker": self.worker_id},
        )
        return self.current

    def close(self) -> None:
        self._client.close()
