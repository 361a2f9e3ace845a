from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from config.settings import Settings, get_settings
from models.credential import Credential


logger = logging.getLogger(__name__)


class EnrichmentError(Exception):
    """Base class for failed enrichment calls."""


class NetworkError(EnrichmentError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""


class HttpError(EnrichmentError):
    """The endpoint answered with a non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EnrichmentClient:
    """Contact/Enrich API wrapper bound to a single credential.

    Stateless apart from its session; build a new instance to switch credentials.
    """

    def __init__(
        self,
        credential: Credential,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.credential = credential
        self.session = session or requests.Session()
        self.session.headers.update(self.build_headers())

    def build_headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "Content-Type": "application/json",
            "galaxy-ap-name": self.credential.key,
            "galaxy-ap-password": self.credential.secret,
            "galaxy-search-type": self.settings.enrich_search_type,
        }

    def enrich(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(
                self.settings.enrich_url,
                json=payload,
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request to {self.settings.enrich_url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise HttpError(
                f"Enrichment request failed with status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise HttpError("Enrichment response is not valid JSON", status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise HttpError("Enrichment response is not a JSON object", status_code=response.status_code)
        return data

    def close(self) -> None:
        self.session.close()
