from __future__ import annotations

import pytest
import requests

from models.credential import Credential
from services.enrichment_client import EnrichmentClient, HttpError, NetworkError


class _FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class _FakeSession:
    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.response = response
        self.exc = exc
        self.posts = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.exc:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


def test_headers_carry_credential_and_operation_tag(settings):
    session = _FakeSession(_FakeResponse(body={"person": {}}))
    client = EnrichmentClient(Credential(key="k1", secret="s1"), settings, session=session)
    assert session.headers["galaxy-ap-name"] == "k1"
    assert session.headers["galaxy-ap-password"] == "s1"
    assert session.headers["galaxy-search-type"] == "DevAPIContactEnrich"
    assert session.headers["accept"] == "application/json"
    assert session.headers["Content-Type"] == "application/json"

    body = client.enrich({"firstName": "John"})
    assert body == {"person": {}}
    post = session.posts[0]
    assert post["url"] == settings.enrich_url
    assert post["json"] == {"firstName": "John"}
    assert post["timeout"] == settings.http_timeout_seconds


def test_non_2xx_raises_http_error(settings):
    session = _FakeSession(_FakeResponse(status_code=503, text="unavailable"))
    client = EnrichmentClient(Credential(key="k", secret="s"), settings, session=session)
    with pytest.raises(HttpError) as exc:
        client.enrich({})
    assert exc.value.status_code == 503


def test_non_json_body_raises_http_error(settings):
    session = _FakeSession(_FakeResponse(status_code=200, body=None))
    client = EnrichmentClient(Credential(key="k", secret="s"), settings, session=session)
    with pytest.raises(HttpError):
        client.enrich({})


def test_transport_failure_raises_network_error(settings):
    session = _FakeSession(exc=requests.exceptions.ConnectTimeout("timed out"))
    client = EnrichmentClient(Credential(key="k", secret="s"), settings, session=session)
    with pytest.raises(NetworkError):
        client.enrich({})
    client.close()
    assert session.closed


def test_credential_repr_hides_secret():
    assert "s3cret" not in repr(Credential(key="k", secret="s3cret"))
