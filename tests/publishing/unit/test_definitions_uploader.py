"""Definitions uploader tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
import requests
from atmyapp.manifest_assembly import Manifest
from atmyapp.publishing import DefinitionsUploader, UploadError


@dataclass
class _FakeResponse:
    status_code: int
    text: str = ""


@dataclass
class _FakeSession:
    response: _FakeResponse = field(default_factory=lambda: _FakeResponse(200, "ok"))
    error: Exception | None = None
    calls: list[dict] = field(default_factory=list)
    closed: bool = False

    def post(self, url, *, json=None, headers=None):
        self.calls.append({"url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def _manifest() -> Manifest:
    return Manifest(
        description="AMA Definitions",
        definitions={"landing/content.json": {"structure": {"type": "object"}}},
    )


def test_posts_manifest_with_bearer_token() -> None:
    session = _FakeSession()

    DefinitionsUploader(session).upload(
        _manifest(), base_url="https://api.example.com/", token="secret"
    )

    (call,) = session.calls
    assert call["url"] == "https://api.example.com/storage/structure"
    assert call["json"] == {"content": _manifest().to_dict()}
    assert call["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer secret",
    }


def test_non_2xx_response_raises_upload_error_with_status() -> None:
    session = _FakeSession(response=_FakeResponse(500, "boom"))

    with pytest.raises(UploadError) as exc_info:
        DefinitionsUploader(session).upload(_manifest(), base_url="https://x", token="t")

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "HTTP error! status: 500, message: boom"


def test_transport_failure_is_wrapped() -> None:
    session = _FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(UploadError, match="refused"):
        DefinitionsUploader(session).upload(_manifest(), base_url="https://x", token="t")


def test_missing_base_url_fails_before_posting() -> None:
    session = _FakeSession()

    with pytest.raises(UploadError, match="Base URL not provided in session"):
        DefinitionsUploader(session).upload(_manifest(), base_url=None, token="t")

    assert session.calls == []


def test_missing_token_fails_before_posting() -> None:
    session = _FakeSession()

    with pytest.raises(UploadError, match="Token not provided"):
        DefinitionsUploader(session).upload(_manifest(), base_url="https://x", token=None)

    assert session.calls == []
