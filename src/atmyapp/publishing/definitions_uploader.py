"""Manifest upload to the content service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import requests

from atmyapp.manifest_assembly import Manifest

from .publish_errors import UploadError

STRUCTURE_ENDPOINT = "/storage/structure"

_LOGGER = logging.getLogger(__name__)


class HttpSession(Protocol):
    """Subset of `requests.Session` used for uploads."""

    def post(
        self, url: str, *, json: Any = None, headers: Mapping[str, str] | None = None
    ) -> requests.Response: ...

    def close(self) -> None: ...


class DefinitionsUploader:  # pylint: disable=too-few-public-methods
    """Post manifests to `<base url>/storage/structure` with a bearer token."""

    def __init__(self, session: HttpSession) -> None:
        self._session = session

    def upload(self, manifest: Manifest, *, base_url: str | None, token: str | None) -> None:
        """Send one POST; no retries.

        Raises:
          UploadError: On missing credentials, transport failure or a non-2xx response.
        """
        if not base_url:
            raise UploadError("Base URL not provided in session. Please run 'use' command first.")
        if not token:
            raise UploadError("Token not provided in session. Please run 'use' command first.")

        url = f"{base_url.rstrip('/')}{STRUCTURE_ENDPOINT}"
        _LOGGER.info("Posting definitions to server at %s", url)
        try:
            response = self._session.post(
                url,
                json={"content": manifest.to_dict()},
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                },
            )
        except requests.RequestException as exc:
            raise UploadError(f"Failed to post definitions: {exc}") from exc

        if not 200 <= response.status_code < 300:
            _LOGGER.debug("Server response: %s", response.text)
            raise UploadError(
                f"HTTP error! status: {response.status_code}, message: {response.text}",
                status_code=response.status_code,
            )
