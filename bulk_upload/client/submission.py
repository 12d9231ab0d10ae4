from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests

from ..errors import RemoteError, ValidationError
from ..models.candidate import CandidateRecord
from ..models.upload_result import UploadResult

"""Bulk submission client for the platform's candidate acceptance endpoint.

The whole batch goes out in one POST and one UploadResult comes back. The
platform decides the per-candidate outcome; from this side the batch is atomic.
Submissions are never retried: every call is one user-initiated request.
"""

__all__ = [
    "DEFAULT_ENDPOINT",
    "GENERIC_FAILURE_MESSAGE",
    "NO_DATA_MESSAGE",
    "BulkSubmissionClient",
]

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "/api/candidates/bulk-upload"
NO_DATA_MESSAGE = "No data found in the Excel file."
GENERIC_FAILURE_MESSAGE = "Error uploading candidates. Please try again."


def _remote_message(resp: requests.Response) -> str | None:
    """Extract the platform's error message from a response body, if any."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class BulkSubmissionClient:
    """Submit normalized candidates to the bulk upload endpoint.

    Args:
        base_url: platform API root, e.g. https://crm.example.com
        endpoint: path of the bulk acceptance route
        auth_token: bearer token sent in the Authorization header when set
        timeout: seconds; None leaves the network-layer default in place
        session: injected requests.Session (tests, connection reuse)
    """

    def __init__(
        self,
        base_url: str,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        auth_token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = base_url.rstrip("/") + "/" + endpoint.lstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def submit(self, records: Sequence[CandidateRecord]) -> UploadResult:
        """Send the full batch and return the platform's summary.

        Raises:
            ValidationError: records is empty (no request is made)
            RemoteError: non-2xx response, transport failure or unreadable body
        """
        if not records:
            raise ValidationError(NO_DATA_MESSAGE)

        payload: dict[str, Any] = {"candidates": [r.to_payload() for r in records]}
        logger.debug(f"POST {self.url} candidates={len(records)}")
        try:
            resp = self.session.post(
                self.url, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"bulk upload timed out url={self.url}")
            raise RemoteError(GENERIC_FAILURE_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"bulk upload request error url={self.url} error={e}")
            raise RemoteError(GENERIC_FAILURE_MESSAGE) from e

        if not resp.ok:
            message = _remote_message(resp) or GENERIC_FAILURE_MESSAGE
            logger.error(f"bulk upload rejected status={resp.status_code} message={message}")
            raise RemoteError(message, status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            logger.error(f"bulk upload returned a non-JSON body status={resp.status_code}")
            raise RemoteError(GENERIC_FAILURE_MESSAGE, status_code=resp.status_code) from e
        if not isinstance(body, dict):
            raise RemoteError(GENERIC_FAILURE_MESSAGE, status_code=resp.status_code)

        result = UploadResult.from_payload(body)
        logger.debug(
            f"bulk upload accepted status={result.status} "
            f"successful={result.results.successful} failed={result.results.failed}"
        )
        return result

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> BulkSubmissionClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
