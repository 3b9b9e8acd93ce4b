from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_MAIL_TIMEOUT_SECONDS
from ..core.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


class MailSender(Protocol):
    def send(self, *, to: str, subject: str, html: str) -> None:
        raise NotImplementedError


class HttpMailSender(MailSender):
    """Hand messages to the SMTP relay service over HTTP (``{to, subject, html}`` JSON)."""

    def __init__(self, url: str, *, token: Optional[str] = None, timeout: float = DEFAULT_MAIL_TIMEOUT_SECONDS):
        self._url = url
        self._token = token
        self._timeout = float(timeout)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def send(self, *, to: str, subject: str, html: str) -> None:
        try:
            response = requests.post(
                self._url,
                json={"to": to, "subject": subject, "html": html},
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise MailDeliveryError(f"mail service unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            raise MailDeliveryError(f"HTTP {response.status_code}: {response.text[:200]}")
        logger.debug("Mail queued for %s: %s", to, subject)
