"""
Client for the external QR rendering service.

Rendering is advisory: every failure mode (backend not configured, HTTP
error, unreadable body, network error, timeout) comes back as a FAILED
result instead of an exception, so link creation never depends on it.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

import requests
from pydantic import BaseModel, ConfigDict, model_validator

from .content import ContentType, QrContent, QrCustomization, DEFAULT_CUSTOMIZATION

logger = logging.getLogger(__name__)


class QrStatus(str, Enum):
    READY = "ready"
    FAILED = "failed"


class QrRenderResult(BaseModel):
    """Outcome of one rendering call"""
    model_config = ConfigDict(frozen=True)

    status: QrStatus
    qr_url: Optional[str] = None

    @model_validator(mode="after")
    def _failed_has_no_url(self):
        if self.status == QrStatus.FAILED and self.qr_url is not None:
            raise ValueError("a failed QR rendering cannot carry a qr_url")
        return self

    @classmethod
    def failed(cls) -> "QrRenderResult":
        return cls(status=QrStatus.FAILED)

    @classmethod
    def ready(cls, qr_url: str) -> "QrRenderResult":
        return cls(status=QrStatus.READY, qr_url=qr_url)


class QrClient:
    """
    Calls ``POST {base_url}/qr`` once per render, no internal retry.

    Args:
        base_url: QR service root; None or empty disables rendering
        timeout: Seconds before the call is abandoned
        session: requests session (injectable for tests). When omitted each
            render opens its own short-lived session, since a Session is not
            safe to share between the worker threads of concurrent renders.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self.session = session

    def _post(self, url: str, payload: Dict[str, Any]) -> requests.Response:
        if self.session is not None:
            return self.session.post(url, json=payload, timeout=self.timeout)
        with requests.Session() as session:
            return session.post(url, json=payload, timeout=self.timeout)

    @property
    def enabled(self) -> bool:
        return self.base_url is not None

    async def render(
        self,
        content_type: ContentType,
        content: Union[QrContent, Mapping[str, Any]],
        customization: Optional[QrCustomization] = None,
    ) -> QrRenderResult:
        """Render a QR image for the given content (never raises for backend faults)"""
        if not self.enabled:
            return QrRenderResult.failed()

        payload = {
            "contentType": ContentType(content_type).value,
            "data": content.to_payload() if isinstance(content, QrContent) else dict(content),
            "customization": (
                customization.to_payload() if customization is not None else dict(DEFAULT_CUSTOMIZATION)
            ),
        }

        try:
            # requests is blocking, keep it off the event loop
            response = await asyncio.to_thread(self._post, f"{self.base_url}/qr", payload)
        except requests.RequestException as e:
            logger.warning("QR backend request failed: %s", e)
            return QrRenderResult.failed()

        if not response.ok:
            logger.warning("QR backend answered HTTP %s", response.status_code)
            return QrRenderResult.failed()

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("QR backend returned a malformed body: %s", e)
            return QrRenderResult.failed()

        qr_url = body.get("url") if isinstance(body, dict) else None
        if not isinstance(qr_url, str) or not qr_url:
            logger.warning("QR backend response has no usable url")
            return QrRenderResult.failed()

        return QrRenderResult.ready(qr_url)
